# === FILE: sitefetch/tokenizer.py ===
"""Token count of fetched pages, with the GPT-4o encoding."""
from __future__ import annotations

from functools import lru_cache
from typing import Iterable

import tiktoken

from sitefetch.crawler.models import Page

#: encoding used by GPT-4o
DEFAULT_ENCODING = "o200k_base"


@lru_cache(maxsize=None)
def _encoding(name: str) -> tiktoken.Encoding:
    # the first call may download the BPE ranks into tiktoken's cache
    return tiktoken.get_encoding(name)


def count_tokens(pages: Iterable[Page], encoding: str = DEFAULT_ENCODING) -> int:
    """Sum of the token counts of every page's content."""
    enc = _encoding(encoding)
    # page text may legitimately contain "<|endoftext|>"
    return sum(len(enc.encode(page.content, disallowed_special=())) for page in pages)
