# sitefetch/crawler/matcher.py
"""
URL canonicalisation and scope matching for sitefetch.

Two URLs that point to the same logical page must normalise to the same
string, because the canonical form is the dedup key of the whole crawl.
"""
from __future__ import annotations

import posixpath
import re
from functools import lru_cache
from typing import Iterable, Optional, Tuple
from urllib.parse import parse_qsl, quote, unquote, urlencode, urljoin, urlparse, urlunparse

from sitefetch.errors import ConfigError

__all__ = (
    "normalize_url",
    "origin",
    "same_origin",
    "compile_pattern",
    "matches",
    "validate_seed",
)

_SCHEMES = ("http", "https")
_DEFAULT_PORTS = {"http": 80, "https": 443}
_URL_PATTERN_PREFIXES = ("http://", "https://")
_GLOB_RE = re.compile(r"[*?]")
_MULTI_SLASH_RE = re.compile(r"/{2,}")
_PATH_SAFE = "/:@!$&'()*+,;=~"


def normalize_url(url: str, base: Optional[str] = None) -> str:
    """
    Return the canonical form of *url*, resolved against *base* when given.

    Lower-cases scheme and host, drops default ports, user info and the
    fragment, collapses ``.``/``..`` and repeated slashes, strips the trailing
    slash (the root stays ``/``) and sorts the query string.

    Raises ValueError for malformed URLs and for schemes other than http(s).
    """
    raw = url.strip()
    if base:
        raw = urljoin(base, raw)
    parsed = urlparse(raw)
    scheme = parsed.scheme.lower()
    if scheme not in _SCHEMES:
        raise ValueError(f"unsupported URL scheme: {url!r}")
    host = parsed.hostname
    if not host:
        raise ValueError(f"URL has no host: {url!r}")
    port = parsed.port
    netloc = f"[{host}]" if ":" in host else host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"

    path = _MULTI_SLASH_RE.sub("/", unquote(parsed.path) or "/")
    norm = posixpath.normpath(path)
    if not norm.startswith("/"):
        norm = "/" + norm
    norm = quote(norm, safe=_PATH_SAFE)

    qs = parse_qsl(parsed.query, keep_blank_values=True)
    qs.sort()
    query = urlencode(qs, doseq=True)
    return urlunparse((scheme, netloc, norm, "", query, ""))


def origin(url: str) -> Tuple[str, str, int]:
    """Scheme, host and effective port of *url*. Raises ValueError if malformed."""
    parsed = urlparse(url)
    scheme = parsed.scheme.lower()
    if scheme not in _SCHEMES or not parsed.hostname:
        raise ValueError(f"not an http(s) URL: {url!r}")
    return scheme, parsed.hostname, parsed.port or _DEFAULT_PORTS[scheme]


def same_origin(url: str, other: str) -> bool:
    try:
        return origin(url) == origin(other)
    except ValueError:
        return False


@lru_cache(maxsize=256)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """
    Translate a glob pattern into an anchored regex.

    ``**`` crosses ``/`` boundaries, ``*`` and ``?`` stay inside one path
    segment, and a trailing ``/**`` also matches the directory itself
    (``/docs/**`` matches ``/docs``). A pattern with no wildcard matches the
    path itself or anything below it.
    """
    pat = pattern.strip()
    if not _GLOB_RE.search(pat):
        return re.compile(f"^{re.escape(pat.rstrip('/'))}(?:/.*)?$")

    out = []
    i = 0
    while i < len(pat):
        if pat.startswith("/**", i) and i + 3 == len(pat):
            out.append("(?:/.*)?")
            i += 3
        elif pat.startswith("**/", i):
            out.append("(?:.*/)?")
            i += 3
        elif pat.startswith("**", i):
            out.append(".*")
            i += 2
        else:
            ch = pat[i]
            if ch == "*":
                out.append("[^/]*")
            elif ch == "?":
                out.append("[^/]")
            else:
                out.append(re.escape(ch))
            i += 1
    return re.compile("^" + "".join(out) + "$")


def matches(url: str, patterns: Iterable[str], seed: str) -> bool:
    """
    True when *url* is in scope: http(s), same origin as *seed*, and matching
    at least one of *patterns* (any same-origin URL matches when there are
    none). Malformed URLs are out of scope, never an error.
    """
    try:
        canonical = normalize_url(url)
    except ValueError:
        return False
    if not same_origin(canonical, seed):
        return False

    patterns = tuple(patterns)
    if not patterns:
        return True
    path = urlparse(canonical).path
    for pattern in patterns:
        target = canonical if pattern.startswith(_URL_PATTERN_PREFIXES) else path
        if compile_pattern(pattern).match(target):
            return True
    return False


def validate_seed(url: str) -> str:
    """Canonical seed URL, or ConfigError when it cannot be crawled."""
    if not isinstance(url, str) or not url.strip():
        raise ConfigError("a seed URL is required")
    try:
        return normalize_url(url)
    except ValueError as exc:
        raise ConfigError(f"invalid seed URL {url!r}: {exc}") from exc
