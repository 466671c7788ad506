# File: sitefetch/report/__init__.py
"""sitefetch.report: serializers for the crawled page map (text and JSON)."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Union

from sitefetch.crawler.models import Page
from sitefetch.report.json_report import render_json, serialize_json
from sitefetch.report.text_report import render_text, serialize_text

FORMATS = ("text", "json")


def format_for_path(path: Union[str, Path]) -> str:
    """``json`` for ``*.json`` files, ``text`` for anything else."""
    return "json" if Path(path).suffix.lower() == ".json" else "text"


def serialize_pages(pages: Mapping[str, Page], fmt: str = "text") -> str:
    """Render *pages* as a text report or a JSON array."""
    if fmt == "text":
        return serialize_text(pages)
    if fmt == "json":
        return serialize_json(pages)
    raise ValueError(f"Unknown output format {fmt!r}, expected one of {', '.join(FORMATS)}")


def write_pages(pages: Mapping[str, Page], path: Union[str, Path], fmt: Optional[str] = None) -> Path:
    """Write the report to *path*; the format follows the suffix unless given."""
    fmt = fmt or format_for_path(path)
    if fmt == "json":
        return render_json(pages, path)
    if fmt == "text":
        return render_text(pages, path)
    raise ValueError(f"Unknown output format {fmt!r}, expected one of {', '.join(FORMATS)}")


__all__ = ["serialize_pages", "write_pages", "format_for_path", "FORMATS"]
