"""sitefetch.parser: pluggable HTML content extraction."""

from sitefetch.parser.html_parser import Extractor, HtmlExtractor, extract

__all__ = ["Extractor", "HtmlExtractor", "extract"]
