# sitefetch/report/text_report.py
"""
Plain-text report: one ``<page>`` block per page, rendered with Jinja2.
"""
from __future__ import annotations

from pathlib import Path
from typing import Mapping, Union

from jinja2 import Environment, StrictUndefined

from sitefetch.crawler.models import Page

PAGE_TEMPLATE = """\
{% for page in pages -%}
<page>
  <title>{{ page.title }}</title>
  <url>{{ page.url }}</url>
  <content>{{ page.content }}</content>
</page>
{%- if not loop.last %}

{% endif %}
{%- endfor %}"""

_env = Environment(autoescape=False, undefined=StrictUndefined, keep_trailing_newline=True)
_template = _env.from_string(PAGE_TEMPLATE)


def serialize_text(pages: Mapping[str, Page]) -> str:
    """Concatenate every page as a delimited block. No pages → empty string."""
    return _template.render(pages=list(pages.values()))


def render_text(pages: Mapping[str, Page], output_path: Union[Path, str]) -> Path:
    """Write the text report to *output_path*, creating parent directories."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(serialize_text(pages), encoding="utf-8")
    return output
