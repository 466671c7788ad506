# sitefetch/report/json_report.py

"""
JSON report for sitefetch: an array of ``{"url", "title", "content"}``
objects, keys always in that order.
"""
import json
from pathlib import Path
from typing import Mapping, Union

from sitefetch.crawler.models import Page


def serialize_json(pages: Mapping[str, Page], *, indent: int = 2) -> str:
    """
    Serialize *pages* to a JSON array string (``[]`` for no pages).

    :param pages: canonical URL → Page mapping as returned by the crawler
    :param indent: indentation of the output, None for a single line
    :return: the JSON document
    """
    return json.dumps([page.as_dict() for page in pages.values()], ensure_ascii=False, indent=indent)


def render_json(pages: Mapping[str, Page], output_path: Union[Path, str]) -> Path:
    """
    Save the JSON report to *output_path*.

    Example:
    ```python
    from sitefetch.report.json_report import render_json
    report_path = render_json(pages, 'reports/site.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        f.write(serialize_json(pages))

    return output
