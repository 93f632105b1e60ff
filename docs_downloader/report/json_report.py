# docs_downloader/report/json_report.py

"""
JSON summary of one or more download runs.

Serialises :class:`~docs_downloader.crawler.models.CrawlReport` objects to a file.
"""
import json
from pathlib import Path
from typing import Iterable

from docs_downloader.crawler.models import CrawlReport


def render_json(reports: Iterable[CrawlReport], output_path: Path | str) -> Path:
    """
    Save *reports* as a JSON list at *output_path*.

    :param reports: CrawlReport objects, one per site
    :param output_path: path of the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from docs_downloader.report.json_report import render_json
    report_path = render_json([report], 'reports/downloads.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = [report.to_dict() for report in reports]

    with output.open('w', encoding='utf-8') as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
