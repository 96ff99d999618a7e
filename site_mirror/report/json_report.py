# site_mirror/report/json_report.py

"""
JSON report for SiteMirror: serializes a MirrorReport to a file.
"""
import json
from pathlib import Path

from site_mirror.aggregator import MirrorReport


def render_json(report: MirrorReport, output_path: Path | str, *, pretty: bool = True) -> Path:
    """
    Save *report* as JSON at *output_path*.

    :param report: MirrorReport of a finished run
    :param output_path: path of the JSON file
    :param pretty: indent the output by two spaces
    :return: Path of the saved file

    Example:
    ```python
    from site_mirror.report.json_report import render_json
    report_path = render_json(report, 'reports/run.json')
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open('w', encoding='utf-8') as f:
        json.dump(report.as_dict(), f, ensure_ascii=False, indent=2 if pretty else None)

    return output
