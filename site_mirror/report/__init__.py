# File: site_mirror/report/__init__.py
"""site_mirror.report: writers for the end-of-run report (JSON and HTML)."""

from site_mirror.report.html_report import render_html
from site_mirror.report.json_report import render_json

__all__ = ["render_json", "render_html"]
