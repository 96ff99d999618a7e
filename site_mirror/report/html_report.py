"""site_mirror.report.html_report: HTML report of a run, rendered with Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from jinja2 import BaseLoader, Environment, FileSystemLoader, select_autoescape

from site_mirror.aggregator import MirrorReport

TEMPLATE_NAME = "report.html.j2"

DEFAULT_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>Mirror of {{ report.domain }}</title>
</head>
<body>
  <h1>Mirror of {{ report.domain }}</h1>
  <p>Started at <a href="{{ report.start_url }}">{{ report.start_url }}</a>,
     written to <code>{{ report.output_dir }}</code>.</p>
  <ul>
    <li>elapsed: {{ "%.2f"|format(report.elapsed) }} s</li>
    <li>requests: {{ report.requests }}</li>
    <li>stored: {{ report.stored_files }} files, {{ report.stored_size }}</li>
  </ul>
  <h2>Status codes</h2>
  <table>
    <tr><th>code</th><th>count</th><th>reason</th></tr>
    {% for row in report.codes %}
    <tr><td>{{ row.code }}</td><td>{{ row.count }}</td><td>{{ row.reason }}</td></tr>
    {% endfor %}
  </table>
  <h2>Servers</h2>
  <ul>
    {% for server, count in report.servers.items() %}
    <li>{{ server }}: {{ count }}</li>
    {% endfor %}
  </ul>
  {% if report.archives %}
  <h2>Archives</h2>
  <ul>
    {% for archive in report.archives %}
    <li>{{ archive }}</li>
    {% endfor %}
  </ul>
  {% endif %}
</body>
</html>
"""


def render_html(
    report: MirrorReport,
    output_path: Union[Path, str],
    template_dir: Optional[Union[Path, str]] = None,
) -> Path:
    """Render the HTML report and save it.

    Args:
        report: MirrorReport of a finished run.
        output_path: path of the resulting HTML file.
        template_dir: optional directory holding ``report.html.j2``; the
            built-in template is used when omitted.

    Returns:
        Path of the saved HTML file.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if template_dir is not None:
        env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml", "j2"]),
        )
        template = env.get_template(TEMPLATE_NAME)
    else:
        env = Environment(loader=BaseLoader(), autoescape=True)
        template = env.from_string(DEFAULT_TEMPLATE)

    output_path.write_text(template.render(report=report), encoding="utf-8")
    return output_path
