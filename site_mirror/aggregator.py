# File: site_mirror/aggregator.py
"""site_mirror.aggregator: turns a finished crawl into a summary report."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Dict, List, TypedDict

from site_mirror.crawler.models import CrawlResult
from site_mirror.utils import convert, status_reason

RULE = "-" * 73


class StatusRow(TypedDict):
    """How often one HTTP status was seen."""

    code: int
    count: int
    reason: str


@dataclass(slots=True)
class MirrorReport:
    """Figures printed at the end of a run and written to JSON/HTML reports."""

    program: str = "site-mirror"
    start_url: str = ""
    domain: str = ""
    output_dir: str = ""
    elapsed: float = 0.0
    requests: int = 0
    stored_files: int = 0
    stored_bytes: int = 0
    stored_size: str = "0.00 bytes"
    codes: List[StatusRow] = field(default_factory=list)
    servers: Dict[str, int] = field(default_factory=dict)
    allowed_domains: List[str] = field(default_factory=list)
    archives: List[str] = field(default_factory=list)

    def as_dict(self) -> dict:
        return asdict(self)

    def summary_text(self) -> str:
        """The ruled plain-text summary shown in verbose mode."""
        lines = [
            RULE,
            f"{self.program}: {self.elapsed:.2f} wallclock secs",
            f"\trequested {self.requests} urls",
            f"\tstored {self.stored_files} files, {self.stored_size}",
        ]
        for row in self.codes:
            lines.append(f"{row['count']:5d}: {row['code']} {row['reason']:<20}")
        lines.append(RULE)
        return "\n".join(lines)


def build_report(result: CrawlResult) -> MirrorReport:
    """Collect the summary figures of *result*."""
    stats = result.stats
    magnitude, units = convert(stats.stored_bytes)
    return MirrorReport(
        start_url=result.start_url,
        domain=result.domain,
        output_dir=str(result.output_dir),
        elapsed=round(stats.elapsed, 3),
        requests=stats.requests,
        stored_files=stats.stored_files,
        stored_bytes=stats.stored_bytes,
        stored_size=f"{magnitude:.2f} {units}",
        codes=[
            {"code": code, "count": count, "reason": status_reason(code)}
            for code, count in sorted(stats.codes.items())
        ],
        servers=dict(sorted(stats.servers.items())),
        allowed_domains=sorted(result.allowed_domains),
        archives=[str(p) for p in result.archives],
    )
