"""
Report assembly and output (JSON report, HTML summary).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from html import escape
from pathlib import Path
from typing import Callable, Sequence

from data_models import ComparisonReport, ComparisonResult, DatasetEntry

LOGGER = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a 'Z' suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def build_report(
    results: Sequence[ComparisonResult],
    clock: Callable[[], datetime] = _utc_now,
) -> ComparisonReport:
    """
    Wrap comparison results into the final report.

    Args:
        results: Comparison results in source-dataset order.
        clock: Source of the generation timestamp.

    Returns:
        ComparisonReport with timestamp and total count.
    """
    return ComparisonReport(
        comparison_date=format_timestamp(clock()),
        total_comparisons=len(results),
        results=tuple(results),
    )


def write_report_json(report: ComparisonReport, output_path: Path) -> None:
    """
    Persist the comparison report to JSON.

    Args:
        report: Report to write.
        output_path: Destination file path.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(report.to_dict(), indent=2, ensure_ascii=False), encoding="utf-8"
    )
    LOGGER.info("Wrote comparison report to %s", output_path)


def _entry_cell(entry: DatasetEntry) -> str:
    skills = ", ".join(entry.skills)
    return (
        f"<strong>{escape(entry.name)}</strong> (#{entry.id})<br>"
        f"{escape(entry.title)}<br>"
        f"<small>{escape(skills)}</small>"
    )


def write_html_summary(report: ComparisonReport, output_path: Path) -> None:
    """
    Generate an HTML table of comparison results, highest score first.

    Args:
        report: Report to render.
        output_path: Destination HTML file path.
    """
    sorted_results = sorted(report.results, key=lambda r: r.similarity_score, reverse=True)

    rows = []
    for result in sorted_results:
        diff_display = escape(result.diff_summary) if result.diff_summary is not None else "N/A"
        rows.append(
            "<tr>"
            f"<td>{result.similarity_score:.4f}</td>"
            f"<td>{_entry_cell(result.entry_a)}</td>"
            f"<td>{_entry_cell(result.match)}</td>"
            f"<td>{diff_display}</td>"
            "</tr>"
        )

    html = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Dataset Comparison</title>

    <!-- jQuery -->
    <script src="https://code.jquery.com/jquery-3.7.1.min.js" integrity="sha256-/JqT3SQfawRcv/BIHPThkBvs0OEvtFFmqPF/lYI/Cxo=" crossorigin="anonymous"></script>

    <!-- DataTables -->
    <link rel="stylesheet" href="https://cdn.datatables.net/1.13.7/css/jquery.dataTables.min.css">
    <script src="https://cdn.datatables.net/1.13.7/js/jquery.dataTables.min.js"></script>

    <style>
        body {{
            font-family: Arial, sans-serif;
            margin: 2rem;
            background-color: #f7f1ec;
        }}
        h1, .info {{
            color: #677472;
        }}
        table {{
            border-collapse: collapse;
            width: 100%;
            background-color: white;
        }}
        th, td {{
            border: 1px solid #e0e0e0;
            padding: 12px;
            text-align: left;
            vertical-align: top;
        }}
        th {{
            background-color: #677472;
            color: white;
        }}
        td:nth-child(4) {{
            max-width: 400px;
            word-wrap: break-word;
        }}
    </style>
</head>
<body>
    <h1>Dataset Comparison</h1>
    <p class="info">Generated: {escape(report.comparison_date)} |
        Total comparisons: {report.total_comparisons} |
        Average similarity: {report.average_similarity:.4f}</p>
    <table id="comparisonTable">
        <thead>
            <tr>
                <th>Similarity</th>
                <th>Entry A</th>
                <th>Best Match</th>
                <th>Differences</th>
            </tr>
        </thead>
        <tbody>
            {''.join(rows)}
        </tbody>
    </table>

    <script>
        $(document).ready(function() {{
            $('#comparisonTable').DataTable({{
                order: [[0, 'desc']],
                pageLength: 25,
                columnDefs: [{{ targets: [0], type: 'num' }}]
            }});
        }});
    </script>
</body>
</html>"""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")
    LOGGER.info("Wrote HTML summary to %s", output_path)
