# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Run report writer.

Writes two files for every run:

    results.html  - score table with the total, one row per input case and
                    a link to its visualization; click a header to re-sort
    results.json  - the same data, machine-readable

Rows are written in report order (sort key, then enumeration order). Both
files are written atomically.
"""

import json
from datetime import datetime
from html import escape
from pathlib import Path

from scorerun.evaluation.tasks.models import RunSummary
from scorerun.logging.logger import get_logger
from scorerun.utils.filesystem import atomic_write

logger = get_logger(__name__)

_HTML_HEAD = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Score Results</title>
    <style>
        table {
            width: 100%;
            border-collapse: collapse;
        }
        th, td {
            border: 1px solid #ddd;
            padding: 8px;
        }
        th {
            background-color: #f2f2f2;
            text-align: left;
            cursor: pointer;
        }
        tr:hover {
            background-color: #f5f5f5;
        }
    </style>
    <script>
        let sortOrder = {
            score: 'desc',
            file: 'asc'
        };

        function sortTable(columnIndex, isNumeric, key) {
            const table = document.getElementById("resultsTable");
            const body = table.tBodies[0];
            const rows = Array.from(body.rows);
            const order = sortOrder[key] === 'asc' ? 1 : -1;

            rows.sort((a, b) => {
                const cellA = a.cells[columnIndex].innerText;
                const cellB = b.cells[columnIndex].innerText;
                if (isNumeric) {
                    return order * (parseInt(cellA.replace(/,/g, '')) - parseInt(cellB.replace(/,/g, '')));
                }
                return order * cellA.localeCompare(cellB, undefined, {numeric: true});
            });

            rows.forEach(row => body.appendChild(row));
            const label = key + ' (' + (order === 1 ? 'Ascending' : 'Descending') + ')';
            sortOrder[key] = sortOrder[key] === 'asc' ? 'desc' : 'asc';
            document.getElementById("sortIndicator").innerText = 'Sorted by ' + label;
        }
    </script>
</head>
<body>
    <h1>Score Results</h1>
"""

_HTML_TABLE_HEAD = """    <p id="sortIndicator">Sorted by file (Ascending)</p>
    <table id="resultsTable">
        <thead>
            <tr>
                <th onclick="sortTable(0, false, 'file')">Input File</th>
                <th onclick="sortTable(1, true, 'score')">Score</th>
                <th>Visualizer</th>
            </tr>
        </thead>
        <tbody>
"""

_HTML_TAIL = """        </tbody>
    </table>
</body>
</html>
"""


def _timestamp() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S %Z").strip()


def render_html(summary: RunSummary, timestamp: str) -> str:
    """Render the report page. Every value from the run is HTML-escaped."""
    parts: list[str] = [
        _HTML_HEAD,
        f"    <p>Total Score: {summary.total_score}</p>\n",
        f"    <p>Timestamp: {escape(timestamp)}</p>\n",
        f"    <p>Cases: {summary.task_count} | Visualized: {summary.visualized_count}"
        f" | Failed: {summary.failed_count}</p>\n",
        _HTML_TABLE_HEAD,
    ]

    for result in summary.results:
        if result.visualizer is not None:
            link = f'<a href="{escape(result.visualizer)}" target="_blank">View</a>'
        else:
            link = ""
        parts.append(
            "            <tr>\n"
            f"                <td>{escape(result.task.name)}</td>\n"
            f"                <td>{escape(result.score_display)}</td>\n"
            f"                <td>{link}</td>\n"
            "            </tr>\n"
        )

    parts.append(_HTML_TAIL)
    return "".join(parts)


def summary_to_dict(summary: RunSummary, timestamp: str) -> dict[str, object]:
    return {
        "timestamp": timestamp,
        "total_score": summary.total_score,
        "task_count": summary.task_count,
        "visualized_count": summary.visualized_count,
        "failed_count": summary.failed_count,
        "results": [
            {
                "input_file": result.task.name,
                "input_path": str(result.task.path),
                "sort_key": result.task.sort_key,
                "score": result.score,
                "score_display": result.score_display,
                "visualizer": result.visualizer,
                "exit_code": result.exit_code,
                "error": result.error,
                "elapsed_seconds": round(result.elapsed_seconds, 3),
            }
            for result in summary.results
        ],
    }


def write_html_report(
    summary: RunSummary,
    output_path: Path,
    timestamp: str | None = None,
) -> Path:
    """
    Write the HTML report.

    Raises:
        OSError: If the file can't be written. The caller decides whether
            that fails the run; the scores themselves are unaffected.
    """
    atomic_write(output_path, render_html(summary, timestamp or _timestamp()))
    logger.info("HTML report written", extra={"path": str(output_path)})
    return output_path


def write_summary_json(
    summary: RunSummary,
    output_path: Path,
    timestamp: str | None = None,
) -> Path:
    """Write the machine-readable summary. Raises OSError like write_html_report."""
    payload = summary_to_dict(summary, timestamp or _timestamp())
    atomic_write(output_path, json.dumps(payload, indent=2, sort_keys=True) + "\n")
    logger.info("JSON summary written", extra={"path": str(output_path)})
    return output_path
