# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the report writer and the answers export.

Verifies the HTML carries the total and one row per case in report order,
that everything from the run is escaped, and that results.json matches.
"""

import json
from pathlib import Path

from scorerun.evaluation.metrics.aggregate import aggregate
from scorerun.evaluation.reporting.export import export_outputs
from scorerun.evaluation.reporting.writer import (
    render_html,
    summary_to_dict,
    write_html_report,
    write_summary_json,
)
from scorerun.evaluation.tasks.models import RunSummary, Task, TaskResult

TIMESTAMP = "2024-05-01 12:00:00 UTC"


def _sample_summary() -> RunSummary:
    return aggregate([
        TaskResult(
            task=Task(path=Path("in/1.txt"), sort_key=1, index=1),
            score=20,
            score_display="20",
        ),
        TaskResult(
            task=Task(path=Path("in/0.txt"), sort_key=0, index=0),
            score=10,
            score_display="10",
            visualizer="visualizations/0.html",
        ),
        TaskResult(
            task=Task(path=Path("in/2.txt"), sort_key=2, index=2),
            error="tester timed out after 5s",
        ),
    ])


class TestRenderHtml:
    def test_has_total_and_timestamp(self) -> None:
        page = render_html(_sample_summary(), TIMESTAMP)
        assert "<title>Score Results</title>" in page
        assert "<p>Total Score: 30</p>" in page
        assert f"<p>Timestamp: {TIMESTAMP}</p>" in page
        assert "Cases: 3 | Visualized: 1 | Failed: 1" in page

    def test_rows_in_report_order(self) -> None:
        page = render_html(_sample_summary(), TIMESTAMP)
        positions = [page.index(f"<td>{name}</td>") for name in ("0.txt", "1.txt", "2.txt")]
        assert positions == sorted(positions)

    def test_link_only_for_visualized_rows(self) -> None:
        page = render_html(_sample_summary(), TIMESTAMP)
        assert page.count('target="_blank">View</a>') == 1
        assert '<a href="visualizations/0.html" target="_blank">View</a>' in page

    def test_shows_file_name_not_full_path(self) -> None:
        page = render_html(_sample_summary(), TIMESTAMP)
        assert "<td>0.txt</td>" in page
        assert "in/0.txt" not in page

    def test_escapes_run_values(self) -> None:
        summary = aggregate([
            TaskResult(
                task=Task(path=Path("<b>&.txt"), sort_key=0, index=0),
                score=1,
                score_display="1",
                visualizer='vis/"x".html',
            ),
        ])
        page = render_html(summary, "<now>")
        assert "<b>&.txt" not in page
        assert "&lt;b&gt;&amp;.txt" in page
        assert 'href="vis/&quot;x&quot;.html"' in page
        assert "Timestamp: &lt;now&gt;" in page

    def test_empty_run(self) -> None:
        page = render_html(aggregate([]), TIMESTAMP)
        assert "<p>Total Score: 0</p>" in page
        assert "<td>" not in page


class TestWriteReports:
    def test_writes_html(self, tmp_path: Path) -> None:
        target = tmp_path / "report" / "results.html"
        write_html_report(_sample_summary(), target, timestamp=TIMESTAMP)

        assert target.is_file()
        assert "Total Score: 30" in target.read_text(encoding="utf-8")
        assert not list(target.parent.glob(".scorerun_tmp_*"))

    def test_writes_valid_json(self, tmp_path: Path) -> None:
        target = tmp_path / "results.json"
        write_summary_json(_sample_summary(), target, timestamp=TIMESTAMP)

        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["total_score"] == 30
        assert data["timestamp"] == TIMESTAMP
        assert [row["input_file"] for row in data["results"]] == ["0.txt", "1.txt", "2.txt"]
        assert data["results"][0]["visualizer"] == "visualizations/0.html"
        assert data["results"][2]["error"] == "tester timed out after 5s"

    def test_dict_matches_summary(self) -> None:
        summary = _sample_summary()
        data = summary_to_dict(summary, TIMESTAMP)
        assert data["task_count"] == summary.task_count
        assert data["visualized_count"] == 1
        assert data["failed_count"] == 1


class TestExportOutputs:
    def test_copies_regular_files(self, tmp_path: Path) -> None:
        output_dir = tmp_path / "out"
        output_dir.mkdir()
        (output_dir / "0.txt").write_text("a\n", encoding="utf-8")
        (output_dir / "1.txt").write_text("b\n", encoding="utf-8")
        (output_dir / "nested").mkdir()

        copied = export_outputs(output_dir, tmp_path / "answers")

        assert copied == 2
        assert (tmp_path / "answers" / "0.txt").read_text(encoding="utf-8") == "a\n"
        assert not (tmp_path / "answers" / "nested").exists()
        assert (output_dir / "0.txt").exists()

    def test_missing_output_dir_copies_nothing(self, tmp_path: Path) -> None:
        assert export_outputs(tmp_path / "nope", tmp_path / "answers") == 0
