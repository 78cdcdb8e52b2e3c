# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the visualizer stage of a single task.

A visualizer failure must leave the result exactly as it was: same score,
no link. Success moves the artifact out of the working directory and links
it relative to the report.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from scorerun.evaluation.tasks.models import Task, TaskResult
from scorerun.evaluation.visualizer.runner import VisualizerSettings, visualize


@pytest.fixture()
def scored(tmp_path: Path) -> TaskResult:
    input_dir = tmp_path / "in"
    output_dir = tmp_path / "out"
    input_dir.mkdir()
    output_dir.mkdir()
    (input_dir / "0003.txt").write_text("3\n", encoding="utf-8")
    (output_dir / "0003.txt").write_text("answer\n", encoding="utf-8")
    return TaskResult(
        task=Task(path=input_dir / "0003.txt", sort_key=3, index=0),
        score=30,
        score_display="30",
        output_path=output_dir / "0003.txt",
        exit_code=0,
    )


def _settings(tmp_path: Path, program: Path, **overrides: object) -> VisualizerSettings:
    work = tmp_path / "work"
    work.mkdir(exist_ok=True)
    values: dict[str, object] = {
        "command": (str(program),),
        "output_dir": tmp_path / "out",
        "visualizer_dir": tmp_path / "visualizations",
        "report_dir": tmp_path,
        "working_dir": work,
    }
    values.update(overrides)
    return VisualizerSettings(**values)  # type: ignore[arg-type]


class TestVisualizeSuccess:
    def test_relocates_artifact_and_links_it(
        self, tmp_path: Path, writing_visualizer: Path, scored: TaskResult
    ) -> None:
        settings = _settings(tmp_path, writing_visualizer)

        result = visualize(scored, settings)

        assert result.visualizer == "visualizations/0003.html"
        artifact = tmp_path / "visualizations" / "0003.html"
        assert artifact.is_file()
        assert not (tmp_path / "work" / "vis.html").exists()

    def test_visualizer_gets_input_and_output_paths(
        self, tmp_path: Path, writing_visualizer: Path, scored: TaskResult
    ) -> None:
        visualize(scored, _settings(tmp_path, writing_visualizer))

        content = (tmp_path / "visualizations" / "0003.html").read_text(encoding="utf-8")
        assert str(scored.task.path.resolve()) in content
        assert str((tmp_path / "out" / "0003.txt").resolve()) in content

    def test_score_is_untouched(
        self, tmp_path: Path, writing_visualizer: Path, scored: TaskResult
    ) -> None:
        result = visualize(scored, _settings(tmp_path, writing_visualizer))
        assert result.score == 30
        assert result.score_display == "30"
        assert result.task == scored.task

    def test_original_result_is_not_mutated(
        self, tmp_path: Path, writing_visualizer: Path, scored: TaskResult
    ) -> None:
        visualize(scored, _settings(tmp_path, writing_visualizer))
        assert scored.visualizer is None

    def test_custom_artifact_name_and_extension(
        self, tmp_path: Path, make_script: Callable[[str, str], Path], scored: TaskResult
    ) -> None:
        program = make_script("vis_svg", "#!/bin/sh\necho '<svg/>' > out.svg\n")
        settings = _settings(
            tmp_path, program, artifact_name="out.svg", artifact_extension=".svg"
        )

        assert visualize(scored, settings).visualizer == "visualizations/0003.svg"

    def test_link_is_relative_to_report_dir(
        self, tmp_path: Path, writing_visualizer: Path, scored: TaskResult
    ) -> None:
        settings = _settings(tmp_path, writing_visualizer, report_dir=tmp_path / "report")
        assert visualize(scored, settings).visualizer == "../visualizations/0003.html"

    def test_stale_artifact_is_not_picked_up(
        self, tmp_path: Path, make_script: Callable[[str, str], Path], scored: TaskResult
    ) -> None:
        program = make_script("vis_noop", "#!/bin/sh\nexit 0\n")
        settings = _settings(tmp_path, program)
        (tmp_path / "work" / "vis.html").write_text("left over", encoding="utf-8")

        result = visualize(scored, settings)
        assert result.visualizer is None


class TestVisualizeFailure:
    def test_nonzero_exit_leaves_result_unchanged(
        self, tmp_path: Path, make_script: Callable[[str, str], Path], scored: TaskResult
    ) -> None:
        program = make_script("vis_fail", """\
            #!/bin/sh
            echo '<html/>' > vis.html
            echo "bad input" >&2
            exit 2
        """)

        result = visualize(scored, _settings(tmp_path, program))
        assert result == scored
        assert not (tmp_path / "visualizations" / "0003.html").exists()

    def test_missing_program_leaves_result_unchanged(
        self, tmp_path: Path, scored: TaskResult
    ) -> None:
        result = visualize(scored, _settings(tmp_path, tmp_path / "no_such_vis"))
        assert result == scored

    def test_missing_artifact_leaves_result_unchanged(
        self, tmp_path: Path, make_script: Callable[[str, str], Path], scored: TaskResult
    ) -> None:
        program = make_script("vis_quiet", "#!/bin/sh\nexit 0\n")
        result = visualize(scored, _settings(tmp_path, program))
        assert result.visualizer is None
        assert result.score == 30

    def test_timeout_leaves_result_unchanged(
        self, tmp_path: Path, make_script: Callable[[str, str], Path], scored: TaskResult
    ) -> None:
        program = make_script("vis_slow", "#!/bin/sh\nexec sleep 30\n")
        result = visualize(scored, _settings(tmp_path, program, timeout_seconds=0.5))
        assert result == scored

    def test_disabled_visualizer_does_nothing(
        self, tmp_path: Path, writing_visualizer: Path, scored: TaskResult
    ) -> None:
        result = visualize(scored, _settings(tmp_path, writing_visualizer, enabled=False))
        assert result == scored
        assert not (tmp_path / "work" / "vis.html").exists()


class TestVisualizerSettingsFromConfig:
    def test_defaults(self, tmp_config_file: Path) -> None:
        from scorerun.config.loader import load_config

        settings = VisualizerSettings.from_config(load_config(tmp_config_file))
        assert settings.command == ("./target/release/vis",)
        assert settings.artifact_path == Path("vis.html")
        assert settings.visualizer_dir == Path("visualizations")
        assert settings.report_dir == Path(".")
        assert settings.enabled is True
