# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Run the external visualizer for one scored task.

The visualizer is invoked as `<command> <input path> <output path>` and
writes a fixed-name artifact (vis.html by default) into its working
directory. That file name is shared by every invocation, so two visualizers
running at once would overwrite each other's artifact. Callers must run this
one task at a time; the consumer stage does exactly that.

On success the artifact is moved into the visualization directory as
`<input stem><artifact extension>` and the result comes back with a link to
it. Any failure leaves the result as it was, with no link, and a log entry.
"""

import subprocess
from dataclasses import dataclass, replace
from pathlib import Path

from scorerun.config.schema import ScorerunConfig
from scorerun.evaluation.tasks.models import TaskResult
from scorerun.logging.logger import get_logger
from scorerun.utils.filesystem import relocate_file, safe_delete
from scorerun.utils.paths import relative_link

logger = get_logger(__name__)


@dataclass(frozen=True)
class VisualizerSettings:
    """Everything visualize needs, resolved once per run."""

    command: tuple[str, ...]
    output_dir: Path
    visualizer_dir: Path
    report_dir: Path
    artifact_name: str = "vis.html"
    artifact_extension: str = ".html"
    working_dir: Path = Path(".")
    timeout_seconds: float | None = None
    enabled: bool = True

    @classmethod
    def from_config(cls, config: ScorerunConfig) -> "VisualizerSettings":
        vis = config.visualizer
        paths = config.paths
        return cls(
            command=tuple(vis.command.split()),
            output_dir=Path(paths.output_dir),
            visualizer_dir=Path(paths.visualizer_dir),
            report_dir=Path(paths.html_output).parent,
            artifact_name=vis.artifact_name,
            artifact_extension=vis.artifact_extension,
            working_dir=Path(vis.working_dir),
            timeout_seconds=vis.timeout_seconds,
            enabled=vis.enabled,
        )

    @property
    def artifact_path(self) -> Path:
        return self.working_dir / self.artifact_name


def _resolve_program(program: str) -> str:
    # The visualizer runs in working_dir, so a relative executable path must
    # be pinned to where we were started from.
    path = Path(program)
    if not path.is_absolute() and len(path.parts) > 1:
        return str(path.resolve())
    return program


def visualize(result: TaskResult, settings: VisualizerSettings) -> TaskResult:
    """
    Render one task and attach the artifact link to its result.

    Must not be called concurrently with another visualize() sharing the
    same working directory.
    """
    if not settings.enabled or not settings.command:
        return result

    task = result.task
    output_path = result.output_path or settings.output_dir / task.name
    artifact = settings.artifact_path

    try:
        if safe_delete(artifact):
            logger.debug("Removed stale visualizer artifact", extra={"path": str(artifact)})
    except OSError as err:
        logger.warning(
            "Could not remove stale visualizer artifact",
            extra={"path": str(artifact), "error": str(err)},
        )

    argv = [
        _resolve_program(settings.command[0]),
        *settings.command[1:],
        str(task.path.resolve()),
        str(output_path.resolve()),
    ]

    try:
        completed = subprocess.run(
            argv,
            capture_output=True,
            cwd=str(settings.working_dir),
            timeout=settings.timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        logger.warning(
            "Visualizer timed out",
            extra={"task": task.name, "timeout_seconds": settings.timeout_seconds},
        )
        return result
    except OSError as err:
        logger.error(
            "Error running visualizer",
            extra={"task": task.name, "command": argv[0], "error": str(err)},
        )
        return result

    if completed.returncode != 0:
        logger.error(
            "Visualizer exited with non-zero status",
            extra={
                "task": task.name,
                "exit_code": completed.returncode,
                "stderr": completed.stderr.decode("utf-8", errors="replace"),
            },
        )
        return result

    if not artifact.is_file():
        logger.error(
            "Visualizer artifact not found",
            extra={"task": task.name, "expected": str(artifact)},
        )
        return result

    destination = settings.visualizer_dir / Path(task.name).with_suffix(settings.artifact_extension)
    try:
        relocate_file(artifact, destination)
    except OSError as err:
        logger.error(
            "Error relocating visualizer artifact",
            extra={"task": task.name, "destination": str(destination), "error": str(err)},
        )
        return result

    link = relative_link(destination, settings.report_dir)
    logger.debug("Task visualized", extra={"task": task.name, "visualizer": link})
    return replace(result, visualizer=link)
