# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Run the external tester against one input case.

The tester gets the case on stdin. Its stdout is the solver's answer and is
persisted verbatim to `<output_dir>/<input name>`; its stderr carries the
`Score = <n>` lines. Exit status and score are independent: a tester that
exits non-zero still has its score read, and only a warning is logged.

Nothing in here raises for a per-task problem. An unreadable input, a tester
that can't be started, a timeout or an unwritable output file all come back
as a zero-score TaskResult with `error` set, so one bad case never stops the
batch.
"""

import subprocess
import time
from dataclasses import dataclass
from pathlib import Path

from scorerun.config.schema import ScorerunConfig
from scorerun.evaluation.scoring.command import build_command, extract_score, format_score
from scorerun.evaluation.tasks.models import Task, TaskResult
from scorerun.logging.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ScorerSettings:
    """Everything score_task needs, resolved once per run."""

    command: tuple[str, ...]
    output_dir: Path
    timeout_seconds: float | None = None

    @classmethod
    def from_config(cls, config: ScorerunConfig) -> "ScorerSettings":
        tester = config.tester
        return cls(
            command=tuple(build_command(tester.command, tester.script, tester.solver_script)),
            output_dir=Path(config.paths.output_dir),
            timeout_seconds=tester.timeout_seconds,
        )


def _persist_output(task: Task, output_dir: Path, stdout: bytes) -> Path:
    output_path = output_dir / task.name
    output_path.write_bytes(stdout)
    return output_path


def score_task(task: Task, settings: ScorerSettings) -> TaskResult:
    """
    Score a single input case.

    Returns a TaskResult with no visualizer link; the visualization stage
    fills that in later.
    """
    if not settings.command:
        logger.warning("Tester command is empty, nothing to run", extra={"task": task.name})
        return TaskResult(task=task, error="empty tester command")

    try:
        input_data = task.path.read_bytes()
    except OSError as err:
        logger.error(
            "Error reading input file",
            extra={"task": task.name, "path": str(task.path), "error": str(err)},
        )
        return TaskResult(task=task, error=f"input unreadable: {err}")

    start = time.monotonic()
    try:
        completed = subprocess.run(
            list(settings.command),
            input=input_data,
            capture_output=True,
            timeout=settings.timeout_seconds,
        )
    except subprocess.TimeoutExpired as exc:
        elapsed = time.monotonic() - start
        logger.warning(
            "Tester timed out",
            extra={"task": task.name, "timeout_seconds": settings.timeout_seconds},
        )
        output_path = None
        try:
            output_path = _persist_output(task, settings.output_dir, exc.stdout or b"")
        except OSError as err:
            logger.error(
                "Error writing tester output",
                extra={"task": task.name, "error": str(err)},
            )
        return TaskResult(
            task=task,
            output_path=output_path,
            error=f"tester timed out after {settings.timeout_seconds}s",
            elapsed_seconds=elapsed,
        )
    except OSError as err:
        logger.error(
            "Error starting tester",
            extra={"task": task.name, "command": settings.command[0], "error": str(err)},
        )
        return TaskResult(
            task=task,
            error=f"tester failed to start: {err}",
            elapsed_seconds=time.monotonic() - start,
        )

    elapsed = time.monotonic() - start
    stderr_text = completed.stderr.decode("utf-8", errors="replace")

    try:
        output_path = _persist_output(task, settings.output_dir, completed.stdout)
    except OSError as err:
        logger.error(
            "Error writing tester output",
            extra={"task": task.name, "output_dir": str(settings.output_dir), "error": str(err)},
        )
        return TaskResult(
            task=task,
            exit_code=completed.returncode,
            error=f"output unwritable: {err}",
            elapsed_seconds=elapsed,
        )

    if completed.returncode != 0:
        logger.warning(
            "Tester exited with non-zero status",
            extra={"task": task.name, "exit_code": completed.returncode, "stderr": stderr_text},
        )

    score = extract_score(stderr_text)

    logger.debug(
        "Task scored",
        extra={
            "task": task.name,
            "score": score,
            "exit_code": completed.returncode,
            "elapsed_seconds": round(elapsed, 3),
        },
    )

    return TaskResult(
        task=task,
        score=score,
        score_display=format_score(score),
        output_path=output_path,
        exit_code=completed.returncode,
        elapsed_seconds=elapsed,
    )
