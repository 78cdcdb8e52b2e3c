# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for the evaluation pipeline.

These are the core types that everything in the pipeline passes around.
Task and TaskResult are frozen dataclasses: a result is created once by the
scorer and, at most, replaced once by the visualizer with a copy carrying
the artifact link. Nothing else touches them.
"""

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Task:
    """
    One input case to evaluate.

    `sort_key` is the numeric prefix of the filename and only matters for the
    order of the final report. `index` is the position in which the case was
    enumerated; it breaks ties between equal sort keys.
    """

    path: Path
    sort_key: int = 0
    index: int = 0

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class TaskResult:
    """
    The outcome of evaluating one Task.

    A failed task is still a result: score 0 and a short `error` saying what
    went wrong. `visualizer` stays None until the visualizer succeeds, and is
    then the artifact's path relative to the report.
    """

    task: Task
    score: int = 0
    score_display: str = "0"
    visualizer: str | None = None
    output_path: Path | None = None
    exit_code: int | None = None
    error: str | None = None
    elapsed_seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.score < 0:
            raise ValueError(f"Score must be non-negative, got {self.score}")

    @property
    def visualized(self) -> bool:
        return self.visualizer is not None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class RunSummary:
    """
    Everything the report needs: results in report order plus the totals.
    """

    results: list[TaskResult] = field(default_factory=list)
    total_score: int = 0
    task_count: int = 0
    visualized_count: int = 0
    failed_count: int = 0
