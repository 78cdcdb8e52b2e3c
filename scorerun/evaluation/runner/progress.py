# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Live progress for the two pipeline stages.

Two counters: tasks scored and tasks visualized. Both are only ever touched
by the consumer thread, which owns this object, so they need no locking.
When enabled, they are rendered as two rich progress bars on stderr that
advance at different rates; scoring runs ahead whenever the visualizer is
the bottleneck. While the bars are live on a terminal, anything written to
stdout (the JSON log lines included) is printed above them instead of
through them.
"""

from types import TracebackType

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)


class PipelineProgress:
    """
    Counter pair with an optional rich display.

    Usage:
        with PipelineProgress(total=len(tasks)) as progress:
            progress.mark_scored()
            progress.mark_visualized()
    """

    def __init__(
        self,
        total: int,
        enabled: bool = True,
        console: Console | None = None,
    ) -> None:
        if total < 0:
            raise ValueError(f"total must be >= 0, got {total}")
        self.total = total
        self.scored = 0
        self.visualized = 0
        self._enabled = enabled
        self._console = console
        self._progress: Progress | None = None
        self._scoring_task: TaskID | None = None
        self._visualizing_task: TaskID | None = None

    def __enter__(self) -> "PipelineProgress":
        if self._enabled:
            self._progress = Progress(
                SpinnerColumn(),
                TextColumn("{task.description}"),
                BarColumn(bar_width=40),
                MofNCompleteColumn(),
                TaskProgressColumn(),
                TimeElapsedColumn(),
                TextColumn("ETA"),
                TimeRemainingColumn(),
                console=self._console or Console(stderr=True),
                redirect_stdout=True,
                redirect_stderr=True,
            )
            self._progress.start()
            self._scoring_task = self._progress.add_task("[cyan]Scoring", total=self.total)
            self._visualizing_task = self._progress.add_task(
                "[green]Visualizing", total=self.total
            )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._progress is None:
            return
        if exc_type is None:
            self._progress.update(self._scoring_task, description="[cyan]Scoring done")
            self._progress.update(
                self._visualizing_task, description="[green]Visualizing done"
            )
        self._progress.stop()
        self._progress = None

    def mark_scored(self) -> None:
        if self.scored >= self.total:
            raise RuntimeError(f"Scoring counter would exceed total of {self.total}")
        self.scored += 1
        if self._progress is not None:
            self._progress.advance(self._scoring_task)

    def mark_visualized(self) -> None:
        if self.visualized >= self.total:
            raise RuntimeError(f"Visualization counter would exceed total of {self.total}")
        self.visualized += 1
        if self._progress is not None:
            self._progress.advance(self._visualizing_task)
