# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The two-stage evaluation pipeline at the heart of scorerun.

    tasks ──► ScoringPool (N workers, tester subprocesses)
                 │  results in completion order
                 ▼
             ResultChannel
                 │
                 ▼
          consume_results (one thread, visualizer subprocesses)
                 │
                 ▼
             aggregate ──► RunSummary (report order, total score)

Scoring runs N tasks at a time. Visualization runs one at a time on the
calling thread and starts on each result as soon as it is scored, so the
two stages overlap. Every task comes out the other end exactly once, scored
or zeroed; the worker count changes wall-clock time only, never the
summary.
"""

import time
from collections.abc import Sequence
from functools import partial

from rich.console import Console

from scorerun.evaluation.metrics.aggregate import aggregate
from scorerun.evaluation.runner.channel import ResultChannel
from scorerun.evaluation.runner.consumer import consume_results
from scorerun.evaluation.runner.pool import ScoringPool
from scorerun.evaluation.runner.progress import PipelineProgress
from scorerun.evaluation.scoring.scorer import ScorerSettings, score_task
from scorerun.evaluation.tasks.models import RunSummary, Task
from scorerun.evaluation.visualizer.runner import VisualizerSettings, visualize
from scorerun.logging.logger import get_logger
from scorerun.utils.paths import ensure_directory

logger = get_logger(__name__)


def run_pipeline(
    tasks: Sequence[Task],
    scorer_settings: ScorerSettings,
    visualizer_settings: VisualizerSettings,
    num_workers: int,
    progress_enabled: bool = True,
    console: Console | None = None,
) -> RunSummary:
    """
    Score and visualize every task, then aggregate.

    Raises:
        OSError: If the output or visualization directory can't be created.
        RuntimeError: If the number of results doesn't match the number of
            tasks, which means the scoring stage lost work.
    """
    ensure_directory(scorer_settings.output_dir)
    if visualizer_settings.enabled:
        ensure_directory(visualizer_settings.visualizer_dir)

    logger.info(
        "Pipeline started",
        extra={
            "total_tasks": len(tasks),
            "num_workers": num_workers,
            "visualizer_enabled": visualizer_settings.enabled,
        },
    )
    start = time.monotonic()

    channel = ResultChannel()
    pool = ScoringPool(partial(score_task, settings=scorer_settings), num_workers)

    with PipelineProgress(len(tasks), enabled=progress_enabled, console=console) as progress:
        pool.start(tasks, channel)
        results = consume_results(
            channel,
            partial(visualize, settings=visualizer_settings),
            progress,
        )
    pool.join()

    if len(results) != len(tasks):
        raise RuntimeError(
            f"Pipeline produced {len(results)} results for {len(tasks)} tasks"
        )

    summary = aggregate(results)

    logger.info(
        "Pipeline finished",
        extra={
            "total_score": summary.total_score,
            "task_count": summary.task_count,
            "visualized_count": summary.visualized_count,
            "failed_count": summary.failed_count,
            "elapsed_seconds": round(time.monotonic() - start, 3),
        },
    )
    return summary
