# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Aggregate per-task results into the run summary.

Results reach this point in completion order, which changes from run to run
and with the number of workers. This is the one place where order is
restored: by sort key, ties broken by enumeration order. The outcome is the
same no matter how the scoring stage happened to interleave.

Pure function: same results in, same summary out.
"""

from collections.abc import Iterable

from scorerun.evaluation.tasks.models import RunSummary, TaskResult
from scorerun.logging.logger import get_logger

logger = get_logger(__name__)


def report_order(result: TaskResult) -> tuple[int, int]:
    return (result.task.sort_key, result.task.index)


def aggregate(results: Iterable[TaskResult]) -> RunSummary:
    ordered = sorted(results, key=report_order)

    summary = RunSummary(
        results=ordered,
        total_score=sum(r.score for r in ordered),
        task_count=len(ordered),
        visualized_count=sum(1 for r in ordered if r.visualized),
        failed_count=sum(1 for r in ordered if r.failed),
    )

    logger.debug(
        "Results aggregated",
        extra={
            "total_score": summary.total_score,
            "task_count": summary.task_count,
            "visualized_count": summary.visualized_count,
            "failed_count": summary.failed_count,
        },
    )
    return summary
