# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Fan-in stage: drain scored results and visualize them one at a time.

Runs on a single thread on purpose. The visualizer writes its artifact to a
fixed file name in a shared working directory, and serializing this stage
is what keeps two invocations from clobbering each other's artifact.
"""

from collections.abc import Callable, Iterable

from scorerun.evaluation.runner.progress import PipelineProgress
from scorerun.evaluation.tasks.models import TaskResult
from scorerun.logging.logger import get_logger

logger = get_logger(__name__)

VisualizeFn = Callable[[TaskResult], TaskResult]


def consume_results(
    channel: Iterable[TaskResult],
    visualize_fn: VisualizeFn,
    progress: PipelineProgress,
) -> list[TaskResult]:
    """
    Visualize every result in receipt order until the channel closes.

    The scoring counter advances when a result is received, the visualization
    counter once its visualizer call returns. A visualizer that raises keeps
    the unvisualized result; the task is never dropped.
    """
    collected: list[TaskResult] = []

    for result in channel:
        progress.mark_scored()

        try:
            result = visualize_fn(result)
        except Exception as exc:
            logger.error(
                "Visualizer raised unexpectedly",
                extra={"task": result.task.name, "error": str(exc)},
                exc_info=True,
            )

        progress.mark_visualized()
        collected.append(result)

    return collected
