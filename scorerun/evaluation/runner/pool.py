# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Scoring fan-out: run the scorer for every task on a bounded worker pool.

One dedicated producer thread owns a ThreadPoolExecutor with N workers.
Each task is submitted exactly once; each worker sends its result to the
shared channel the moment it finishes, so results arrive in completion
order, not enumeration order. The channel is closed only after the executor
has drained, which means every task has been scored and sent.

Workers spend nearly all their time blocked on a tester subprocess, so
threads are enough here. The parallelism is in the child processes.
"""

import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor

from scorerun.evaluation.runner.channel import ResultChannel
from scorerun.evaluation.tasks.models import Task, TaskResult
from scorerun.logging.logger import get_logger
from scorerun.runtime.environment import available_parallelism

logger = get_logger(__name__)

ScoreFn = Callable[[Task], TaskResult]


def resolve_num_workers(configured: int | None) -> int:
    """Unset or 0 means one worker per available CPU."""
    if configured is None or configured == 0:
        return available_parallelism()
    if configured < 0:
        raise ValueError(f"Number of workers must be >= 0, got {configured}")
    return configured


class ScoringPool:
    """
    Bounded-parallel scorer driver.

    Usage:
        pool = ScoringPool(score_fn, num_workers=8)
        pool.start(tasks, channel)
        for result in channel:   # completion order
            ...
        pool.join()
    """

    def __init__(self, score_fn: ScoreFn, num_workers: int) -> None:
        if num_workers < 1:
            raise ValueError(f"num_workers must be >= 1, got {num_workers}")
        self._score_fn = score_fn
        self._num_workers = num_workers
        self._thread: threading.Thread | None = None

    @property
    def num_workers(self) -> int:
        return self._num_workers

    def start(self, tasks: Sequence[Task], channel: ResultChannel) -> None:
        if self._thread is not None:
            raise RuntimeError("ScoringPool has already been started")
        self._thread = threading.Thread(
            target=self._produce,
            args=(list(tasks), channel),
            name="scorerun-producer",
            daemon=True,
        )
        self._thread.start()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def _produce(self, tasks: list[Task], channel: ResultChannel) -> None:
        logger.debug(
            "Scoring pool started",
            extra={"total_tasks": len(tasks), "num_workers": self._num_workers},
        )
        try:
            with ThreadPoolExecutor(
                max_workers=self._num_workers,
                thread_name_prefix="scorerun-worker",
            ) as executor:
                for task in tasks:
                    executor.submit(self._score_and_send, task, channel)
        except Exception:
            # Tasks not yet sent are missing from the channel; the pipeline
            # checks the result count and fails the run.
            logger.error("Scoring pool failed", exc_info=True)
        finally:
            channel.close()
        logger.debug("Scoring pool drained", extra={"total_tasks": len(tasks)})

    def _score_and_send(self, task: Task, channel: ResultChannel) -> None:
        try:
            result = self._score_fn(task)
        except Exception as exc:
            logger.error(
                "Scorer raised unexpectedly",
                extra={"task": task.name, "error": str(exc)},
                exc_info=True,
            )
            result = TaskResult(task=task, error=f"scorer crashed: {exc}")
        channel.send(result)
