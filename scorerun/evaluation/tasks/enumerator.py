# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Input case enumeration.

Lists the input directory, keeps files with the configured extension and
pairs each with its sort key. Files are taken in name order so the
enumeration index is stable from one run to the next; the sort key plays no
part in dispatch, only in the final report.

A missing or unreadable input directory is fatal: there is nothing to run.
"""

import re
from pathlib import Path

from scorerun.evaluation.tasks.models import Task
from scorerun.logging.logger import get_logger

logger = get_logger(__name__)

_NON_NEGATIVE_INT = re.compile(r"\+?[0-9]+")


class InputDirectoryError(Exception):
    """Raised when the input directory cannot be listed."""


def parse_non_negative_int(text: str) -> int | None:
    """Parse a non-negative decimal integer, or return None if `text` isn't one."""
    if _NON_NEGATIVE_INT.fullmatch(text) is None:
        return None
    try:
        return int(text)
    except ValueError:
        # Longer than the interpreter allows for int conversion.
        return None


def extract_sort_key(filename: str | Path) -> int:
    """
    Numeric prefix of a filename: "0042.txt" -> 42, "abc.txt" -> 0.

    Only the base name is looked at, and only the part before the first dot.
    Anything that isn't a plain non-negative integer gives 0.
    """
    base = Path(filename).name
    head = base.split(".", 1)[0]
    value = parse_non_negative_int(head)
    return value if value is not None else 0


def enumerate_tasks(input_dir: Path, extension: str = ".txt") -> list[Task]:
    """
    Build the task list for a run.

    Raises:
        InputDirectoryError: If the directory is missing or can't be read.
    """
    if not input_dir.is_dir():
        raise InputDirectoryError(f"Input directory not found: {input_dir}")

    try:
        entries = sorted(input_dir.iterdir())
    except OSError as err:
        raise InputDirectoryError(f"Cannot read input directory {input_dir}: {err}") from err

    tasks: list[Task] = []
    for entry in entries:
        if entry.suffix != extension or not entry.is_file():
            continue
        tasks.append(Task(path=entry, sort_key=extract_sort_key(entry), index=len(tasks)))

    logger.info(
        "Input cases enumerated",
        extra={"input_dir": str(input_dir), "extension": extension, "total_tasks": len(tasks)},
    )
    return tasks
