# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Export the solver outputs of a run to a separate answers directory.

A straight copy of every regular file in the output directory. A file that
fails to copy is logged and skipped; the export never changes the scores.
"""

import shutil
from pathlib import Path

from scorerun.logging.logger import get_logger
from scorerun.utils.paths import ensure_directory

logger = get_logger(__name__)


def export_outputs(output_dir: Path, answers_dir: Path) -> int:
    """Copy output files into `answers_dir`. Returns how many were copied."""
    try:
        ensure_directory(answers_dir)
        entries = sorted(output_dir.iterdir())
    except OSError as err:
        logger.error(
            "Cannot export outputs",
            extra={"output_dir": str(output_dir), "answers_dir": str(answers_dir), "error": str(err)},
        )
        return 0

    copied = 0
    for source in entries:
        if not source.is_file():
            continue
        try:
            shutil.copyfile(source, answers_dir / source.name)
        except OSError as err:
            logger.error(
                "Error copying output file",
                extra={"path": str(source), "error": str(err)},
            )
            continue
        copied += 1

    logger.info(
        "Answers saved",
        extra={"answers_dir": str(answers_dir), "copied": copied},
    )
    return copied
