# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Path utilities for scorerun.

Directory creation is always explicit, and links written into reports are
always relative to the report so the whole results folder can be moved or
served as-is.
"""

import os
from pathlib import Path


def ensure_directory(path: Path) -> Path:
    """
    Create a directory (and parents) if it doesn't exist. Returns the path for chaining.

    Args:
        path: Directory path to create.

    Returns:
        The same path, now guaranteed to exist.
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def relative_link(target: Path, base_dir: Path) -> str:
    """
    Express `target` relative to `base_dir` using forward slashes.

    This is what goes into an href, so it is POSIX-style even on Windows.
    When no relative path exists (different drives), the absolute path is
    returned instead.
    """
    resolved_target = target.resolve()
    try:
        relative = os.path.relpath(resolved_target, base_dir.resolve())
    except ValueError:
        return resolved_target.as_posix()
    return Path(relative).as_posix()
