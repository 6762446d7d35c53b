"""
Module: core.utils.file_locking

Purpose:
    Cross-platform file locking for layout snapshot files.
    Uses portalocker for Mac, Windows, and Linux compatibility.

Key Functions:
    - locked_file: Context manager for locked file access
    - locked_write_json: Replace a JSON file's content under an exclusive lock

Dependencies:
    - portalocker: Cross-platform file locking

Used By:
    - core.utils.serialization: save_layout / load_layout
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator

import portalocker

logger = logging.getLogger(__name__)


@contextmanager
def locked_file(
    path: Path,
    mode: str = 'r',
    lock_type: int = portalocker.LOCK_EX,
) -> Generator:
    """
    Context manager for cross-platform locked file access.

    Args:
        path: Path to file.
        mode: File open mode ('r', 'w', 'a', etc.).
        lock_type: Lock type (LOCK_EX for exclusive, LOCK_SH for shared).

    Yields:
        Open file handle with lock held.

    Example:
        >>> with locked_file(path, 'r', portalocker.LOCK_SH) as f:
        ...     data = f.read()
    """
    if 'r' not in mode:
        path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, mode, encoding='utf-8') as f:
        portalocker.lock(f, lock_type)
        try:
            yield f
        finally:
            portalocker.unlock(f)


def locked_write_json(path: Path, data: Dict[str, Any]) -> None:
    """
    Write a JSON document with an exclusive lock held.

    Opens in append mode so the file is not truncated before the lock
    is acquired, then truncates and rewrites under the lock.

    Args:
        path: Path to JSON file.
        data: Dictionary to write.
    """
    with locked_file(path, 'a', portalocker.LOCK_EX) as f:
        f.seek(0)
        f.truncate()
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write('\n')

    logger.debug(f"Wrote {path.name} under lock")
