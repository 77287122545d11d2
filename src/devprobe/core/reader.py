"""Read a file, or only its tail when it is large."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from devprobe.models.logs import BoundedRead

log = logging.getLogger(__name__)

DEFAULT_TAIL_BYTES = 256 * 1024


def read_bounded(path: Path | str, max_bytes: int = DEFAULT_TAIL_BYTES) -> BoundedRead:
    """Return the text of *path*, limited to its last *max_bytes* bytes.

    Recent log entries sit at the end of a file, so a large file is read
    from ``size - max_bytes`` to the end. Bytes that are not valid UTF-8
    are replaced. Read failures (permission denied, file removed since it
    was listed) give an empty ``BoundedRead`` with ``error`` set.
    """
    if max_bytes <= 0:
        raise ValueError(f"max_bytes must be positive, got {max_bytes}")

    try:
        with open(path, "rb") as f:
            size = os.fstat(f.fileno()).st_size
            truncated = size > max_bytes
            if truncated:
                f.seek(size - max_bytes)
            data = f.read(max_bytes)
    except OSError as e:
        log.debug("Cannot read %s: %s", path, e)
        return BoundedRead(error=str(e))

    return BoundedRead(text=data.decode("utf-8", errors="replace"), truncated=truncated)
