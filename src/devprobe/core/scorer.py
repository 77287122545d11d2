"""Workspace complexity scoring."""

from __future__ import annotations

from collections.abc import Mapping

_FILES_PER_POINT = 1000
_BYTES_PER_POINT = 100 * 1024 * 1024
_COMPONENT_CAP = 10.0


def complexity_score(file_count: int, dir_sizes: Mapping[str, int]) -> float:
    """Score a workspace from 0 to 20.

    Half the score comes from the file count (one point per thousand
    files), half from the bytes held in major directories (one point per
    100 MB). Each half is capped at 10.
    """
    size_component = min(file_count / _FILES_PER_POINT, _COMPONENT_CAP)
    volume_component = min(sum(dir_sizes.values()) / _BYTES_PER_POINT, _COMPONENT_CAP)
    return round(size_component + volume_component, 2)
