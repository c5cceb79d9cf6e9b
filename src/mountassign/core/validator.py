"""
MountAssign assignment validation.

Pure functions deciding what an edit does to the reformat flag, whether
a set of requests can be installed, and which controls are editable.
None of these functions touch the backend.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from mountassign.core.config import EditorConfig
from mountassign.core.models import MountPointOption, PartitionRequest, RowState

ROOT_MOUNT_POINT = "/"

_DEFAULT_EDITOR_CONFIG = EditorConfig()


def compute_reformat_on_mount_point_change(
    old_mount_point: str,
    new_mount_point: str,
    current_reformat: bool,
    root: str = ROOT_MOUNT_POINT,
) -> bool:
    """Return the reformat flag a request carries after its mount point changes.

    The root mount point is always reformatted, so entering it forces the
    flag on and leaving it drops the forced flag.
    """
    if new_mount_point == root:
        return True
    if old_mount_point == root and current_reformat:
        return False
    return current_reformat


def _mount_point_counts(requests: Sequence[PartitionRequest]) -> Counter[str]:
    return Counter(r.mount_point for r in requests if r.mount_point)


def is_duplicate_mount_point(
    mount_point: str, requests: Sequence[PartitionRequest]
) -> bool:
    """Check whether more than one request uses the given mount point."""
    if not mount_point:
        return False
    return _mount_point_counts(requests)[mount_point] > 1


def duplicate_mount_points(requests: Sequence[PartitionRequest]) -> set[str]:
    """Get every non-empty mount point assigned more than once."""
    return {mp for mp, count in _mount_point_counts(requests).items() if count > 1}


def is_set_valid(requests: Sequence[PartitionRequest]) -> bool:
    """Check that no non-empty mount point is assigned twice."""
    return not duplicate_mount_points(requests)


def is_root_mount_point(
    request: PartitionRequest, config: EditorConfig = _DEFAULT_EDITOR_CONFIG
) -> bool:
    return request.mount_point == config.root_mount_point


def is_mount_point_editable(
    request: PartitionRequest, config: EditorConfig = _DEFAULT_EDITOR_CONFIG
) -> bool:
    """Non-mountable regions such as BIOS boot never get a mount point."""
    return request.format_type not in config.non_mountable_format_types


def is_reformat_editable(
    request: PartitionRequest, config: EditorConfig = _DEFAULT_EDITOR_CONFIG
) -> bool:
    """Check whether the user may toggle the reformat flag of a request."""
    if is_root_mount_point(request, config):
        return False
    if not is_mount_point_editable(request, config):
        return False
    return request.format_type not in config.reformat_locked_format_types


def mount_point_options(
    current: str, config: EditorConfig = _DEFAULT_EDITOR_CONFIG
) -> list[MountPointOption]:
    """Get the selector options for a request currently mounted at ``current``.

    The current value is moved to the end of the list; custom paths entered
    by the user show up there without a name.
    """
    options = [
        MountPointOption(value=value, name=name)
        for value, name in config.default_mount_points.items()
        if value != current
    ]
    if current:
        options.append(MountPointOption(value=current))
    return options


def evaluate_row(
    request: PartitionRequest,
    requests: Sequence[PartitionRequest],
    config: EditorConfig = _DEFAULT_EDITOR_CONFIG,
) -> RowState:
    """Derive the view state of one request within the full set."""
    return RowState(
        request=request,
        duplicate=is_duplicate_mount_point(request.mount_point, requests),
        is_root=is_root_mount_point(request, config),
        mount_point_editable=is_mount_point_editable(request, config),
        reformat_editable=is_reformat_editable(request, config),
        options=tuple(mount_point_options(request.mount_point, config)),
    )
