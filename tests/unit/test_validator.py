"""
Tests for mountassign.core.validator module.
"""

import pytest

from mountassign.core.config import EditorConfig
from mountassign.core.models import MountPointOption, PartitionRequest
from mountassign.core.validator import (
    compute_reformat_on_mount_point_change,
    duplicate_mount_points,
    evaluate_row,
    is_duplicate_mount_point,
    is_mount_point_editable,
    is_reformat_editable,
    is_root_mount_point,
    is_set_valid,
    mount_point_options,
)


def make_requests(*mount_points: str) -> tuple[PartitionRequest, ...]:
    return tuple(
        PartitionRequest(device_spec=f"sda{i}", format_type="ext4", mount_point=mp)
        for i, mp in enumerate(mount_points, 1)
    )


class TestComputeReformat:
    """Tests for compute_reformat_on_mount_point_change."""

    @pytest.mark.parametrize("current", [True, False])
    def test_entering_root_forces_reformat(self, current: bool) -> None:
        assert compute_reformat_on_mount_point_change("", "/", current) is True
        assert compute_reformat_on_mount_point_change("/home", "/", current) is True

    def test_leaving_root_clears_reformat(self) -> None:
        assert compute_reformat_on_mount_point_change("/", "/boot", True) is False
        assert compute_reformat_on_mount_point_change("/", "", True) is False

    def test_leaving_root_without_reformat(self) -> None:
        assert compute_reformat_on_mount_point_change("/", "/boot", False) is False

    def test_reselecting_root(self) -> None:
        assert compute_reformat_on_mount_point_change("/", "/", True) is True

    @pytest.mark.parametrize("current", [True, False])
    def test_other_changes_keep_flag(self, current: bool) -> None:
        assert compute_reformat_on_mount_point_change("/home", "/var", current) is current
        assert compute_reformat_on_mount_point_change("", "/boot", current) is current

    def test_custom_root(self) -> None:
        assert compute_reformat_on_mount_point_change("", "/sysroot", False, root="/sysroot")
        assert not compute_reformat_on_mount_point_change("", "/", False, root="/sysroot")


class TestDuplicates:
    """Tests for duplicate detection and set validity."""

    def test_unique_set_is_valid(self) -> None:
        requests = make_requests("/", "/home", "/boot")
        assert is_set_valid(requests)
        assert duplicate_mount_points(requests) == set()

    def test_duplicate_set_is_invalid(self) -> None:
        requests = make_requests("/", "/home", "/")
        assert not is_set_valid(requests)
        assert duplicate_mount_points(requests) == {"/"}
        assert is_duplicate_mount_point("/", requests)
        assert not is_duplicate_mount_point("/home", requests)

    def test_empty_mount_points_never_duplicate(self) -> None:
        requests = make_requests("", "", "/home", "")
        assert is_set_valid(requests)
        assert not is_duplicate_mount_point("", requests)

    def test_value_absent_from_set(self) -> None:
        assert not is_duplicate_mount_point("/var", make_requests("/", "/home"))

    def test_empty_set(self) -> None:
        assert is_set_valid(())

    def test_validity_matches_multiset(self) -> None:
        samples = [
            ("", ""),
            ("/", "/home"),
            ("/", "/"),
            ("/a", "/b", "/a", ""),
            ("/boot", "", "/boot/efi"),
        ]
        for mount_points in samples:
            non_empty = [mp for mp in mount_points if mp]
            expected = len(non_empty) == len(set(non_empty))
            assert is_set_valid(make_requests(*mount_points)) is expected


class TestEditability:
    """Tests for the enable/disable rules of the row controls."""

    def test_root_reformat_not_editable(self) -> None:
        request = PartitionRequest("sda1", "ext4", "/", True)
        assert is_root_mount_point(request)
        assert is_mount_point_editable(request)
        assert not is_reformat_editable(request)

    def test_regular_partition_editable(self) -> None:
        request = PartitionRequest("sda2", "ext4", "/home")
        assert is_mount_point_editable(request)
        assert is_reformat_editable(request)

    def test_biosboot_not_mountable(self) -> None:
        request = PartitionRequest("sda3", "biosboot")
        assert not is_mount_point_editable(request)
        assert not is_reformat_editable(request)

    def test_btrfs_reformat_locked(self) -> None:
        request = PartitionRequest("sda4", "btrfs", "/home")
        assert is_mount_point_editable(request)
        assert not is_reformat_editable(request)

    def test_configured_types(self) -> None:
        config = EditorConfig(
            non_mountable_format_types=["prepboot"],
            reformat_locked_format_types=[],
        )
        assert not is_mount_point_editable(PartitionRequest("sda1", "prepboot"), config)
        assert is_mount_point_editable(PartitionRequest("sda1", "biosboot"), config)
        assert is_reformat_editable(PartitionRequest("sda2", "btrfs"), config)


class TestMountPointOptions:
    """Tests for mount_point_options."""

    def test_unassigned(self) -> None:
        options = mount_point_options("")
        assert [o.value for o in options] == ["/", "/boot", "/home"]
        assert options[0].name == "root"

    def test_selected_default_moved_last(self) -> None:
        options = mount_point_options("/boot")
        assert [o.value for o in options] == ["/", "/home", "/boot"]
        assert options[-1] == MountPointOption(value="/boot")

    def test_custom_path_appended(self) -> None:
        options = mount_point_options("/srv/data")
        assert [o.value for o in options] == ["/", "/boot", "/home", "/srv/data"]
        assert options[-1].name is None


class TestEvaluateRow:
    """Tests for evaluate_row."""

    def test_duplicate_row(self) -> None:
        requests = make_requests("/", "/")
        row = evaluate_row(requests[1], requests)
        assert row.duplicate
        assert row.is_root
        assert not row.reformat_editable
        assert row.device_spec == "sda2"

    def test_plain_row(self) -> None:
        requests = make_requests("", "/home")
        row = evaluate_row(requests[0], requests)
        assert not row.duplicate
        assert not row.is_root
        assert row.mount_point_editable
        assert row.reformat_editable
        assert [o.value for o in row.options] == ["/", "/boot", "/home"]
