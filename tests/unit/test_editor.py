"""
Tests for mountassign.core.editor module.
"""

import asyncio
from unittest.mock import Mock

import pytest

from mountassign.backend.memory import InMemoryStorageBackend
from mountassign.core.editor import (
    STEP_ID,
    MountPointEditor,
    PartitionRecordStore,
)
from mountassign.core.errors import EditorNotReadyError, LockedFieldError, UnknownDeviceError
from mountassign.core.models import (
    PartitioningData,
    PartitioningMethod,
    PartitionRequest,
    SessionState,
    StepNotification,
)


def make_editor(backend: InMemoryStorageBackend) -> tuple[MountPointEditor, Mock, Mock]:
    on_validity = Mock()
    on_error = Mock()
    editor = MountPointEditor(backend, on_validity_changed=on_validity, on_error=on_error)
    return editor, on_validity, on_error


class TestPartitionRecordStore:
    """Tests for PartitionRecordStore."""

    def test_load_and_get(self) -> None:
        store = PartitionRecordStore()
        store.load(
            PartitioningData(
                path="/p/1",
                method=PartitioningMethod.MANUAL,
                requests=(PartitionRequest("sda1", "ext4"),),
            )
        )
        assert store.path == "/p/1"
        assert len(store) == 1
        assert store.get("sda1") is not None
        assert store.get("sdb1") is None

    def test_load_keeps_path_when_missing(self) -> None:
        store = PartitionRecordStore()
        store.load(PartitioningData(path="/p/1"))
        store.load(PartitioningData(requests=(PartitionRequest("sda1", "ext4"),)))
        assert store.path == "/p/1"

    def test_replace_is_wholesale(self) -> None:
        store = PartitionRecordStore()
        requests = [PartitionRequest("sda1", "ext4")]
        store.replace(requests)
        requests.append(PartitionRequest("sda2", "ext4"))
        assert len(store) == 1
        assert isinstance(store.requests, tuple)


class TestMountPointEditorMount:
    """Tests for the editor setup sequence."""

    @pytest.mark.asyncio
    async def test_mount_creates_manual_partitioning(self, memory_backend) -> None:
        editor, on_validity, on_error = make_editor(memory_backend)
        assert editor.is_loading
        assert not editor.is_editable

        state = await editor.mount(
            PartitioningData(path="/p/auto", method=PartitioningMethod.AUTOMATIC)
        )

        assert state is SessionState.READY
        assert not editor.is_loading
        assert editor.is_editable
        assert [c[0] for c in memory_backend.calls] == [
            "set_bootloader_drive",
            "create_partitioning",
            "get_partitioning_data",
        ]
        assert memory_backend.bootloader_drive == ""
        assert editor.store.path == memory_backend.current_path
        assert [r.device_spec for r in editor.requests] == ["sda1", "sda2", "sda3", "sda4"]
        on_validity.assert_called_with(True)
        on_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_mount_manual_makes_no_calls(self, memory_backend, sample_requests) -> None:
        editor, on_validity, _ = make_editor(memory_backend)
        data = PartitioningData(
            path="/p/1", method=PartitioningMethod.MANUAL, requests=sample_requests
        )

        state = await editor.mount(data)

        assert state is SessionState.READY
        assert memory_backend.calls == []
        assert editor.requests == sample_requests
        on_validity.assert_called_once_with(True)

    @pytest.mark.asyncio
    async def test_mount_setup_failure(self, memory_backend) -> None:
        memory_backend.fail("create_partitioning", "Storage is busy")
        editor, on_validity, on_error = make_editor(memory_backend)

        state = await editor.mount(None)

        assert state is SessionState.FAILED
        assert not editor.is_editable
        assert not editor.is_loading
        on_error.assert_called_once()
        assert "Storage is busy" in on_error.call_args.args[0]
        on_validity.assert_not_called()

        with pytest.raises(EditorNotReadyError):
            await editor.change_mount_point("sda1", "/")

    @pytest.mark.asyncio
    async def test_mount_read_failure_is_reported(self, memory_backend) -> None:
        memory_backend.fail("get_partitioning_data", "gone")
        editor, _, on_error = make_editor(memory_backend)

        state = await editor.mount(None)

        assert state is SessionState.READY
        assert editor.requests == ()
        assert editor.store.path == memory_backend.current_path
        on_error.assert_called_once_with("get_partitioning_data: gone")

    @pytest.mark.asyncio
    async def test_unmount_during_setup_abandons_results(self, sample_requests) -> None:
        backend = InMemoryStorageBackend(devices=sample_requests, latency=0.01)
        editor, on_validity, on_error = make_editor(backend)

        task = asyncio.create_task(editor.mount(None))
        await asyncio.sleep(0)
        editor.unmount()
        await task

        assert editor.requests == ()
        assert not editor.is_editable
        on_validity.assert_not_called()
        on_error.assert_not_called()

    @pytest.mark.asyncio
    async def test_unmount_during_submission_drops_error(self, sample_requests) -> None:
        backend = InMemoryStorageBackend(devices=sample_requests, latency=0.01)
        editor, _, on_error = make_editor(backend)
        await editor.mount(None)
        backend.fail("set_manual_partitioning_requests", "device busy")

        task = asyncio.create_task(editor.change_mount_point("sda1", "/"))
        await asyncio.sleep(0)
        editor.unmount()

        assert await task is False
        on_error.assert_not_called()


class TestMountPointEditorEdits:
    """Tests for edits issued through the editor."""

    @pytest.mark.asyncio
    async def test_edits_rejected_before_mount(self, memory_backend) -> None:
        editor, _, _ = make_editor(memory_backend)
        with pytest.raises(EditorNotReadyError):
            await editor.toggle_reformat("sda1", True)
        assert memory_backend.calls == []

    @pytest.mark.asyncio
    async def test_change_mount_point_submits_full_list(self, memory_backend) -> None:
        editor, on_validity, _ = make_editor(memory_backend)
        await editor.mount(None)
        memory_backend.calls.clear()

        accepted = await editor.change_mount_point("sda1", "/")

        assert accepted is True
        assert editor.store.get("sda1") == PartitionRequest("sda1", "ext4", "/", True)
        operation, path, submitted = memory_backend.calls[0]
        assert operation == "set_manual_partitioning_requests"
        assert path == editor.store.path
        assert submitted == editor.requests
        assert memory_backend.current_partitioning().requests == editor.requests
        on_validity.assert_called_with(True)

    @pytest.mark.asyncio
    async def test_duplicate_mount_point_invalidates(self, memory_backend) -> None:
        editor, on_validity, on_error = make_editor(memory_backend)
        await editor.mount(None)

        await editor.change_mount_point("sda1", "/home")

        assert not editor.is_valid
        on_validity.assert_called_with(False)
        rows = {row.device_spec: row for row in editor.rows}
        assert rows["sda1"].duplicate and rows["sda2"].duplicate
        # Duplicates are accepted by the backend; the flag only gates the page
        on_error.assert_not_called()

        await editor.change_mount_point("sda2", "")
        on_validity.assert_called_with(True)

    @pytest.mark.asyncio
    async def test_toggle_reformat(self, memory_backend) -> None:
        editor, _, _ = make_editor(memory_backend)
        await editor.mount(None)

        await editor.toggle_reformat("sda2", True)

        assert editor.store.get("sda2").reformat is True

    @pytest.mark.asyncio
    async def test_locked_controls(self, memory_backend) -> None:
        editor, _, _ = make_editor(memory_backend)
        await editor.mount(None)
        await editor.change_mount_point("sda1", "/")
        memory_backend.calls.clear()

        with pytest.raises(LockedFieldError):
            await editor.toggle_reformat("sda1", False)
        with pytest.raises(LockedFieldError):
            await editor.change_mount_point("sda3", "/boot")
        with pytest.raises(LockedFieldError):
            await editor.toggle_reformat("sda4", True)

        assert memory_backend.calls == []
        assert editor.store.get("sda1").reformat is True

    @pytest.mark.asyncio
    async def test_unknown_device(self, memory_backend) -> None:
        editor, _, _ = make_editor(memory_backend)
        await editor.mount(None)
        with pytest.raises(UnknownDeviceError):
            await editor.change_mount_point("nvme0n1p1", "/")

    @pytest.mark.asyncio
    async def test_submission_failure_keeps_local_state(self, memory_backend) -> None:
        editor, _, on_error = make_editor(memory_backend)
        await editor.mount(None)
        memory_backend.fail("set_manual_partitioning_requests", "device busy")

        accepted = await editor.change_mount_point("sda1", "/")

        assert accepted is False
        assert editor.store.get("sda1").mount_point == "/"
        assert memory_backend.current_partitioning().requests[0].mount_point == ""
        on_error.assert_called_once_with("set_manual_partitioning_requests: device busy")

        memory_backend.clear_failures()
        assert await editor.toggle_reformat("sda2", True) is True
        assert memory_backend.current_partitioning().requests == editor.requests

    @pytest.mark.asyncio
    async def test_refresh_reconciles_with_backend(self, memory_backend) -> None:
        editor, on_validity, _ = make_editor(memory_backend)
        await editor.mount(None)
        memory_backend.fail("set_manual_partitioning_requests")
        await editor.change_mount_point("sda1", "/")

        data = await memory_backend.get_partitioning_data(editor.store.path)
        editor.refresh(data)

        assert editor.store.get("sda1").mount_point == ""
        on_validity.assert_called_with(True)


class TestStepNotification:
    """Tests for step notifications addressed to the page."""

    def test_alert_for_this_step(self, memory_backend) -> None:
        editor, _, _ = make_editor(memory_backend)
        editor.set_step_notification(StepNotification(step=STEP_ID, message="Invalid layout"))
        assert editor.alert_message == "Invalid layout"

    def test_alert_for_other_step(self, memory_backend) -> None:
        editor, _, _ = make_editor(memory_backend)
        editor.set_step_notification(StepNotification(step="installation-method", message="x"))
        assert editor.alert_message is None

    def test_no_alert(self, memory_backend) -> None:
        editor, _, _ = make_editor(memory_backend)
        assert editor.alert_message is None
