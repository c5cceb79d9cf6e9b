"""
Pytest configuration and fixtures for MountAssign tests.
"""

import os
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_requests() -> "tuple[PartitionRequest, ...]":
    """Discovered partitions of a typical BIOS installation disk."""
    from mountassign.core.models import PartitionRequest

    return (
        PartitionRequest(device_spec="sda1", format_type="ext4"),
        PartitionRequest(device_spec="sda2", format_type="ext4", mount_point="/home"),
        PartitionRequest(device_spec="sda3", format_type="biosboot"),
        PartitionRequest(device_spec="sda4", format_type="btrfs"),
    )


@pytest.fixture
def memory_backend(sample_requests) -> "InMemoryStorageBackend":
    """Create an in-memory storage backend with the sample partitions."""
    from mountassign.backend.memory import InMemoryStorageBackend

    return InMemoryStorageBackend(devices=sample_requests, bootloader_drive="sda")


@pytest.fixture
def sample_config(temp_dir: Path) -> "MountAssignConfig":
    """Create a sample configuration writing only into a temporary directory."""
    from mountassign.core.config import BackendConfig, LoggingConfig, MountAssignConfig

    config = MountAssignConfig(
        logging=LoggingConfig(log_directory=temp_dir / "logs", console_enabled=False),
        backend=BackendConfig(state_file=temp_dir / "storage.json"),
    )
    config.ensure_directories()
    return config


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "gui: GUI tests requiring Qt")
    config.addinivalue_line("markers", "slow: Slow running tests")


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Modify test collection based on available resources."""
    # Skip GUI tests if Qt is not available or if running in CI without display
    try:
        from PySide6.QtWidgets import QApplication  # noqa: F401

        if (
            os.environ.get("DISPLAY") is None
            and os.environ.get("QT_QPA_PLATFORM") != "offscreen"
            and sys.platform != "win32"
        ):
            skip_gui = pytest.mark.skip(reason="No display available")
            for item in items:
                if "gui" in item.keywords:
                    item.add_marker(skip_gui)
    except ImportError:
        skip_gui = pytest.mark.skip(reason="PySide6 not available")
        for item in items:
            if "gui" in item.keywords:
                item.add_marker(skip_gui)


@pytest.fixture
def qapp() -> Generator["QApplication", None, None]:
    """Create a QApplication for GUI tests."""
    try:
        from PySide6.QtWidgets import QApplication

        app = QApplication.instance()
        if app is None:
            app = QApplication([])

        yield app
    except ImportError:
        pytest.skip("PySide6 not available")
