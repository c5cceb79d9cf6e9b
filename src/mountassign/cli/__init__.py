"""
MountAssign CLI Module.

Provides the command-line interface for editing mount point assignments.
"""

from mountassign.cli.main import main, cli

__all__ = ["main", "cli"]
