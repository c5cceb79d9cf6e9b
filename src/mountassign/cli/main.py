"""
MountAssign CLI Main Entry Point.

Edits the mount point assignments of a simulated installer storage
service kept in a JSON state file.
"""

from __future__ import annotations

import asyncio
import json
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from mountassign import __version__
from mountassign.backend.file import JsonFileStorageBackend
from mountassign.core.config import MountAssignConfig, load_config
from mountassign.core.editor import (
    DUPLICATE_MOUNT_POINT_TEXT,
    PAGE_TITLE,
    ROOT_REFORMAT_HELP_TEXT,
    MountPointEditor,
)
from mountassign.core.errors import MountAssignError
from mountassign.core.logging import setup_logging
from mountassign.core.models import PartitioningMethod, PartitionRequest, SessionState

console = Console()

T = TypeVar("T")


def print_error(message: str) -> None:
    console.print(f"[red]{message}[/red]", soft_wrap=True)


def get_config(ctx: click.Context) -> MountAssignConfig:
    return ctx.obj["config"]


def get_state_file(ctx: click.Context) -> Path:
    return ctx.obj.get("state_file") or get_config(ctx).backend.state_file


def run_with_editor(
    ctx: click.Context,
    action: Callable[[MountPointEditor], Awaitable[T]],
) -> tuple[MountPointEditor, T | None]:
    """Mount an editor over the state file and run ``action`` on it.

    Exits with status 1 if manual partitioning cannot be set up or the
    backend rejects a call.
    """
    config = get_config(ctx)
    errors: list[str] = []

    async def _run() -> tuple[MountPointEditor, T | None]:
        backend = JsonFileStorageBackend(get_state_file(ctx))
        editor = MountPointEditor(backend, config.editor, on_error=errors.append)
        await editor.mount(backend.current_partitioning())
        if editor.state is not SessionState.READY:
            return editor, None
        return editor, await action(editor)

    try:
        editor, result = asyncio.run(_run())
    except MountAssignError as e:
        print_error(str(e))
        sys.exit(1)

    for message in errors:
        print_error(message)
    if errors:
        sys.exit(1)
    return editor, result


def parse_device(value: str) -> PartitionRequest:
    """Parse a ``DEVICE:FORMAT[:MOUNT_POINT]`` argument."""
    parts = value.split(":")
    if len(parts) not in (2, 3) or not parts[0] or not parts[1]:
        raise click.BadParameter(
            f"expected DEVICE:FORMAT[:MOUNT_POINT], got {value!r}", param_hint="DEVICES"
        )
    mount_point = parts[2] if len(parts) == 3 else ""
    return PartitionRequest(
        device_spec=parts[0],
        format_type=parts[1],
        mount_point=mount_point,
        reformat=mount_point == "/",
    )


def editor_to_dict(editor: MountPointEditor) -> dict[str, Any]:
    return {
        "path": editor.store.path,
        "valid": editor.is_valid,
        "requests": [
            {**row.request.to_backend(), "duplicate": row.duplicate}
            for row in editor.rows
        ],
    }


def print_rows(editor: MountPointEditor) -> None:
    table = Table(title=PAGE_TITLE)
    table.add_column("Partition", style="cyan")
    table.add_column("Format type", style="yellow")
    table.add_column("Mount point", style="blue")
    table.add_column("Reformat", style="magenta")
    table.add_column("Notes", style="white")

    for row in editor.rows:
        notes = []
        if row.duplicate:
            notes.append(f"[red]{DUPLICATE_MOUNT_POINT_TEXT}[/red]")
        if row.is_root:
            notes.append(ROOT_REFORMAT_HELP_TEXT)
        if not row.mount_point_editable:
            notes.append("Not mountable")
        elif not row.reformat_editable and not row.is_root:
            notes.append("Reformat not supported")
        table.add_row(
            row.device_spec,
            row.format_type,
            row.mount_point or "-",
            "Yes" if row.reformat else "No",
            " ".join(notes),
        )

    if not editor.rows:
        console.print("[yellow]No partitions[/yellow]")
        return
    console.print(table)


@click.group()
@click.version_option(version=__version__, prog_name="MountAssign")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--state",
    "-s",
    "state_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Path to the storage state file",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option("--verbose", "-v", is_flag=True, help="Log to the console")
@click.pass_context
def cli(
    ctx: click.Context,
    config: Path | None,
    state_file: Path | None,
    json_output: bool,
    verbose: bool,
) -> None:
    """
    MountAssign - Assign mount points to discovered partitions.
    """
    ctx.ensure_object(dict)

    loaded = MountAssignConfig.load(config) if config else load_config()
    ctx.obj["config"] = loaded
    ctx.obj["state_file"] = state_file
    ctx.obj["json_output"] = json_output

    setup_logging(loaded.logging.model_copy(update={"console_enabled": verbose}))


@cli.command("init")
@click.argument("devices", nargs=-1, required=True)
@click.option(
    "--method",
    type=click.Choice([m.value for m in PartitioningMethod], case_sensitive=False),
    default=PartitioningMethod.AUTOMATIC.value,
    show_default=True,
    help="Method of the initial partitioning object",
)
@click.option("--bootloader-drive", default="", help="Initial boot loader drive")
@click.pass_context
def init_state(
    ctx: click.Context, devices: tuple[str, ...], method: str, bootloader_drive: str
) -> None:
    """Create a state file from DEVICE:FORMAT[:MOUNT_POINT] entries."""
    requests = [parse_device(d) for d in devices]
    state_file = get_state_file(ctx)
    try:
        JsonFileStorageBackend.create(
            state_file,
            requests,
            method=PartitioningMethod.from_string(method),
            bootloader_drive=bootloader_drive,
        )
    except MountAssignError as e:
        print_error(str(e))
        sys.exit(1)
    if not ctx.obj.get("json_output"):
        console.print(
            f"[green]Discovered {len(requests)} partition(s), state written to {state_file}[/green]"
        )


@cli.command("list")
@click.pass_context
def list_requests(ctx: click.Context) -> None:
    """List partitions and their mount point assignments."""
    editor, _ = run_with_editor(ctx, _noop)

    if ctx.obj.get("json_output"):
        click.echo(json.dumps(editor_to_dict(editor), indent=2))
        return

    print_rows(editor)
    if not editor.is_valid:
        console.print(f"[red]{DUPLICATE_MOUNT_POINT_TEXT}[/red]")


@cli.command("assign")
@click.argument("device")
@click.argument("mount_point")
@click.pass_context
def assign(ctx: click.Context, device: str, mount_point: str) -> None:
    """Assign MOUNT_POINT to DEVICE ("" removes the assignment)."""

    async def _assign(editor: MountPointEditor) -> bool:
        return await editor.change_mount_point(device, mount_point)

    editor, _ = run_with_editor(ctx, _assign)
    request = editor.store.get(device)

    if ctx.obj.get("json_output"):
        click.echo(json.dumps(editor_to_dict(editor), indent=2))
        return

    if request is not None:
        console.print(
            Panel(
                f"""[cyan]Partition:[/cyan] {request.device_spec}
[cyan]Mount point:[/cyan] {request.mount_point or "(none)"}
[cyan]Reformat:[/cyan] {"Yes" if request.reformat else "No"}""",
                title="Mount Point Assigned",
            )
        )
    if not editor.is_valid:
        console.print(f"[yellow]Warning: {DUPLICATE_MOUNT_POINT_TEXT}[/yellow]")


@cli.command("format")
@click.argument("device")
@click.option(
    "--reformat/--keep",
    default=True,
    help="Reformat the partition or keep its contents",
)
@click.pass_context
def set_reformat(ctx: click.Context, device: str, reformat: bool) -> None:
    """Choose whether DEVICE is reformatted during installation."""

    async def _toggle(editor: MountPointEditor) -> bool:
        return await editor.toggle_reformat(device, reformat)

    editor, _ = run_with_editor(ctx, _toggle)

    if ctx.obj.get("json_output"):
        click.echo(json.dumps(editor_to_dict(editor), indent=2))
        return

    action = "will be reformatted" if reformat else "will keep its contents"
    console.print(f"[green]{device} {action}[/green]")


@cli.command("validate")
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Check that no mount point is assigned twice."""
    editor, _ = run_with_editor(ctx, _noop)
    duplicates = sorted({row.mount_point for row in editor.rows if row.duplicate})

    if ctx.obj.get("json_output"):
        click.echo(json.dumps({"valid": editor.is_valid, "duplicates": duplicates}))
    elif editor.is_valid:
        console.print("[green]Mount point assignments are valid[/green]")
    else:
        console.print(
            f"[red]{DUPLICATE_MOUNT_POINT_TEXT}[/red] {', '.join(duplicates)}"
        )

    if not editor.is_valid:
        sys.exit(1)


async def _noop(editor: MountPointEditor) -> None:
    return None


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
