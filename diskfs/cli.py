"""Command-line interface for diskfs."""

from pathlib import Path
from typing import Callable, Optional

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from diskfs.common import path as pathutil
from diskfs.common.constants import COPY_CHUNK_SIZE, FileOpenMode
from diskfs.common.errors import FileIOError
from diskfs.common.models import PathKind
from diskfs.config import configure_logging, load_settings
from diskfs.file.base import File
from diskfs.filesystem.disk import DiskFilesystem

app = typer.Typer(
    name="diskfs",
    help="diskfs - inspect and edit a root-prefixed disk filesystem",
    no_args_is_help=True,
    add_completion=False,
)

console = Console()


def format_size(size: int) -> str:
    """Format size in human-readable format."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024  # type: ignore[assignment]
    return f"{size:.1f} TB"


def print_success(message: str) -> None:
    """Print success message."""
    console.print(f"[bold green]✓[/bold green] {message}")


def print_error(message: str) -> None:
    """Print error message."""
    console.print(f"[bold red]✗[/bold red] {message}")


def _fs(ctx: typer.Context) -> DiskFilesystem:
    return ctx.obj  # type: ignore[no-any-return]


def _copy(src: File, write: Callable[[bytes], object]) -> int:
    """Stream *src* from its cursor to *write* until a read returns nothing."""
    buffer = bytearray(COPY_CHUNK_SIZE)
    total = 0
    while True:
        n = src.read(buffer)
        if n == 0:
            break
        write(bytes(buffer[:n]))
        total += n
    return total


@app.callback()
def main_options(
    ctx: typer.Context,
    prefix: Optional[str] = typer.Option(
        None,
        "--prefix",
        "-p",
        help="Root prefix for relative paths (overrides config)",
    ),
    backend: Optional[str] = typer.Option(
        None,
        "--backend",
        "-b",
        help="File backend: auto, stream, raw (overrides config)",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file (default: auto-discovery)",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    """Load settings and build the filesystem shared by all commands."""
    try:
        settings = load_settings(config)
        configure_logging(log_level or settings.log_level)
        ctx.obj = DiskFilesystem(
            prefix=settings.prefix if prefix is None else prefix,
            backend=backend or settings.backend,
        )
    except (ValueError, OSError, yaml.YAMLError) as e:
        print_error(str(e))
        raise typer.Exit(1)


@app.command()
def resolve(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path to resolve"),
) -> None:
    """Print the absolute path a path resolves to."""
    typer.echo(_fs(ctx).resolve(path))


@app.command("ls")
def list_directory(
    ctx: typer.Context,
    path: str = typer.Argument(".", help="Directory to list"),
) -> None:
    """List the entries of a directory."""
    fs = _fs(ctx)
    try:
        names = sorted(fs.list_files(path))

        table = Table(
            title=f"[bold cyan]{fs.resolve(path)}[/bold cyan]",
            show_header=True,
            header_style="bold magenta",
            border_style="cyan",
        )
        table.add_column("Name", style="white")
        table.add_column("Type", justify="center")
        table.add_column("Size", justify="right", style="green")

        for name in names:
            info = fs.stat(pathutil.join(path, name))
            kind_labels = {
                PathKind.DIRECTORY: "[blue]dir[/blue]",
                PathKind.FILE: "file",
            }
            size = format_size(info.size) if info.size is not None else ""
            table.add_row(name, kind_labels.get(info.kind, f"[dim]{info.kind.value}[/dim]"), size)

        console.print(table)
        console.print(f"[dim]{len(names)} entries[/dim]")

    except FileIOError as e:
        print_error(f"Failed to list directory: {e}")
        raise typer.Exit(1)


@app.command()
def cat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to print"),
) -> None:
    """Write the contents of a file to stdout."""
    try:
        with _fs(ctx).opened(path, FileOpenMode.READ) as f:
            _copy(f, lambda chunk: typer.echo(chunk, nl=False))
    except FileIOError as e:
        print_error(f"Failed to read file: {e}")
        raise typer.Exit(1)


@app.command()
def stat(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Path to inspect"),
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
) -> None:
    """Show metadata of a path."""
    try:
        info = _fs(ctx).stat(path)
    except FileIOError as e:
        print_error(f"Failed to stat path: {e}")
        raise typer.Exit(1)

    if as_json:
        typer.echo(info.model_dump_json())
        return

    lines = f"[bold]Resolved:[/bold] {info.resolved}"
    lines += f"\n[bold]Type:[/bold] {info.kind.value}"
    if info.size is not None:
        lines += f"\n[bold]Size:[/bold] {format_size(info.size)} ({info.size} bytes)"
    if info.mtime is not None:
        lines += f"\n[bold]Modified:[/bold] {info.mtime}"
    console.print(Panel(lines, title=f"[bold cyan]{path}[/bold cyan]", border_style="cyan"))
    if not info.exists:
        raise typer.Exit(1)


@app.command()
def mkdir(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Directory to create"),
) -> None:
    """Create a directory (no error if it already exists)."""
    try:
        _fs(ctx).create_directory(path)
    except FileIOError as e:
        print_error(f"Failed to create directory: {e}")
        raise typer.Exit(1)
    print_success(f"Directory [bold]{path}[/bold] ready")


@app.command()
def rmdir(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Empty directory to delete"),
) -> None:
    """Delete an empty directory."""
    try:
        _fs(ctx).delete_directory(path)
    except FileIOError as e:
        print_error(f"Failed to delete directory: {e}")
        raise typer.Exit(1)
    print_success(f"Directory [bold]{path}[/bold] deleted")


@app.command()
def touch(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to create"),
) -> None:
    """Create an empty file, truncating an existing one."""
    try:
        _fs(ctx).create_file(path)
    except FileIOError as e:
        print_error(f"Failed to create file: {e}")
        raise typer.Exit(1)
    print_success(f"File [bold]{path}[/bold] created")


@app.command()
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to delete"),
) -> None:
    """Delete a file."""
    try:
        _fs(ctx).delete_file(path)
    except FileIOError as e:
        print_error(f"Failed to delete file: {e}")
        raise typer.Exit(1)
    print_success(f"File [bold]{path}[/bold] deleted")


@app.command()
def put(
    ctx: typer.Context,
    local: Path = typer.Argument(..., help="Local file to copy"),
    path: str = typer.Argument(..., help="Destination path"),
) -> None:
    """Copy a local file into the filesystem."""
    fs = _fs(ctx)
    local_fs = DiskFilesystem(backend=fs.file_class)
    try:
        with local_fs.opened(str(local), FileOpenMode.READ) as src:
            fs.create_file(path)
            with fs.opened(path, FileOpenMode.WRITE) as dst:
                total = _copy(src, dst.write)
                dst.flush()
    except FileIOError as e:
        print_error(f"Failed to copy file: {e}")
        raise typer.Exit(1)
    print_success(f"Copied {format_size(total)} to [bold]{fs.resolve(path)}[/bold]")


@app.command()
def get(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Source path"),
    local: Path = typer.Argument(..., help="Local destination file"),
) -> None:
    """Copy a file out of the filesystem."""
    fs = _fs(ctx)
    local_fs = DiskFilesystem(backend=fs.file_class)
    try:
        with fs.opened(path, FileOpenMode.READ) as src:
            local_fs.create_file(str(local))
            with local_fs.opened(str(local), FileOpenMode.WRITE) as dst:
                total = _copy(src, dst.write)
                dst.flush()
    except FileIOError as e:
        print_error(f"Failed to copy file: {e}")
        raise typer.Exit(1)
    print_success(f"Copied {format_size(total)} to [bold]{local}[/bold]")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
