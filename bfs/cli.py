import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.pretty import Pretty
from rich.table import Table
from rich.traceback import install

from .config import load_config
from .core import BFS, from_tar
from .decorators import handle_bfs_errors
from .logger import Logger

# Initialize Rich Traceback for better error messages
install(show_locals=True)

# Initialize Rich Console
console = Console()

# Log to stderr so command output stays parseable
logging.basicConfig(
    level=logging.INFO,  # Set to INFO by default, DEBUG if verbose
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)]
)
logger = logging.getLogger(__name__)

# Main app
app = typer.Typer(help="Read files and require modules from tar archives in memory")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose mode"),
):
    """
    bfs - buffered file system.

    Inspect a tar archive and load Python modules from it without
    unpacking anything to disk.
    """
    settings = load_config().cli
    if not settings.color:
        console.no_color = True
    if verbose or settings.verbose:
        logging.getLogger("bfs").setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
        console.print("[bold green]Verbose mode enabled.[/bold green]")


def open_archive(archive_path: Path, basedir: Optional[str] = None) -> BFS:
    """Read an archive from disk and build a BFS over it."""
    data = archive_path.read_bytes()
    bfs = asyncio.run(from_tar(
        data,
        logger=Logger.from_logging(logging.getLogger("bfs")),
        config=load_config().resolver,
    ))
    if basedir is not None:
        bfs.basedir(basedir)
    return bfs


@app.command()
@handle_bfs_errors
def info(
    archive_path: Path = typer.Argument(..., help="Path to the tar archive"),
):
    """
    Show archive size and file count.

    Example:
        bfs info bundle.tar
    """
    bfs = open_archive(archive_path)

    table = Table(title=f"Archive {archive_path.name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")

    table.add_row("Bytes", str(bfs.byte_length()))
    table.add_row("Files", str(bfs.size()))

    console.print(table)


@app.command(name="ls")
@handle_bfs_errors
def ls(
    archive_path: Path = typer.Argument(..., help="Path to the tar archive"),
    pattern: Optional[str] = typer.Argument(None, help="Regular expression to filter paths"),
):
    """
    List files stored in an archive.

    Examples:
        bfs ls bundle.tar
        bfs ls bundle.tar '\\.py$'
    """
    bfs = open_archive(archive_path)
    compiled = re.compile(pattern) if pattern else None

    for path in bfs.list_files(compiled):
        console.print(path, markup=False, highlight=False, soft_wrap=True)


@app.command()
@handle_bfs_errors
def cat(
    archive_path: Path = typer.Argument(..., help="Path to the tar archive"),
    path: str = typer.Argument(..., help="Path of the file inside the archive"),
    basedir: Optional[str] = typer.Option(None, "--basedir", "-b", help="Base directory inside the archive"),
):
    """
    Print a file from an archive.

    Examples:
        bfs cat bundle.tar modules/__init__.py
        bfs cat bundle.tar nested.py --basedir modules
    """
    bfs = open_archive(archive_path, basedir)
    console.print(bfs.read_file(path), markup=False, highlight=False, soft_wrap=True, end="")


@app.command()
@handle_bfs_errors
def require(
    archive_path: Path = typer.Argument(..., help="Path to the tar archive"),
    specifier: str = typer.Argument(..., help="Module specifier, e.g. ./ or ./lib/util or requests"),
    basedir: Optional[str] = typer.Option(None, "--basedir", "-b", help="Base directory inside the archive"),
    as_json: bool = typer.Option(False, "--json", help="Print the exported value as JSON"),
):
    """
    Require a module from an archive and print what it exports.

    Examples:
        bfs require bundle.tar ./ --basedir modules
        bfs require bundle.tar ./nested/deep/__init__.py --basedir modules --json
    """
    bfs = open_archive(archive_path, basedir)
    exported = bfs.require(specifier)

    if as_json:
        console.print(json.dumps(exported, indent=2, default=repr), markup=False, highlight=False, soft_wrap=True)
    else:
        console.print(Pretty(exported))


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    init: bool = typer.Option(False, "--init", help="Initialize config file with defaults"),
    # Resolver settings
    set_source_suffix: Optional[str] = typer.Option(None, "--source-suffix", help="Suffix of source files (default .py)"),
    set_index_file: Optional[str] = typer.Option(None, "--index-file", help="Directory index file (default __init__.py)"),
    set_manifest_file: Optional[str] = typer.Option(None, "--manifest-file", help="Package manifest file (default manifest.json)"),
    set_main_field: Optional[str] = typer.Option(None, "--main-field", help="Manifest field naming the entry file"),
    set_dependency_dir: Optional[str] = typer.Option(None, "--dependency-dir", help="Dependency directory (default site-packages)"),
    # CLI settings
    set_verbose: Optional[bool] = typer.Option(None, "--cli-verbose/--no-cli-verbose", help="Enable verbose output by default"),
    set_color: Optional[bool] = typer.Option(None, "--cli-color/--no-cli-color", help="Enable colored output by default"),
):
    """
    View or edit bfs configuration.

    Configuration is stored at ~/.config/bfs/config.json (or ~/.bfs/config.json).

    Examples:
        # Show current configuration
        bfs config --show

        # Initialize config file with defaults
        bfs config --init

        # Use a different dependency directory
        bfs config --dependency-dir vendor
    """
    from bfs.config import ensure_config_exists, get_config_path, update_config

    if init:
        config_path = ensure_config_exists()
        console.print(f"[green]Configuration initialized at {config_path}[/green]")
        return

    has_settings = any([
        set_source_suffix, set_index_file, set_manifest_file, set_main_field,
        set_dependency_dir, set_verbose is not None, set_color is not None,
    ])

    if has_settings:
        update_config(
            source_suffix=set_source_suffix,
            index_file=set_index_file,
            manifest_file=set_manifest_file,
            main_field=set_main_field,
            dependency_dir=set_dependency_dir,
            cli_verbose=set_verbose,
            cli_color=set_color,
        )
        console.print(f"[green]Configuration saved to {get_config_path()}[/green]")
        if not show:
            return

    current = load_config()

    console.print("\n[bold]bfs Configuration[/bold]")
    console.print(f"[dim]Location: {get_config_path()}[/dim]\n")

    console.print("[bold cyan]Resolver Settings:[/bold cyan]")
    console.print(f"  Source suffix:  {current.resolver.source_suffix}")
    console.print(f"  Data suffixes:  {', '.join(current.resolver.data_suffixes)}")
    console.print(f"  Index file:     {current.resolver.index_file}")
    console.print(f"  Manifest file:  {current.resolver.manifest_file}")
    console.print(f"  Main field:     {current.resolver.main_field}")
    console.print(f"  Dependency dir: {current.resolver.dependency_dir}")

    console.print("\n[bold cyan]CLI Settings:[/bold cyan]")
    console.print(f"  Verbose:        {current.cli.verbose}")
    console.print(f"  Color:          {current.cli.color}")


if __name__ == "__main__":
    app()
