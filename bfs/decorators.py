"""Decorators for bfs command-line functionality."""

import functools
import logging
from typing import Any, Callable

import typer
from rich.console import Console

from bfs.errors import (
    ArchiveError,
    ExecutionError,
    InvalidArgumentError,
    ManifestParseError,
    NativeLoadError,
    NotFoundError,
)

logger = logging.getLogger(__name__)
console = Console(stderr=True)


def handle_bfs_errors(func: Callable) -> Callable:
    """
    Decorator to handle common archive and resolution errors.

    Centralizes error handling for CLI commands:
    - FileNotFoundError: Archive file doesn't exist on disk
    - ArchiveError: Archive can't be parsed
    - NotFoundError: Path or module missing from the archive
    - InvalidArgumentError: Bad base directory
    - ManifestParseError / NativeLoadError / ExecutionError: Module failures
    - General exceptions: Unexpected errors
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except FileNotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] Archive not found: {e}")
            raise typer.Exit(code=1)
        except ArchiveError as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            console.print("[yellow]Tip: The file must be a tar archive (optionally gzip, bz2 or xz compressed)[/yellow]")
            raise typer.Exit(code=1)
        except NotFoundError as e:
            console.print(f"[bold red]Error:[/bold red] Not found in archive: {e.path}")
            raise typer.Exit(code=1)
        except InvalidArgumentError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid input: {e}")
            raise typer.Exit(code=1)
        except (ManifestParseError, NativeLoadError, ExecutionError) as e:
            console.print(f"[bold red]Error:[/bold red] {e}")
            if e.__cause__ is not None:
                console.print(f"[dim]Caused by: {e.__cause__!r}[/dim]")
            raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            raise typer.Exit(code=130)
        except Exception as e:
            logger.error(f"Unexpected error in {func.__name__}: {e}", exc_info=True)
            console.print(f"[bold red]Unexpected error:[/bold red] {e}")
            raise typer.Exit(code=1)

    return wrapper
