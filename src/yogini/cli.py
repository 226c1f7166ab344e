"""
yogini.cli - Command Line Interface
===================================

This module provides the command-line interface for yogini using Typer.
There is a single command; what it does depends on which checkout it runs
from:

    yogini checkout        ──▶ Create Mode   (bootstraps a new generator)
    created generator      ──▶ Generate Mode (materializes a project)

The run proceeds in strictly separated phases:

    1. Detect the execution mode
    2. Load yogini.json (missing / empty ⇒ plain copy, invalid ⇒ fail)
    3. Ask the prompts (nothing has been written yet)
    4. Finalize the view data
    5. Materialize
    6. Install dependencies

Usage Examples
--------------
Interactive:
    $ yogini ../my-project

Use every prompt's default:
    $ yogini ../my-project --yes --skip-install

Show help:
    $ yogini --help
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from yogini import __version__
from yogini.config import (
    CONFIG_FILENAME,
    PACKAGE_DIR,
    TOOL_ROOT,
    config_path,
    detect_mode,
    load_config,
    require_prompts,
)
from yogini.errors import (
    ConfigInvalidError,
    ConfigMissingError,
    EmptyPromptSetError,
    PromptAbortedError,
    PromptError,
    YoginiError,
)
from yogini.generator import Materializer, install_dependencies
from yogini.models import ConfigDescriptor, ExecutionMode
from yogini.prompts import collect_answers
from yogini.viewdata import build_view_data


# =============================================================================
# CLI Application Setup
# =============================================================================

app = typer.Typer(
    name="yogini",
    help="Scaffold projects from templates, or bootstrap a new generator.",
    rich_markup_mode="rich",
    add_completion=False,
)

# Console for rich output
console = Console()


# =============================================================================
# Version Callback
# =============================================================================

def version_callback(value: bool) -> None:
    """
    Display version information and exit.

    Parameters
    ----------
    value : bool
        True if --version was passed.
    """
    if value:
        console.print(Panel(
            f"[bold green]yogini[/] version [cyan]{__version__}[/]\n\n"
            f"[dim]Self-replicating project scaffolding[/]",
            border_style="green",
        ))
        raise typer.Exit()


# =============================================================================
# Configuration Phase
# =============================================================================

def load_descriptor(mode: ExecutionMode) -> tuple[ConfigDescriptor | None, bool]:
    """
    Load the descriptor for ``mode`` and decide whether to degrade.

    Returns
    -------
    tuple[ConfigDescriptor | None, bool]
        The descriptor (None when missing) and whether the run is a plain
        copy.

    Raises
    ------
    typer.Exit
        If the descriptor is invalid.
    """
    path = config_path(mode, TOOL_ROOT, PACKAGE_DIR)

    try:
        descriptor = load_config(path)
    except ConfigMissingError:
        rprint(f"[red]No {CONFIG_FILENAME} found. Proceeding with simple copy.[/]")
        return None, True
    except ConfigInvalidError as e:
        rprint(f"[red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1)

    try:
        require_prompts(descriptor, path)
    except EmptyPromptSetError:
        rprint(f"[red]No prompts in {CONFIG_FILENAME}. Proceeding with simple copy.[/]")
        return descriptor, True

    return descriptor, False


# =============================================================================
# Main Command
# =============================================================================

@app.command()
def main(
    destination: Annotated[
        Path,
        typer.Argument(
            help="Directory to materialize into (default: current directory)",
        ),
    ] = Path("."),
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip all prompts, use defaults",
        ),
    ] = False,
    skip_install: Annotated[
        bool,
        typer.Option(
            "--skip-install",
            help="Do not install dependencies afterwards",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """
    Materialize a project (or, from a yogini checkout, a new generator).

    [bold]Examples:[/]

        # Interactive
        yogini ../my-project

        # Defaults only, no dependency installation
        yogini ../my-project --yes --skip-install
    """
    mode = detect_mode(TOOL_ROOT)
    descriptor, raw = load_descriptor(mode)

    # Prompting completes before anything is written
    answers = {}
    if descriptor is not None and not raw:
        try:
            answers = collect_answers(descriptor.prompts, mode, assume_defaults=yes)
        except PromptAbortedError:
            raise typer.Abort()
        except PromptError as e:
            rprint(f"[red]Error:[/] {escape(str(e))}")
            raise typer.Exit(1)

    context = build_view_data(answers)

    materializer = Materializer(
        mode,
        destination,
        context,
        template_dir=PACKAGE_DIR / "templates",
        tool_root=TOOL_ROOT,
        raw=raw,
        include_hidden=descriptor.include_hidden if descriptor is not None else False,
    )

    console.print()
    console.print(Panel(
        f"[bold blue]{'Creating generator' if mode is ExecutionMode.CREATE else 'Generating project'}:[/] "
        f"[green]{escape(str(destination))}[/]",
        title="[bold]yogini[/]",
        border_style="blue",
    ))

    try:
        result = materializer.run()
    except YoginiError as e:
        rprint(f"\n[bold red]Error:[/] {escape(str(e))}")
        raise typer.Exit(1)

    console.print()
    console.print(Panel(
        f"[bold green]Wrote {len(result.files)} file(s)[/]\n\n"
        f"[dim]Location:[/] {escape(str(destination.resolve()))}",
        title="[bold green]Success[/]",
        border_style="green",
    ))

    if skip_install:
        return

    console.print("[bold]Installing dependencies...[/]")
    if install_dependencies(destination):
        console.print("  [green]✓[/] Dependencies installed")
    else:
        console.print("  [yellow]⚠[/] Dependency installation skipped or failed")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    app()
