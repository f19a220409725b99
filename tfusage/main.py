"""tfusage CLI - Find declared-but-unused symbols in Terraform modules."""
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from rich.markup import escape

from tfusage.config import __version__, get_config
from tfusage.analyzer.discovery import list_modules
from tfusage.analyzer.errors import InvalidDisplayTypeError, TfUsageError
from tfusage.analyzer.module_usage import ModuleUsage
from tfusage.reporter import DisplayType, display, display_sources, display_unused_simple
from tfusage.utils import logger
from tfusage.utils.safe_console import SafeConsole

app = typer.Typer(
    name="tfusage",
    help="Report how often Terraform variables, locals, modules and data sources are referenced",
    add_completion=False
)
# Use SafeConsole for terminals without UTF-8 support
console = SafeConsole(force_terminal=True)


def _configure(verbose: bool, strict_modules: bool = False) -> Tuple[str, bool]:
    """Resolve config + CLI overrides.

    Returns:
        (file extension, strict module reference flag)
    """
    try:
        config = get_config()
    except ValueError as e:
        console.error(str(e))
        raise typer.Exit(1)

    logger.set_verbose(verbose or config.verbose)
    strict = strict_modules or config.strict_module_refs
    return config.file_extension, strict


def _discover(root: str, extension: str) -> List[Path]:
    """List module directories under root in a stable order, exiting on failure."""
    root_path = Path(root).resolve()

    if not root_path.exists():
        console.error(f"Path does not exist: {root_path}")
        raise typer.Exit(1)

    try:
        modules = list_modules(root_path, extension)
    except TfUsageError as e:
        console.error(str(e))
        raise typer.Exit(1)

    if not modules:
        console.print(f"[yellow]No {escape(extension)} files found under {escape(str(root_path))}[/yellow]")

    return sorted(modules)


def _analyze(module_path: Path, extension: str, strict: bool) -> Optional[ModuleUsage]:
    """Build one module's report. Load/parse failures are printed and yield None."""
    try:
        usage = ModuleUsage.from_path(module_path, strict_module_refs=strict, extension=extension)
    except TfUsageError as e:
        console.error(str(e))
        return None

    for key in usage.duplicates:
        console.warn(f"{usage.path}: {key} is declared more than once, keeping the last count")
    return usage


@app.command()
def scan(
    root: str = typer.Argument(".", help="Directory to search for Terraform modules"),
    display_type: str = typer.Option("all", "--type", "-t", help="Symbols to report: all, variables or locals"),
    unused_only: bool = typer.Option(False, "--unused-only", "-u", help="Only show symbols with zero references"),
    strict_modules: bool = typer.Option(
        False, "--strict-modules",
        help="Require a word boundary after module.<name> (also TFUSAGE_STRICT_MODULE_REFS)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug traces to stderr"),
):
    """Count references to every variable and local of each module."""
    try:
        display_type = DisplayType.parse(display_type)
    except InvalidDisplayTypeError as e:
        console.error(f"{e}. Use 'all', 'variables' or 'locals'.")
        raise typer.Exit(1)

    extension, strict = _configure(verbose, strict_modules)

    failed = 0
    for module_path in _discover(root, extension):
        usage = _analyze(module_path, extension, strict)
        if usage is None:
            failed += 1
            continue
        display(usage, display_type, unused_only, console)

    if failed:
        console.print(f"\n[bold red]{failed} module(s) could not be analyzed[/bold red]")
        raise typer.Exit(1)


@app.command()
def unused(
    root: str = typer.Argument(".", help="Directory to search for Terraform modules"),
    strict_modules: bool = typer.Option(
        False, "--strict-modules", help="Require a word boundary after module.<name>"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug traces to stderr"),
):
    """List unused variables, locals and child modules of each module."""
    extension, strict = _configure(verbose, strict_modules)

    failed = 0
    for module_path in _discover(root, extension):
        usage = _analyze(module_path, extension, strict)
        if usage is None:
            failed += 1
            continue
        display_unused_simple(usage, console)

    if failed:
        raise typer.Exit(1)


@app.command()
def sources(
    root: str = typer.Argument(".", help="Directory to search for Terraform modules"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Print debug traces to stderr"),
):
    """Show the source and pinned version of every child module call."""
    extension, strict = _configure(verbose)

    failed = 0
    for module_path in _discover(root, extension):
        usage = _analyze(module_path, extension, strict)
        if usage is None:
            failed += 1
            continue
        display_sources(usage, console)

    if failed:
        raise typer.Exit(1)


def _version_callback(value: bool):
    if value:
        console.print(f"tfusage {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True,
        help="Show the version and exit"
    ),
):
    """tfusage - Find declared-but-unused symbols in Terraform modules."""
    pass


if __name__ == "__main__":
    app()
