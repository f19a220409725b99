"""Rendering of ModuleUsage reports to a Rich console."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tfusage.analyzer.errors import InvalidDisplayTypeError
from tfusage.analyzer.module_usage import ModuleUsage


class DisplayType(str, Enum):
    """Which symbol kinds a report shows. Modules/data lookups are not an axis yet."""
    ALL = "all"
    VARIABLES = "variables"
    LOCALS = "locals"

    @classmethod
    def parse(cls, value: "str | DisplayType") -> "DisplayType":
        """Convert a CLI string to a DisplayType.

        Raises:
            InvalidDisplayTypeError: If value is not all/variables/locals
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidDisplayTypeError(str(value)) from None

    @property
    def shows_variables(self) -> bool:
        return self in (DisplayType.ALL, DisplayType.VARIABLES)

    @property
    def shows_locals(self) -> bool:
        return self in (DisplayType.ALL, DisplayType.LOCALS)


@dataclass
class UsageView:
    """The slice of a ModuleUsage selected for display."""
    variables: Dict[str, int] = field(default_factory=dict)
    locals: Dict[str, int] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.variables and not self.locals


def filter_unused_only(items: Dict[str, int]) -> Dict[str, int]:
    """Return a new mapping holding only the zero-count entries of `items`.

    The input mapping is not modified, so a report can be displayed repeatedly.
    """
    return {name: count for name, count in items.items() if count == 0}


def select_usage(usage: ModuleUsage, display_type: "str | DisplayType",
                 unused_only: bool = False) -> UsageView:
    """Pick the kinds requested by `display_type`, optionally unused only.

    Kinds that were not requested come back as empty mappings.

    Raises:
        InvalidDisplayTypeError: If display_type is not recognized
    """
    display_type = DisplayType.parse(display_type)
    view = UsageView()

    if display_type.shows_variables:
        view.variables = dict(usage.variables)
    if display_type.shows_locals:
        view.locals = dict(usage.locals)

    if unused_only:
        view.variables = filter_unused_only(view.variables)
        view.locals = filter_unused_only(view.locals)

    return view


def _usage_table(title: str, items: Dict[str, int]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta", box=None)
    table.add_column("Symbol", style="cyan", no_wrap=True)
    table.add_column("References", justify="right", style="yellow")
    for name in sorted(items):
        count = items[name]
        style = "bold red" if count == 0 else "green"
        table.add_row(escape(name), f"[{style}]{count}[/{style}]")
    return table


def display(usage: ModuleUsage, display_type: "str | DisplayType", unused_only: bool,
            console: Console) -> UsageView:
    """Print the selected view of one module's usage.

    In unused-only mode a module with nothing unused prints nothing at all.

    Returns:
        The view that was rendered

    Raises:
        InvalidDisplayTypeError: If display_type is not recognized
    """
    display_type = DisplayType.parse(display_type)
    view = select_usage(usage, display_type, unused_only)

    if unused_only and view.is_empty():
        return view

    console.print(f"\n 🚀 [bold blue]Module:[/bold blue] {escape(usage.path)}")

    if display_type.shows_variables and (not unused_only or view.variables):
        console.print(f" 👉 {len(view.variables)} variables found")
        if view.variables:
            console.print(_usage_table("Variables", view.variables))

    if display_type.shows_locals and (not unused_only or view.locals):
        console.print(f" 👉 {len(view.locals)} locals found")
        if view.locals:
            console.print(_usage_table("Locals", view.locals))

    return view


def display_variables(usage: ModuleUsage, unused_only: bool, console: Console) -> UsageView:
    return display(usage, DisplayType.VARIABLES, unused_only, console)


def display_locals(usage: ModuleUsage, unused_only: bool, console: Console) -> UsageView:
    return display(usage, DisplayType.LOCALS, unused_only, console)


def display_unused_simple(usage: ModuleUsage, console: Console):
    """List unused variables, locals and child modules of one module, one per line."""
    sections = (
        ("Variables", filter_unused_only(usage.variables), "Variable "),
        ("Locals", filter_unused_only(usage.locals), ""),
        ("Modules", filter_unused_only(usage.modules), ""),
    )
    for title, items, prefix in sections:
        console.print(f"\n 🚀 [bold]{title}:[/bold] {escape(usage.path)}")
        for name in sorted(items):
            console.print(f"{prefix}{escape(name)} used {items[name]} times")


def display_sources(usage: ModuleUsage, console: Console):
    """Tabulate the child modules of one module with their source and pinned version."""
    if not usage.module_sources:
        return

    table = Table(title=f"Module Sources: {escape(usage.path)}")
    table.add_column("Module", style="cyan", no_wrap=True)
    table.add_column("Source", style="magenta", no_wrap=False)
    table.add_column("Version", style="green")
    table.add_column("References", justify="right", style="yellow")

    for name in sorted(usage.module_sources):
        source = usage.module_sources[name]
        table.add_row(
            escape(name),
            escape(source.path) if source.path else "[dim](expression)[/dim]",
            escape(source.version) if source.version else "[dim]-[/dim]",
            str(usage.modules.get(name, 0)),
        )

    console.print(table)
