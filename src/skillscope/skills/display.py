"""Rich rendering of registry diagnostics.

Produces a counts table by location and provider, followed by the scanned
roots, warnings and conflicts when ``verbose`` is set.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from skillscope.skills.config import LOCATION_PRIORITY, SkillProvider
from skillscope.skills.registry import RegistryDiagnostics


def render_diagnostics_renderables(
    diagnostics: RegistryDiagnostics,
    *,
    verbose: bool = False,
) -> list[Table | Panel | Text]:
    """Build Rich renderables for ``diagnostics`` without printing them.

    Args:
        diagnostics: Diagnostics from ``SkillRegistry.get_diagnostics()``.
        verbose: Also include scanned paths, warnings and conflicts.

    Returns:
        A list of Rich renderable objects.
    """
    table = Table(title="Skill Diagnostics")
    table.add_column("Group", style="bold cyan")
    table.add_column("Name")
    table.add_column("Skills", justify="right")

    for location in sorted(LOCATION_PRIORITY, key=LOCATION_PRIORITY.__getitem__):
        count = diagnostics.by_location.get(location.value, 0)
        table.add_row("location", location.value, str(count))

    table.add_section()
    for provider in SkillProvider:
        count = diagnostics.by_provider.get(provider.value, 0)
        table.add_row("provider", provider.value, str(count))

    table.add_section()
    table.add_row("Total", "", str(diagnostics.total_skills), style="bold")

    renderables: list[Table | Panel | Text] = [table]
    renderables.append(
        Text(
            f"{len(diagnostics.warnings)} warning(s), {len(diagnostics.conflicts)} conflict(s)",
            style="dim",
        )
    )

    if not verbose:
        return renderables

    sections = (
        ("Scanned directories", [str(p) for p in diagnostics.directories_scanned]),
        ("Plugin sources", [str(p) for p in diagnostics.plugin_sources]),
        ("Warnings", diagnostics.warnings),
        ("Conflicts", diagnostics.conflicts),
    )
    for title, lines in sections:
        if lines:
            body = "\n".join(f"- {line}" for line in lines)
            renderables.append(Panel(body, title=title, expand=False))

    return renderables


def render_diagnostics(
    diagnostics: RegistryDiagnostics,
    *,
    console: Console | None = None,
    verbose: bool = False,
) -> str:
    """Render registry diagnostics and return the captured text.

    Args:
        diagnostics: Diagnostics from ``SkillRegistry.get_diagnostics()``.
        console: Optional Rich Console instance. A console created without
            ``record=True`` is replaced by a recording one of the same
            width. When omitted, a new recording console is created.
        verbose: Also render scanned paths, warnings and conflicts.

    Returns:
        The rendered string captured from the console.
    """
    if console is None:
        console = Console(record=True, width=120)
    elif not console.record:
        console = Console(record=True, width=console.width)

    for renderable in render_diagnostics_renderables(diagnostics, verbose=verbose):
        console.print(renderable)

    return console.export_text()
