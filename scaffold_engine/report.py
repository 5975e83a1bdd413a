"""Rich console presentation of generation results and template listings."""

from __future__ import annotations

from collections.abc import Sequence

from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from scaffold_engine.constraints import ConstraintRegistry
from scaffold_engine.orchestrator import GenerationResult, StepStatus
from scaffold_engine.templates import GenerationTemplate
from scaffold_engine.utils import console, format_duration, print_summary_table


def render_result(result: GenerationResult) -> None:
    """Print the end-of-run summary for one generation."""
    print_summary_table(
        {
            "Project type": result.archetype,
            "Template": result.template_id or "-",
            "Output": result.project_path or "-",
            "Files written": str(len(result.files_generated)),
            "Commands run": f"{len(result.commands_executed)} of {len(result.command_outcomes)}",
            "Duration": format_duration(result.duration_seconds),
        },
        title="Generation Summary",
    )

    skipped_files = [o for o in result.file_outcomes if o.status is StepStatus.SKIPPED]
    skipped_commands = [o for o in result.command_outcomes if o.status is StepStatus.SKIPPED]
    if skipped_files or skipped_commands:
        table = Table(title="Skipped Steps", header_style="bold yellow")
        table.add_column("Kind", style="dim", no_wrap=True)
        table.add_column("Target")
        table.add_column("Reason")
        for outcome in skipped_files:
            table.add_row("file", escape(outcome.path), escape(outcome.reason or ""))
        for outcome in skipped_commands:
            table.add_row("command", escape(outcome.command), escape(outcome.reason or ""))
        console.print(table)
        console.print()

    if result.validation_results:
        table = Table(title="Validation", header_style="bold cyan")
        table.add_column("Rule", no_wrap=True)
        table.add_column("Description")
        table.add_column("Result", justify="center")
        table.add_column("Message")
        for validation in result.validation_results:
            mark = "[green]PASS[/green]" if validation.passed else "[red]FAIL[/red]"
            table.add_row(
                validation.rule_type.value,
                escape(validation.description),
                mark,
                escape(validation.message),
            )
        console.print(table)
        console.print()

    if result.success:
        border_style = "bold green"
        lines = ["[bold green]GENERATION SUCCEEDED[/bold green]"]
    else:
        border_style = "bold red"
        lines = ["[bold red]GENERATION FAILED[/bold red]"]
    for error in result.errors:
        lines.append(f"[red]error:[/red] {escape(error)}")
    for warning in result.warnings:
        lines.append(f"[yellow]warning:[/yellow] {escape(warning)}")
    if result.next_steps:
        lines.extend(["", "[bold]Next steps[/bold]"])
        lines.extend(f"  {i}. {escape(step)}" for i, step in enumerate(result.next_steps, 1))

    console.print(Panel("\n".join(lines), title="[bold]Generation Complete[/bold]", border_style=border_style))


def render_templates(templates: Sequence[GenerationTemplate]) -> None:
    """Print a table of the registered templates."""
    table = Table(title="Templates", header_style="bold cyan")
    table.add_column("Id", no_wrap=True)
    table.add_column("Project type", style="dim")
    table.add_column("Name")
    table.add_column("Files", justify="right")
    table.add_column("Commands", justify="right")
    table.add_column("Rules", justify="right")
    for template in templates:
        table.add_row(
            template.id,
            template.archetype,
            escape(template.name),
            str(len(template.files)),
            str(len(template.commands)),
            str(len(template.validation)),
        )
    console.print(table)


def render_archetypes(registry: ConstraintRegistry) -> None:
    """Print every registered archetype with its platforms and capabilities."""
    table = Table(title="Project Types", header_style="bold cyan")
    table.add_column("Archetype", no_wrap=True)
    table.add_column("Platforms")
    table.add_column("Required capabilities")
    for archetype in registry.archetypes():
        profile = registry.get(archetype)
        if profile is None:
            continue
        table.add_row(
            archetype,
            ", ".join(sorted(p.value for p in profile.platforms)),
            ", ".join(registry.required_capabilities(archetype)) or "-",
        )
    console.print(table)
