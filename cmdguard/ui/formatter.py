from __future__ import annotations

from typing import List, Sequence

from rich import box
from rich.console import Console, Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from cmdguard.executor.shell_manager import CommandResult
from cmdguard.models.analysis_models import AnalysisResult, Severity
from cmdguard.models.command_models import CommandComponent

RISK_STYLES = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "bold yellow",
    Severity.LOW: "bold green",
}

RISK_ICONS = {
    Severity.HIGH: "⛔",
    Severity.MEDIUM: "⚠️ ",
    Severity.LOW: "✓ ",
}


def risk_style(level: Severity) -> str:
    return RISK_STYLES.get(level, RISK_STYLES[Severity.LOW])


def risk_icon(level: Severity) -> str:
    return RISK_ICONS.get(level, RISK_ICONS[Severity.LOW])


def build_header(result: AnalysisResult) -> Text:
    header = Text()
    header.append(
        f"{risk_icon(result.risk_level)} {result.risk_level.value.upper()} RISK",
        style=risk_style(result.risk_level),
    )
    header.append(": ")
    header.append(result.tool, style="bold")
    return header


def build_findings_table(result: AnalysisResult) -> Table:
    table = Table(
        title="Risk Details",
        title_justify="left",
        show_header=True,
        header_style="bold",
        box=box.SIMPLE,
    )
    table.add_column("Indicator", no_wrap=True)
    table.add_column("Severity", no_wrap=True)
    table.add_column("Reason")
    for finding in result.findings:
        style = risk_style(finding.severity)
        table.add_row(
            Text(f"[{finding.indicator}]", style=style),
            Text(finding.severity.value, style=style),
            finding.reason,
        )
    return table


def build_suggestions(result: AnalysisResult) -> List[Text]:
    lines: List[Text] = []
    directed = result.directed_suggestion
    if directed is not None:
        line = Text("  → Safer: ", style="cyan")
        line.append(directed.safer, style="green")
        lines.append(line)
        lines.append(Text(f"    {directed.explanation}", style="dim"))
    if result.contextual_suggestion:
        line = Text("  • ", style="cyan")
        line.append(result.contextual_suggestion)
        lines.append(line)
    return lines


def render_analysis(
    result: AnalysisResult, console: Console, show_dry_run: bool = True
) -> None:
    """Render a full analysis: header, explanation, findings, advice, dry-run."""
    if not result.tool:
        console.print("[dim]No command provided.[/]")
        return

    parts = [build_header(result), Text(""), Text(f"▸ {result.explanation}")]
    if result.description:
        parts.append(Text(f"  {result.description}", style="dim"))

    if result.findings:
        parts.append(Text(""))
        parts.append(build_findings_table(result))

    suggestion_lines = build_suggestions(result)
    if suggestion_lines:
        parts.append(Text(""))
        parts.append(Text("Suggestions:", style="bold"))
        parts.extend(suggestion_lines)

    if show_dry_run:
        parts.append(Text(""))
        dry_run = Text("Dry-run: ", style="bold")
        dry_run.append(result.dry_run, style="dim")
        parts.append(dry_run)

    console.print(
        Panel(
            Group(*parts),
            title=f"🛡 {escape(result.command.strip())}",
            border_style=risk_style(result.risk_level).replace("bold ", ""),
        )
    )


def render_rewrite(result: AnalysisResult, console: Console) -> None:
    """Render only the safer rewrite for a command."""
    directed = result.directed_suggestion
    if directed is None:
        console.print("[yellow]No safer rewrite known for this command.[/]")
        return

    body = Text()
    body.append("Instead of: ", style="bold")
    body.append(directed.dangerous, style="red")
    body.append("\nUse:        ", style="bold")
    body.append(directed.safer, style="green")
    body.append(f"\n\n{directed.explanation}", style="dim")
    console.print(Panel(body, title="Safer Rewrite", border_style="green"))


def render_components(
    components: Sequence[CommandComponent], console: Console
) -> None:
    """Render the token-by-token breakdown of a command."""
    if not components:
        return

    table = Table(
        title="Command Components", show_header=True, box=box.ROUNDED
    )
    table.add_column("Part", style="cyan", no_wrap=True)
    table.add_column("Type", style="magenta")
    table.add_column("Description", style="white")
    for component in components:
        table.add_row(
            Text(component.part), component.type.value, Text(component.description)
        )
    console.print(table)


def render_execution_result(result: CommandResult, console: Console) -> None:
    if result.success:
        console.print("\n[bold green]✓ Command completed successfully[/]")
    else:
        console.print(
            f"\n[bold red]❌ Process exited with code {result.return_code}[/]"
        )


def render_error(message: str, console: Console) -> None:
    console.print(f"[bold red]❌ Error:[/] {escape(message)}")
