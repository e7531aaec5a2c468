"""
Console Reporter (rich)

사람이 읽는 진행 상황 출력. 구조화 로그(structlog)와 별개로 stdout에 쓴다.
"""

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from codegraph_upgrade.application.ports import UpgradeReporterPort
from codegraph_upgrade.domain.change import UpgradeChange, shorten_source
from codegraph_upgrade.domain.models import UpgradeState, UpgradeStatus
from codegraph_upgrade.domain.source import Diagnostic

PROLOGUE = (
    "codegraph-upgrade does not support all breaking changes for each version.\n"
    "Please run `codegraph-upgrade --help` and get a list of implemented upgrades."
)


class ConsoleReporter(UpgradeReporterPort):
    """
    Console Reporter (Real Implementation)

    Args:
        console: 출력 대상 (None = stdout)
    """

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False, soft_wrap=True)

    def prologue(self) -> None:
        self.console.print()
        self.console.print(PROLOGUE)
        self.console.print()
        self.console.print("[bold]Running analysis (and upgrade) on given source files...[/bold]")
        self.console.print()

    def skipped(self, messages: Sequence[str]) -> None:
        for message in messages:
            self.console.print(escape(message))

    def compiling(self) -> None:
        self.console.print("[yellow]Running compilation phases...[/yellow]")
        self.console.print()

    def diagnostics(self, diagnostics: Sequence[Diagnostic], resolvable: bool) -> None:
        if resolvable:
            header = "Compilation errors that codegraph-upgrade may resolve occurred."
        else:
            header = "Compilation errors that codegraph-upgrade cannot resolve occurred."
        self.console.print(f"[magenta]{header}[/magenta]")
        self.console.print()
        for diagnostic in diagnostics:
            self.console.print(escape(diagnostic.message))
            self.console.print()

    def analyzing(self, unit_id: str, upgrading: bool) -> None:
        verb = "Analyzing and upgrading" if upgrading else "Analyzing"
        self.console.print(f"{verb} {escape(unit_id)}...")

    def findings_found(self, unit_id: str, count: int) -> None:
        self.console.print(
            f"[yellow]Found {count} upgrade(s) which can be done by codegraph-upgrade automatically.[/yellow]"
        )
        self.console.print()

    def change(self, change: UpgradeChange, source: str, verbose: bool) -> None:
        line, column = change.range.line_column(source)
        if change.is_safe:
            header = "[green]Upgrade change (safe)[/green]"
        else:
            header = "[magenta]Upgrade change (unsafe)[/magenta]"

        self.console.print(f"{header} [dim]{escape(change.unit_id)}:{line}:{column}[/dim]")
        self.console.print(escape(change.description))

        before, after = change.preview(source)
        if not verbose:
            before, after = shorten_source(before), shorten_source(after)

        for text in before.splitlines():
            self.console.print(f"[red]- {escape(text)}[/red]")
        for text in after.splitlines():
            self.console.print(f"[green]+ {escape(text)}[/green]")
        self.console.print()

    def writing(self, unit_id: str) -> None:
        self.console.print()
        self.console.print(f"[yellow]Writing to input file {escape(unit_id)}...[/yellow]")

    def failure(self, message: str) -> None:
        self.console.print(f"[magenta]{escape(message)}[/magenta]")

    def finished(self, state: UpgradeState) -> None:
        if state.applied:
            table = Table(title="Applied upgrades")
            table.add_column("#", justify="right")
            table.add_column("Rule", style="cyan")
            table.add_column("Level")
            table.add_column("Location")
            for index, change in enumerate(state.applied, start=1):
                table.add_row(str(index), change.rule, change.level.value, str(change.range))
            self.console.print()
            self.console.print(table)

        if state.status == UpgradeStatus.CONVERGED:
            self.console.print()
            self.console.print("[cyan]No errors or upgrades found![/cyan]")
        elif state.status in (UpgradeStatus.CYCLE_DETECTED, UpgradeStatus.BUDGET_EXCEEDED):
            self.console.print()
            message = state.error_message or f"Stopped after {state.iteration} upgrade(s)."
            self.console.print(f"[magenta]{escape(message)}[/magenta]")
        elif state.status == UpgradeStatus.NO_PROGRESS:
            self.console.print()
            self.console.print(
                f"[magenta]{len(state.blocking_diagnostics)} error(s) remain that codegraph-upgrade "
                "cannot resolve.[/magenta]"
            )
