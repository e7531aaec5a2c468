"""
Codegraph Upgrade CLI

Command-line interface for upgrading Solidity sources to breaking language
changes.
"""

import typer
from rich.console import Console

from codegraph_upgrade import __version__
from codegraph_upgrade.api import UpgradeAPI
from codegraph_upgrade.common.exceptions import InvalidConfigurationError, InvalidInputError
from codegraph_upgrade.common.logging_config import configure_logging
from codegraph_upgrade.infrastructure.config import UpgradeSettings
from codegraph_upgrade.infrastructure.console_reporter import ConsoleReporter
from codegraph_upgrade.rules.suite import DEFAULT_060_RULES, RULE_REGISTRY


def _help_text() -> str:
    lines = [
        "The codegraph-upgrade tool can help upgrade smart contracts to breaking language features.",
        "",
        "It does not support all breaking changes for each version, "
        "but will hopefully assist upgrading your contracts to the desired Solidity version.",
        "",
        "List of supported breaking changes (0.6.0):",
        "",
    ]
    for name, rule in RULE_REGISTRY.items():
        default = "" if name in DEFAULT_060_RULES else ", opt-in"
        lines.append(f"- {name}: {rule.summary}{default}")
    lines += [
        "",
        "codegraph-upgrade is distributed in the hope that it will be useful, "
        "but WITHOUT ANY WARRANTY. Please be careful when running upgrades on your contracts.",
    ]
    return "\n\n".join(line for line in lines if line)


app = typer.Typer(
    name="codegraph-upgrade",
    add_completion=False,
)

console = Console(highlight=False, soft_wrap=True)


def _version_callback(value: bool):
    if value:
        console.print(f"codegraph-upgrade {__version__}")
        raise typer.Exit()


@app.command(help=_help_text())
def upgrade(
    files: list[str] | None = typer.Argument(None, help="Input files (contract.sol ...)"),
    accept_safe: bool = typer.Option(
        False, "--accept-safe", help="Accept all *safe* changes and write to input file."
    ),
    accept_unsafe: bool = typer.Option(
        False, "--accept-unsafe", help="Accept all *unsafe* changes and write to input file."
    ),
    short_log: bool = typer.Option(False, "--short-log", help="Shortens output of upgrade patches."),
    allow_paths: str | None = typer.Option(
        None,
        "--allow-paths",
        metavar="PATH(S)",
        help='Allow a given path for imports. A list of paths can be supplied by separating them with a comma. Defaults to "*"',
    ),
    ignore_missing: bool = typer.Option(
        False, "--ignore-missing", help="Ignore missing or invalid input files instead of failing."
    ),
    solc: str | None = typer.Option(None, "--solc", help="Path to the solc binary"),
    rules: list[str] | None = typer.Option(
        None, "--rule", "-r", help="Upgrade rule to run (repeatable, defaults to the 0.6.0 suite)"
    ),
    max_iterations: int | None = typer.Option(
        None, "--max-iterations", min=1, help="Stop after this many applied changes"
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="Structured log level (stderr)"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Emit structured logs as JSON"),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
):
    """
    Analyze (and upgrade) the given source files.

    Without --accept-safe / --accept-unsafe, upgrades are only reported.
    """
    overrides: dict = {}
    if accept_safe:
        overrides["accept_safe"] = True
    if accept_unsafe:
        overrides["accept_unsafe"] = True
    if short_log:
        overrides["short_log"] = True
    if ignore_missing:
        overrides["ignore_missing"] = True
    if json_logs:
        overrides["log_json"] = True
    if allow_paths is not None:
        overrides["allow_paths"] = allow_paths
    if solc is not None:
        overrides["solc_binary"] = solc
    if rules:
        overrides["rules"] = ",".join(rules)
    if max_iterations is not None:
        overrides["max_iterations"] = max_iterations
    if log_level is not None:
        overrides["log_level"] = log_level

    settings = UpgradeSettings(**overrides)
    configure_logging(level=settings.logging.level, json_format=settings.logging.json_format)

    reporter = ConsoleReporter(console)
    reporter.prologue()

    try:
        api = UpgradeAPI(settings, reporter=reporter)
    except InvalidConfigurationError as e:
        console.print(f"[red]{e.message}[/red]")
        console.print(f"Available rules: {', '.join(RULE_REGISTRY)}")
        raise typer.Exit(code=1)

    try:
        sources = api.load(files or [])
    except InvalidInputError as e:
        console.print(e.message, markup=False)
        raise typer.Exit(code=1)

    reporter.skipped(api.store.skipped)

    state = api.run_sources(sources)
    if state.status.is_failure:
        raise typer.Exit(code=1)


def main():
    """Entry point for CLI"""
    app()


if __name__ == "__main__":
    main()
