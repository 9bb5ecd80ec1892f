"""CLI output formatting."""

from __future__ import annotations

import enum

from pydantic import ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .errors import ConfigError
from .sync.runner import BackupResult


class OutputFormat(str, enum.Enum):
    """Output format for CLI commands."""

    HUMAN = "human"
    JSON = "json"


def print_human_result(
    result: BackupResult,
    *,
    console: Console | None = None,
) -> None:
    """Print a human-readable summary of a backup run."""
    if console is None:
        console = Console()
    mode = " (dry run)" if result.dry_run else ""

    table = Table(
        title=f"Backup{mode}:",
        show_header=False,
    )
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Status", Text("OK", style="green"))
    table.add_row("Source", result.source)
    table.add_row("Snapshot", result.snapshot_path)
    if result.link_dest:
        table.add_row("Mode", "incremental")
        table.add_row("Hard-link reference", result.link_dest)
    else:
        table.add_row("Mode", "full copy")
    if result.destination_created:
        table.add_row("Destination", f"{result.destination} (created)")
    if result.pruned_paths:
        table.add_row(
            "Pruned",
            f"{len(result.pruned_paths)} snapshot(s)",
        )

    console.print(table)


def print_config_error(
    e: ConfigError,
    *,
    console: Console | None = None,
) -> None:
    """Print a ConfigError as a Rich panel to stderr."""
    if console is None:
        console = Console(stderr=True)
    cause = e.__cause__
    match cause:
        case ValidationError():
            lines: list[str] = []
            for err in cause.errors():
                loc = " → ".join(str(p) for p in err["loc"])
                msg = err["msg"]
                if msg.startswith("Value error, "):
                    prefix_len = len("Value error, ")
                    msg = msg[prefix_len:]
                if loc:
                    lines.append(f"{loc}: {msg}")
                else:
                    lines.append(msg)
            body = "\n".join(lines)
        case _:
            body = str(e)
    console.print(Panel(Text(body), title="Config error", style="red"))
