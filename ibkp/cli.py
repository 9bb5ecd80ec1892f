"""Typer CLI: take one incremental snapshot."""

from __future__ import annotations

import json
from typing import Annotated, Optional

import typer

from .checks import USAGE, check_dependencies, validate_arguments
from .config import Config, ConfigError, load_config
from .errors import BackupError, UsageError
from .logs import setup_logging
from .output import OutputFormat, print_config_error, print_human_result
from .sync import ProgressMode, RsyncCopier, run_backup

app = typer.Typer(
    name="ibkp",
    help="Incremental Backup - rsync hard-link snapshots",
    add_completion=False,
)


@app.command()
def backup(
    paths: Annotated[
        Optional[list[str]],
        typer.Argument(
            metavar="SOURCE_DIR DESTINATION_DIR",
            help="Directory to back up and directory holding snapshots",
            show_default=False,
        ),
    ] = None,
    config: Annotated[
        Optional[str],
        typer.Option("--config", "-c", help="Path to config file"),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", "-n", help="Perform a dry run"),
    ] = False,
    output: Annotated[
        OutputFormat,
        typer.Option("--output", "-o", help="Output format"),
    ] = OutputFormat.HUMAN,
    progress: Annotated[
        ProgressMode,
        typer.Option("--progress", help="Rsync progress reporting"),
    ] = ProgressMode.NONE,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase log verbosity (-v, -vv)",
        ),
    ] = 0,
    prune: Annotated[
        bool,
        typer.Option(
            "--prune/--no-prune",
            help="Prune old snapshots beyond max-snapshots",
        ),
    ] = True,
) -> None:
    """Back up SOURCE_DIR into a new snapshot under DESTINATION_DIR.

    Unchanged files are hard-linked against the snapshot that
    DESTINATION_DIR/latest points to, then latest is moved to the
    new snapshot.
    """
    setup_logging(verbose)
    cfg = _load_config_or_exit(config)

    stream_output = (
        (lambda chunk: typer.echo(chunk, nl=False))
        if output is OutputFormat.HUMAN and progress is not ProgressMode.NONE
        else None
    )
    copier = RsyncCopier(
        cfg,
        dry_run=dry_run,
        progress=progress,
        on_output=stream_output,
    )

    try:
        check_dependencies(cfg)
        source, destination = validate_arguments(paths or [])
        result = run_backup(
            source,
            destination,
            cfg,
            copier=copier,
            dry_run=dry_run,
            prune=prune,
        )
    except UsageError as e:
        typer.echo(f"Error: {e}", err=True)
        typer.echo(USAGE, err=True)
        raise typer.Exit(int(e.exit_code))
    except BackupError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(int(e.exit_code))

    match output:
        case OutputFormat.JSON:
            typer.echo(json.dumps(result.model_dump(), indent=2))
        case OutputFormat.HUMAN:
            if stream_output is not None:
                typer.echo("")
            print_human_result(result)


def _load_config_or_exit(config_path: str | None) -> Config:
    """Load config or exit with the config error code."""
    try:
        return load_config(config_path)
    except ConfigError as e:
        print_config_error(e)
        raise typer.Exit(int(e.exit_code))


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
