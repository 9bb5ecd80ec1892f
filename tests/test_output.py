"""Tests for ibkp.output."""

from __future__ import annotations

import io

import pytest
from pydantic import ValidationError
from rich.console import Console

from ibkp.config import Config, ConfigError
from ibkp.output import print_config_error, print_human_result
from ibkp.sync import BackupResult


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=200), buf


def _result(**overrides: object) -> BackupResult:
    fields: dict[str, object] = dict(
        source="/data",
        destination="/backups",
        snapshot_name="2026-02-21_120000_+0000",
        snapshot_path="/backups/2026-02-21_120000_+0000",
        dry_run=False,
        rsync_exit_code=0,
        output="",
    )
    fields.update(overrides)
    return BackupResult.model_validate(fields)


class TestPrintHumanResult:
    def test_full_copy(self) -> None:
        console, buf = _console()
        print_human_result(_result(), console=console)
        text = buf.getvalue()
        assert "OK" in text
        assert "full copy" in text
        assert "/backups/2026-02-21_120000_+0000" in text

    def test_incremental_with_prune(self) -> None:
        console, buf = _console()
        print_human_result(
            _result(
                link_dest="../2026-02-20_120000_+0000",
                pruned_paths=["/backups/2026-02-19_120000_+0000"],
            ),
            console=console,
        )
        text = buf.getvalue()
        assert "incremental" in text
        assert "../2026-02-20_120000_+0000" in text
        assert "Pruned" in text
        assert "1 snapshot(s)" in text

    def test_dry_run_title(self) -> None:
        console, buf = _console()
        print_human_result(_result(dry_run=True), console=console)
        assert "(dry run)" in buf.getvalue()


class TestPrintConfigError:
    def test_validation_error(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            Config.model_validate({"max-snapshots": 0})
        err = ConfigError(str(exc_info.value))
        err.__cause__ = exc_info.value
        console, buf = _console()
        print_config_error(err, console=console)
        text = buf.getvalue()
        assert "Config error" in text
        assert "max-snapshots" in text
        assert "greater than or equal to 1" in text

    def test_plain_error(self) -> None:
        console, buf = _console()
        print_config_error(
            ConfigError("Config file not found: /x.yaml"), console=console
        )
        assert "Config file not found: /x.yaml" in buf.getvalue()
