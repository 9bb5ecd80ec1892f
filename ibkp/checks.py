"""Startup checks: external programs, arguments, and paths."""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
from pathlib import Path
from typing import Sequence

from .config import Config
from .errors import (
    DependencyError,
    MkdirError,
    NotDirectoryError,
    NotReadableError,
    NotWritableError,
    UsageError,
)

logger = logging.getLogger(__name__)

USAGE = "Usage: ibkp [OPTIONS] SOURCE_DIR DESTINATION_DIR"

_RSYNC_VERSION_RE = re.compile(r"version\s+v?(\d+)\.(\d+)\.(\d+)")


def check_command_available(command: str) -> bool:
    """Check if a command resolves to an executable on PATH."""
    return shutil.which(command) is not None


def parse_rsync_version(line: str) -> tuple[int, int, int] | None:
    """Extract ``(major, minor, patch)`` from an ``rsync --version`` line.

    Returns None if the line carries no recognisable version.
    """
    m = _RSYNC_VERSION_RE.search(line)
    if m is None:
        return None
    else:
        return (int(m.group(1)), int(m.group(2)), int(m.group(3)))


def get_rsync_version() -> tuple[int, int, int]:
    """Run ``rsync --version`` and parse the first line."""
    try:
        result = subprocess.run(
            ["rsync", "--version"],
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise DependencyError(f"Cannot run rsync --version: {e}") from e

    if result.returncode != 0:
        raise DependencyError(
            f"rsync --version exited with code {result.returncode}"
        )
    lines = result.stdout.splitlines()
    first_line = lines[0] if lines else ""
    version = parse_rsync_version(first_line)
    if version is None:
        raise DependencyError(
            f"Cannot parse rsync version from: {first_line!r}"
        )
    return version


def check_dependencies(config: Config) -> tuple[int, int, int]:
    """Verify required programs exist and rsync is recent enough.

    Older rsyncs copy unchanged files instead of hard-linking them
    against ``--link-dest``, so an outdated rsync is fatal.
    Returns the detected rsync version.
    """
    missing = [
        cmd
        for cmd in config.required_programs
        if not check_command_available(cmd)
    ]
    if missing:
        raise DependencyError(
            "Required program(s) not found on PATH: " + ", ".join(missing)
        )

    version = get_rsync_version()
    minimum = config.min_rsync_version_tuple
    logger.info(
        "Found rsync %s (minimum %s)",
        ".".join(str(p) for p in version),
        config.min_rsync_version,
    )
    if version < minimum:
        raise DependencyError(
            "rsync "
            + ".".join(str(p) for p in version)
            + f" is too old, {config.min_rsync_version} or newer is required"
        )
    return version


def validate_arguments(args: Sequence[str]) -> tuple[str, str]:
    """Return ``(source, destination)`` or raise UsageError."""
    if len(args) < 2:
        raise UsageError(
            "Missing argument(s): SOURCE_DIR and DESTINATION_DIR"
            " are required"
        )
    elif len(args) > 2:
        raise UsageError(
            f"Too many arguments: expected 2, got {len(args)}"
        )
    else:
        return args[0], args[1]


def check_source(source: Path) -> None:
    """Source must be an existing, readable directory."""
    if not source.is_dir():
        raise NotDirectoryError(f"Source is not a directory: {source}")
    if not os.access(source, os.R_OK):
        raise NotReadableError(f"Source is not readable: {source}")


def prepare_destination(destination: Path) -> bool:
    """Validate the destination, creating it if absent.

    Returns True if the directory was created.
    """
    if destination.exists():
        if not destination.is_dir():
            raise NotDirectoryError(
                f"Destination is not a directory: {destination}"
            )
        if not os.access(destination, os.W_OK):
            raise NotWritableError(
                f"Destination is not writable: {destination}"
            )
        return False
    else:
        try:
            destination.mkdir(parents=True)
        except OSError as e:
            raise MkdirError(
                f"Cannot create destination {destination}: {e}"
            ) from e
        logger.info("Created destination directory %s", destination)
        return True
