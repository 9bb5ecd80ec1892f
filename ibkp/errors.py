"""Exit codes and the exception hierarchy for a backup run."""

from __future__ import annotations

import enum


class ExitCode(enum.IntEnum):
    """Process exit codes, one per failure class."""

    OK = 0
    USAGE = 1
    NOT_A_DIRECTORY = 2
    NOT_READABLE = 3
    NOT_WRITABLE = 4
    DEPENDENCY = 5
    MKDIR = 6
    COPY = 7
    LINK = 8
    CONFIG = 9
    PRUNE = 10


class BackupError(Exception):
    """Base class for fatal errors that end a backup run.

    Every subclass sets its own ``exit_code``.
    """

    exit_code: ExitCode


class UsageError(BackupError):
    """Wrong number of positional arguments."""

    exit_code = ExitCode.USAGE


class NotDirectoryError(BackupError):
    """A path that must be a directory is missing or is something else."""

    exit_code = ExitCode.NOT_A_DIRECTORY


class NotReadableError(BackupError):
    exit_code = ExitCode.NOT_READABLE


class NotWritableError(BackupError):
    exit_code = ExitCode.NOT_WRITABLE


class DependencyError(BackupError):
    """A required program is missing or too old."""

    exit_code = ExitCode.DEPENDENCY


class MkdirError(BackupError):
    exit_code = ExitCode.MKDIR


class CopyError(BackupError):
    """rsync could not be launched or exited non-zero."""

    exit_code = ExitCode.COPY


class LinkError(BackupError):
    """The latest symlink could not be replaced."""

    exit_code = ExitCode.LINK


class ConfigError(BackupError):
    """Raised when configuration is invalid."""

    exit_code = ExitCode.CONFIG


class PruneError(BackupError):
    exit_code = ExitCode.PRUNE
