"""Rsync command building and execution."""

from __future__ import annotations

import logging
import shlex
import subprocess
from enum import Enum
from typing import Callable, Protocol

from ..config import Config

logger = logging.getLogger(__name__)


class ProgressMode(str, Enum):
    """Rsync progress reporting mode."""

    NONE = "none"
    OVERALL = "overall"
    PER_FILE = "per-file"
    FULL = "full"


_DEFAULT_RSYNC_OPTIONS: list[str] = [
    "-a",
    "--delete",
]


def _base_rsync_args(
    config: Config,
    dry_run: bool,
    link_dest: str | None,
    progress: ProgressMode | None = None,
) -> list[str]:
    """Build common rsync flags."""
    rsync_opts = config.rsync_options
    options = (
        rsync_opts.default_options_override
        if rsync_opts.default_options_override is not None
        else _DEFAULT_RSYNC_OPTIONS
    )
    args = ["rsync"] + list(options)
    if rsync_opts.checksum:
        args.append("--checksum")
    if rsync_opts.compress:
        args.append("--compress")
    args.extend(rsync_opts.extra_options)
    match progress:
        case ProgressMode.OVERALL:
            args.extend(
                [
                    "--info=progress2",
                    "--stats",
                    "--human-readable",
                ]
            )
        case ProgressMode.PER_FILE:
            args.extend(
                [
                    "-v",
                    "--progress",
                    "--human-readable",
                ]
            )
        case ProgressMode.FULL:
            args.extend(
                [
                    "-v",
                    "--progress",
                    "--info=progress2",
                    "--stats",
                    "--human-readable",
                ]
            )
        case ProgressMode.NONE | None:
            pass
    if dry_run:
        args.append("--dry-run")
    if link_dest:
        args.append(f"--link-dest={link_dest}")
    return args


def _filter_args(config: Config) -> list[str]:
    """Build rsync --filter arguments."""
    args: list[str] = []
    for rule in config.filters:
        args.append(f"--filter={rule}")
    if config.filter_file:
        args.append(f"--filter=merge {config.filter_file}")
    return args


def _dir_arg(path: str) -> str:
    return path if path.endswith("/") else f"{path}/"


def build_rsync_command(
    config: Config,
    source: str,
    snapshot_path: str,
    dry_run: bool = False,
    link_dest: str | None = None,
    progress: ProgressMode | None = None,
) -> list[str]:
    """Build the rsync command copying *source* into *snapshot_path*.

    Both paths get a trailing slash so rsync copies the contents of
    the source into the snapshot directory itself.  A relative
    *link_dest* is resolved by rsync against the snapshot directory.
    """
    rsync_args = _base_rsync_args(config, dry_run, link_dest, progress)
    rsync_args.extend(_filter_args(config))
    rsync_args.append(_dir_arg(source))
    rsync_args.append(_dir_arg(snapshot_path))
    return rsync_args


def run_rsync(
    cmd: list[str],
    on_output: Callable[[str], None] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute an rsync command, optionally streaming its output."""
    logger.debug("Running: %s", shlex.join(cmd))
    if on_output is None:
        return subprocess.run(
            cmd,
            capture_output=True,
            text=True,
        )
    else:
        proc = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            bufsize=1,
        )

        assert proc.stdout is not None
        output_chunks: list[str] = []

        # Stream one character at a time so rsync progress
        # updates that rely on carriage returns are visible
        # immediately.
        while True:
            ch = proc.stdout.read(1)
            if ch:
                output_chunks.append(ch)
                on_output(ch)
            elif proc.poll() is not None:
                break

        return subprocess.CompletedProcess(
            cmd,
            proc.wait(),
            stdout="".join(output_chunks),
            stderr="",
        )


class IncrementalCopier(Protocol):
    """Something that can mirror a directory tree into a snapshot.

    ``copy_incremental`` must leave files unchanged since *ref_dir*
    as hard links into it rather than fresh copies.
    """

    def copy_full(
        self, src: str, dst: str
    ) -> subprocess.CompletedProcess[str]: ...

    def copy_incremental(
        self, src: str, dst: str, ref_dir: str
    ) -> subprocess.CompletedProcess[str]: ...


class RsyncCopier:
    """IncrementalCopier backed by the rsync executable."""

    def __init__(
        self,
        config: Config,
        *,
        dry_run: bool = False,
        progress: ProgressMode | None = None,
        on_output: Callable[[str], None] | None = None,
    ) -> None:
        self.config = config
        self.dry_run = dry_run
        self.progress = progress
        self.on_output = on_output

    def copy_full(
        self, src: str, dst: str
    ) -> subprocess.CompletedProcess[str]:
        return self._run(src, dst, None)

    def copy_incremental(
        self, src: str, dst: str, ref_dir: str
    ) -> subprocess.CompletedProcess[str]:
        return self._run(src, dst, ref_dir)

    def _run(
        self, src: str, dst: str, link_dest: str | None
    ) -> subprocess.CompletedProcess[str]:
        cmd = build_rsync_command(
            self.config,
            src,
            dst,
            dry_run=self.dry_run,
            link_dest=link_dest,
            progress=self.progress,
        )
        return run_rsync(cmd, self.on_output)
