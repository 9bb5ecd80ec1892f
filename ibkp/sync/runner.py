"""Backup orchestration: paths -> rsync -> latest symlink -> prune."""

from __future__ import annotations

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from ..checks import check_source, prepare_destination
from ..config import Config
from ..errors import CopyError
from .hardlinks import (
    check_latest_link,
    prune_snapshots,
    read_latest_symlink,
    snapshot_name,
    update_latest_symlink,
)
from .rsync import IncrementalCopier, RsyncCopier

logger = logging.getLogger(__name__)


class BackupResult(BaseModel):
    """Result of a completed backup run."""

    source: str
    destination: str
    snapshot_name: str
    snapshot_path: str
    dry_run: bool
    rsync_exit_code: int
    output: str
    link_dest: Optional[str] = None
    destination_created: bool = False
    pruned_paths: list[str] = []


def resolve_link_dest(destination: Path, link_name: str) -> str | None:
    """Return the ``--link-dest`` for the next snapshot, if any.

    The path is relative to the new snapshot directory.  A dangling
    latest link falls back to a full copy.
    """
    prev_name = read_latest_symlink(destination, link_name)
    if prev_name is None:
        return None
    elif not (destination / prev_name).is_dir():
        logger.warning(
            "%s points to missing snapshot %s, doing a full copy",
            destination / link_name,
            prev_name,
        )
        return None
    else:
        return f"../{prev_name}"


def run_backup(
    source: str,
    destination: str,
    config: Config,
    *,
    copier: IncrementalCopier | None = None,
    now: datetime | None = None,
    dry_run: bool = False,
    prune: bool = True,
) -> BackupResult:
    """Take one snapshot of *source* under *destination*.

    Raises a ``BackupError`` subclass on the first failing step;
    ``latest`` only moves once rsync has succeeded.
    """
    src_path = Path(source)
    dst_path = Path(destination)
    check_source(src_path)
    created = prepare_destination(dst_path)
    check_latest_link(dst_path, config.latest_link_name)

    if copier is None:
        copier = RsyncCopier(config, dry_run=dry_run)

    # One timestamp for both the directory and the symlink target
    name = snapshot_name(now)
    snapshot_path = dst_path / name
    link_name = config.latest_link_name
    link_dest = resolve_link_dest(dst_path, link_name)
    existed = snapshot_path.exists()

    if link_dest is None:
        logger.info("No previous snapshot, full copy into %s", snapshot_path)
    else:
        logger.info(
            "Incremental copy into %s against %s", snapshot_path, link_dest
        )

    try:
        if link_dest is None:
            proc = copier.copy_full(source, str(snapshot_path))
        else:
            proc = copier.copy_incremental(
                source, str(snapshot_path), link_dest
            )
    except OSError as e:
        raise CopyError(f"Cannot run rsync: {e}") from e

    if proc.returncode != 0:
        if not existed:
            shutil.rmtree(snapshot_path, ignore_errors=True)
        output = (proc.stdout + proc.stderr).strip()
        message = f"rsync exited with code {proc.returncode}"
        if output:
            message += f"\n{output}"
        raise CopyError(message)

    pruned: list[Path] = []
    if not dry_run:
        update_latest_symlink(dst_path, name, link_name)
        if prune and config.max_snapshots is not None:
            pruned = prune_snapshots(
                dst_path,
                config.max_snapshots,
                link_name=link_name,
            )

    return BackupResult(
        source=source,
        destination=destination,
        snapshot_name=name,
        snapshot_path=str(snapshot_path),
        dry_run=dry_run,
        rsync_exit_code=proc.returncode,
        output=proc.stdout,
        link_dest=link_dest,
        destination_created=created,
        pruned_paths=[str(p) for p in pruned],
    )
