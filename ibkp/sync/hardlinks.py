"""Hard-link snapshot naming, lookup, symlink management, and pruning."""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path

from ..errors import LinkError, PruneError

logger = logging.getLogger(__name__)

SNAPSHOT_NAME_FORMAT = "%Y-%m-%d_%H%M%S_%z"


def snapshot_name(now: datetime | None = None) -> str:
    """Format a snapshot directory name, e.g. ``2026-02-21_120000_+0100``.

    Naive datetimes are taken as local time.
    """
    if now is None:
        now = datetime.now()
    if now.tzinfo is None:
        now = now.astimezone()
    return now.strftime(SNAPSHOT_NAME_FORMAT)


def parse_snapshot_name(name: str) -> datetime | None:
    """Parse a snapshot directory name, or None if it is not one.

    Only the exact ``snapshot_name`` form is accepted: ``strptime``
    alone also takes ``Z``, ``+01:00`` and unpadded fields.
    """
    try:
        ts = datetime.strptime(name, SNAPSHOT_NAME_FORMAT)
    except ValueError:
        return None
    if ts.strftime(SNAPSHOT_NAME_FORMAT) != name:
        return None
    return ts


def read_latest_symlink(
    destination: Path, link_name: str = "latest"
) -> str | None:
    """Read the latest symlink target, returning the snapshot name.

    Returns None if the symlink does not exist.
    """
    p = destination / link_name
    if not p.is_symlink():
        return None
    target = str(p.readlink())
    # Older trees may hold an absolute target; keep the name only
    return target.rstrip("/").rsplit("/", 1)[-1]


def check_latest_link(destination: Path, link_name: str = "latest") -> None:
    """Fail if *link_name* exists under *destination* but is no symlink.

    Such an entry cannot be replaced by the link update, so this runs
    before anything is copied.
    """
    p = destination / link_name
    if p.exists() and not p.is_symlink():
        raise LinkError(f"{p} exists and is not a symlink")


def update_latest_symlink(
    destination: Path,
    name: str,
    link_name: str = "latest",
) -> None:
    """Create or update the latest symlink to point to a snapshot.

    The target is the bare snapshot name, so the destination tree
    stays valid when moved.  The new link is built under a temporary
    name and renamed over the old one, so readers never see the link
    missing.  This is not transactional with the copy itself.
    """
    p = destination / link_name
    tmp = destination / f".{link_name}.tmp"
    try:
        if tmp.is_symlink():
            tmp.unlink()
        tmp.symlink_to(name)
        os.replace(tmp, p)
    except OSError as e:
        if tmp.is_symlink():
            tmp.unlink()
        raise LinkError(f"Cannot update {p} -> {name}: {e}") from e
    logger.info("Updated %s -> %s", p, name)


def list_snapshots(destination: Path) -> list[Path]:
    """List snapshot directories under *destination*, oldest first.

    Ordering uses the parsed timestamp, not the name, so snapshots
    taken under different UTC offsets still sort correctly.
    """
    snapshots: list[tuple[datetime, Path]] = []
    for entry in destination.iterdir():
        if entry.is_symlink() or not entry.is_dir():
            continue
        ts = parse_snapshot_name(entry.name)
        if ts is not None:
            snapshots.append((ts, entry))
    snapshots.sort(key=lambda pair: (pair[0], pair[1].name))
    return [path for _, path in snapshots]


def delete_snapshot(path: Path) -> None:
    """Delete a hard-link snapshot directory."""
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise PruneError(f"Cannot delete snapshot {path}: {e}") from e
    logger.info("Deleted snapshot %s", path)


def prune_snapshots(
    destination: Path,
    max_snapshots: int,
    *,
    link_name: str = "latest",
    dry_run: bool = False,
) -> list[Path]:
    """Delete oldest snapshots exceeding max_snapshots.

    Never prunes the snapshot that the latest symlink points to.
    Returns list of deleted (or would-be-deleted) paths.
    """
    snapshots = list_snapshots(destination)
    excess = len(snapshots) - max_snapshots
    if excess <= 0:
        return []

    latest_name = read_latest_symlink(destination, link_name)

    # Candidates are oldest first, but skip the latest target
    to_delete: list[Path] = []
    for snap_path in snapshots:
        if len(to_delete) >= excess:
            break
        if snap_path.name == latest_name:
            continue
        to_delete.append(snap_path)

    if not dry_run:
        for path in to_delete:
            delete_snapshot(path)

    return to_delete
