"""Backup orchestration and rsync command building."""

from __future__ import annotations

from .rsync import IncrementalCopier as IncrementalCopier
from .rsync import ProgressMode as ProgressMode
from .rsync import RsyncCopier as RsyncCopier
from .runner import BackupResult as BackupResult
from .runner import run_backup as run_backup

__all__ = [
    "BackupResult",
    "IncrementalCopier",
    "ProgressMode",
    "RsyncCopier",
    "run_backup",
]
