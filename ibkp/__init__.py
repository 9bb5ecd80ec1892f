"""
Incremental Backup (ibkp) - rsync hard-link snapshot backups.

Each run copies a source directory into a new timestamped snapshot
under the destination, hard-linking unchanged files against the
previous snapshot, then repoints the ``latest`` symlink.
"""

__version__ = "0.1.0"
