"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest

from ibkp.config import Config

SAMPLE_YAML = """\
required-programs:
  - rsync
min-rsync-version: 3.1.0
latest-link-name: latest
max-snapshots: 5
rsync-options:
  checksum: true
  extra-options:
    - --one-file-system
filters:
  - "- *.tmp"
filter-file: /etc/ibkp/filters
"""


class FakeCopier:
    """IncrementalCopier that copies with plain files and records calls.

    Mirrors rsync semantics closely enough for orchestration tests:
    the destination directory is created and each source file is
    written into it.
    """

    def __init__(self, returncode: int = 0, stderr: str = "") -> None:
        self.returncode = returncode
        self.stderr = stderr
        self.calls: list[tuple[str, str, str | None]] = []

    def copy_full(
        self, src: str, dst: str
    ) -> subprocess.CompletedProcess[str]:
        return self._copy(src, dst, None)

    def copy_incremental(
        self, src: str, dst: str, ref_dir: str
    ) -> subprocess.CompletedProcess[str]:
        return self._copy(src, dst, ref_dir)

    def _copy(
        self, src: str, dst: str, ref_dir: str | None
    ) -> subprocess.CompletedProcess[str]:
        self.calls.append((src, dst, ref_dir))
        dst_path = Path(dst)
        dst_path.mkdir()
        for f in Path(src).iterdir():
            if f.is_file():
                (dst_path / f.name).write_bytes(f.read_bytes())
        return subprocess.CompletedProcess(
            ["rsync"], self.returncode, stdout="", stderr=self.stderr
        )


@pytest.fixture()
def config() -> Config:
    return Config()


@pytest.fixture()
def sample_config_file(tmp_path: Path) -> Path:
    """Write sample YAML config to a temp file."""
    p = tmp_path / "config.yaml"
    p.write_text(SAMPLE_YAML)
    return p


@pytest.fixture()
def src_tree(tmp_path: Path) -> Path:
    """A source directory holding files a.txt and b.txt."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.txt").write_text("alpha")
    (src / "b.txt").write_text("bravo")
    return src


@pytest.fixture()
def fake_copier() -> FakeCopier:
    return FakeCopier()


@pytest.fixture()
def copier_factory() -> type[FakeCopier]:
    return FakeCopier
