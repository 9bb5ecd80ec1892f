from __future__ import annotations

import re
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+$")


def _to_kebab(name: str) -> str:
    return name.replace("_", "-")


class _BaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_kebab,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )


class RsyncOptions(_BaseModel):
    """Flags passed to every rsync invocation."""

    # None means the built-in defaults (-a --delete)
    default_options_override: Optional[List[str]] = None
    extra_options: List[str] = Field(default_factory=list)
    checksum: bool = False
    compress: bool = False


class Config(_BaseModel):
    """Top-level ibkp configuration.

    Every field has a default, so an empty mapping (or no config
    file at all) is a valid configuration.
    """

    required_programs: List[str] = Field(
        default_factory=lambda: ["rsync"], min_length=1
    )
    min_rsync_version: str = "3.1.0"
    latest_link_name: str = Field("latest", min_length=1)
    rsync_options: RsyncOptions = Field(default_factory=RsyncOptions)
    filters: List[str] = Field(default_factory=list)
    filter_file: Optional[str] = None
    max_snapshots: Optional[int] = Field(default=None, ge=1)

    @field_validator("min_rsync_version")
    @classmethod
    def validate_min_rsync_version(cls, v: str) -> str:
        if not _VERSION_RE.match(v):
            raise ValueError(
                f"min-rsync-version must look like X.Y.Z, got {v!r}"
            )
        return v

    @field_validator("latest_link_name")
    @classmethod
    def validate_latest_link_name(cls, v: str) -> str:
        if "/" in v or v in (".", ".."):
            raise ValueError(
                f"latest-link-name must be a plain file name, got {v!r}"
            )
        return v

    @property
    def min_rsync_version_tuple(self) -> tuple[int, int, int]:
        major, minor, patch = (
            int(p) for p in self.min_rsync_version.split(".")
        )
        return (major, minor, patch)
