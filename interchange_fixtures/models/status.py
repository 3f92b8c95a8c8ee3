"""Snapshot of on-disk provisioning state, used by ``status``."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict


class TreeStatus(BaseModel):
    """Presence and shape of a fixture directory."""

    model_config = ConfigDict(frozen=True)

    path: Path
    present: bool
    file_count: int = 0
    digest: str = ""  # sha256 of the tree, empty when absent


class FixtureStatus(BaseModel):
    """State of the archive cache, extracted tree and generated tree."""

    model_config = ConfigDict(frozen=True)

    version_tag: str
    archive_url: str
    archive_path: Path
    archive_present: bool
    archive_sha256: str = ""
    extracted: TreeStatus
    extracted_source: str = ""  # archive name the extracted tree came from
    generated: TreeStatus
    other_cached_tags: list[str] = []

    @property
    def extracted_is_current(self) -> bool:
        return self.extracted.present and self.extracted_source == self.archive_path.name
