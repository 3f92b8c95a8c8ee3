"""Destructive, idempotent extraction of a fixture archive.

The archive must be a gzip-compressed tar whose single top-level entry is
a directory. That leading component is stripped from every member so the
output directory holds the payload directly.

Extraction is staged: members are validated first, unpacked into a hidden
sibling directory, and only then swapped in for the previous tree. The
output directory is therefore always absent, the previous complete tree,
or the new complete tree, never a mix of two archives.
"""

from __future__ import annotations

import gzip
import logging
import os
import posixpath
import shutil
import tarfile
import tempfile
import zlib
from pathlib import Path

from interchange_fixtures.core.errors import ArchiveFormatError
from interchange_fixtures.models.config import FixtureConfig

logger = logging.getLogger(__name__)

_STAGING_MARKER = ".staging-"
_DEFAULT_DIR_MODE = 0o755


def _split(name: str) -> list[str]:
    return [part for part in name.split("/") if part not in ("", ".")]


def strip_members(members: list[tarfile.TarInfo]) -> list[tarfile.TarInfo]:
    """Validate archive members and return copies with one component stripped.

    Raises :class:`ArchiveFormatError` when the archive is empty, has more
    than one top-level entry, or holds unsafe or unsupported members.
    """
    if not members:
        raise ArchiveFormatError("Archive is empty")

    tops: set[str] = set()
    stripped: list[tarfile.TarInfo] = []

    for member in members:
        if member.name.startswith("/"):
            raise ArchiveFormatError(f"Absolute path in archive: {member.name!r}")
        parts = _split(member.name)
        if not parts:
            raise ArchiveFormatError(f"Empty member name in archive: {member.name!r}")
        if ".." in parts:
            raise ArchiveFormatError(f"Path traversal in archive: {member.name!r}")
        if member.ischr() or member.isblk() or member.isfifo():
            raise ArchiveFormatError(f"Unsupported special file in archive: {member.name!r}")

        tops.add(parts[0])
        if len(tops) > 1:
            raise ArchiveFormatError(
                f"Archive has more than one top-level entry: {sorted(tops)}"
            )

        if len(parts) == 1:
            if not member.isdir():
                raise ArchiveFormatError(
                    f"Top-level entry {member.name!r} is not a directory"
                )
            continue

        rel = "/".join(parts[1:])
        changes: dict[str, str] = {"name": rel}

        if member.islnk():
            link_parts = _split(member.linkname)
            if len(link_parts) < 2 or link_parts[0] != parts[0] or ".." in link_parts:
                raise ArchiveFormatError(
                    f"Hard link {member.name!r} points outside the archive: "
                    f"{member.linkname!r}"
                )
            changes["linkname"] = "/".join(link_parts[1:])
        elif member.issym():
            if member.linkname.startswith("/"):
                raise ArchiveFormatError(
                    f"Symlink {member.name!r} has absolute target {member.linkname!r}"
                )
            resolved = posixpath.normpath(
                posixpath.join(posixpath.dirname(rel), member.linkname)
            )
            if resolved == ".." or resolved.startswith("../"):
                raise ArchiveFormatError(
                    f"Symlink {member.name!r} points outside the archive: "
                    f"{member.linkname!r}"
                )

        stripped.append(member.replace(**changes, deep=False))

    if not stripped:
        raise ArchiveFormatError("Archive has no payload below its top-level directory")
    return stripped


def top_level_mode(members: list[tarfile.TarInfo]) -> int:
    """Permission bits for the directory that replaces the top-level entry.

    Follows the ``data`` extraction filter: group and other write bits are
    cleared and the owner keeps full access. Archives without an explicit
    top-level directory member get 0o755.
    """
    for member in members:
        if member.isdir() and len(_split(member.name)) == 1:
            return (member.mode & 0o755) | 0o700
    return _DEFAULT_DIR_MODE


class Extractor:
    """Replaces the fixture tree with the contents of one archive.

    Parameters
    ----------
    config:
        Supplies the output directory and the location of the source stamp
        that records which archive the current tree came from.
    """

    def __init__(self, config: FixtureConfig) -> None:
        self._config = config

    @property
    def output_dir(self) -> Path:
        return self._config.output_dir

    @property
    def stamp_path(self) -> Path:
        return self._config.source_stamp_path

    # ------------------------------------------------------------------
    # Extract
    # ------------------------------------------------------------------

    def extract(self, archive_path: Path) -> Path:
        """Unpack ``archive_path`` into the output directory, replacing it.

        On :class:`ArchiveFormatError` the output directory is untouched.
        """
        archive_path = Path(archive_path)
        if not archive_path.is_file():
            raise ArchiveFormatError(f"Archive not found: {archive_path}")

        parent = self.output_dir.parent
        parent.mkdir(parents=True, exist_ok=True)
        self.remove_staging()

        staging = Path(
            tempfile.mkdtemp(
                prefix=f".{self.output_dir.name}{_STAGING_MARKER}", dir=parent
            )
        )
        logger.info("Extracting %s -> %s", archive_path.name, self.output_dir)
        try:
            count = self._unpack(archive_path, staging)
            # Stamp is absent whenever the tree does not match it.
            self.stamp_path.unlink(missing_ok=True)
            if self.output_dir.exists():
                shutil.rmtree(self.output_dir)
            os.replace(staging, self.output_dir)
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

        os.utime(self.output_dir)
        self.stamp_path.write_text(archive_path.name + "\n", encoding="utf-8")
        logger.info("Extracted %d entries into %s", count, self.output_dir)
        return self.output_dir

    @staticmethod
    def _unpack(archive_path: Path, dest: Path) -> int:
        try:
            with tarfile.open(archive_path, "r:gz") as tar:
                all_members = tar.getmembers()
                members = strip_members(all_members)
                tar.extractall(dest, members=members, filter="data")
        except (tarfile.TarError, gzip.BadGzipFile, EOFError, zlib.error) as exc:
            raise ArchiveFormatError(
                f"Cannot read archive {archive_path.name}: {exc}"
            ) from exc
        # mkdtemp creates 0700; the output dir takes the top-level entry's mode.
        os.chmod(dest, top_level_mode(all_members))
        return len(members)

    # ------------------------------------------------------------------
    # State and cleanup
    # ------------------------------------------------------------------

    def source(self) -> str:
        """Return the archive name the current tree was extracted from, or ''."""
        if not self.output_dir.is_dir():
            return ""
        try:
            return self.stamp_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return ""

    def is_current(self, archive_path: Path) -> bool:
        """Whether the tree on disk was extracted from ``archive_path``."""
        return self.source() == Path(archive_path).name

    def remove_staging(self) -> None:
        """Delete staging directories left behind by an interrupted run."""
        parent = self.output_dir.parent
        if not parent.is_dir():
            return
        for stale in parent.glob(f".{self.output_dir.name}{_STAGING_MARKER}*"):
            logger.debug("Removing stale staging directory %s", stale)
            shutil.rmtree(stale, ignore_errors=True)

    def remove(self) -> bool:
        """Delete the extracted tree. Returns True if it existed."""
        self.remove_staging()
        self.stamp_path.unlink(missing_ok=True)
        if not self.output_dir.exists():
            return False
        shutil.rmtree(self.output_dir)
        logger.info("Removed extracted fixtures %s", self.output_dir)
        return True
