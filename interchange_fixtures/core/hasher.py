"""Hashing helpers for archives and fixture trees.

Tree digests cover relative paths, entry kinds and file bytes, so two
trees share a digest exactly when they are structurally and byte-for-byte
identical.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

_CHUNK_SIZE = 1 << 16


def sha256_file(path: Path) -> str:
    """Return the SHA-256 hex digest of a file, read in chunks."""
    digest = hashlib.sha256()
    with Path(path).open("rb") as fh:
        for chunk in iter(lambda: fh.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def iter_tree_files(root: Path) -> list[Path]:
    """Return every file below ``root`` as sorted relative paths."""
    root = Path(root)
    return sorted(
        p.relative_to(root) for p in root.rglob("*") if p.is_file() or p.is_symlink()
    )


def tree_digest(root: Path) -> str:
    """SHA-256 over the sorted (kind, relative path, content) of a tree.

    Symlinks contribute their target string rather than the bytes they
    point at. Empty directories are included.
    """
    root = Path(root)
    digest = hashlib.sha256()
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        if path.is_symlink():
            digest.update(f"L:{rel}->{os.readlink(path)}\n".encode("utf-8"))
        elif path.is_dir():
            digest.update(f"D:{rel}\n".encode("utf-8"))
        else:
            digest.update(f"F:{rel}:{sha256_file(path)}\n".encode("utf-8"))
    return digest.hexdigest()
