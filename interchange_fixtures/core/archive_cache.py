"""Version-keyed archive cache backed by an HTTP download.

Storage layout: {cache_root}/{output_dir_name}-{version_tag}.tar.gz

A cached archive is written once, under its final name, only after the
whole response body has arrived. Downloads go to a hidden ``.part`` file
in the same directory and are renamed into place, so a reader never sees
a partially written archive as a cache hit.
"""

from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

import httpx

from interchange_fixtures.config import RuntimeSettings
from interchange_fixtures.core.errors import FetchError
from interchange_fixtures.models.config import FixtureConfig

logger = logging.getLogger(__name__)

_ARCHIVE_SUFFIX = ".tar.gz"
_PART_SUFFIX = ".part"


class ArchiveCache:
    """Maps a version tag to a local compressed archive.

    Parameters
    ----------
    config:
        Supplies the cache directory, the archive naming scheme and the
        URL scheme.
    client:
        HTTP client used for downloads. When omitted a client is created
        per download from ``settings``; it follows redirects.
    settings:
        Runtime settings for the default client.
    """

    def __init__(
        self,
        config: FixtureConfig,
        *,
        client: httpx.Client | None = None,
        settings: RuntimeSettings | None = None,
    ) -> None:
        self._config = config
        self._client = client
        self._settings = settings or RuntimeSettings()

    @property
    def root(self) -> Path:
        return self._config.archive_dir

    def path_for(self, tag: str | None = None) -> Path:
        """Return the keyed archive path for ``tag`` (default: configured tag)."""
        return self.root / self._config.archive_name_for(tag or self._config.version_tag)

    def exists(self, tag: str | None = None) -> bool:
        return self.path_for(tag).is_file()

    def cached_tags(self) -> list[str]:
        """Return tags that currently have a cached archive, sorted."""
        if not self.root.is_dir():
            return []
        prefix = f"{self._config.output_dir_name}-"
        tags = []
        for path in self.root.glob(f"{prefix}*{_ARCHIVE_SUFFIX}"):
            if path.is_file():
                tags.append(path.name[len(prefix):-len(_ARCHIVE_SUFFIX)])
        return sorted(tags)

    # ------------------------------------------------------------------
    # Ensure
    # ------------------------------------------------------------------

    def ensure(self, tag: str | None = None) -> Path:
        """Return the cached archive for ``tag``, downloading it on a miss.

        A cache hit performs no network access. On any download failure no
        archive file is left behind and :class:`FetchError` is raised.
        """
        tag = tag or self._config.version_tag
        path = self.path_for(tag)
        if path.is_file():
            logger.debug("Archive cache hit for %s at %s", tag, path)
            return path

        self._remove_partials(path)
        url = self._config.archive_url_for(tag)
        logger.info("Fetching %s -> %s", url, path)
        self._download(url, path)
        logger.info("Cached archive %s (%d bytes)", path.name, path.stat().st_size)
        return path

    @contextlib.contextmanager
    def _open_client(self) -> Iterator[httpx.Client]:
        if self._client is not None:
            yield self._client
            return
        with httpx.Client(
            follow_redirects=True,
            timeout=self._settings.http_timeout_seconds,
            headers={"User-Agent": self._settings.user_agent},
        ) as client:
            yield client

    def _download(self, url: str, dest: Path) -> None:
        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{dest.name}.", suffix=_PART_SUFFIX, dir=dest.parent
        )
        tmp_path = Path(tmp_name)
        completed = False
        try:
            with os.fdopen(fd, "wb") as fh, self._open_client() as client:
                self._stream_into(client, url, fh)
            os.replace(tmp_path, dest)
            completed = True
        finally:
            if not completed:
                tmp_path.unlink(missing_ok=True)

    @staticmethod
    def _stream_into(client: httpx.Client, url: str, fh) -> None:
        try:
            with client.stream("GET", url) as response:
                if not response.is_success:
                    raise FetchError(
                        f"GET {url} returned HTTP {response.status_code}"
                    )
                received = 0
                for chunk in response.iter_bytes():
                    fh.write(chunk)
                    received += len(chunk)
                expected = response.headers.get("content-length")
                if expected is not None and "content-encoding" not in response.headers:
                    if int(expected) != received:
                        raise FetchError(
                            f"GET {url} truncated: received {received} of {expected} bytes"
                        )
        except httpx.HTTPError as exc:
            raise FetchError(f"GET {url} failed: {exc}") from exc
        except OSError as exc:
            raise FetchError(f"Writing download from {url} failed: {exc}") from exc

    # ------------------------------------------------------------------
    # Removal
    # ------------------------------------------------------------------

    def _remove_partials(self, path: Path) -> None:
        """Delete leftover ``.part`` files from interrupted downloads of ``path``."""
        if not path.parent.is_dir():
            return
        for stale in path.parent.glob(f".{path.name}.*{_PART_SUFFIX}"):
            logger.debug("Removing stale partial download %s", stale)
            stale.unlink(missing_ok=True)

    def remove(self, tag: str | None = None) -> bool:
        """Delete the cached archive for ``tag``. Returns True if one existed."""
        path = self.path_for(tag)
        self._remove_partials(path)
        if not path.exists():
            return False
        path.unlink()
        logger.info("Removed cached archive %s", path)
        return True
