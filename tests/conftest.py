"""Shared test fixtures for interchange-fixtures."""

from __future__ import annotations

import io
import tarfile
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from interchange_fixtures.core.archive_cache import ArchiveCache
from interchange_fixtures.core.extractor import Extractor
from interchange_fixtures.core.generator import CallableGenerator
from interchange_fixtures.core.lifecycle import LifecycleController
from interchange_fixtures.models.config import FixtureConfig

BASE_URL = "https://fixtures.test/tarball"
CDN_URL = "https://cdn.fixtures.test/archives"

DEFAULT_PAYLOAD: dict[str, bytes] = {
    "README.md": b"# interchange tests\n",
    "tests/generated/single_validator_import.json": b'{"name": "single_validator_import"}\n',
    "tests/generated/multiple_validators.json": b'{"name": "multiple_validators"}\n',
}


def build_tarball(
    files: dict[str, bytes],
    top: str = "eth2-clients-interchange-tests-359085b",
) -> bytes:
    """Build an in-memory tar.gz with a single top-level directory."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        top_info = tarfile.TarInfo(top)
        top_info.type = tarfile.DIRTYPE
        top_info.mode = 0o755
        tar.addfile(top_info)
        for name, data in files.items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def build_raw_tarball(entries: list[tarfile.TarInfo], data: dict[str, bytes] | None = None) -> bytes:
    """Build an in-memory tar.gz from hand-made members, without validation."""
    data = data or {}
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for info in entries:
            payload = data.get(info.name)
            if payload is not None:
                info.size = len(payload)
                tar.addfile(info, io.BytesIO(payload))
            else:
                tar.addfile(info)
    return buf.getvalue()


def read_tree(root: Path) -> dict[str, bytes]:
    """Return {relative posix path: bytes} for every file below ``root``."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }


class FakeArchiveServer:
    """Serves tarballs per tag through ``httpx.MockTransport``.

    ``GET {BASE_URL}/{tag}`` redirects to ``{CDN_URL}/{tag}.tar.gz``, the
    way the real archive host hands off to its CDN. ``fetches`` counts
    archive bodies served per tag.
    """

    def __init__(self) -> None:
        self.archives: dict[str, bytes] = {}
        self.failures: dict[str, httpx.Response | Callable[[], httpx.Response]] = {}
        self.fetches: dict[str, int] = {}
        self.requests: list[str] = []

    def publish(self, tag: str, files: dict[str, bytes] | None = None, **kwargs) -> bytes:
        body = build_tarball(DEFAULT_PAYLOAD if files is None else files, **kwargs)
        self.archives[tag] = body
        return body

    def fail(self, tag: str, response: httpx.Response | Callable[[], httpx.Response]) -> None:
        self.failures[tag] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url.startswith(BASE_URL + "/"):
            tag = url[len(BASE_URL) + 1:]
            return httpx.Response(302, headers={"Location": f"{CDN_URL}/{tag}.tar.gz"})
        if url.startswith(CDN_URL + "/") and url.endswith(".tar.gz"):
            tag = url[len(CDN_URL) + 1:-len(".tar.gz")]
            if tag in self.failures:
                failure = self.failures[tag]
                return failure() if callable(failure) else failure
            if tag not in self.archives:
                return httpx.Response(404, text="Not Found")
            self.fetches[tag] = self.fetches.get(tag, 0) + 1
            return httpx.Response(200, content=self.archives[tag])
        return httpx.Response(404, text="Not Found")

    def total_fetches(self) -> int:
        return sum(self.fetches.values())


class RecordingGenerator:
    """In-process generator stub writing a fixed set of files."""

    FILES = {
        "generated/a.json": b'{"case": "a"}\n',
        "generated/b.json": b'{"case": "b"}\n',
    }

    def __init__(self) -> None:
        self.calls: list[Path] = []

    def __call__(self, output_dir: Path) -> None:
        self.calls.append(output_dir)
        for rel, data in self.FILES.items():
            path = output_dir / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary working root."""
    return tmp_path


@pytest.fixture
def fixture_config(tmp_dir: Path) -> FixtureConfig:
    """Provide a FixtureConfig rooted in a temp directory with a test tag."""
    return FixtureConfig(
        version_tag="tag-a",
        archive_base_url=BASE_URL,
        working_root=tmp_dir,
    )


@pytest.fixture
def archive_server() -> FakeArchiveServer:
    """Provide a fake archive host with ``tag-a`` and ``tag-b`` published."""
    server = FakeArchiveServer()
    server.publish("tag-a")
    server.publish(
        "tag-b",
        {"README.md": b"# version b\n", "tests/b_only.json": b"{}\n"},
        top="eth2-clients-interchange-tests-bbbbbbb",
    )
    return server


@pytest.fixture
def http_client(archive_server: FakeArchiveServer):
    """Provide an httpx client routed to the fake archive server."""
    with httpx.Client(
        transport=httpx.MockTransport(archive_server.handler),
        follow_redirects=True,
    ) as client:
        yield client


@pytest.fixture
def archive_cache(fixture_config: FixtureConfig, http_client: httpx.Client) -> ArchiveCache:
    return ArchiveCache(fixture_config, client=http_client)


@pytest.fixture
def extractor(fixture_config: FixtureConfig) -> Extractor:
    return Extractor(fixture_config)


@pytest.fixture
def recording_generator() -> RecordingGenerator:
    return RecordingGenerator()


@pytest.fixture
def make_controller(
    http_client: httpx.Client, recording_generator: RecordingGenerator
) -> Callable[..., LifecycleController]:
    """Factory fixture: build a LifecycleController wired to test doubles."""

    def _factory(config: FixtureConfig, **overrides) -> LifecycleController:
        defaults = {
            "client": http_client,
            "generator": CallableGenerator(recording_generator, name="recording"),
        }
        defaults.update(overrides)
        return LifecycleController(config, **defaults)

    return _factory


@pytest.fixture
def controller(
    fixture_config: FixtureConfig, make_controller: Callable[..., LifecycleController]
) -> LifecycleController:
    """Convenience: a controller for ``tag-a`` with test doubles."""
    return make_controller(fixture_config)


# ---------------------------------------------------------------------------
# Archive helpers exposed as fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def make_tarball() -> Callable[..., bytes]:
    """Factory fixture: build a well-formed tar.gz from {path: bytes}."""
    return build_tarball


@pytest.fixture
def make_raw_tarball() -> Callable[..., bytes]:
    """Factory fixture: build a tar.gz from arbitrary TarInfo members."""
    return build_raw_tarball


@pytest.fixture
def tree_contents() -> Callable[[Path], dict[str, bytes]]:
    """Provide ``read_tree`` for comparing extracted trees."""
    return read_tree


@pytest.fixture
def default_payload() -> dict[str, bytes]:
    return dict(DEFAULT_PAYLOAD)
