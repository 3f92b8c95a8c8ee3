"""Lifecycle controller — the named provisioning operations.

The LifecycleController wires the ArchiveCache, Extractor and a
FixtureGenerator together behind five operations:

    acquire          archive -> extracted tree (each step skipped when current)
    clean_extracted  remove the extracted tree
    clean_archives   remove the cached archive for the configured tag
    clean_all        clean_extracted, then clean_archives
    generate         remove the generated tree, then regenerate it

Only ``acquire`` has internal ordering; the clean and generate operations
are independent of it and of each other. Every operation is safe to re-run
after an interruption.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

import httpx

from interchange_fixtures.config import RuntimeSettings
from interchange_fixtures.core.archive_cache import ArchiveCache
from interchange_fixtures.core.errors import GeneratorProcessError
from interchange_fixtures.core.extractor import Extractor
from interchange_fixtures.core.generator import FixtureGenerator, SubprocessGenerator
from interchange_fixtures.core.hasher import iter_tree_files, sha256_file, tree_digest
from interchange_fixtures.core.task_graph import TaskGraph
from interchange_fixtures.models.config import FixtureConfig
from interchange_fixtures.models.status import FixtureStatus, TreeStatus
from interchange_fixtures.models.tasks import Task, TaskReport

logger = logging.getLogger(__name__)

ARCHIVE_TASK = "archive"
FIXTURES_TASK = "fixtures"


class LifecycleController:
    """Provisioning entry point.

    Parameters
    ----------
    config:
        Provisioning constants. Uses defaults if not provided.
    cache, extractor, generator:
        Component overrides. Defaults are built from ``config``; the
        default generator runs ``config.generator_command`` in
        ``config.working_root``.
    client:
        HTTP client for the default cache.
    """

    def __init__(
        self,
        config: FixtureConfig | None = None,
        *,
        cache: ArchiveCache | None = None,
        extractor: Extractor | None = None,
        generator: FixtureGenerator | None = None,
        client: httpx.Client | None = None,
        settings: RuntimeSettings | None = None,
    ) -> None:
        self.config = config or FixtureConfig()
        self.cache = cache or ArchiveCache(self.config, client=client, settings=settings)
        self.extractor = extractor or Extractor(self.config)
        self.generator: FixtureGenerator = generator or SubprocessGenerator(
            self.config.generator_command, cwd=self.config.working_root
        )
        self.graph = self._build_graph()

    def _build_graph(self) -> TaskGraph:
        archive_path = self.config.archive_path
        return TaskGraph([
            Task(
                name=ARCHIVE_TASK,
                output=archive_path,
                action=lambda: self.cache.ensure(self.config.version_tag),
            ),
            Task(
                name=FIXTURES_TASK,
                output=self.config.output_dir,
                inputs=(ARCHIVE_TASK,),
                action=lambda: self.extractor.extract(archive_path),
                is_current=lambda: self.extractor.is_current(archive_path),
            ),
        ])

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def acquire(self) -> TaskReport:
        """Ensure the extracted fixtures for the configured tag are present."""
        report = self.graph.run(FIXTURES_TASK)
        if not report.built:
            logger.info(
                "Fixtures for %s already up to date in %s",
                self.config.version_tag,
                self.config.output_dir,
            )
        return report

    def clean_extracted(self) -> bool:
        """Remove the extracted tree. Returns True if anything was removed."""
        return self.extractor.remove()

    def clean_archives(self) -> bool:
        """Remove the cached archive for the configured tag."""
        return self.cache.remove(self.config.version_tag)

    def clean_all(self) -> tuple[bool, bool]:
        """Remove the extracted tree, then the cached archive."""
        return self.clean_extracted(), self.clean_archives()

    def clean_generated(self) -> bool:
        """Remove the generated tree. Returns True if it existed."""
        target = self.config.generate_dir
        if not target.exists() and not target.is_symlink():
            return False
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        else:
            target.unlink()
        logger.info("Removed generated fixtures %s", target)
        return True

    def generate(self) -> Path:
        """Regenerate the synthetic fixtures from scratch.

        Any previous generated tree is removed first. If the generator
        fails, whatever it wrote is removed as well and the error is
        re-raised.
        """
        target = self.config.generate_dir
        self.clean_generated()
        try:
            self.generator.generate(target)
        except GeneratorProcessError:
            self.clean_generated()
            raise
        logger.info("Generated fixtures in %s", target)
        return target

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @staticmethod
    def _tree_status(path: Path, *, with_digest: bool = True) -> TreeStatus:
        if not path.is_dir():
            return TreeStatus(path=path, present=False)
        return TreeStatus(
            path=path,
            present=True,
            file_count=len(iter_tree_files(path)),
            digest=tree_digest(path) if with_digest else "",
        )

    def status(self) -> FixtureStatus:
        """Snapshot the cache, extracted tree and generated tree."""
        archive_path = self.cache.path_for(self.config.version_tag)
        present = archive_path.is_file()
        return FixtureStatus(
            version_tag=self.config.version_tag,
            archive_url=self.config.archive_url,
            archive_path=archive_path,
            archive_present=present,
            archive_sha256=sha256_file(archive_path) if present else "",
            extracted=self._tree_status(self.config.output_dir),
            extracted_source=self.extractor.source(),
            generated=self._tree_status(self.config.generate_dir, with_digest=False),
            other_cached_tags=[
                t for t in self.cache.cached_tags() if t != self.config.version_tag
            ],
        )
