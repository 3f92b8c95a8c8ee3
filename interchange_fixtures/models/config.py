"""Provisioning configuration — the constants that locate every artifact."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from interchange_fixtures.models.versioning import (
    DEFAULT_VERSION_TAG,
    VersionTag,
    validate_path_component,
)

DirName = Annotated[str, AfterValidator(validate_path_component)]

DEFAULT_ARCHIVE_BASE_URL = (
    "https://github.com/eth2-clients/slashing-protection-interchange-tests/tarball"
)
DEFAULT_GENERATOR_COMMAND = (
    "cargo", "run", "--release", "--bin", "test_generator", "--",
)


class FixtureConfig(BaseModel):
    """Immutable description of where fixtures come from and where they live.

    Layout, relative to ``working_root``::

        <cache_root>/<output_dir_name>-<version_tag>.tar.gz   cached archive
        <output_dir_name>/                                    extracted tree
        <generate_dir_name>/                                  generated tree

    ``cache_root`` defaults to ``working_root``.
    """

    model_config = ConfigDict(frozen=True)

    version_tag: VersionTag = DEFAULT_VERSION_TAG
    output_dir_name: DirName = "interchange-tests"
    generate_dir_name: DirName = "generated-tests"
    archive_base_url: str = DEFAULT_ARCHIVE_BASE_URL
    working_root: Path = Path(".")
    cache_root: Path | None = None
    generator_command: tuple[str, ...] = Field(
        default=DEFAULT_GENERATOR_COMMAND, min_length=1
    )

    # ------------------------------------------------------------------
    # Derived locations
    # ------------------------------------------------------------------

    @property
    def archive_dir(self) -> Path:
        return self.cache_root if self.cache_root is not None else self.working_root

    def archive_name_for(self, tag: str) -> str:
        """Raises ``ValueError`` when ``tag`` is not a single path component."""
        return f"{self.output_dir_name}-{validate_path_component(tag)}.tar.gz"

    def archive_url_for(self, tag: str) -> str:
        return f"{self.archive_base_url.rstrip('/')}/{validate_path_component(tag)}"

    @property
    def archive_name(self) -> str:
        return self.archive_name_for(self.version_tag)

    @property
    def archive_url(self) -> str:
        return self.archive_url_for(self.version_tag)

    @property
    def archive_path(self) -> Path:
        return self.archive_dir / self.archive_name

    @property
    def output_dir(self) -> Path:
        return self.working_root / self.output_dir_name

    @property
    def generate_dir(self) -> Path:
        return self.working_root / self.generate_dir_name

    @property
    def source_stamp_path(self) -> Path:
        """File recording which archive the extracted tree came from.

        Lives beside the tree rather than inside it so the tree stays a
        byte-for-byte copy of the archive payload.
        """
        return self.working_root / f".{self.output_dir_name}.source"

    def with_tag(self, tag: str) -> FixtureConfig:
        """Return a copy of this configuration pointing at another revision."""
        return FixtureConfig.model_validate(
            {**self.model_dump(), "version_tag": tag}
        )
