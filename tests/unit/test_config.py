"""Tests for FixtureConfig and RuntimeSettings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from interchange_fixtures.config import RuntimeSettings
from interchange_fixtures.models.config import FixtureConfig
from interchange_fixtures.models.versioning import DEFAULT_VERSION_TAG


class TestFixtureConfig:
    def test_defaults(self):
        config = FixtureConfig()
        assert config.version_tag == DEFAULT_VERSION_TAG
        assert config.output_dir_name == "interchange-tests"
        assert config.generate_dir_name == "generated-tests"
        assert config.generator_command[:2] == ("cargo", "run")

    def test_archive_name_and_url(self):
        config = FixtureConfig()
        assert config.archive_name == f"interchange-tests-{DEFAULT_VERSION_TAG}.tar.gz"
        assert config.archive_url == (
            "https://github.com/eth2-clients/slashing-protection-interchange-tests"
            f"/tarball/{DEFAULT_VERSION_TAG}"
        )

    def test_layout_relative_to_working_root(self, tmp_path: Path):
        config = FixtureConfig(working_root=tmp_path, version_tag="abc")
        assert config.archive_path == tmp_path / "interchange-tests-abc.tar.gz"
        assert config.output_dir == tmp_path / "interchange-tests"
        assert config.generate_dir == tmp_path / "generated-tests"
        assert config.source_stamp_path.parent == tmp_path

    def test_separate_cache_root(self, tmp_path: Path):
        config = FixtureConfig(
            working_root=tmp_path / "work", cache_root=tmp_path / "cache", version_tag="abc"
        )
        assert config.archive_path == tmp_path / "cache" / "interchange-tests-abc.tar.gz"
        assert config.output_dir == tmp_path / "work" / "interchange-tests"

    def test_base_url_trailing_slash(self):
        config = FixtureConfig(archive_base_url="https://example.test/tarball/", version_tag="x")
        assert config.archive_url == "https://example.test/tarball/x"

    def test_frozen(self):
        config = FixtureConfig()
        with pytest.raises(ValidationError):
            config.version_tag = "other"

    @pytest.mark.parametrize("tag", ["", "a/b", "..", "has space"])
    def test_rejects_unusable_tags(self, tag: str):
        with pytest.raises(ValidationError):
            FixtureConfig(version_tag=tag)

    def test_rejects_nested_dir_name(self):
        with pytest.raises(ValidationError):
            FixtureConfig(output_dir_name="a/b")

    def test_rejects_empty_generator_command(self):
        with pytest.raises(ValidationError):
            FixtureConfig(generator_command=())

    def test_with_tag(self, tmp_path: Path):
        config = FixtureConfig(working_root=tmp_path, version_tag="a")
        other = config.with_tag("b")
        assert other.version_tag == "b"
        assert other.working_root == tmp_path
        assert config.version_tag == "a"
        assert other.archive_path != config.archive_path

    def test_with_tag_validates(self):
        with pytest.raises(ValidationError):
            FixtureConfig().with_tag("bad/tag")


class TestRuntimeSettings:
    def test_defaults(self):
        settings = RuntimeSettings()
        assert settings.log_level == "INFO"
        assert settings.http_timeout_seconds == 60.0
        assert settings.user_agent.startswith("interchange-fixtures/")

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("INTERCHANGE_FIXTURES_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("INTERCHANGE_FIXTURES_HTTP_TIMEOUT_SECONDS", "5")
        settings = RuntimeSettings()
        assert settings.log_level == "DEBUG"
        assert settings.http_timeout_seconds == 5.0

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            RuntimeSettings(http_timeout_seconds=0)
