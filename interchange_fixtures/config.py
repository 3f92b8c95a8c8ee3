"""Runtime settings — env-driven, ambient knobs only.

Reads from a .env file and INTERCHANGE_FIXTURES_* environment variables.
Nothing here changes *which* archive is fetched or *where* fixtures live;
those are fixed by :class:`interchange_fixtures.models.config.FixtureConfig`.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from interchange_fixtures import __version__


class RuntimeSettings(BaseSettings):
    """Runtime settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export INTERCHANGE_FIXTURES_LOG_LEVEL=DEBUG
        export INTERCHANGE_FIXTURES_HTTP_TIMEOUT_SECONDS=120
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="INTERCHANGE_FIXTURES_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # HTTP
    http_timeout_seconds: float = Field(default=60.0, gt=0)
    user_agent: str = f"interchange-fixtures/{__version__}"
