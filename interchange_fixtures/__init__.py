"""interchange-fixtures: provisioning for slashing-protection interchange tests.

Fetches a pinned revision of the interchange test-vector archive into a
local cache, unpacks it into a flattened fixture tree, and drives an
external generator for synthetic vectors.
"""

__version__ = "0.1.0"
__description__ = (
    "Versioned fetch, extraction and generation of slashing-protection test fixtures"
)

from interchange_fixtures.core.errors import (
    ArchiveFormatError,
    FetchError,
    GeneratorProcessError,
    ProvisioningError,
)
from interchange_fixtures.core.lifecycle import LifecycleController
from interchange_fixtures.models.config import FixtureConfig

__all__ = [
    "ArchiveFormatError",
    "FetchError",
    "FixtureConfig",
    "GeneratorProcessError",
    "LifecycleController",
    "ProvisioningError",
    "__version__",
]
