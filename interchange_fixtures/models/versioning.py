"""Version tag model — names exactly one remote archive revision."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator

DEFAULT_VERSION_TAG = "359085be9da6e5e19644977aa45947bcec5d99de"


def validate_path_component(value: str) -> str:
    """Reject values that cannot serve as a single file-name or URL segment."""
    if not value:
        raise ValueError("must not be empty")
    if value in (".", ".."):
        raise ValueError(f"{value!r} is not a valid path component")
    if "/" in value or "\\" in value:
        raise ValueError(f"{value!r} must not contain path separators")
    if any(ch.isspace() for ch in value):
        raise ValueError(f"{value!r} must not contain whitespace")
    return value


# Opaque and immutable; typically a commit hash of the fixtures repository.
VersionTag = Annotated[str, AfterValidator(validate_path_component)]
