"""Configuration schema using Pydantic for validation."""

from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator


class StagingConfig(BaseModel):
    """Configuration for source resolution.

    Attributes:
        staging_root: Directory under which cache entries are created.
        download_timeout: Timeout for archive downloads (seconds).
        chunk_size: Download streaming chunk size (bytes).
        max_workers: Worker threads for resolving several sources.
        quiet_checkout: Pass ``-q`` to ``svn checkout``.
    """

    staging_root: Path = Path(".depstage_cache/staging")
    download_timeout: int = Field(default=300, ge=1, le=3600)
    chunk_size: int = Field(default=8192, ge=1024)
    max_workers: int = Field(default=4, ge=1, le=64)
    quiet_checkout: bool = True

    model_config = {"extra": "forbid"}

    @field_validator("staging_root")
    @classmethod
    def expand_staging_root(cls, v: Path) -> Path:
        """Expand ``~`` in the staging root."""
        return Path(v).expanduser()

    @classmethod
    def default(cls) -> "StagingConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StagingConfig":
        """Build from a mapping, accepting an optional ``[staging]`` table."""
        if "staging" in data and isinstance(data["staging"], dict):
            data = data["staging"]
        return cls.model_validate(data)
