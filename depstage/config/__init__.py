"""Configuration schema and loading for depstage."""

from .loader import load_staging_config
from .schema import StagingConfig

__all__ = ["StagingConfig", "load_staging_config"]
