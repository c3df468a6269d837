"""Helpers for loading StagingConfig from TOML/JSON sources.

Accepted sources:

* None -> default StagingConfig
* dict -> StagingConfig.from_dict
* Path / path-like string -> load .toml/.json from filesystem
* Inline JSON/TOML strings
"""

from __future__ import annotations

import json
import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, Union

from depstage.config.schema import StagingConfig

logger = logging.getLogger("depstage.config.loader")

ConfigSource = Union[str, Path, Dict[str, Any], None]


def _is_file(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        # inline text longer than a file name
        return False


def _detect_format(text: str) -> str:
    stripped = text.lstrip()
    return "json" if stripped.startswith(("{", "[")) else "toml"


def load_staging_config(source: ConfigSource) -> StagingConfig:
    """Load StagingConfig from various configuration sources.

    Args:
        source: None, a parsed mapping, a path to a ``.toml``/``.json`` file,
            or an inline TOML/JSON string (auto-detected).

    Returns:
        StagingConfig instance.

    Raises:
        ValueError: If the top-level document is not a mapping.
        pydantic.ValidationError: If values fail validation.
    """
    if source is None:
        logger.debug("No config source provided; using default StagingConfig")
        return StagingConfig.default()

    if isinstance(source, dict):
        logger.debug("Loading StagingConfig from provided dict")
        return StagingConfig.from_dict(source)

    if isinstance(source, (str, Path)):
        path = Path(source)
        if _is_file(path):
            text = path.read_text(encoding="utf-8")
            suffix = path.suffix.lower()
            if suffix in {".toml", ".tml"}:
                fmt = "toml"
            elif suffix == ".json":
                fmt = "json"
            else:
                fmt = _detect_format(text)
            logger.info("Loading configuration from file: %s (fmt=%s)", path, fmt)
        else:
            text = str(source)
            fmt = _detect_format(text)
            logger.info("Loading configuration from inline %s string", fmt)

        data = json.loads(text) if fmt == "json" else tomllib.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Top-level configuration must be a mapping/dict")

        return StagingConfig.from_dict(data)

    raise TypeError(f"Unsupported config source type: {type(source)!r}")


__all__ = ["ConfigSource", "load_staging_config"]
