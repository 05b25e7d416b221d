"""
Configuration — loads the edit configuration (a multi-document YAML file)
and resolves run settings from CLI arguments, environment variables and
built-in defaults (in that priority order).

Edit configuration format, one document per Go type::

    type: Example
    fields:
      Total: uint64
      CreatedAt: time.Time
    ---
    type: Order
    fields:
      ID: uuid.UUID
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import yaml

from .editing.renderer import required_imports
from .errors import ConfigError, ReadFailure

logger = logging.getLogger(__name__)


_DEFAULTS = {
    "config": "edit.yaml",
    "dir": ".",
    "recursive": False,
    "log_level": "WARNING",
}


@dataclass
class TypeConfig:
    """Desired field types for one struct."""
    type: str
    fields: dict[str, str] = field(default_factory=dict)

    def imports(self) -> dict[str, str]:
        """Alias -> path for every qualified type among the fields."""
        return required_imports(self.fields.values())


def _to_type_config(doc, index: int) -> Optional[TypeConfig]:
    if doc is None:
        return None
    if not isinstance(doc, dict):
        raise ConfigError(
            f"parse config: document {index + 1} is not a mapping"
        )
    type_name = doc.get("type")
    fields = doc.get("fields") or {}
    if not isinstance(fields, dict):
        raise ConfigError(
            f"parse config: document {index + 1}: fields must be a mapping"
        )
    if not type_name or not fields:
        logger.debug("Skipping config document %d: no type or fields", index + 1)
        return None
    for name, value in fields.items():
        if value is None:
            raise ConfigError(
                f"parse config: document {index + 1}: field {name} has no type"
            )
    return TypeConfig(
        type=str(type_name),
        fields={str(k): str(v) for k, v in fields.items()},
    )


def load(path: str) -> list[TypeConfig]:
    """Load every usable document from the YAML file at *path*.

    Documents without a ``type`` or with no ``fields`` are skipped.

    Raises
    ------
    ReadFailure
        If the file cannot be read (``FileNotFoundError`` is the cause when
        it does not exist).
    ConfigError
        If the YAML is malformed or a document has the wrong shape.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = f.read()
    except OSError as exc:
        raise ReadFailure(f"read config: {path}: {exc}") from exc

    configs: list[TypeConfig] = []
    try:
        for index, doc in enumerate(yaml.safe_load_all(data)):
            cfg = _to_type_config(doc, index)
            if cfg is not None:
                configs.append(cfg)
    except yaml.YAMLError as exc:
        raise ConfigError(f"parse config: {exc}") from exc

    logger.debug("Loaded %d type config(s) from %s", len(configs), path)
    return configs


class Settings:
    """Run settings.

    Settings are resolved in priority order:
    1. CLI arguments (passed as keyword overrides)
    2. Environment variables (``EDITSTRUCT_*``)
    3. Built-in defaults
    """

    def __init__(
        self,
        config: str | None = None,
        directory: str | None = None,
        recursive: bool | None = None,
        log_level: str | None = None,
    ) -> None:
        # Helper: CLI override > env var > default
        def _get(env_key: str, override, default):
            if override is not None:
                return override
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val
            return default

        def _get_bool(env_key: str, override, default: bool) -> bool:
            if override is not None:
                return bool(override)
            env_val = os.getenv(env_key)
            if env_val is not None:
                return env_val.lower() in ("1", "true", "yes")
            return default

        self.CONFIG_PATH = _get("EDITSTRUCT_CONFIG", config, _DEFAULTS["config"])
        self.DIRECTORY = _get("EDITSTRUCT_DIR", directory, _DEFAULTS["dir"])
        self.RECURSIVE = _get_bool("EDITSTRUCT_RECURSIVE", recursive,
                                   _DEFAULTS["recursive"])
        self.LOG_LEVEL = str(_get("EDITSTRUCT_LOG_LEVEL", log_level,
                                  _DEFAULTS["log_level"])).upper()
