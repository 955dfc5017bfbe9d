# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pmm.yml Configuration Loader.

Reads and writes the client configuration file. The file holds the server
password and the generated MySQL password in clear text, so it is always
written with mode 0600.

Security:
    - Uses yaml.safe_load() to prevent arbitrary code execution
    - Empty optional fields are omitted on write
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import SecretStr, ValidationError

from pmm_admin.errors import ProtocolConfigurationError
from pmm_admin.models.model_pmm_config import ModelPmmConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_MODE: int = 0o600

# Written even when empty.
_REQUIRED_KEYS: tuple[str, ...] = (
    "server_address",
    "client_address",
    "bind_address",
    "client_name",
)


def load_config(path: str | Path) -> ModelPmmConfig:
    """Load ``pmm.yml``.

    A missing file yields the empty default configuration.

    Raises:
        ProtocolConfigurationError: Unreadable file, invalid YAML, or
            values rejected by ModelPmmConfig.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Config file not found, using defaults", extra={"path": str(path)})
        return ModelPmmConfig()

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ProtocolConfigurationError(
            f"cannot read config file {path}: {e}", config_file=str(path)
        ) from e
    except yaml.YAMLError as e:
        raise ProtocolConfigurationError(
            f"Invalid YAML in config file {path}: {e}", config_file=str(path)
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ProtocolConfigurationError(
            f"Config file {path} must be a mapping, got {type(data).__name__}",
            config_file=str(path),
        )

    try:
        return ModelPmmConfig.model_validate(data)
    except ValidationError as e:
        raise ProtocolConfigurationError(
            f"Invalid config file {path}: {e.error_count()} error(s): "
            + "; ".join(str(err["msg"]) for err in e.errors()),
            config_file=str(path),
        ) from e


def _to_document(config: ModelPmmConfig) -> dict[str, object]:
    document: dict[str, object] = {}
    for key, value in config.model_dump().items():
        if isinstance(value, SecretStr):
            value = value.get_secret_value()
        if key in _REQUIRED_KEYS or value:
            document[key] = value
    return document


def write_config(config: ModelPmmConfig, path: str | Path) -> None:
    """Write ``pmm.yml`` with mode 0600, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yaml.safe_dump(_to_document(config), f, default_flow_style=False, sort_keys=False)
        os.chmod(path, CONFIG_FILE_MODE)
    except OSError as e:
        raise ProtocolConfigurationError(
            f"cannot write config file {path}: {e}", config_file=str(path)
        ) from e
    logger.debug("Wrote config file", extra={"path": str(path)})


__all__: list[str] = ["CONFIG_FILE_MODE", "load_config", "write_config"]
