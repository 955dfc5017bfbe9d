# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Filesystem layout of a pmm client installation."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PMM_BASE_DIR: str = "/usr/local/percona/pmm-client"
DEFAULT_AGENT_BASE_DIR: str = "/usr/local/percona/qan-agent"
DEFAULT_UNIT_DIR: str = "/etc/systemd/system"


class ModelPathsConfig(BaseModel):
    """Base directories used by exporters, the QAN agent and unit files."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    pmm_base_dir: Path = Field(default=Path(DEFAULT_PMM_BASE_DIR))
    agent_base_dir: Path = Field(default=Path(DEFAULT_AGENT_BASE_DIR))
    unit_dir: Path = Field(default=Path(DEFAULT_UNIT_DIR))

    @property
    def config_file(self) -> Path:
        return self.pmm_base_dir / "pmm.yml"

    @property
    def ssl_cert_file(self) -> Path:
        return self.pmm_base_dir / "server.crt"

    @property
    def ssl_key_file(self) -> Path:
        return self.pmm_base_dir / "server.key"

    @property
    def agent_config_file(self) -> Path:
        return self.agent_base_dir / "config" / "agent.conf"

    @property
    def agent_instance_dir(self) -> Path:
        return self.agent_base_dir / "instance"

    @property
    def agent_binary(self) -> Path:
        return self.agent_base_dir / "bin" / "percona-qan-agent"

    @property
    def agent_installer(self) -> Path:
        return self.agent_base_dir / "bin" / "percona-qan-agent-installer"


__all__ = [
    "DEFAULT_AGENT_BASE_DIR",
    "DEFAULT_PMM_BASE_DIR",
    "DEFAULT_UNIT_DIR",
    "ModelPathsConfig",
]
