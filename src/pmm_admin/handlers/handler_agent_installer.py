# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""QAN Agent Installer Handler.

Owns the local QAN agent installation under the agent base directory:
reads the agent identity from ``config/agent.conf`` and (re-)registers
the agent with the QAN API through ``percona-qan-agent-installer``.

Registration wipes ``config/``, ``data/`` and ``instance/`` first, so
running it twice leaves the same state as running it once.
"""

from __future__ import annotations

import json
import logging
import shutil
import subprocess
from collections.abc import Callable

from pmm_admin.errors import AgentRegistrationError
from pmm_admin.models.model_paths_config import ModelPathsConfig
from pmm_admin.models.model_pmm_config import ModelPmmConfig
from pmm_admin.handlers.model_qan_api_config import QAN_API_PATH

logger = logging.getLogger(__name__)

_REGISTRATION_TIMEOUT_SECONDS: float = 120.0
_AGENT_STATE_DIRS: tuple[str, ...] = ("config", "data", "instance")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


class AgentInstallerHandler:
    """Local QAN agent identity and registration."""

    def __init__(
        self,
        config: ModelPmmConfig,
        paths: ModelPathsConfig,
        runner: Runner = subprocess.run,
    ) -> None:
        self._config = config
        self._paths = paths
        self._runner = runner

    @property
    def paths(self) -> ModelPathsConfig:
        return self._paths

    def is_registered(self) -> bool:
        """Return True if the agent config file exists."""
        return self._paths.agent_config_file.exists()

    def get_agent_id(self) -> str:
        """Read the agent UUID from ``config/agent.conf``.

        Raises:
            AgentRegistrationError: The file is unreadable, not JSON, or has no UUID.
        """
        config_file = self._paths.agent_config_file
        try:
            data = json.loads(config_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise AgentRegistrationError(
                f"cannot read agent config file {config_file}: {e}",
                config_file=str(config_file),
            ) from e
        uuid = data.get("UUID") if isinstance(data, dict) else None
        if not uuid:
            raise AgentRegistrationError(
                f"missing agent UUID in config file {config_file}",
                config_file=str(config_file),
            )
        return str(uuid)

    def build_command(self) -> list[str]:
        """Return the installer command line for the current configuration."""
        base_dir = str(self._paths.agent_base_dir)
        command = [str(self._paths.agent_installer), "-basedir", base_dir]
        if self._config.server_ssl:
            command.append("-use-ssl")
        if self._config.server_insecure_ssl:
            command.append("-use-insecure-ssl")
        auth = self._config.server_auth
        if auth is not None:
            command.extend([f"-server-user={auth[0]}", f"-server-pass={auth[1]}"])
        command.append(f"{self._config.server_url}{QAN_API_PATH}")
        return command

    def register(self) -> None:
        """Register this host's agent with the QAN API.

        Raises:
            AgentRegistrationError: The installer could not be run or failed.
        """
        for name in _AGENT_STATE_DIRS:
            shutil.rmtree(self._paths.agent_base_dir / name, ignore_errors=True)

        command = self.build_command()
        try:
            result = self._runner(
                command,
                capture_output=True,
                text=True,
                timeout=_REGISTRATION_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise AgentRegistrationError(
                f"problem with agent registration on QAN API: {type(e).__name__}: {e}"
            ) from e
        if result.returncode != 0:
            raise AgentRegistrationError(
                "problem with agent registration on QAN API: exit status "
                f"{result.returncode}\n{(result.stderr or '').strip()}",
                exit_code=result.returncode,
            )
        logger.info(
            "Registered QAN agent",
            extra={"agent_base_dir": str(self._paths.agent_base_dir)},
        )


__all__: list[str] = ["AgentInstallerHandler"]
