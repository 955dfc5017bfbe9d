# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""systemd Service Supervisor Handler.

Implements ProtocolServiceSupervisor with unit files under
``/etc/systemd/system`` and ``systemctl``. Every pmm service is a unit
named ``pmm-<type>-<port>.service``; ``list_local`` enumerates those files,
which is what the reconciliation engine compares catalog records against.

Idempotency:
    - ``start`` of a running unit and ``stop`` of a stopped unit are no-ops
    - ``uninstall`` of a unit without a file is a no-op
    - ``install`` overwrites an existing unit file
"""

from __future__ import annotations

import logging
import re
import shlex
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path

from pmm_admin.errors import SupervisorError
from pmm_admin.models.model_local_service_config import ModelLocalServiceConfig
from pmm_admin.utils.util_service_naming import LOCAL_SERVICE_PREFIX

logger = logging.getLogger(__name__)

UNIT_SUFFIX: str = ".service"
SYSTEMCTL: str = "systemctl"
SERVICE_MANAGER: str = "linux-systemd"
# Units carry the exporter environment, credentials included.
UNIT_FILE_MODE: int = 0o600
_COMMAND_TIMEOUT_SECONDS: float = 30.0
_NEEDS_QUOTING = re.compile(r"""[\s"'\\;]""")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]

_UNIT_TEMPLATE = """\
[Unit]
Description={description}
ConditionFileIsExecutable={executable}

[Service]
StartLimitInterval=5
StartLimitBurst=10
ExecStart={exec_start}
{environment}Restart=always
RestartSec=120

[Install]
WantedBy=multi-user.target
"""


def _escape_specifiers(value: str) -> str:
    return value.replace("%", "%%")


def escape_environment(entry: str) -> str:
    """Quote a ``KEY=value`` entry for an ``Environment=`` line.

    Backslashes and double quotes are backslash-escaped and ``%`` is
    doubled so systemd does not read it as a specifier.
    """
    escaped = entry.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{_escape_specifiers(escaped)}"'


def escape_exec_argument(argument: str) -> str:
    """Quote one ``ExecStart=`` argument using systemd command-line rules.

    ``%`` and ``$`` are always doubled. Arguments that are empty or hold
    whitespace, quotes, backslashes or ``;`` are double-quoted with
    backslashes and double quotes escaped.
    """
    escaped = _escape_specifiers(argument).replace("$", "$$")
    if escaped and not _NEEDS_QUOTING.search(escaped):
        return escaped
    escaped = escaped.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def render_unit(config: ModelLocalServiceConfig) -> str:
    """Render the unit file of a local service."""
    environment = "".join(
        f"Environment={escape_environment(entry)}\n" for entry in config.environment
    )
    return _UNIT_TEMPLATE.format(
        description=_escape_specifiers(
            config.description or config.display_name or config.name
        ),
        executable=_escape_specifiers(config.executable),
        exec_start=" ".join(
            escape_exec_argument(argument)
            for argument in (config.executable, *config.arguments)
        ),
        environment=environment,
    )


class SystemdSupervisorHandler:
    """Local service manager backed by systemd.

    Args:
        unit_dir: Directory holding unit files (``/etc/systemd/system``)
        runner: ``subprocess.run`` compatible callable, replaceable in tests
    """

    def __init__(
        self,
        unit_dir: Path,
        runner: Runner = subprocess.run,
    ) -> None:
        self._unit_dir = unit_dir
        self._runner = runner

    def unit_path(self, name: str) -> Path:
        return self._unit_dir / f"{name}{UNIT_SUFFIX}"

    def _systemctl(
        self, args: Sequence[str], name: str | None, check: bool = True
    ) -> subprocess.CompletedProcess[str]:
        command = [SYSTEMCTL, *args]
        try:
            result = self._runner(
                command,
                capture_output=True,
                text=True,
                timeout=_COMMAND_TIMEOUT_SECONDS,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise SupervisorError(
                f"'{shlex.join(command)}' failed: {type(e).__name__}: {e}",
                service_name=name,
            ) from e
        if check and result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise SupervisorError(
                f"'{shlex.join(command)}' exited with code {result.returncode}"
                + (f": {detail}" if detail else ""),
                service_name=name,
            )
        return result

    def status(self, name: str) -> bool:
        result = self._systemctl(["is-active", "--quiet", name], name, check=False)
        return result.returncode == 0

    def install(self, config: ModelLocalServiceConfig) -> None:
        path = self.unit_path(config.name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(render_unit(config), encoding="utf-8")
            path.chmod(UNIT_FILE_MODE)
        except OSError as e:
            raise SupervisorError(
                f"cannot write unit file {path}: {e}", service_name=config.name
            ) from e
        self._systemctl(["daemon-reload"], config.name)
        self._systemctl(["enable", config.name], config.name)
        self._systemctl(["start", config.name], config.name)
        logger.info(
            "Installed local service",
            extra={"service_name": config.name, "unit_path": str(path)},
        )

    def uninstall(self, name: str) -> None:
        path = self.unit_path(name)
        if self.status(name):
            self._systemctl(["stop", name], name)
        if not path.exists():
            return
        self._systemctl(["disable", name], name, check=False)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise SupervisorError(
                f"cannot remove unit file {path}: {e}", service_name=name
            ) from e
        self._systemctl(["daemon-reload"], name)
        logger.info("Uninstalled local service", extra={"service_name": name})

    def start(self, name: str) -> None:
        if self.status(name):
            return
        self._systemctl(["start", name], name)
        logger.info("Started local service", extra={"service_name": name})

    def stop(self, name: str) -> None:
        if not self.status(name):
            return
        self._systemctl(["stop", name], name)
        logger.info("Stopped local service", extra={"service_name": name})

    def list_local(self) -> list[str]:
        if not self._unit_dir.is_dir():
            return []
        return sorted(
            path.name[: -len(UNIT_SUFFIX)]
            for path in self._unit_dir.glob(f"{LOCAL_SERVICE_PREFIX}*{UNIT_SUFFIX}")
        )


__all__: list[str] = [
    "SERVICE_MANAGER",
    "UNIT_FILE_MODE",
    "SystemdSupervisorHandler",
    "escape_environment",
    "escape_exec_argument",
    "render_unit",
]
