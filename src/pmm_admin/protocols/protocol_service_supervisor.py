# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for the local OS service supervisor.

Local services are named ``pmm-<type>-<port>`` (see
pmm_admin.utils.util_service_naming). That name is the only link between a
catalog record and the process running on this host.

Implementations:
    - SystemdSupervisorHandler: unit files plus ``systemctl``
    - FakeServiceSupervisor (pmm_admin.testing): in-memory, for tests

Error Handling:
    Failures raise SupervisorError. ``uninstall`` of a missing service and
    ``stop`` of a stopped service are not errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pmm_admin.models.model_local_service_config import ModelLocalServiceConfig


@runtime_checkable
class ProtocolServiceSupervisor(Protocol):
    """Install, control and enumerate local pmm services."""

    def install(self, config: ModelLocalServiceConfig) -> None:
        """Install and start a service."""
        ...

    def uninstall(self, name: str) -> None:
        """Stop and remove a service."""
        ...

    def start(self, name: str) -> None:
        ...

    def stop(self, name: str) -> None:
        ...

    def status(self, name: str) -> bool:
        """Return True if the service is running."""
        ...

    def list_local(self) -> list[str]:
        """Return the names of installed ``pmm-*`` services."""
        ...


__all__: list[str] = ["ProtocolServiceSupervisor"]
