# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Port Allocator Service.

Chooses the port a new exporter listens on. Ports are unique per catalog
node, not per host: the node's records are the source of truth, not the
OS socket table.

Concurrency:
    Best effort. Two invocations on the same node can pick the same port
    between ``choose`` and ``register_service``; nothing locks the catalog.
    The second registration overwrites the first record with the same ID,
    which ``pmm-admin repair`` detects as a missing local service.

Example:
    >>> allocator = ServicePortAllocator(catalog, node_name="db-host")
    >>> allocator.choose(requested_port=0, default_port=42002)
    42002
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pmm_admin.errors import (
    PortInUseError,
    PortRangeExhaustedError,
    ProtocolConfigurationError,
)

if TYPE_CHECKING:
    from pmm_admin.protocols import ProtocolServiceCatalog

logger = logging.getLogger(__name__)

PORT_SCAN_RANGE: int = 1000
MAX_PORT: int = 65535


class ServicePortAllocator:
    """Picks a free port on the current catalog node."""

    def __init__(self, catalog: ProtocolServiceCatalog, node_name: str) -> None:
        self._catalog = catalog
        self._node_name = node_name

    def used_ports(self) -> set[int]:
        """Return the ports of every record registered on this node."""
        return {
            record.port
            for record in self._catalog.list_services_for_node(self._node_name)
        }

    def choose(self, requested_port: int, default_port: int) -> int:
        """Return the port for a new service.

        Args:
            requested_port: Operator supplied port, or 0 to scan for a free one.
            default_port: First port of the scanned range.

        Raises:
            PortInUseError: ``requested_port`` is already used on this node.
            PortRangeExhaustedError: Every port of the scanned range is used.
            ProtocolConfigurationError: A port is negative or above 65535.
        """
        if requested_port < 0 or requested_port > MAX_PORT:
            raise ProtocolConfigurationError(
                f"invalid port {requested_port}: must be between 1 and {MAX_PORT}"
            )
        if default_port <= 0 or default_port > MAX_PORT:
            raise ProtocolConfigurationError(
                f"invalid default port {default_port}: must be between 1 and {MAX_PORT}"
            )

        used = self.used_ports()
        if requested_port > 0:
            if requested_port in used:
                raise PortInUseError(requested_port)
            return requested_port

        last_port = min(default_port + PORT_SCAN_RANGE - 1, MAX_PORT)
        for port in range(default_port, last_port + 1):
            if port not in used:
                logger.debug(
                    "Chose port",
                    extra={"node": self._node_name, "port": port},
                )
                return port
        raise PortRangeExhaustedError(default_port, last_port)


__all__: list[str] = ["MAX_PORT", "PORT_SCAN_RANGE", "ServicePortAllocator"]
