# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Subsystem Enumeration.

Identifies which of the independently failing state stores an operation
touched. Every error carries one so the operator knows where to look.
"""

from enum import Enum


class EnumSubsystem(str, Enum):
    """Subsystems the coordinator keeps converged.

    Attributes:
        CATALOG: Consul service catalog and KV store
        AGENT_API: Remote query-analytics (QAN) API
        LOCAL_SUPERVISOR: Local OS service manager
        COORDINATOR: The coordination layer itself (validation, config)
    """

    CATALOG = "catalog"
    AGENT_API = "agent_api"
    LOCAL_SUPERVISOR = "local_supervisor"
    COORDINATOR = "coordinator"

    @property
    def display_name(self) -> str:
        """Return the name used in operator-facing messages."""
        return _DISPLAY_NAMES[self]


_DISPLAY_NAMES: dict[EnumSubsystem, str] = {
    EnumSubsystem.CATALOG: "Consul catalog",
    EnumSubsystem.AGENT_API: "QAN API",
    EnumSubsystem.LOCAL_SUPERVISOR: "local service manager",
    EnumSubsystem.COORDINATOR: "pmm-admin",
}


__all__ = ["EnumSubsystem"]
