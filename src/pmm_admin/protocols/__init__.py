# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Structural interfaces of the external subsystems pmm-admin coordinates."""

from pmm_admin.protocols.protocol_service_catalog import ProtocolServiceCatalog
from pmm_admin.protocols.protocol_service_supervisor import ProtocolServiceSupervisor

__all__: list[str] = [
    "ProtocolServiceCatalog",
    "ProtocolServiceSupervisor",
]
