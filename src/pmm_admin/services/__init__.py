# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Coordination services.

Components:
    - ServicePortAllocator: per-node port choice
    - ServiceDuplicateGuard: node identity and alias uniqueness checks
    - RendezvousRetryPolicy: bounded wait for the QAN agent to connect
    - ServiceAgentRendezvous: agent identity, instances, command relay
    - ServiceReconciliationEngine: diff and repair of local vs catalog state
    - ServiceMonitoringCoordinator: add/remove/list/operate flows
"""

from pmm_admin.services.service_agent_rendezvous import (
    INSTANCE_FILE_MODE,
    ServiceAgentRendezvous,
)
from pmm_admin.services.service_duplicate_guard import ServiceDuplicateGuard
from pmm_admin.services.service_monitoring_coordinator import (
    METRICS_SERVICE_TYPES,
    ServiceMonitoringCoordinator,
    parse_service_type,
    uninstall_local_services,
)
from pmm_admin.services.service_port_allocator import (
    MAX_PORT,
    PORT_SCAN_RANGE,
    ServicePortAllocator,
)
from pmm_admin.services.service_reconciliation import ServiceReconciliationEngine
from pmm_admin.services.service_rendezvous_retry import RendezvousRetryPolicy

__all__ = [
    "INSTANCE_FILE_MODE",
    "MAX_PORT",
    "METRICS_SERVICE_TYPES",
    "PORT_SCAN_RANGE",
    "RendezvousRetryPolicy",
    "ServiceAgentRendezvous",
    "ServiceDuplicateGuard",
    "ServiceMonitoringCoordinator",
    "ServicePortAllocator",
    "ServiceReconciliationEngine",
    "parse_service_type",
    "uninstall_local_services",
]
