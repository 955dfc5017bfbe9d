# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pmm-admin - PMM client coordination core.

Registers monitoring services of this host with the PMM server's service
catalog, runs their exporters and QAN agent under the local service
manager, and keeps the two consistent.

Key Components:
    - ServiceMonitoringCoordinator: add/remove/list/operate flows
    - ServicePortAllocator, ServiceDuplicateGuard: pre-registration checks
    - ServiceAgentRendezvous: QAN agent instances and command relay
    - ServiceReconciliationEngine: detection and repair of divergence
    - Handlers for Consul, the QAN API, systemd and the agent installer
"""

__version__ = "1.0.0"

__all__: list[str] = ["__version__"]
