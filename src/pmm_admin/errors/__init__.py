# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pmm-admin Errors Module.

Every error names the subsystem that failed (catalog, agent API, local
service manager) and, where state may be left divergent, tells the
operator to run ``pmm-admin repair``.

Error Sanitization Guidelines:
    NEVER include in error messages or context:
        - Passwords of the monitored databases (use sanitize_dsn)
        - Server HTTP basic auth credentials (strip them from URLs)

    SAFE to include:
        - Node names, client addresses, aliases
        - Service types, service IDs, ports
        - Agent and instance UUIDs
        - HTTP method, URL path and status codes
"""

from pmm_admin.errors.admin_errors import (
    REPAIR_HINT,
    AgentNotConnectedError,
    AgentRegistrationError,
    AgentRendezvousTimeoutError,
    AliasConflictError,
    BulkOperationError,
    CatalogError,
    DuplicateServiceError,
    InstanceNotFoundError,
    NodeIdentityConflictError,
    NoServiceError,
    PmmAdminError,
    PortInUseError,
    PortRangeExhaustedError,
    ProtocolConfigurationError,
    RendezvousCancelledError,
    ServerConnectionError,
    SupervisorError,
)
from pmm_admin.errors.error_remote_api import RemoteAPIError
from pmm_admin.errors.model_admin_error_context import ModelAdminErrorContext

__all__: list[str] = [
    # Configuration model
    "ModelAdminErrorContext",
    "REPAIR_HINT",
    # Error classes
    "PmmAdminError",
    "ProtocolConfigurationError",
    "DuplicateServiceError",
    "NoServiceError",
    "NodeIdentityConflictError",
    "AliasConflictError",
    "PortInUseError",
    "PortRangeExhaustedError",
    "CatalogError",
    "SupervisorError",
    "AgentRegistrationError",
    "InstanceNotFoundError",
    "AgentNotConnectedError",
    "AgentRendezvousTimeoutError",
    "RendezvousCancelledError",
    "RemoteAPIError",
    "ServerConnectionError",
    "BulkOperationError",
]
