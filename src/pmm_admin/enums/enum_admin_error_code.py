# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Error code enumeration for pmm-admin errors."""

from enum import Enum


class EnumAdminErrorCode(str, Enum):
    """Machine-readable classification attached to every PmmAdminError."""

    OPERATION_FAILED = "operation_failed"
    INVALID_CONFIGURATION = "invalid_configuration"
    DUPLICATE_SERVICE = "duplicate_service"
    NO_SERVICE = "no_service"
    NODE_IDENTITY_CONFLICT = "node_identity_conflict"
    ALIAS_CONFLICT = "alias_conflict"
    PORT_IN_USE = "port_in_use"
    PORT_RANGE_EXHAUSTED = "port_range_exhausted"
    AGENT_RENDEZVOUS_TIMEOUT = "agent_rendezvous_timeout"
    AGENT_NOT_CONNECTED = "agent_not_connected"
    OPERATION_CANCELLED = "operation_cancelled"
    INSTANCE_NOT_FOUND = "instance_not_found"
    AGENT_REGISTRATION_FAILED = "agent_registration_failed"
    REMOTE_API_ERROR = "remote_api_error"
    SERVER_CONNECTION_FAILED = "server_connection_failed"
    CATALOG_ERROR = "catalog_error"
    SUPERVISOR_ERROR = "supervisor_error"
    BULK_OPERATION_FAILED = "bulk_operation_failed"


__all__ = ["EnumAdminErrorCode"]
