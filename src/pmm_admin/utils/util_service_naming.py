# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Naming conventions binding catalog records to local services.

The local service name ``pmm-<type with ':' -> '-'>-<port>`` is the only
link between a ServiceRecord and the process supervised on this host; the
reconciliation engine matches the two sides with it.
"""

from __future__ import annotations

from enum import Enum

LOCAL_SERVICE_PREFIX: str = "pmm-"


def _type_value(service_type: str | Enum) -> str:
    return service_type.value if isinstance(service_type, Enum) else service_type


def local_service_name(service_type: str | Enum, port: int) -> str:
    """Return the local service name for a service type and port.

    Example:
        >>> local_service_name("mysql:metrics", 42002)
        'pmm-mysql-metrics-42002'
    """
    return f"{LOCAL_SERVICE_PREFIX}{_type_value(service_type).replace(':', '-', 1)}-{port}"


def catalog_service_id(service_type: str | Enum, port: int) -> str:
    """Return the per-node catalog service ID, e.g. ``mysql:metrics-42002``."""
    return f"{_type_value(service_type)}-{port}"


def kv_service_prefix(node_name: str, service_id: str) -> str:
    """Return the KV subtree prefix owned by a service record."""
    return f"{node_name}/{service_id}/"


def is_local_service_name(name: str) -> bool:
    """Return True if a local unit name follows the pmm naming pattern."""
    return name.startswith(LOCAL_SERVICE_PREFIX) and len(name) > len(LOCAL_SERVICE_PREFIX)


__all__ = [
    "LOCAL_SERVICE_PREFIX",
    "catalog_service_id",
    "is_local_service_name",
    "kv_service_prefix",
    "local_service_name",
]
