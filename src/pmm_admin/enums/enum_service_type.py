# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Service Type Enumeration.

Service types are the catalog's service names. Each is ``<product>:<kind>``
where kind is ``metrics`` (one exporter per monitored instance) or
``queries`` (one QAN agent hosting many monitored instances).
"""

from enum import Enum


class EnumServiceType(str, Enum):
    """Catalog service types managed by pmm-admin."""

    LINUX_METRICS = "linux:metrics"
    MYSQL_METRICS = "mysql:metrics"
    MYSQL_QUERIES = "mysql:queries"
    MONGODB_METRICS = "mongodb:metrics"
    MONGODB_QUERIES = "mongodb:queries"
    PROXYSQL_METRICS = "proxysql:metrics"
    POSTGRESQL_METRICS = "postgresql:metrics"

    @property
    def product(self) -> str:
        """Return the product part, e.g. ``mysql`` for ``mysql:queries``."""
        return self.value.split(":", 1)[0]

    @property
    def is_queries(self) -> bool:
        """Return True for query-analytics service types."""
        return self.value.endswith(":queries")

    @classmethod
    def metrics_for(cls, product: str) -> "EnumServiceType":
        """Return the metrics service type of a product."""
        return cls(f"{product}:metrics")

    @classmethod
    def queries_for(cls, product: str) -> "EnumServiceType":
        """Return the queries service type of a product."""
        return cls(f"{product}:queries")

    @classmethod
    def values(cls) -> list[str]:
        """Return all service type strings in declaration order."""
        return [member.value for member in cls]


__all__ = ["EnumServiceType"]
