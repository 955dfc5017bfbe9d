# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Protocol definition for the service catalog and KV store.

This module defines the ProtocolServiceCatalog interface the coordination
services depend on. ConsulCatalogHandler implements it against Consul;
InMemoryServiceCatalog (pmm_admin.testing) implements it for tests.

Architecture Context:
    - ServiceDuplicateGuard and ServicePortAllocator read node records
    - ServiceMonitoringCoordinator registers records and writes KV entries
    - ServiceReconciliationEngine deletes KV subtrees and deregisters

    Tags are structured (ModelServiceMetadata) on this side of the
    protocol. Implementations convert them to their storage format.

Consistency:
    The catalog provides no transactions across calls. Every method is a
    single request; callers must tolerate a crash between any two calls.

Error Handling:
    Transport and server failures raise CatalogError. Missing keys and
    missing nodes are not errors: ``get_node`` and ``kv_get`` return None.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from pmm_admin.models.model_catalog_node import ModelCatalogNode
    from pmm_admin.models.model_service_record import ModelServiceRecord


@runtime_checkable
class ProtocolServiceCatalog(Protocol):
    """Catalog of service records plus a hierarchical KV store."""

    def get_node(self, node_name: str) -> ModelCatalogNode | None:
        """Return the node with its services, or None if it is not registered."""
        ...

    def register_service(
        self, node_name: str, node_address: str, record: ModelServiceRecord
    ) -> None:
        """Create or overwrite a record (upsert by ``record.service_id``)."""
        ...

    def deregister_service(self, node_name: str, service_id: str) -> None:
        """Remove a record. Removing a missing record is not an error."""
        ...

    def list_services_for_node(self, node_name: str) -> list[ModelServiceRecord]:
        ...

    def list_services_globally(
        self, service_type: str, alias: str | None = None
    ) -> list[ModelServiceRecord]:
        """Return records of a type across all nodes, optionally filtered by alias."""
        ...

    def kv_put(self, key: str, value: bytes) -> None:
        ...

    def kv_get(self, key: str) -> bytes | None:
        ...

    def kv_list_prefix(self, prefix: str) -> list[str]:
        """Return the keys under a prefix."""
        ...

    def kv_delete_tree(self, prefix: str) -> None:
        """Delete every key under a prefix."""
        ...

    def leader(self) -> str:
        """Return the address of the cluster leader (empty if none)."""
        ...


__all__: list[str] = ["ProtocolServiceCatalog"]
