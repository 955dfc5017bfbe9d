# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Duplicate Guard Service.

The catalog enforces neither node-name ownership nor alias uniqueness, so
both are checked here before anything is registered.

Checks:
    - Local duplicate: this node already monitors the alias under the type
    - Node identity: another machine (different address) owns this node name
    - Alias conflict: another node monitors the same ``(type, alias)``

These checks are advisory. They read the catalog and report; they do not
lock it, so two clients racing on the same alias can both pass.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pmm_admin.errors import (
    AliasConflictError,
    DuplicateServiceError,
    NodeIdentityConflictError,
)

if TYPE_CHECKING:
    from pmm_admin.models.model_service_record import ModelServiceRecord
    from pmm_admin.protocols import ProtocolServiceCatalog

logger = logging.getLogger(__name__)


class ServiceDuplicateGuard:
    """Enforces node identity and cluster-wide alias uniqueness.

    Args:
        catalog: Service catalog to read records from
        node_name: Catalog node name of this client
        client_address: Address this client registers with
    """

    def __init__(
        self,
        catalog: ProtocolServiceCatalog,
        node_name: str,
        client_address: str,
    ) -> None:
        self._catalog = catalog
        self._node_name = node_name
        self._client_address = client_address

    def find_local_service(
        self, service_type: str, alias: str | None = None
    ) -> ModelServiceRecord | None:
        """Return this node's record of a type, optionally the one carrying an alias."""
        for record in self._catalog.list_services_for_node(self._node_name):
            if record.service_type != service_type:
                continue
            if alias is None or record.has_alias(alias):
                return record
        return None

    def check_local_duplicate(self, service_type: str, alias: str | None) -> None:
        """Raise DuplicateServiceError if this node already has the service.

        With ``alias=None`` any record of the type counts, which is how
        single-instance products (``linux:metrics``) are limited to one.
        """
        if self.find_local_service(service_type, alias) is not None:
            raise DuplicateServiceError(service_type, alias)

    def check_global_uniqueness(self, service_type: str, alias: str) -> None:
        """Check node identity and cluster-wide alias uniqueness.

        Raises:
            NodeIdentityConflictError: The node name is registered with a
                different address and has services.
            AliasConflictError: Another node monitors ``(service_type, alias)``.
        """
        node = self._catalog.get_node(self._node_name)
        if (
            node is not None
            and node.address != self._client_address
            and len(node.services) > 0
        ):
            raise NodeIdentityConflictError(
                node_name=self._node_name,
                client_address=self._client_address,
                other_address=node.address,
            )

        for record in self._catalog.list_services_globally(service_type, alias):
            if record.node_name != self._node_name and record.has_alias(alias):
                logger.debug(
                    "Alias conflict",
                    extra={
                        "service_type": service_type,
                        "alias": alias,
                        "other_node": record.node_name,
                    },
                )
                raise AliasConflictError(
                    service_type=service_type,
                    alias=alias,
                    other_node=record.node_name,
                    other_address=record.node_address,
                )


__all__: list[str] = ["ServiceDuplicateGuard"]
