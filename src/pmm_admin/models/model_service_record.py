# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Service Record Model.

One catalog service registration of a node. ``service_id`` is unique per
node; ``(service_type, alias)`` is unique across the whole catalog, which
ServiceDuplicateGuard enforces since the catalog does not.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pmm_admin.models.model_service_metadata import ModelServiceMetadata
from pmm_admin.utils.util_service_naming import local_service_name


class ModelServiceRecord(BaseModel):
    """Catalog service registration.

    Attributes:
        service_id: Per-node unique ID (``<service_type>-<port>``)
        service_type: Catalog service name, e.g. ``mysql:metrics``
        metadata: Structured tags (aliases, scheme, cluster, ...)
        port: Port the exporter or agent service is bound to (0 for QAN agents)
        node_name: Catalog node the record belongs to
        node_address: Address registered for that node
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    service_id: str = Field(description="Per-node unique service ID")
    service_type: str = Field(description="Catalog service name")
    metadata: ModelServiceMetadata = Field(default_factory=ModelServiceMetadata)
    port: int = Field(default=0, ge=0, le=65535)
    node_name: str = Field(default="", description="Owning catalog node")
    node_address: str = Field(default="", description="Address of the owning node")

    @property
    def aliases(self) -> tuple[str, ...]:
        return self.metadata.aliases

    @property
    def local_service_name(self) -> str:
        """Return the name of the local service this record binds to."""
        return local_service_name(self.service_type, self.port)

    def has_alias(self, alias: str) -> bool:
        return self.metadata.has_alias(alias)


__all__ = ["ModelServiceRecord"]
