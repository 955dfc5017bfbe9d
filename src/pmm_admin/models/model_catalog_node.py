# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Catalog node with its registered services."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pmm_admin.models.model_service_record import ModelServiceRecord


class ModelCatalogNode(BaseModel):
    """A catalog node: its logical name, registered address and services."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    name: str = Field(description="Logical node name (pmm-admin client name)")
    address: str = Field(default="", description="Registered node address")
    services: tuple[ModelServiceRecord, ...] = Field(default=())


__all__ = ["ModelCatalogNode"]
