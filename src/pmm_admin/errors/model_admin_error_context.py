# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Admin Error Context Configuration Model.

Bundles the structured fields every pmm-admin error carries so error
constructors keep a short signature.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from pmm_admin.enums import EnumSubsystem


class ModelAdminErrorContext(BaseModel):
    """Structured context for pmm-admin errors.

    Attributes:
        subsystem: Which state store failed (catalog, agent API, supervisor)
        operation: Operation being performed (register, kv_put, send_command, ...)
        target_name: Resource the operation targeted (service id, URL, unit name)
        correlation_id: Correlation ID of the invocation, for log lookup

    Example:
        >>> context = ModelAdminErrorContext(
        ...     subsystem=EnumSubsystem.CATALOG,
        ...     operation="register_service",
        ...     target_name="mysql:metrics-42002",
        ... )
        >>> raise CatalogError("Failed to register service", context=context)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    subsystem: EnumSubsystem | None = Field(
        default=None,
        description="Subsystem the failing operation belongs to",
    )
    operation: str | None = Field(
        default=None,
        description="Operation being performed",
    )
    target_name: str | None = Field(
        default=None,
        description="Target resource or endpoint name",
    )
    correlation_id: UUID | None = Field(
        default=None,
        description="Correlation ID of the invocation",
    )


__all__ = ["ModelAdminErrorContext"]
