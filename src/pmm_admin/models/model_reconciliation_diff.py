# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Divergence between local services and catalog records of a node."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelReconciliationDiff(BaseModel):
    """Result of ServiceReconciliationEngine.diff().

    Attributes:
        orphaned_local: Local ``pmm-*`` services with no catalog record
        missing_remote: IDs of catalog records with no local service
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    orphaned_local: tuple[str, ...] = Field(default=())
    missing_remote: tuple[str, ...] = Field(default=())

    @property
    def is_empty(self) -> bool:
        return not self.orphaned_local and not self.missing_remote

    @property
    def total(self) -> int:
        return len(self.orphaned_local) + len(self.missing_remote)


__all__ = ["ModelReconciliationDiff"]
