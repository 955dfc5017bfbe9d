# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Outcome of a repair run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pmm_admin.models.model_reconciliation_diff import ModelReconciliationDiff


class ModelRepairReport(BaseModel):
    """What ServiceReconciliationEngine.repair() healed and what it could not.

    Attributes:
        diff: The divergence found before repairing
        uninstalled_local: Orphaned local services that were uninstalled
        removed_remote: Catalog records that were removed
        deleted_instances: QAN instance UUIDs soft-deleted on the way
        failures: One message per item left unrepaired (ignore_errors mode)
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    diff: ModelReconciliationDiff = Field(default_factory=ModelReconciliationDiff)
    uninstalled_local: tuple[str, ...] = Field(default=())
    removed_remote: tuple[str, ...] = Field(default=())
    deleted_instances: tuple[str, ...] = Field(default=())
    failures: tuple[str, ...] = Field(default=())

    @property
    def removed_count(self) -> int:
        return len(self.uninstalled_local) + len(self.removed_remote)

    @property
    def succeeded(self) -> bool:
        return not self.failures


__all__ = ["ModelRepairReport"]
