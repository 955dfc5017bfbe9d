# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Result of the QAN API liveness check."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelPingResult(BaseModel):
    """Status code and API version header returned by ``GET /ping``."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    status_code: int
    api_version: str | None = Field(
        default=None,
        description="X-Percona-Qan-Api-Version header, present on a real PMM server",
    )

    @property
    def is_pmm_server(self) -> bool:
        return self.status_code == 200 and bool(self.api_version)


__all__ = ["ModelPingResult"]
