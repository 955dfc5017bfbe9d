# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""One row of ``pmm-admin list``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelServiceStatus(BaseModel):
    """Status of one monitored alias."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    service_type: str
    name: str
    port: int
    running: bool = False
    dsn: str = Field(default="", description="Sanitized DSN from KV")
    options: str = Field(default="", description="Comma separated key=value flags")
    ssl: str = Field(default="", description="'scheme_https' records show 'yes'")

    def sort_key(self) -> tuple[int, str, str]:
        return (self.port, self.name, self.service_type)


__all__ = ["ModelServiceStatus"]
