# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Definition of a supervised local service."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelLocalServiceConfig(BaseModel):
    """What the local service manager needs to install one pmm service."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    name: str = Field(description="Unit name, pmm-<type>-<port>")
    display_name: str = Field(default="")
    description: str = Field(default="")
    executable: str = Field(description="Absolute path of the binary")
    arguments: tuple[str, ...] = Field(default=())
    environment: tuple[str, ...] = Field(
        default=(),
        description="KEY=VALUE pairs exported to the process",
    )


__all__ = ["ModelLocalServiceConfig"]
