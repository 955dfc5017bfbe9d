# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Information about a monitored database, as supplied by the operator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelTargetInfo(BaseModel):
    """Connection and identity details of a monitoring target.

    ``dsn`` is the real connection string, credentials included. It is only
    ever written to the local agent instance file and the exporter
    environment; everything remote gets ``sanitize_dsn(dsn)``.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    dsn: str = Field(default="", description="Unsanitized connection string")
    hostname: str = Field(default="")
    port: str = Field(default="")
    distro: str = Field(default="")
    version: str = Field(default="")
    query_source: str = Field(default="")


__all__ = ["ModelTargetInfo"]
