# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Rendezvous Retry Configuration Model.

An agent started by the local service manager connects to the QAN API on
its own schedule. Commands relayed before that get HTTP 404; the client
polls with a fixed interval for a bounded number of attempts.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelRendezvousRetryConfig(BaseModel):
    """Bounded, fixed-interval retry settings for agent command relay.

    Attributes:
        max_attempts: Number of PUT attempts before giving up (1-100, default 10)
        interval_seconds: Wait after each "not connected" reply (0-60, default 1.0)

    Example:
        >>> config = ModelRendezvousRetryConfig(max_attempts=3, interval_seconds=0.0)
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="forbid",
    )

    max_attempts: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum number of relay attempts",
    )
    interval_seconds: float = Field(
        default=1.0,
        ge=0.0,
        le=60.0,
        description="Fixed wait between attempts in seconds",
    )


__all__ = ["ModelRendezvousRetryConfig"]
