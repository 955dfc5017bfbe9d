# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""QAN tool configuration sent with ``StartTool``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelQanToolConfig(BaseModel):
    """Query analytics settings for one instance on the agent.

    Serialized with the agent's PascalCase keys (``UUID``, ``Interval``,
    ``CollectFrom``, ``ExampleQueries``).
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="forbid",
    )

    uuid: str = Field(default="", alias="UUID")
    interval: int = Field(default=60, ge=1, alias="Interval")
    collect_from: str | None = Field(default=None, alias="CollectFrom")
    example_queries: bool | None = Field(default=None, alias="ExampleQueries")
    slow_log_rotation: bool | None = Field(default=None, alias="SlowLogRotation")
    retain_slow_logs: int | None = Field(default=None, ge=0, alias="RetainSlowLogs")

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = ["ModelQanToolConfig"]
