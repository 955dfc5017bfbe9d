# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Agent Command Model.

Command relayed by the QAN API to a connected agent. ``Data`` is a byte
string; the API expects it base64-encoded in JSON.
"""

from __future__ import annotations

import base64

from pydantic import BaseModel, ConfigDict, Field

CMD_START_TOOL: str = "StartTool"
CMD_STOP_TOOL: str = "StopTool"


class ModelAgentCommand(BaseModel):
    """``{user, service, cmd, data}`` command sent to ``/agents/{id}/cmd``."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    user: str = Field(description="Issuer, e.g. pmm-admin@<hostname>")
    service: str = Field(default="qan", description="Agent service addressed")
    cmd: str = Field(description="Command name (StartTool, StopTool)")
    data: bytes = Field(default=b"", description="Command payload")

    def to_wire(self) -> dict[str, str]:
        return {
            "User": self.user,
            "Service": self.service,
            "Cmd": self.cmd,
            "Data": base64.b64encode(self.data).decode("ascii"),
        }


__all__ = ["CMD_START_TOOL", "CMD_STOP_TOOL", "ModelAgentCommand"]
