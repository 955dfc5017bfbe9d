# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""QAN API Handler Configuration Model."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr

QAN_API_PATH: str = "/qan-api"


class ModelQanApiConfig(BaseModel):
    """Configuration for QanApiHandler.

    Attributes:
        server_url: ``<scheme>://<server_address>`` of the PMM server
        username: HTTP basic auth user (optional)
        password: HTTP basic auth password (SecretStr, optional)
        verify_ssl: Verify the server certificate
        timeout_seconds: Client-wide request timeout (1.0-300.0, default 10.0)
        verbose: Log every request and response at DEBUG
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="forbid",
    )

    server_url: str = Field(description="PMM server base URL")
    username: str | None = Field(default=None)
    password: SecretStr | None = Field(default=None)
    verify_ssl: bool = Field(default=True)
    timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=300.0,
        description="Request timeout in seconds",
    )
    verbose: bool = Field(default=False)

    @property
    def api_base_url(self) -> str:
        """Return the QAN API root, e.g. ``https://pmm/qan-api``."""
        return self.server_url.rstrip("/") + QAN_API_PATH


__all__: list[str] = ["QAN_API_PATH", "ModelQanApiConfig"]
