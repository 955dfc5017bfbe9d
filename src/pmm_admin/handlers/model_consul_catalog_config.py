# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Consul Catalog Handler Configuration Model.

The PMM server proxies the Consul HTTP API at its root, so the catalog is
reached at the same ``host[:port]`` as the QAN API, with the same scheme
and HTTP basic auth credentials.

Security Note:
    The password uses SecretStr so it never shows up in reprs or logs.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, SecretStr


class ModelConsulCatalogConfig(BaseModel):
    """Configuration for ConsulCatalogHandler.

    Attributes:
        host: Consul (PMM server) hostname
        port: Consul HTTP port (80 or 443 when the server address has none)
        scheme: ``http`` or ``https``
        verify_ssl: Verify the server certificate (False for --server-insecure-ssl)
        username: HTTP basic auth user (optional)
        password: HTTP basic auth password (SecretStr, optional)
        timeout_seconds: Request timeout, shared with the QAN API client

    Example:
        >>> config = ModelConsulCatalogConfig(host="pmm.example.com", port=443, scheme="https")
    """

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="forbid",
    )

    host: str = Field(description="Consul hostname")
    port: int = Field(default=80, ge=1, le=65535)
    scheme: str = Field(default="http", pattern=r"^https?$")
    verify_ssl: bool = Field(default=True)
    username: str | None = Field(default=None)
    password: SecretStr | None = Field(default=None)
    timeout_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=300.0,
        description="Request timeout in seconds",
    )


__all__: list[str] = ["ModelConsulCatalogConfig"]
