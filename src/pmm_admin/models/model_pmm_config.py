# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pmm-admin Client Configuration Model.

Mirrors ``pmm.yml``. Passwords are SecretStr so they never end up in logs
or reprs; ``config_loader.write_config`` unwraps them when persisting.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator, model_validator

CLIENT_NAME_PATTERN: re.Pattern[str] = re.compile(r"^[a-zA-Z0-9_.:-]{2,60}$")


class ModelPmmConfig(BaseModel):
    """Client configuration.

    Attributes:
        server_address: PMM server ``host[:port]``
        client_address: Address this node registers in the catalog
        bind_address: Address exporters listen on (defaults to client_address)
        client_name: Catalog node name of this client
        mysql_password: Password of the generated MySQL pmm user
        server_user: HTTP basic auth user of the PMM server
        server_password: HTTP basic auth password of the PMM server
        server_ssl: Talk to the server over verified HTTPS
        server_insecure_ssl: Talk to the server over HTTPS without verification
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
    )

    server_address: str = Field(default="")
    client_address: str = Field(default="")
    bind_address: str = Field(default="")
    client_name: str = Field(default="")
    mysql_password: SecretStr | None = Field(default=None)
    server_user: str = Field(default="")
    server_password: SecretStr | None = Field(default=None)
    server_ssl: bool = Field(default=False)
    server_insecure_ssl: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def _default_bind_address(cls, data: object) -> object:
        if isinstance(data, dict) and not data.get("bind_address"):
            data = dict(data)
            data["bind_address"] = data.get("client_address", "")
        return data

    @field_validator("client_name")
    @classmethod
    def _check_client_name(cls, value: str) -> str:
        if value and not CLIENT_NAME_PATTERN.match(value):
            raise ValueError(
                "Client name must be 2 to 60 characters long, contain only letters, "
                "numbers and symbols _ - . :"
            )
        return value

    @model_validator(mode="after")
    def _check_ssl_flags(self) -> ModelPmmConfig:
        if self.server_ssl and self.server_insecure_ssl:
            raise ValueError(
                "Flags --server-ssl and --server-insecure-ssl are mutually exclusive."
            )
        return self

    @property
    def scheme(self) -> str:
        return "https" if self.server_ssl or self.server_insecure_ssl else "http"

    @property
    def server_url(self) -> str:
        """Return ``<scheme>://<server_address>`` without credentials."""
        return f"{self.scheme}://{self.server_address}"

    @property
    def server_security(self) -> str:
        """Return ``(SSL, password-protected)`` style labels, or ``""``."""
        labels: list[str] = []
        if self.server_insecure_ssl:
            labels.append("insecure SSL")
        elif self.server_ssl:
            labels.append("SSL")
        if self.server_user:
            labels.append("password-protected")
        return f"({', '.join(labels)})" if labels else ""

    @property
    def server_auth(self) -> tuple[str, str] | None:
        """Return the basic auth pair if the server is password protected."""
        if not self.server_user or self.server_password is None:
            return None
        return (self.server_user, self.server_password.get_secret_value())


__all__ = ["CLIENT_NAME_PATTERN", "ModelPmmConfig"]
