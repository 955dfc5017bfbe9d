# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Client/server reachability report of ``pmm-admin check-network``."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ModelEndpointStatus(BaseModel):
    """Whether Prometheus on the server scrapes one exporter of this node."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    service_type: str
    name: str
    remote_endpoint: str = Field(description="Address the server scrapes")
    up: bool = False


class ModelNetworkReport(BaseModel):
    """Connectivity in both directions.

    Attributes:
        server_address: Configured PMM server address
        client_address: Address the server reaches this node by
        bind_address: Address exporters listen on
        consul_ok: The catalog answered with a leader
        prometheus_ok: The Prometheus query API answered
        qan_ok: The QAN API answered ping with its version header
        node_registered: The catalog knows this node
        endpoints: One entry per metrics exporter of this node
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    server_address: str
    client_address: str
    bind_address: str
    consul_ok: bool = False
    prometheus_ok: bool = False
    qan_ok: bool = False
    node_registered: bool = False
    endpoints: tuple[ModelEndpointStatus, ...] = Field(default=())

    @property
    def behind_nat(self) -> bool:
        return self.client_address != self.bind_address

    @property
    def endpoints_down(self) -> bool:
        return any(not endpoint.up for endpoint in self.endpoints)


__all__ = ["ModelEndpointStatus", "ModelNetworkReport"]
