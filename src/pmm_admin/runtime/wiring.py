# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Component wiring.

This module is the single place where the concrete handlers are built from
the client configuration and injected into the services. Services never
construct their own transports, so tests wire in-memory fakes instead.

Wiring:
    ModelPmmConfig ──► ModelConsulCatalogConfig ──► ConsulCatalogHandler
                   └─► ModelQanApiConfig ─────────► QanApiHandler
    ModelPathsConfig ─► SystemdSupervisorHandler, AgentInstallerHandler
    all of the above ─► ServiceAgentRendezvous ─► ServiceMonitoringCoordinator

Example:
    >>> config = load_config(paths.config_file)
    >>> coordinator = build_coordinator(config, paths)
    >>> coordinator.list_services()
"""

from __future__ import annotations

import logging

from pmm_admin.errors import ProtocolConfigurationError
from pmm_admin.handlers.handler_agent_installer import AgentInstallerHandler
from pmm_admin.handlers.handler_consul_catalog import ConsulCatalogHandler
from pmm_admin.handlers.handler_qan_api import QanApiHandler
from pmm_admin.handlers.handler_systemd_supervisor import SystemdSupervisorHandler
from pmm_admin.handlers.model_consul_catalog_config import ModelConsulCatalogConfig
from pmm_admin.handlers.model_qan_api_config import ModelQanApiConfig
from pmm_admin.models.model_paths_config import ModelPathsConfig
from pmm_admin.models.model_pmm_config import ModelPmmConfig
from pmm_admin.models.model_rendezvous_retry_config import ModelRendezvousRetryConfig
from pmm_admin.services.service_agent_rendezvous import ServiceAgentRendezvous
from pmm_admin.services.service_monitoring_coordinator import (
    ServiceMonitoringCoordinator,
)
from pmm_admin.services.service_rendezvous_retry import RendezvousRetryPolicy

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS: float = 10.0


def split_server_address(address: str, scheme: str) -> tuple[str, int]:
    """Split ``host[:port]`` into host and port, defaulting the port by scheme.

    Raises:
        ProtocolConfigurationError: Empty address or non-numeric port.
    """
    if not address:
        raise ProtocolConfigurationError(
            "PMM server address is not set. Use 'pmm-admin config --server'."
        )
    host, sep, port = address.rpartition(":")
    if not sep or "]" in port:
        return address, 443 if scheme == "https" else 80
    if not port.isdigit():
        raise ProtocolConfigurationError(
            f"invalid port in PMM server address: {address}", server_address=address
        )
    return host.strip("[]"), int(port)


def build_catalog_config(
    config: ModelPmmConfig, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
) -> ModelConsulCatalogConfig:
    host, port = split_server_address(config.server_address, config.scheme)
    return ModelConsulCatalogConfig(
        host=host,
        port=port,
        scheme=config.scheme,
        verify_ssl=not config.server_insecure_ssl,
        username=config.server_user or None,
        password=config.server_password if config.server_user else None,
        timeout_seconds=timeout_seconds,
    )


def build_qan_api_config(
    config: ModelPmmConfig,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    verbose: bool = False,
) -> ModelQanApiConfig:
    return ModelQanApiConfig(
        server_url=config.server_url,
        username=config.server_user or None,
        password=config.server_password if config.server_user else None,
        verify_ssl=not config.server_insecure_ssl,
        timeout_seconds=timeout_seconds,
        verbose=verbose,
    )


def build_coordinator(
    config: ModelPmmConfig,
    paths: ModelPathsConfig | None = None,
    retry_config: ModelRendezvousRetryConfig | None = None,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    verbose: bool = False,
) -> ServiceMonitoringCoordinator:
    """Build a coordinator talking to the configured PMM server.

    Raises:
        ProtocolConfigurationError: The configuration is incomplete.
    """
    if not config.client_name or not config.client_address:
        raise ProtocolConfigurationError(
            "PMM client is not configured. Use 'pmm-admin config' first."
        )
    paths = paths or ModelPathsConfig()

    catalog = ConsulCatalogHandler(build_catalog_config(config, timeout_seconds))
    api = QanApiHandler(build_qan_api_config(config, timeout_seconds, verbose))
    supervisor = SystemdSupervisorHandler(paths.unit_dir)
    installer = AgentInstallerHandler(config, paths)
    rendezvous = ServiceAgentRendezvous(
        api, installer, RendezvousRetryPolicy(retry_config)
    )
    logger.debug(
        "Wired coordinator",
        extra={
            "node": config.client_name,
            "catalog": catalog.describe(),
            "api": api.describe(),
        },
    )
    return ServiceMonitoringCoordinator(
        config=config,
        paths=paths,
        catalog=catalog,
        supervisor=supervisor,
        api=api,
        rendezvous=rendezvous,
    )


__all__: list[str] = [
    "build_catalog_config",
    "build_coordinator",
    "build_qan_api_config",
    "split_server_address",
]
