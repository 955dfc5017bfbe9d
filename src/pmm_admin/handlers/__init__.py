# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Handlers for the external subsystems pmm-admin coordinates.

Handlers:
    - ConsulCatalogHandler: Consul catalog and KV store (python-consul)
    - QanApiHandler: QAN API over HTTP (httpx)
    - SystemdSupervisorHandler: local services via systemd
    - AgentInstallerHandler: local QAN agent identity and registration
"""

from pmm_admin.handlers.handler_agent_installer import AgentInstallerHandler
from pmm_admin.handlers.handler_consul_catalog import ConsulCatalogHandler
from pmm_admin.handlers.handler_qan_api import API_VERSION_HEADER, QanApiHandler
from pmm_admin.handlers.handler_systemd_supervisor import (
    SystemdSupervisorHandler,
    render_unit,
)
from pmm_admin.handlers.model_consul_catalog_config import ModelConsulCatalogConfig
from pmm_admin.handlers.model_qan_api_config import QAN_API_PATH, ModelQanApiConfig

__all__: list[str] = [
    "API_VERSION_HEADER",
    "QAN_API_PATH",
    "AgentInstallerHandler",
    "ConsulCatalogHandler",
    "ModelConsulCatalogConfig",
    "ModelQanApiConfig",
    "QanApiHandler",
    "SystemdSupervisorHandler",
    "render_unit",
]
