# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Shared pytest configuration for all unit tests.

Applies the ``unit`` marker to every test under tests/unit/ and provides
the in-memory wiring used by service and CLI tests:

    InMemoryServiceCatalog + FakeServiceSupervisor + FakeQanApi
        -> QanApiHandler (httpx.MockTransport)
        -> AgentInstallerHandler (fake installer run)
        -> ServiceAgentRendezvous (no-wait retry)
        -> ServiceMonitoringCoordinator
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from pmm_admin.handlers.handler_agent_installer import AgentInstallerHandler
from pmm_admin.handlers.handler_qan_api import QanApiHandler
from pmm_admin.handlers.model_qan_api_config import ModelQanApiConfig
from pmm_admin.models.model_paths_config import ModelPathsConfig
from pmm_admin.models.model_pmm_config import ModelPmmConfig
from pmm_admin.models.model_rendezvous_retry_config import ModelRendezvousRetryConfig
from pmm_admin.services.service_agent_rendezvous import ServiceAgentRendezvous
from pmm_admin.services.service_monitoring_coordinator import (
    ServiceMonitoringCoordinator,
)
from pmm_admin.services.service_rendezvous_retry import RendezvousRetryPolicy
from pmm_admin.testing import FakeQanApi, FakeServiceSupervisor, InMemoryServiceCatalog

NODE_NAME = "db-host"
NODE_ADDRESS = "10.0.0.5"


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Dynamically add unit marker to all tests in the unit directory."""
    unit_marker = pytest.mark.unit
    for item in items:
        if "tests/unit" in str(item.fspath):
            if not any(marker.name == "unit" for marker in item.iter_markers()):
                item.add_marker(unit_marker)


@pytest.fixture
def pmm_config() -> ModelPmmConfig:
    """Client configuration of the node under test."""
    return ModelPmmConfig(
        server_address="pmm.example.com",
        client_address=NODE_ADDRESS,
        client_name=NODE_NAME,
    )


@pytest.fixture
def paths(tmp_path: Path) -> ModelPathsConfig:
    """Installation directories under tmp_path, with SSL files present."""
    config = ModelPathsConfig(
        pmm_base_dir=tmp_path / "pmm-client",
        agent_base_dir=tmp_path / "qan-agent",
        unit_dir=tmp_path / "systemd",
    )
    config.pmm_base_dir.mkdir(parents=True)
    config.ssl_cert_file.write_text("cert")
    config.ssl_key_file.write_text("key")
    return config


@pytest.fixture
def catalog() -> InMemoryServiceCatalog:
    return InMemoryServiceCatalog()


@pytest.fixture
def supervisor() -> FakeServiceSupervisor:
    return FakeServiceSupervisor()


@pytest.fixture
def fake_api() -> FakeQanApi:
    return FakeQanApi()


@pytest.fixture
def qan_api(fake_api: FakeQanApi) -> QanApiHandler:
    """QanApiHandler served by the fake API."""
    handler = QanApiHandler(
        ModelQanApiConfig(server_url="http://pmm.example.com"),
        transport=fake_api.transport,
    )
    yield handler
    handler.close()


@pytest.fixture
def installer_runner(fake_api: FakeQanApi, paths: ModelPathsConfig) -> MagicMock:
    """Stand-in for the agent installer: registers an agent and writes agent.conf."""

    def run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess[str]:
        agent_id = fake_api.add_agent()
        config_file = paths.agent_config_file
        config_file.parent.mkdir(parents=True, exist_ok=True)
        config_file.write_text(json.dumps({"UUID": agent_id}))
        return subprocess.CompletedProcess(command, 0, "", "")

    return MagicMock(side_effect=run)


@pytest.fixture
def installer(
    pmm_config: ModelPmmConfig,
    paths: ModelPathsConfig,
    installer_runner: MagicMock,
) -> AgentInstallerHandler:
    return AgentInstallerHandler(pmm_config, paths, runner=installer_runner)


@pytest.fixture
def retry_policy() -> RendezvousRetryPolicy:
    """Rendezvous retry without waiting between attempts."""
    return RendezvousRetryPolicy(
        ModelRendezvousRetryConfig(max_attempts=10, interval_seconds=0.0)
    )


@pytest.fixture
def rendezvous(
    qan_api: QanApiHandler,
    installer: AgentInstallerHandler,
    retry_policy: RendezvousRetryPolicy,
) -> ServiceAgentRendezvous:
    return ServiceAgentRendezvous(qan_api, installer, retry_policy)


@pytest.fixture
def coordinator(
    pmm_config: ModelPmmConfig,
    paths: ModelPathsConfig,
    catalog: InMemoryServiceCatalog,
    supervisor: FakeServiceSupervisor,
    qan_api: QanApiHandler,
    rendezvous: ServiceAgentRendezvous,
) -> ServiceMonitoringCoordinator:
    return ServiceMonitoringCoordinator(
        config=pmm_config,
        paths=paths,
        catalog=catalog,
        supervisor=supervisor,
        api=qan_api,
        rendezvous=rendezvous,
    )
