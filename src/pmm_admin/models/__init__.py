# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Pydantic models for pmm-admin records, wire payloads and configuration."""

from pmm_admin.models.model_agent_command import (
    CMD_START_TOOL,
    CMD_STOP_TOOL,
    ModelAgentCommand,
)
from pmm_admin.models.model_agent_instance import UNDELETED_AT, ModelAgentInstance
from pmm_admin.models.model_catalog_node import ModelCatalogNode
from pmm_admin.models.model_local_service_config import ModelLocalServiceConfig
from pmm_admin.models.model_network_report import ModelEndpointStatus, ModelNetworkReport
from pmm_admin.models.model_paths_config import ModelPathsConfig
from pmm_admin.models.model_ping_result import ModelPingResult
from pmm_admin.models.model_pmm_config import CLIENT_NAME_PATTERN, ModelPmmConfig
from pmm_admin.models.model_qan_tool_config import ModelQanToolConfig
from pmm_admin.models.model_reconciliation_diff import ModelReconciliationDiff
from pmm_admin.models.model_rendezvous_retry_config import ModelRendezvousRetryConfig
from pmm_admin.models.model_repair_report import ModelRepairReport
from pmm_admin.models.model_service_metadata import ModelServiceMetadata
from pmm_admin.models.model_service_record import ModelServiceRecord
from pmm_admin.models.model_service_status import ModelServiceStatus
from pmm_admin.models.model_target_info import ModelTargetInfo

__all__: list[str] = [
    "CLIENT_NAME_PATTERN",
    "CMD_START_TOOL",
    "CMD_STOP_TOOL",
    "UNDELETED_AT",
    "ModelAgentCommand",
    "ModelAgentInstance",
    "ModelCatalogNode",
    "ModelEndpointStatus",
    "ModelLocalServiceConfig",
    "ModelNetworkReport",
    "ModelPathsConfig",
    "ModelPingResult",
    "ModelPmmConfig",
    "ModelQanToolConfig",
    "ModelReconciliationDiff",
    "ModelRendezvousRetryConfig",
    "ModelRepairReport",
    "ModelServiceMetadata",
    "ModelServiceRecord",
    "ModelServiceStatus",
    "ModelTargetInfo",
]
