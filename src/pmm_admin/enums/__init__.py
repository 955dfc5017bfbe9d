# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pmm-admin Enumerations Module.

Exports:
    EnumAdminErrorCode: Error classification for PmmAdminError
    EnumInstanceState: Observed state of a remote QAN instance
    EnumMonitoringAction: start/stop/restart of local services
    EnumServiceType: Catalog service types (``<product>:<kind>``)
    EnumSubsystem: Subsystem an operation or error belongs to
"""

from pmm_admin.enums.enum_admin_error_code import EnumAdminErrorCode
from pmm_admin.enums.enum_instance_state import EnumInstanceState
from pmm_admin.enums.enum_monitoring_action import EnumMonitoringAction
from pmm_admin.enums.enum_service_type import EnumServiceType
from pmm_admin.enums.enum_subsystem import EnumSubsystem

__all__: list[str] = [
    "EnumAdminErrorCode",
    "EnumInstanceState",
    "EnumMonitoringAction",
    "EnumServiceType",
    "EnumSubsystem",
]
