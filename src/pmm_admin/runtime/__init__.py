# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Runtime wiring of handlers and services."""

from pmm_admin.runtime.wiring import (
    build_catalog_config,
    build_coordinator,
    build_qan_api_config,
    split_server_address,
)

__all__ = [
    "build_catalog_config",
    "build_coordinator",
    "build_qan_api_config",
    "split_server_address",
]
