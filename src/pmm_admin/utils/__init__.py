# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Utility modules for pmm-admin.

    - util_dsn: DSN password masking
    - util_service_naming: local service / catalog ID / KV prefix conventions
    - util_error_sanitization: credential removal from URLs
"""

from pmm_admin.utils.util_dsn import sanitize_dsn
from pmm_admin.utils.util_error_sanitization import redact_url_credentials
from pmm_admin.utils.util_service_naming import (
    LOCAL_SERVICE_PREFIX,
    catalog_service_id,
    is_local_service_name,
    kv_service_prefix,
    local_service_name,
)

__all__: list[str] = [
    "LOCAL_SERVICE_PREFIX",
    "catalog_service_id",
    "is_local_service_name",
    "kv_service_prefix",
    "local_service_name",
    "redact_url_credentials",
    "sanitize_dsn",
]
