# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Monitoring target descriptors.

Components:
    - PluginMetricsTarget / PluginQueriesTarget: abstract descriptors
    - METRICS_TARGETS: linux, mysql, mongodb, proxysql, postgresql exporters
    - QUERIES_TARGETS: mysql and mongodb query analytics
"""

from pmm_admin.plugins.plugin_metrics_targets import (
    METRICS_TARGETS,
    LinuxMetricsTarget,
    MongoDBMetricsTarget,
    MySQLMetricsTarget,
    PostgreSQLMetricsTarget,
    ProxySQLMetricsTarget,
)
from pmm_admin.plugins.plugin_queries_targets import (
    QUERIES_TARGETS,
    MongoDBQueriesTarget,
    MySQLQueriesTarget,
)
from pmm_admin.plugins.plugin_target_base import (
    PluginMetricsTarget,
    PluginQueriesTarget,
)

__all__ = [
    "METRICS_TARGETS",
    "QUERIES_TARGETS",
    "LinuxMetricsTarget",
    "MongoDBMetricsTarget",
    "MongoDBQueriesTarget",
    "MySQLMetricsTarget",
    "MySQLQueriesTarget",
    "PluginMetricsTarget",
    "PluginQueriesTarget",
    "PostgreSQLMetricsTarget",
    "ProxySQLMetricsTarget",
]
