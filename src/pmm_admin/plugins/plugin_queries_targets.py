# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Query analytics targets.

The QAN instance type differs from the product name for MongoDB
(``mongo``). MySQL collects from the slow log or performance schema;
``auto`` picks the slow log when the server runs on this host.
"""

from __future__ import annotations

from pmm_admin.errors import ProtocolConfigurationError
from pmm_admin.models.model_qan_tool_config import ModelQanToolConfig
from pmm_admin.models.model_target_info import ModelTargetInfo
from pmm_admin.plugins.plugin_target_base import PluginQueriesTarget

QUERY_SOURCE_SLOWLOG: str = "slowlog"
QUERY_SOURCE_PERFSCHEMA: str = "perfschema"
QUERY_SOURCE_AUTO: str = "auto"
QUERY_SOURCE_PROFILER: str = "profiler"


class MySQLQueriesTarget(PluginQueriesTarget):
    """MySQL query analytics.

    Args:
        info: Target details; ``info.query_source`` selects the source
        local_hostname: Hostname of this client, used to resolve ``auto``
        disable_query_examples: Do not collect example queries
        slow_log_rotation: Let the agent rotate the slow log
        retain_slow_logs: Number of rotated slow logs to keep
    """

    name = "mysql"
    instance_type_name = "mysql"

    def __init__(
        self,
        info: ModelTargetInfo | None = None,
        local_hostname: str = "",
        disable_query_examples: bool = False,
        slow_log_rotation: bool = True,
        retain_slow_logs: int = 1,
    ) -> None:
        super().__init__(info, disable_query_examples)
        source = self.info.query_source or QUERY_SOURCE_AUTO
        if source == QUERY_SOURCE_AUTO:
            source = (
                QUERY_SOURCE_SLOWLOG
                if local_hostname and local_hostname == self.info.hostname
                else QUERY_SOURCE_PERFSCHEMA
            )
        if source not in (QUERY_SOURCE_SLOWLOG, QUERY_SOURCE_PERFSCHEMA):
            raise ProtocolConfigurationError(
                f"invalid query source '{source}': use slowlog, perfschema or auto"
            )
        self._query_source = source
        self._slow_log_rotation = slow_log_rotation
        self._retain_slow_logs = retain_slow_logs

    @property
    def query_source(self) -> str:
        return self._query_source

    def qan_config(self) -> ModelQanToolConfig:
        return ModelQanToolConfig(
            collect_from=self._query_source,
            example_queries=not self._disable_query_examples,
            slow_log_rotation=self._slow_log_rotation,
            retain_slow_logs=self._retain_slow_logs,
        )


class MongoDBQueriesTarget(PluginQueriesTarget):
    name = "mongodb"
    instance_type_name = "mongo"

    def qan_config(self) -> ModelQanToolConfig:
        return ModelQanToolConfig(
            collect_from=QUERY_SOURCE_PROFILER,
            example_queries=not self._disable_query_examples,
        )


QUERIES_TARGETS: dict[str, type[PluginQueriesTarget]] = {
    MySQLQueriesTarget.name: MySQLQueriesTarget,
    MongoDBQueriesTarget.name: MongoDBQueriesTarget,
}


__all__: list[str] = [
    "QUERIES_TARGETS",
    "QUERY_SOURCE_AUTO",
    "QUERY_SOURCE_PERFSCHEMA",
    "QUERY_SOURCE_PROFILER",
    "QUERY_SOURCE_SLOWLOG",
    "MongoDBQueriesTarget",
    "MySQLQueriesTarget",
]
