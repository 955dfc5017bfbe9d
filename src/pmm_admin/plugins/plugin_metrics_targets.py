# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Metrics exporter targets.

Default ports: linux 42000, mysql 42002, mongodb 42003, proxysql 42004,
postgresql 42005. Only ``linux`` is single-instance per node.
"""

from __future__ import annotations

from collections.abc import Iterable

from pmm_admin.errors import ProtocolConfigurationError
from pmm_admin.models.model_target_info import ModelTargetInfo
from pmm_admin.plugins.plugin_target_base import PluginMetricsTarget

LINUX_COLLECTORS: str = (
    "diskstats,filefd,filesystem,loadavg,meminfo,netdev,netstat,stat,time,"
    "uname,vmstat,meminfo_numa,textfile"
)

MYSQL_DEFAULT_ARGS: tuple[str, ...] = (
    "-collect.auto_increment.columns=true",
    "-collect.binlog_size=true",
    "-collect.global_status=true",
    "-collect.global_variables=true",
    "-collect.info_schema.innodb_metrics=true",
    "-collect.info_schema.innodb_cmp=true",
    "-collect.info_schema.innodb_cmpmem=true",
    "-collect.info_schema.processlist=true",
    "-collect.info_schema.query_response_time=true",
    "-collect.info_schema.tables=true",
    "-collect.info_schema.tablestats=true",
    "-collect.info_schema.userstats=true",
    "-collect.perf_schema.eventswaits=true",
    "-collect.perf_schema.file_events=true",
    "-collect.perf_schema.indexiowaits=true",
    "-collect.perf_schema.tableiowaits=true",
    "-collect.perf_schema.tablelocks=true",
    "-collect.slave_status=true",
)

# Option name -> collector flags it turns off.
MYSQL_DISABLE_ARGS: dict[str, tuple[str, ...]] = {
    "tablestats": (
        "-collect.auto_increment.columns=",
        "-collect.info_schema.tables=",
        "-collect.info_schema.tablestats=",
        "-collect.perf_schema.indexiowaits=",
        "-collect.perf_schema.tableiowaits=",
        "-collect.perf_schema.tablelocks=",
    ),
    "userstats": ("-collect.info_schema.userstats=",),
    "binlogstats": ("-collect.binlog_size=",),
    "processlist": ("-collect.info_schema.processlist=",),
}

OPTION_OFF: bytes = b"OFF"


class LinuxMetricsTarget(PluginMetricsTarget):
    name = "linux"
    default_port = 42000
    executable = "node_exporter"

    @property
    def multiple(self) -> bool:
        return False

    def args(self) -> list[str]:
        return [f"-collectors.enabled={LINUX_COLLECTORS}"]

    def environment(self) -> list[str]:
        return []

    def kv(self) -> dict[str, bytes]:
        return {}


class MySQLMetricsTarget(PluginMetricsTarget):
    """mysqld_exporter with optional collector groups switched off.

    Disabled option groups are recorded as ``<option>=OFF`` KV entries,
    which ``pmm-admin list`` shows in its options column.
    """

    name = "mysql"
    default_port = 42002
    executable = "mysqld_exporter"

    def __init__(
        self,
        info: ModelTargetInfo | None = None,
        cluster: str = "",
        disabled_options: Iterable[str] = (),
    ) -> None:
        super().__init__(info, cluster)
        disabled = list(dict.fromkeys(disabled_options))
        unknown = [option for option in disabled if option not in MYSQL_DISABLE_ARGS]
        if unknown:
            raise ProtocolConfigurationError(
                f"unknown mysql option(s) to disable: {', '.join(unknown)}. "
                f"Valid: {', '.join(MYSQL_DISABLE_ARGS)}"
            )
        self._disabled = disabled

    @property
    def disabled_options(self) -> list[str]:
        return list(self._disabled)

    def args(self) -> list[str]:
        args = list(MYSQL_DEFAULT_ARGS)
        for option in self._disabled:
            for flag in MYSQL_DISABLE_ARGS[option]:
                for i, arg in enumerate(args):
                    if arg.startswith(flag):
                        args[i] = f"{flag}false"
                        break
        return args

    def environment(self) -> list[str]:
        return [f"DATA_SOURCE_NAME={self.info.dsn}"]

    def kv(self) -> dict[str, bytes]:
        kv = super().kv()
        for option in self._disabled:
            kv[option] = OPTION_OFF
        return kv


class MongoDBMetricsTarget(PluginMetricsTarget):
    name = "mongodb"
    default_port = 42003
    executable = "mongodb_exporter"

    def environment(self) -> list[str]:
        return [f"MONGODB_URI={self.info.dsn}"]


class ProxySQLMetricsTarget(PluginMetricsTarget):
    name = "proxysql"
    default_port = 42004
    executable = "proxysql_exporter"

    def environment(self) -> list[str]:
        return [f"DATA_SOURCE_NAME={self.info.dsn}"]


class PostgreSQLMetricsTarget(PluginMetricsTarget):
    name = "postgresql"
    default_port = 42005
    executable = "postgres_exporter"

    def environment(self) -> list[str]:
        return [f"DATA_SOURCE_NAME={self.info.dsn}"]


METRICS_TARGETS: dict[str, type[PluginMetricsTarget]] = {
    target.name: target
    for target in (
        LinuxMetricsTarget,
        MySQLMetricsTarget,
        MongoDBMetricsTarget,
        ProxySQLMetricsTarget,
        PostgreSQLMetricsTarget,
    )
}


__all__: list[str] = [
    "METRICS_TARGETS",
    "MYSQL_DISABLE_ARGS",
    "LinuxMetricsTarget",
    "MongoDBMetricsTarget",
    "MySQLMetricsTarget",
    "PostgreSQLMetricsTarget",
    "ProxySQLMetricsTarget",
]
