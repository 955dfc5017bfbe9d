# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Base classes for monitoring target descriptors.

A target describes what to run and what to record for one product:
exporter binary, arguments, environment, KV entries, default port and
QAN settings. Targets are built from operator input (ModelTargetInfo);
they never connect to the monitored database.

Architecture:
    ServiceMonitoringCoordinator consumes targets:
    - PluginMetricsTarget drives add_metrics (one exporter per alias)
    - PluginQueriesTarget drives add_queries (one agent, many aliases)

Determinism:
    Every method returns the same value for the same construction
    arguments. No I/O, no clock, no environment access.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pmm_admin.enums import EnumServiceType
from pmm_admin.models.model_qan_tool_config import ModelQanToolConfig
from pmm_admin.models.model_target_info import ModelTargetInfo
from pmm_admin.utils.util_dsn import sanitize_dsn


class PluginMetricsTarget(ABC):
    """Descriptor of a metrics exporter for one product.

    Subclasses set ``name``, ``default_port`` and ``executable`` and may
    override ``args``, ``environment``, ``kv`` and ``multiple``.
    """

    name: str = ""
    default_port: int = 0
    executable: str = ""

    def __init__(self, info: ModelTargetInfo | None = None, cluster: str = "") -> None:
        self._info = info or ModelTargetInfo()
        self._cluster = cluster

    @property
    def info(self) -> ModelTargetInfo:
        return self._info

    @property
    def service_type(self) -> EnumServiceType:
        return EnumServiceType.metrics_for(self.name)

    @property
    def cluster(self) -> str:
        return self._cluster

    @property
    def multiple(self) -> bool:
        """Return True if one node may run several exporters of this product."""
        return True

    def args(self) -> list[str]:
        """Product specific exporter arguments."""
        return []

    @abstractmethod
    def environment(self) -> list[str]:
        """``KEY=VALUE`` pairs exported to the exporter, credentials included."""

    def kv(self) -> dict[str, bytes]:
        """Entries stored under ``<node>/<service_id>/`` in the catalog KV."""
        return {"dsn": sanitize_dsn(self._info.dsn).encode("utf-8")}


class PluginQueriesTarget(ABC):
    """Descriptor of query analytics for one product."""

    name: str = ""
    instance_type_name: str = ""

    def __init__(
        self,
        info: ModelTargetInfo | None = None,
        disable_query_examples: bool = False,
    ) -> None:
        self._info = info or ModelTargetInfo()
        self._disable_query_examples = disable_query_examples

    @property
    def info(self) -> ModelTargetInfo:
        return self._info

    @property
    def service_type(self) -> EnumServiceType:
        return EnumServiceType.queries_for(self.name)

    @abstractmethod
    def qan_config(self) -> ModelQanToolConfig:
        """QAN tool settings sent with StartTool (UUID and interval set by caller)."""


__all__: list[str] = ["PluginMetricsTarget", "PluginQueriesTarget"]
