# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Reconciliation Engine Service.

Detects and heals divergence between the local service manager and this
node's catalog records. The two sides are matched by local service name
(``pmm-<type>-<port>``), the only binding between them.

Divergence:
    orphaned_local  local ``pmm-*`` service without a catalog record
    missing_remote  catalog record without its local service

Repair Ordering:
    For each missing-remote record, strictly in this order:

    1. soft-delete every QAN instance named by a ``qan_<product>_uuid`` key
       under ``<node>/<service_id>/``
    2. delete the KV subtree ``<node>/<service_id>/``
    3. deregister the record

    The record is removed last so that a crash at any step leaves it in
    the catalog, where the next ``diff()`` reports it again. Instance
    deletes treat 404 as done, so repeating step 1 is harmless. If an
    instance delete fails, steps 2 and 3 are skipped for that record so
    its UUID keys are not lost.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from pmm_admin.errors import PmmAdminError
from pmm_admin.models.model_reconciliation_diff import ModelReconciliationDiff
from pmm_admin.models.model_repair_report import ModelRepairReport
from pmm_admin.utils.util_service_naming import kv_service_prefix

if TYPE_CHECKING:
    from pmm_admin.models.model_service_record import ModelServiceRecord
    from pmm_admin.protocols import ProtocolServiceCatalog, ProtocolServiceSupervisor
    from pmm_admin.services.service_agent_rendezvous import ServiceAgentRendezvous

logger = logging.getLogger(__name__)

_INSTANCE_UUID_KEY = re.compile(r"/qan_[^/]+_uuid$")


class ServiceReconciliationEngine:
    """Diff and repair of local services against catalog records.

    Args:
        catalog: Service catalog and KV store
        supervisor: Local service manager
        rendezvous: Used to soft-delete QAN instances of removed records
        node_name: Catalog node name of this client
    """

    def __init__(
        self,
        catalog: ProtocolServiceCatalog,
        supervisor: ProtocolServiceSupervisor,
        rendezvous: ServiceAgentRendezvous,
        node_name: str,
    ) -> None:
        self._catalog = catalog
        self._supervisor = supervisor
        self._rendezvous = rendezvous
        self._node_name = node_name

    def _snapshot(self) -> tuple[list[str], list[ModelServiceRecord]]:
        return (
            self._supervisor.list_local(),
            self._catalog.list_services_for_node(self._node_name),
        )

    @staticmethod
    def _compute_diff(
        local: list[str], records: list[ModelServiceRecord]
    ) -> ModelReconciliationDiff:
        expected = {record.local_service_name for record in records}
        local_set = set(local)
        return ModelReconciliationDiff(
            orphaned_local=tuple(name for name in local if name not in expected),
            missing_remote=tuple(
                record.service_id
                for record in records
                if record.local_service_name not in local_set
            ),
        )

    def diff(self) -> ModelReconciliationDiff:
        """Compare local services with this node's records."""
        local, records = self._snapshot()
        return self._compute_diff(local, records)

    def _delete_instances(self, record: ModelServiceRecord) -> list[str]:
        prefix = kv_service_prefix(self._node_name, record.service_id)
        deleted: list[str] = []
        for key in self._catalog.kv_list_prefix(prefix):
            if not _INSTANCE_UUID_KEY.search(key):
                continue
            value = self._catalog.kv_get(key)
            if not value:
                continue
            uuid = value.decode("utf-8")
            self._rendezvous.delete_instance(uuid)
            deleted.append(uuid)
        return deleted

    def remove_record(self, record: ModelServiceRecord) -> list[str]:
        """Remove a record with everything it owns remotely.

        Returns:
            UUIDs of the QAN instances soft-deleted on the way.
        """
        deleted = self._delete_instances(record)
        self._catalog.kv_delete_tree(
            kv_service_prefix(self._node_name, record.service_id)
        )
        self._catalog.deregister_service(self._node_name, record.service_id)
        logger.info(
            "Removed catalog record without local service",
            extra={
                "node": self._node_name,
                "service_id": record.service_id,
                "deleted_instances": len(deleted),
            },
        )
        return deleted

    def repair(self, ignore_errors: bool = False) -> ModelRepairReport:
        """Uninstall orphaned local services and remove missing-remote records.

        Args:
            ignore_errors: Record per-item failures in the report and keep
                going instead of raising the first one.

        Raises:
            PmmAdminError: The first failure, unless ``ignore_errors``.
        """
        local, records = self._snapshot()
        diff = self._compute_diff(local, records)
        records_by_id = {record.service_id: record for record in records}

        uninstalled: list[str] = []
        removed: list[str] = []
        deleted_instances: list[str] = []
        failures: list[str] = []

        for name in diff.orphaned_local:
            try:
                self._supervisor.uninstall(name)
            except PmmAdminError as e:
                if not ignore_errors:
                    raise
                logger.warning(
                    "Cannot uninstall orphaned local service",
                    extra={"service_name": name, "error": str(e)},
                )
                failures.append(f"{name}: {e}")
                continue
            uninstalled.append(name)

        for service_id in diff.missing_remote:
            record = records_by_id[service_id]
            try:
                deleted_instances.extend(self.remove_record(record))
            except PmmAdminError as e:
                if not ignore_errors:
                    raise
                logger.warning(
                    "Cannot remove catalog record",
                    extra={"service_id": service_id, "error": str(e)},
                )
                failures.append(f"{service_id}: {e}")
                continue
            removed.append(service_id)

        return ModelRepairReport(
            diff=diff,
            uninstalled_local=tuple(uninstalled),
            removed_remote=tuple(removed),
            deleted_instances=tuple(deleted_instances),
            failures=tuple(failures),
        )


__all__: list[str] = ["ServiceReconciliationEngine"]
