# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Monitoring Coordinator Service.

Per-product add/remove flows over the catalog, the local service manager
and the QAN API. Each flow checks first, then writes remote state, then
installs locally:

    add metrics   duplicate checks -> port -> register -> KV -> install
    add queries   duplicate checks -> agent -> instance -> install/start
                  -> StartTool -> register (alias appended) -> KV
    remove        reverse order, catalog record kept until its last alias

Nothing here is transactional. A failure after the first catalog write
leaves divergent state that ``pmm-admin repair`` heals; such errors carry
the repair hint.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from typing import TYPE_CHECKING
from urllib.parse import quote

from pmm_admin.enums import EnumMonitoringAction, EnumServiceType
from pmm_admin.errors import (
    REPAIR_HINT,
    BulkOperationError,
    CatalogError,
    DuplicateServiceError,
    NoServiceError,
    PmmAdminError,
    ProtocolConfigurationError,
    ServerConnectionError,
    SupervisorError,
)
from pmm_admin.models.model_local_service_config import ModelLocalServiceConfig
from pmm_admin.models.model_network_report import (
    ModelEndpointStatus,
    ModelNetworkReport,
)
from pmm_admin.models.model_service_metadata import ModelServiceMetadata
from pmm_admin.models.model_service_record import ModelServiceRecord
from pmm_admin.models.model_service_status import ModelServiceStatus
from pmm_admin.plugins.plugin_metrics_targets import LinuxMetricsTarget
from pmm_admin.services.service_duplicate_guard import ServiceDuplicateGuard
from pmm_admin.services.service_port_allocator import ServicePortAllocator
from pmm_admin.services.service_reconciliation import ServiceReconciliationEngine
from pmm_admin.utils.util_dsn import sanitize_dsn
from pmm_admin.utils.util_service_naming import (
    catalog_service_id,
    kv_service_prefix,
    local_service_name,
)

if TYPE_CHECKING:
    from pmm_admin.handlers.handler_qan_api import QanApiHandler
    from pmm_admin.models.model_paths_config import ModelPathsConfig
    from pmm_admin.models.model_ping_result import ModelPingResult
    from pmm_admin.models.model_pmm_config import ModelPmmConfig
    from pmm_admin.plugins import PluginMetricsTarget, PluginQueriesTarget
    from pmm_admin.protocols import ProtocolServiceCatalog, ProtocolServiceSupervisor
    from pmm_admin.services.service_agent_rendezvous import ServiceAgentRendezvous

logger = logging.getLogger(__name__)

QAN_INTERVAL_SECONDS: int = 60
QAN_AGENT_DISPLAY_NAME: str = "PMM Query Analytics agent"
CONSUL_SERVICE: str = "consul"
PROMETHEUS_UP_QUERY: str = "prometheus/api/v1/query?query=up"

METRICS_SERVICE_TYPES: tuple[str, ...] = tuple(
    t.value for t in EnumServiceType if not t.is_queries
)

_CONNECT_HINTS = (
    "* Check if the configured address is correct.\n"
    "* If server is running on non-default port, ensure it was specified "
    "along with the address.\n"
    "* If server is enabled for SSL or self-signed SSL, enable the "
    "corresponding option.\n"
    "* You may also check the firewall settings."
)


def parse_service_type(service_type: str) -> EnumServiceType:
    """Return the enum member for a service type string.

    Raises:
        ProtocolConfigurationError: Unknown service type.
    """
    try:
        return EnumServiceType(service_type)
    except ValueError:
        raise ProtocolConfigurationError(
            "bad service type.\n\nService type takes the following values: "
            f"{', '.join(EnumServiceType.values())}.",
            service_type=service_type,
        ) from None


def uninstall_local_services(supervisor: ProtocolServiceSupervisor) -> int:
    """Uninstall every local pmm service, skipping the ones that fail.

    Needs no catalog or client configuration.
    """
    count = 0
    for name in supervisor.list_local():
        try:
            supervisor.uninstall(name)
        except SupervisorError as e:
            logger.warning(
                "Cannot uninstall local service",
                extra={"service_name": name, "error": str(e)},
            )
            continue
        count += 1
    return count


@contextmanager
def _repair_hint_on_failure() -> Iterator[None]:
    try:
        yield
    except (CatalogError, SupervisorError) as e:
        e.append_hint(REPAIR_HINT)
        raise


class ServiceMonitoringCoordinator:
    """Adds, removes and operates monitoring services of this node.

    Args:
        config: Client configuration (node name and address, bind address)
        paths: Installation directories
        catalog: Service catalog and KV store
        supervisor: Local service manager
        api: QAN API transport, also used for server checks and purges
        rendezvous: Agent identity, instances and command relay
    """

    def __init__(
        self,
        config: ModelPmmConfig,
        paths: ModelPathsConfig,
        catalog: ProtocolServiceCatalog,
        supervisor: ProtocolServiceSupervisor,
        api: QanApiHandler,
        rendezvous: ServiceAgentRendezvous,
    ) -> None:
        self._config = config
        self._paths = paths
        self._catalog = catalog
        self._supervisor = supervisor
        self._api = api
        self._rendezvous = rendezvous
        self._node_name = config.client_name
        self._node_address = config.client_address
        self._guard = ServiceDuplicateGuard(
            catalog, self._node_name, self._node_address
        )
        self._ports = ServicePortAllocator(catalog, self._node_name)
        self._reconciliation = ServiceReconciliationEngine(
            catalog, supervisor, rendezvous, self._node_name
        )

    @property
    def node_name(self) -> str:
        return self._node_name

    @property
    def reconciliation(self) -> ServiceReconciliationEngine:
        return self._reconciliation

    @property
    def local_hostname(self) -> str:
        return self._api.hostname

    def _require_record(self, service_type: str, alias: str) -> ModelServiceRecord:
        record = self._guard.find_local_service(service_type, alias)
        if record is None:
            raise NoServiceError(service_type=service_type, alias=alias)
        return record

    def _register(self, record: ModelServiceRecord) -> None:
        self._catalog.register_service(self._node_name, self._node_address, record)

    # -- metrics ---------------------------------------------------------

    def _check_ssl_files(self) -> None:
        missing = [
            str(path)
            for path in (self._paths.ssl_cert_file, self._paths.ssl_key_file)
            if not path.is_file()
        ]
        if missing:
            raise ProtocolConfigurationError(
                f"SSL certificate files not found: {', '.join(missing)}. "
                "Create them or add the service with --disable-ssl.",
                missing_files=missing,
            )

    def _metrics_service_config(
        self,
        target: PluginMetricsTarget,
        port: int,
        disable_ssl: bool,
        extra_args: Sequence[str],
    ) -> ModelLocalServiceConfig:
        args = [
            f"-web.listen-address={self._config.bind_address}:{port}",
            f"-web.auth-file={self._paths.config_file}",
        ]
        if not disable_ssl:
            args.append(f"-web.ssl-key-file={self._paths.ssl_key_file}")
            args.append(f"-web.ssl-cert-file={self._paths.ssl_cert_file}")
        args.extend(target.args())
        args.extend(extra_args)
        title = f"PMM Prometheus {target.executable} on port {port}"
        return ModelLocalServiceConfig(
            name=local_service_name(target.service_type, port),
            display_name=title,
            description=title,
            executable=str(self._paths.pmm_base_dir / target.executable),
            arguments=tuple(args),
            environment=tuple(target.environment()),
        )

    def add_metrics(
        self,
        target: PluginMetricsTarget,
        alias: str,
        port: int = 0,
        force: bool = False,
        disable_ssl: bool = False,
        extra_args: Sequence[str] = (),
    ) -> ModelServiceRecord:
        """Register and start a metrics exporter for ``alias``.

        Single-instance products (linux) allow one exporter per node unless
        ``force`` is set.

        Raises:
            DuplicateServiceError: This node already has the service.
            NodeIdentityConflictError: Node name taken by another address.
            AliasConflictError: Another node monitors the alias.
            PortInUseError, PortRangeExhaustedError: No usable port.
            ProtocolConfigurationError: SSL files missing.
            CatalogError, SupervisorError: Write failed (repair hint appended).
        """
        service_type = target.service_type.value
        self._guard.check_local_duplicate(
            service_type, alias if target.multiple or force else None
        )
        self._guard.check_global_uniqueness(service_type, alias)
        chosen_port = self._ports.choose(port, target.default_port)
        if not disable_ssl:
            self._check_ssl_files()

        record = ModelServiceRecord(
            service_id=catalog_service_id(service_type, chosen_port),
            service_type=service_type,
            metadata=ModelServiceMetadata(
                aliases=(alias,),
                scheme="http" if disable_ssl else "https",
                cluster=target.cluster or None,
            ),
            port=chosen_port,
            node_name=self._node_name,
            node_address=self._node_address,
        )
        service_config = self._metrics_service_config(
            target, chosen_port, disable_ssl, extra_args
        )

        self._register(record)
        with _repair_hint_on_failure():
            prefix = kv_service_prefix(self._node_name, record.service_id)
            for key, value in target.kv().items():
                self._catalog.kv_put(f"{prefix}{key}", value)
            self._supervisor.install(service_config)

        logger.info(
            "Added metrics service",
            extra={
                "node": self._node_name,
                "service_id": record.service_id,
                "service_type": service_type,
                "alias": alias,
                "port": chosen_port,
            },
        )
        return record

    def remove_metrics(self, product: str, alias: str) -> None:
        """Deregister, drop KV entries and uninstall a metrics exporter.

        Raises:
            NoServiceError: This node does not monitor the alias.
        """
        service_type = parse_service_type(f"{product}:metrics").value
        record = self._require_record(service_type, alias)
        self._catalog.deregister_service(self._node_name, record.service_id)
        with _repair_hint_on_failure():
            self._catalog.kv_delete_tree(
                kv_service_prefix(self._node_name, record.service_id)
            )
            self._supervisor.uninstall(record.local_service_name)
        logger.info(
            "Removed metrics service",
            extra={
                "node": self._node_name,
                "service_id": record.service_id,
                "alias": alias,
            },
        )

    # -- queries ---------------------------------------------------------

    def add_queries(
        self,
        target: PluginQueriesTarget,
        alias: str,
        extra_args: Sequence[str] = (),
    ) -> ModelServiceRecord:
        """Attach ``alias`` to this node's QAN agent.

        One agent service (``pmm-<product>-queries-0``) serves every alias
        of a product; it is installed with the first alias.

        Raises:
            DuplicateServiceError, NodeIdentityConflictError, AliasConflictError:
                Pre-checks failed.
            AgentRegistrationError: The agent cannot be registered.
            AgentRendezvousTimeoutError: The agent never connected.
            RemoteAPIError: QAN API refused a request.
        """
        service_type = target.service_type.value
        self._guard.check_local_duplicate(service_type, alias)
        self._guard.check_global_uniqueness(service_type, alias)
        existing = self._guard.find_local_service(service_type)

        agent_id, parent_uuid = self._rendezvous.ensure_agent()
        instance = self._rendezvous.find_or_create_instance(
            target.instance_type_name, alias, parent_uuid, target.info
        )
        self._rendezvous.write_instance_file(instance, target.info.dsn)

        if existing is None:
            port = 0
            self._supervisor.install(
                ModelLocalServiceConfig(
                    name=local_service_name(service_type, port),
                    display_name=QAN_AGENT_DISPLAY_NAME,
                    description=QAN_AGENT_DISPLAY_NAME,
                    executable=str(self._paths.agent_binary),
                    arguments=tuple(extra_args),
                )
            )
            metadata = ModelServiceMetadata(aliases=(alias,))
        else:
            port = existing.port
            # StartTool is lost if the agent is not running.
            self._supervisor.start(existing.local_service_name)
            metadata = existing.metadata.with_alias(alias)

        qan_config = target.qan_config().model_copy(
            update={"uuid": instance.uuid, "interval": QAN_INTERVAL_SECONDS}
        )
        self._rendezvous.start_qan(agent_id, qan_config)

        record = ModelServiceRecord(
            service_id=catalog_service_id(service_type, port),
            service_type=service_type,
            metadata=metadata,
            port=port,
            node_name=self._node_name,
            node_address=self._node_address,
        )
        with _repair_hint_on_failure():
            self._register(record)
            prefix = f"{kv_service_prefix(self._node_name, record.service_id)}{alias}/"
            self._catalog.kv_put(
                f"{prefix}dsn", sanitize_dsn(target.info.dsn).encode("utf-8")
            )
            self._catalog.kv_put(
                f"{prefix}qan_{target.name}_uuid", instance.uuid.encode("utf-8")
            )

        logger.info(
            "Added queries service",
            extra={
                "node": self._node_name,
                "service_id": record.service_id,
                "alias": alias,
                "instance_uuid": instance.uuid,
            },
        )
        return record

    def remove_queries(self, product: str, alias: str) -> None:
        """Stop QAN for ``alias`` and detach it from the agent.

        The agent service and its record are removed with the last alias.

        Raises:
            NoServiceError: No such alias, or its instance UUID key is gone.
        """
        service_type = parse_service_type(f"{product}:queries").value
        record = self._require_record(service_type, alias)
        # StopTool fails if the agent is not running.
        self._supervisor.start(record.local_service_name)

        alias_prefix = (
            f"{kv_service_prefix(self._node_name, record.service_id)}{alias}/"
        )
        uuid_key = f"{alias_prefix}qan_{product}_uuid"
        value = self._catalog.kv_get(uuid_key)
        if not value:
            raise NoServiceError(f"can't get key {uuid_key}", consul_key=uuid_key)
        uuid = value.decode("utf-8")

        agent_id = self._rendezvous.get_agent_id()
        self._rendezvous.stop_qan(agent_id, uuid)
        self._rendezvous.delete_instance(uuid)

        with _repair_hint_on_failure():
            self._catalog.kv_delete_tree(alias_prefix)
            metadata = record.metadata.without_alias(alias)
            if metadata.aliases:
                self._register(record.model_copy(update={"metadata": metadata}))
            else:
                self._catalog.deregister_service(self._node_name, record.service_id)
                self._supervisor.uninstall(record.local_service_name)

        logger.info(
            "Removed queries service",
            extra={
                "node": self._node_name,
                "service_id": record.service_id,
                "alias": alias,
                "instance_uuid": uuid,
                "remaining_aliases": len(metadata.aliases),
            },
        )

    # -- bulk ------------------------------------------------------------

    def remove(self, service_type: str, alias: str) -> None:
        """Dispatch removal of one alias by service type."""
        parsed = parse_service_type(service_type)
        if parsed.is_queries:
            self.remove_queries(parsed.product, alias)
        else:
            self.remove_metrics(parsed.product, alias)

    def remove_all(self, ignore_errors: bool = False) -> int:
        """Remove every alias of every record on this node.

        Returns:
            Number of aliases removed.
        """
        node = self._catalog.get_node(self._node_name)
        if node is None:
            return 0

        count = 0
        for record in node.services:
            if record.service_type not in EnumServiceType.values():
                continue
            for alias in record.aliases:
                try:
                    self.remove(record.service_type, alias)
                except PmmAdminError as e:
                    if not ignore_errors:
                        raise
                    logger.warning(
                        "Cannot remove service",
                        extra={
                            "service_type": record.service_type,
                            "alias": alias,
                            "error": str(e),
                        },
                    )
                    continue
                count += 1
        return count

    def add_complete(
        self,
        metrics_target: PluginMetricsTarget,
        queries_target: PluginQueriesTarget,
        alias: str,
        force: bool = False,
        disable_ssl: bool = False,
    ) -> Iterator[tuple[str, ModelServiceRecord | None]]:
        """Add linux metrics, product metrics and queries for ``alias``.

        Yields ``(service_type, record)`` as each step completes. ``record``
        is None when the service was already monitored. Any other error
        stops the sequence; earlier steps stay in place.

        Raises:
            ProtocolConfigurationError: The targets are of different products.
        """
        product = metrics_target.service_type.product
        if queries_target.service_type.product != product:
            raise ProtocolConfigurationError(
                f"cannot combine {metrics_target.service_type.value} with "
                f"{queries_target.service_type.value}"
            )
        for target, target_force in (
            (LinuxMetricsTarget(), force),
            (metrics_target, False),
        ):
            try:
                record = self.add_metrics(
                    target, alias, force=target_force, disable_ssl=disable_ssl
                )
            except DuplicateServiceError:
                record = None
            yield target.service_type.value, record
        try:
            record = self.add_queries(queries_target, alias)
        except DuplicateServiceError:
            record = None
        yield queries_target.service_type.value, record

    def remove_complete(
        self, product: str, alias: str
    ) -> Iterator[tuple[str, PmmAdminError | None]]:
        """Remove linux metrics, product metrics and queries of ``alias``.

        Every step runs. Yields ``(service_type, error)``, ``error`` being
        None on success and NoServiceError when nothing was monitored.
        """
        for service_type in (
            EnumServiceType.LINUX_METRICS.value,
            f"{product}:metrics",
            f"{product}:queries",
        ):
            try:
                self.remove(service_type, alias)
            except PmmAdminError as e:
                logger.debug(
                    "Step of combined removal failed",
                    extra={"service_type": service_type, "alias": alias, "error": str(e)},
                )
                yield service_type, e
                continue
            yield service_type, None

    def uninstall(self) -> int:
        """Remove everything reachable, then any leftover local service.

        Never raises for per-item failures.

        Returns:
            Number of aliases and local services removed.
        """
        count = 0
        try:
            count = self.remove_all(ignore_errors=True)
        except PmmAdminError as e:
            logger.warning(
                "Cannot remove monitoring services from catalog",
                extra={"node": self._node_name, "error": str(e)},
            )
        return count + uninstall_local_services(self._supervisor)

    # -- operations ------------------------------------------------------

    def _apply(self, action: EnumMonitoringAction, name: str) -> bool:
        if action is EnumMonitoringAction.START:
            if self._supervisor.status(name):
                return False
            self._supervisor.start(name)
        elif action is EnumMonitoringAction.STOP:
            if not self._supervisor.status(name):
                return False
            self._supervisor.stop(name)
        else:
            self._supervisor.stop(name)
            self._supervisor.start(name)
        return True

    def start_stop(
        self, action: EnumMonitoringAction, service_type: str, alias: str
    ) -> bool:
        """Start, stop or restart the local service of one alias.

        Returns:
            False if the service was already in the requested state.
        """
        parsed = parse_service_type(service_type)
        record = self._require_record(parsed.value, alias)
        return self._apply(action, record.local_service_name)

    def start_stop_all(self, action: EnumMonitoringAction) -> tuple[int, int]:
        """Apply ``action`` to every local pmm service.

        Returns:
            ``(affected, total)``

        Raises:
            BulkOperationError: Some services failed; the others were handled.
        """
        names = self._supervisor.list_local()
        affected = 0
        errors: list[Exception] = []
        for name in names:
            try:
                if self._apply(action, name):
                    affected += 1
            except SupervisorError as e:
                errors.append(e)
        if errors:
            raise BulkOperationError(errors, affected=affected, total=len(names))
        return affected, len(names)

    def _kv_entries(self, prefix: str) -> dict[str, bytes]:
        entries: dict[str, bytes] = {}
        for key in self._catalog.kv_list_prefix(prefix):
            name = key[len(prefix) :]
            if not name or "/" in name:
                continue
            value = self._catalog.kv_get(key)
            if value is not None:
                entries[name] = value
        return entries

    @staticmethod
    def _tag_options(metadata: ModelServiceMetadata) -> list[str]:
        options: list[str] = []
        if metadata.cluster is not None:
            options.append(f"cluster={metadata.cluster}")
        if metadata.node_type is not None:
            options.append(f"nodetype={metadata.node_type}")
        if metadata.replset is not None:
            options.append(f"replset={metadata.replset}")
        options.extend(tag.replace("_", "=", 1) for tag in metadata.extra_tags)
        return options

    def _status_row(
        self,
        record: ModelServiceRecord,
        alias: str,
        kv_prefix: str,
        running: bool,
    ) -> ModelServiceStatus:
        entries = self._kv_entries(kv_prefix)
        dsn = entries.pop("dsn", b"").decode("utf-8", errors="replace")
        options = [
            f"{key}={value.decode('utf-8', errors='replace')}"
            for key, value in sorted(entries.items())
            if not key.startswith("qan_")
        ]
        options.extend(self._tag_options(record.metadata))
        return ModelServiceStatus(
            service_type=record.service_type,
            name=alias,
            port=record.port,
            running=running,
            dsn=dsn,
            options=", ".join(options),
            ssl="yes" if record.metadata.scheme == "https" else "",
        )

    def list_services(self) -> list[ModelServiceStatus]:
        """One status row per monitored alias, sorted by port, alias, type."""
        rows: list[ModelServiceStatus] = []
        for record in self._catalog.list_services_for_node(self._node_name):
            if record.service_type == CONSUL_SERVICE:
                continue
            running = self._supervisor.status(record.local_service_name)
            service_prefix = kv_service_prefix(self._node_name, record.service_id)
            if record.service_type.endswith(":queries"):
                for alias in record.aliases:
                    rows.append(
                        self._status_row(
                            record, alias, f"{service_prefix}{alias}/", running
                        )
                    )
            else:
                alias = record.aliases[0] if record.aliases else "-"
                rows.append(self._status_row(record, alias, service_prefix, running))
        return sorted(rows, key=ModelServiceStatus.sort_key)

    def purge_metrics(self, service_type: str, alias: str) -> None:
        """Delete the stored series of a metrics alias on the PMM server.

        Raises:
            ProtocolConfigurationError: Not a metrics service type.
            BulkOperationError: One or more Prometheus calls failed.
        """
        if service_type not in METRICS_SERVICE_TYPES:
            raise ProtocolConfigurationError(
                "bad service type.\n\nService type takes the following values: "
                f"{', '.join(METRICS_SERVICE_TYPES)}.",
                service_type=service_type,
            )
        product = service_type.split(":", 1)[0]
        match = quote(f'{{job="{product}",instance="{alias}"}}', safe="")
        calls = (
            ("DELETE", f"prometheus1/api/v1/series?match[]={match}", 200),
            ("POST", f"prometheus/api/v1/admin/tsdb/delete_series?match[]={match}", 204),
            ("POST", "prometheus/api/v1/admin/tsdb/clean_tombstones", 204),
        )
        errors: list[Exception] = []
        for method, path, expected in calls:
            try:
                self._api.request(method, self._api.server_url(path), expected, b"")
            except PmmAdminError as e:
                errors.append(e)
        if errors:
            raise BulkOperationError(errors, service_type=service_type, alias=alias)
        logger.info(
            "Purged metrics",
            extra={"service_type": service_type, "alias": alias},
        )

    def check_server(self) -> ModelPingResult:
        """Verify the configured address answers like a PMM server.

        Raises:
            ServerConnectionError: Unreachable, wrong SSL or auth settings,
                or not a PMM server.
        """
        address = self._config.server_address
        header = f"Unable to connect to PMM server by address: {address}\n\n"
        try:
            ping = self._api.ping()
        except ServerConnectionError as e:
            detail = str(e).lower()
            if "certificate" in detail:
                hint = (
                    "Looks like PMM server running with self-signed SSL "
                    "certificate.\nUse 'pmm-admin config' with "
                    "--server-insecure-ssl flag."
                )
            else:
                hint = _CONNECT_HINTS
            raise ServerConnectionError(header + hint, server_address=address) from e

        if ping.status_code == 400:
            raise ServerConnectionError(
                header + "Looks like the server is enabled for SSL or self-signed "
                "SSL.\nUse 'pmm-admin config' to enable the corresponding SSL option.",
                server_address=address,
                status_code=ping.status_code,
            )
        if ping.status_code == 401:
            raise ServerConnectionError(
                header + "Looks like the server is password protected.\n"
                "Use 'pmm-admin config' to define server user and password.",
                server_address=address,
                status_code=ping.status_code,
            )

        try:
            leader = self._catalog.leader()
        except CatalogError as e:
            logger.debug("Consul leader check failed", extra={"error": str(e)})
            leader = ""
        if not leader:
            raise ServerConnectionError(
                header + "Even though the server is reachable it does not look to "
                "be PMM server.\nCheck if the configured address is correct.",
                server_address=address,
            )
        return ping

    def _prometheus_up_targets(self) -> set[tuple[str, str]] | None:
        """Return ``(instance, job)`` of every target Prometheus reports up.

        None when the Prometheus query API does not answer usefully.
        """
        try:
            response = self._api.request(
                "GET", self._api.server_url(PROMETHEUS_UP_QUERY), 200
            )
            payload = response.json()
        except (PmmAdminError, ValueError) as e:
            logger.debug("Prometheus query failed", extra={"error": str(e)})
            return None
        if not isinstance(payload, dict) or payload.get("status") != "success":
            return None
        targets: set[tuple[str, str]] = set()
        for series in payload.get("data", {}).get("result", []):
            metric = series.get("metric", {})
            value = series.get("value") or ()
            if value and str(value[-1]) == "1":
                targets.add((metric.get("instance", ""), metric.get("job", "")))
        return targets

    def check_network(self) -> ModelNetworkReport:
        """Check client to server APIs and server to exporter scraping.

        Raises:
            ServerConnectionError: The server fails ``check_server``.
        """
        ping = self.check_server()
        up_targets = self._prometheus_up_targets()
        node = self._catalog.get_node(self._node_name)

        endpoints: list[ModelEndpointStatus] = []
        if node is not None and up_targets is not None:
            bind_address = self._config.bind_address
            for record in node.services:
                if record.service_type not in METRICS_SERVICE_TYPES:
                    continue
                alias = record.aliases[0] if record.aliases else "-"
                if bind_address != self._node_address:
                    remote = f"{self._node_address}-->{bind_address}:{record.port}"
                else:
                    remote = f"{self._node_address}:{record.port}"
                endpoints.append(
                    ModelEndpointStatus(
                        service_type=record.service_type,
                        name=alias,
                        remote_endpoint=remote,
                        up=(alias, record.service_type.split(":", 1)[0])
                        in up_targets,
                    )
                )
        return ModelNetworkReport(
            server_address=self._config.server_address,
            client_address=self._node_address,
            bind_address=self._config.bind_address,
            consul_ok=True,
            prometheus_ok=up_targets is not None,
            qan_ok=ping.is_pmm_server,
            node_registered=node is not None,
            endpoints=tuple(
                sorted(endpoints, key=lambda e: (e.service_type, e.name))
            ),
        )


__all__: list[str] = [
    "METRICS_SERVICE_TYPES",
    "ServiceMonitoringCoordinator",
    "parse_service_type",
    "uninstall_local_services",
]
