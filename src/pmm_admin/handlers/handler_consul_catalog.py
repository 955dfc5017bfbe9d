# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""HashiCorp Consul Catalog Handler using the python-consul client.

Implements ProtocolServiceCatalog against the Consul instance embedded in
the PMM server: catalog node/service registration plus the KV store holding
per-service DSNs, option flags and QAN instance UUIDs.

Security Features:
    - SecretStr protection for the basic auth password
    - Error messages name keys and service IDs, never credentials

Supported Operations:
    - get_node / list_services_for_node: catalog node lookup
    - list_services_globally: catalog service lookup filtered by alias tag
    - register_service / deregister_service: catalog writes
    - kv_get / kv_put / kv_list_prefix / kv_delete_tree: KV store
    - leader: cluster leader (connectivity check)

Tag Conversion:
    Records carry a structured ModelServiceMetadata. It is converted to the
    flat Consul tag list here and nowhere else.

Retries:
    None. Catalog writes are not idempotent from the caller's point of view
    (a timed out register may or may not have applied), so failures are
    raised as CatalogError and left to ``pmm-admin repair``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

import consul

from pmm_admin.enums import EnumSubsystem
from pmm_admin.errors import CatalogError, ModelAdminErrorContext
from pmm_admin.handlers.model_consul_catalog_config import ModelConsulCatalogConfig
from pmm_admin.models.model_catalog_node import ModelCatalogNode
from pmm_admin.models.model_service_metadata import ModelServiceMetadata
from pmm_admin.models.model_service_record import ModelServiceRecord

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ConsulCatalogHandler:
    """Consul-backed service catalog and KV store.

    The handler owns one ``consul.Consul`` client, created eagerly from a
    validated ModelConsulCatalogConfig. Every public method is a single
    blocking Consul request.
    """

    def __init__(
        self,
        config: ModelConsulCatalogConfig,
        client: consul.Consul | None = None,
    ) -> None:
        self._config = config
        self._client = client if client is not None else self._setup_consul_client(config)

    @property
    def config(self) -> ModelConsulCatalogConfig:
        return self._config

    def _setup_consul_client(self, config: ModelConsulCatalogConfig) -> consul.Consul:
        """Create and configure the Consul client.

        Args:
            config: Validated catalog configuration.

        Returns:
            Configured consul.Consul client instance.
        """
        client = consul.Consul(
            host=config.host,
            port=config.port,
            scheme=config.scheme,
            verify=config.verify_ssl,
        )
        if config.username and config.password is not None:
            client.http.session.auth = (
                config.username,
                config.password.get_secret_value(),
            )
        return client

    def _call(
        self,
        operation: str,
        func: Callable[[], T],
        consul_key: str | None = None,
        service_id: str | None = None,
    ) -> T:
        """Run one Consul request and map its failures to CatalogError."""
        ctx = ModelAdminErrorContext(
            subsystem=EnumSubsystem.CATALOG,
            operation=operation,
            target_name=consul_key or service_id or self._config.host,
        )
        try:
            return func()
        except consul.ACLPermissionDenied as e:
            raise CatalogError(
                f"Consul denied {operation}: check the server user and password",
                context=ctx,
                consul_key=consul_key,
                service_id=service_id,
            ) from e
        except consul.Timeout as e:
            raise CatalogError(
                f"Consul {operation} timed out after {self._config.timeout_seconds}s",
                context=ctx,
                consul_key=consul_key,
                service_id=service_id,
            ) from e
        except (consul.ConsulException, OSError) as e:
            raise CatalogError(
                f"Consul {operation} failed: {type(e).__name__}: {e}",
                context=ctx,
                consul_key=consul_key,
                service_id=service_id,
            ) from e

    @staticmethod
    def _record_from_node_service(
        node_name: str, node_address: str, service: dict[str, object]
    ) -> ModelServiceRecord:
        tags = service.get("Tags") or []
        return ModelServiceRecord(
            service_id=str(service.get("ID", "")),
            service_type=str(service.get("Service", "")),
            metadata=ModelServiceMetadata.from_tags(list(tags)),  # type: ignore[call-overload]
            port=int(service.get("Port") or 0),  # type: ignore[call-overload]
            node_name=node_name,
            node_address=node_address,
        )

    @staticmethod
    def _record_from_catalog_service(entry: dict[str, object]) -> ModelServiceRecord:
        tags = entry.get("ServiceTags") or []
        return ModelServiceRecord(
            service_id=str(entry.get("ServiceID", "")),
            service_type=str(entry.get("ServiceName", "")),
            metadata=ModelServiceMetadata.from_tags(list(tags)),  # type: ignore[call-overload]
            port=int(entry.get("ServicePort") or 0),  # type: ignore[call-overload]
            node_name=str(entry.get("Node", "")),
            node_address=str(entry.get("Address", "")),
        )

    def get_node(self, node_name: str) -> ModelCatalogNode | None:
        _index, data = self._call(
            "get_node", lambda: self._client.catalog.node(node_name)
        )
        if not data:
            return None
        node = data.get("Node") or {}
        address = str(node.get("Address", ""))
        services = tuple(
            self._record_from_node_service(node_name, address, service)
            for service in (data.get("Services") or {}).values()
        )
        return ModelCatalogNode(name=node_name, address=address, services=services)

    def list_services_for_node(self, node_name: str) -> list[ModelServiceRecord]:
        node = self.get_node(node_name)
        if node is None:
            return []
        return list(node.services)

    def list_services_globally(
        self, service_type: str, alias: str | None = None
    ) -> list[ModelServiceRecord]:
        tag = ModelServiceMetadata.alias_tag(alias) if alias is not None else None
        _index, entries = self._call(
            "list_services_globally",
            lambda: self._client.catalog.service(service_type, tag=tag),
        )
        return [self._record_from_catalog_service(entry) for entry in entries or []]

    def register_service(
        self, node_name: str, node_address: str, record: ModelServiceRecord
    ) -> None:
        service = {
            "ID": record.service_id,
            "Service": record.service_type,
            "Tags": record.metadata.to_tags(),
            "Port": record.port,
        }
        self._call(
            "register_service",
            lambda: self._client.catalog.register(
                node_name, node_address, service=service
            ),
            service_id=record.service_id,
        )
        logger.info(
            "Registered catalog service",
            extra={
                "node": node_name,
                "service_id": record.service_id,
                "service_type": record.service_type,
                "port": record.port,
            },
        )

    def deregister_service(self, node_name: str, service_id: str) -> None:
        self._call(
            "deregister_service",
            lambda: self._client.catalog.deregister(node_name, service_id=service_id),
            service_id=service_id,
        )
        logger.info(
            "Deregistered catalog service",
            extra={"node": node_name, "service_id": service_id},
        )

    def kv_put(self, key: str, value: bytes) -> None:
        self._call(
            "kv_put",
            lambda: self._client.kv.put(key, value),
            consul_key=key,
        )
        logger.debug("Consul KV put", extra={"consul_key": key})

    def kv_get(self, key: str) -> bytes | None:
        _index, data = self._call(
            "kv_get",
            lambda: self._client.kv.get(key),
            consul_key=key,
        )
        if data is None:
            return None
        value = data.get("Value")
        if value is None:
            return b""
        return value if isinstance(value, bytes) else str(value).encode("utf-8")

    def kv_list_prefix(self, prefix: str) -> list[str]:
        _index, keys = self._call(
            "kv_list_prefix",
            lambda: self._client.kv.get(prefix, keys=True),
            consul_key=prefix,
        )
        return list(keys or [])

    def kv_delete_tree(self, prefix: str) -> None:
        self._call(
            "kv_delete_tree",
            lambda: self._client.kv.delete(prefix, recurse=True),
            consul_key=prefix,
        )
        logger.debug("Consul KV tree deleted", extra={"consul_key": prefix})

    def leader(self) -> str:
        return str(self._call("leader", self._client.status.leader) or "")

    def describe(self) -> dict[str, object]:
        """Return handler metadata without credentials."""
        return {
            "handler_type": "consul_catalog",
            "host": self._config.host,
            "port": self._config.port,
            "scheme": self._config.scheme,
            "verify_ssl": self._config.verify_ssl,
            "authenticated": self._config.username is not None,
        }


__all__: list[str] = ["ConsulCatalogHandler"]
