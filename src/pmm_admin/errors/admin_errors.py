# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""pmm-admin Error Classes.

Error Hierarchy:
    PmmAdminError (base)
    ├── ProtocolConfigurationError
    ├── DuplicateServiceError
    ├── NoServiceError
    ├── NodeIdentityConflictError
    ├── AliasConflictError
    ├── PortInUseError
    ├── PortRangeExhaustedError
    ├── CatalogError
    ├── SupervisorError
    ├── AgentRegistrationError
    ├── InstanceNotFoundError
    ├── AgentNotConnectedError
    ├── AgentRendezvousTimeoutError
    ├── RendezvousCancelledError
    ├── RemoteAPIError (see error_remote_api.py)
    ├── ServerConnectionError
    └── BulkOperationError

All errors:
    - Carry an EnumAdminErrorCode and a ModelAdminErrorContext naming the
      subsystem that failed
    - Render a human-readable message with a remediation hint
    - Support proper error chaining with ``raise ... from e``
    - Accept free-form structured context as keyword arguments
"""

from __future__ import annotations

from collections.abc import Sequence

from pmm_admin.enums import EnumAdminErrorCode, EnumSubsystem
from pmm_admin.errors.model_admin_error_context import ModelAdminErrorContext

REPAIR_HINT: str = "Run 'pmm-admin repair' to remove orphaned services."


class PmmAdminError(Exception):
    """Base error class for pmm-admin.

    Structured Fields (via ModelAdminErrorContext):
        subsystem: Which state store failed
        operation: Operation being performed
        target_name: Target resource name
        correlation_id: Invocation correlation ID

    Example:
        >>> context = ModelAdminErrorContext(
        ...     subsystem=EnumSubsystem.CATALOG,
        ...     operation="kv_put",
        ... )
        >>> raise PmmAdminError("Operation failed", context=context, key="node/svc/dsn")
    """

    default_subsystem: EnumSubsystem = EnumSubsystem.COORDINATOR

    def __init__(
        self,
        message: str,
        error_code: EnumAdminErrorCode | None = None,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        """Initialize PmmAdminError with structured fields.

        Args:
            message: Human-readable error message
            error_code: Error code (defaults to OPERATION_FAILED)
            context: Bundled error context; defaults to the class subsystem
            **extra_context: Additional context information
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or EnumAdminErrorCode.OPERATION_FAILED
        if context is None:
            context = ModelAdminErrorContext(subsystem=self.default_subsystem)
        elif context.subsystem is None:
            context = context.model_copy(update={"subsystem": self.default_subsystem})
        self.context = context
        self.extra_context: dict[str, object] = dict(extra_context)

    @property
    def subsystem(self) -> EnumSubsystem:
        """Return the subsystem that failed."""
        return self.context.subsystem or self.default_subsystem

    def append_hint(self, hint: str) -> None:
        """Append a remediation hint to the message, once."""
        if hint in self.message:
            return
        self.message = f"{self.message} {hint}"
        self.args = (self.message,)

    def __str__(self) -> str:
        return self.message


class ProtocolConfigurationError(PmmAdminError):
    """Raised for invalid configuration or invalid operator input.

    Used for unknown service types, malformed client names, mutually
    exclusive SSL flags and out-of-range ports.
    """

    def __init__(
        self,
        message: str,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.INVALID_CONFIGURATION,
            context=context,
            **extra_context,
        )


class DuplicateServiceError(PmmAdminError):
    """Raised when this node already monitors the alias under the service type."""

    default_subsystem = EnumSubsystem.CATALOG

    def __init__(
        self,
        service_type: str,
        alias: str | None,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.service_type = service_type
        self.alias = alias
        super().__init__(
            message=(
                "you have already the instance with this name under monitoring "
                f"({service_type}, name '{alias or '-'}')."
            ),
            error_code=EnumAdminErrorCode.DUPLICATE_SERVICE,
            context=context,
            service_type=service_type,
            alias=alias,
            **extra_context,
        )


class NoServiceError(PmmAdminError):
    """Raised when an operation targets a record that does not exist."""

    default_subsystem = EnumSubsystem.CATALOG

    def __init__(
        self,
        message: str = "no service found.",
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.NO_SERVICE,
            context=context,
            **extra_context,
        )


class NodeIdentityConflictError(PmmAdminError):
    """Raised when another machine registered services under this node name.

    Example:
        >>> raise NodeIdentityConflictError(
        ...     node_name="db-host",
        ...     client_address="10.0.0.5",
        ...     other_address="10.0.0.9",
        ... )
    """

    default_subsystem = EnumSubsystem.CATALOG

    def __init__(
        self,
        node_name: str,
        client_address: str,
        other_address: str,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.node_name = node_name
        self.client_address = client_address
        self.other_address = other_address
        super().__init__(
            message=(
                f"another client with the same name '{node_name}' but different "
                "address detected.\n\n"
                f"This client address is {client_address}, the other one - "
                f"{other_address}.\n"
                "Set different client name using "
                "'pmm-admin config --client-name' command."
            ),
            error_code=EnumAdminErrorCode.NODE_IDENTITY_CONFLICT,
            context=context,
            node_name=node_name,
            other_address=other_address,
            **extra_context,
        )


class AliasConflictError(PmmAdminError):
    """Raised when another node already monitors ``(service_type, alias)``."""

    default_subsystem = EnumSubsystem.CATALOG

    def __init__(
        self,
        service_type: str,
        alias: str,
        other_node: str,
        other_address: str,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.service_type = service_type
        self.alias = alias
        self.other_node = other_node
        self.other_address = other_address
        super().__init__(
            message=(
                f"another client '{other_node}' by address '{other_address}' is "
                f"monitoring {service_type} instance under the name '{alias}'.\n\n"
                "Choose different name for this service."
            ),
            error_code=EnumAdminErrorCode.ALIAS_CONFLICT,
            context=context,
            service_type=service_type,
            alias=alias,
            other_node=other_node,
            other_address=other_address,
            **extra_context,
        )


class PortInUseError(PmmAdminError):
    """Raised when a requested port is already registered on this node."""

    default_subsystem = EnumSubsystem.CATALOG

    def __init__(
        self,
        port: int,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.port = port
        super().__init__(
            message=(
                f"port {port} is reserved by other service. Choose the different one."
            ),
            error_code=EnumAdminErrorCode.PORT_IN_USE,
            context=context,
            port=port,
            **extra_context,
        )


class PortRangeExhaustedError(PmmAdminError):
    """Raised when every port of the scanned range is registered on this node."""

    default_subsystem = EnumSubsystem.CATALOG

    def __init__(
        self,
        first_port: int,
        last_port: int,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.first_port = first_port
        self.last_port = last_port
        super().__init__(
            message=(
                f"ports {first_port}-{last_port} are reserved by other services. "
                "Try to specify the other port using --service-port"
            ),
            error_code=EnumAdminErrorCode.PORT_RANGE_EXHAUSTED,
            context=context,
            first_port=first_port,
            last_port=last_port,
            **extra_context,
        )


class CatalogError(PmmAdminError):
    """Raised when a Consul catalog or KV operation fails.

    Used for transport failures, ACL denials and unexpected responses.
    Catalog writes are never retried; the caller sees this error directly.
    """

    default_subsystem = EnumSubsystem.CATALOG

    def __init__(
        self,
        message: str,
        context: ModelAdminErrorContext | None = None,
        consul_key: str | None = None,
        service_id: str | None = None,
        **extra_context: object,
    ) -> None:
        if consul_key is not None:
            extra_context["consul_key"] = consul_key
        if service_id is not None:
            extra_context["service_id"] = service_id
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.CATALOG_ERROR,
            context=context,
            **extra_context,
        )


class SupervisorError(PmmAdminError):
    """Raised when the local service manager fails to act on a unit."""

    default_subsystem = EnumSubsystem.LOCAL_SUPERVISOR

    def __init__(
        self,
        message: str,
        service_name: str | None = None,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.service_name = service_name
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.SUPERVISOR_ERROR,
            context=context,
            service_name=service_name,
            **extra_context,
        )


class AgentRegistrationError(PmmAdminError):
    """Raised when the QAN agent installer fails to register the agent."""

    default_subsystem = EnumSubsystem.AGENT_API

    def __init__(
        self,
        message: str,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.AGENT_REGISTRATION_FAILED,
            context=context,
            **extra_context,
        )


class InstanceNotFoundError(PmmAdminError):
    """Raised when a QAN instance cannot be fetched right after creating it."""

    default_subsystem = EnumSubsystem.AGENT_API

    def __init__(
        self,
        message: str = "no instance found.",
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.INSTANCE_NOT_FOUND,
            context=context,
            **extra_context,
        )


class AgentNotConnectedError(PmmAdminError):
    """Raised when the QAN API answers 404 to a relayed agent command.

    The agent has not connected to the API yet; the rendezvous retry
    policy treats this as "not ready".
    """

    default_subsystem = EnumSubsystem.AGENT_API

    def __init__(
        self,
        agent_id: str,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.agent_id = agent_id
        super().__init__(
            message=f"agent {agent_id} is not connected to QAN API yet",
            error_code=EnumAdminErrorCode.AGENT_NOT_CONNECTED,
            context=context,
            agent_id=agent_id,
            **extra_context,
        )


class AgentRendezvousTimeoutError(PmmAdminError):
    """Raised when the agent never connected within the retry budget."""

    default_subsystem = EnumSubsystem.AGENT_API

    def __init__(
        self,
        attempts: int,
        interval_seconds: float,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.attempts = attempts
        self.interval_seconds = interval_seconds
        budget = attempts * interval_seconds
        super().__init__(
            message=(
                f"timeout {budget:g}s waiting on agent to connect to API "
                f"({attempts} attempts). Check that the pmm-*-queries service is "
                f"running. {REPAIR_HINT}"
            ),
            error_code=EnumAdminErrorCode.AGENT_RENDEZVOUS_TIMEOUT,
            context=context,
            attempts=attempts,
            interval_seconds=interval_seconds,
            **extra_context,
        )


class RendezvousCancelledError(PmmAdminError):
    """Raised when a rendezvous wait is cancelled before the agent connected."""

    default_subsystem = EnumSubsystem.AGENT_API

    def __init__(
        self,
        attempts: int,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.attempts = attempts
        super().__init__(
            message=f"waiting on agent to connect to API cancelled after {attempts} attempts",
            error_code=EnumAdminErrorCode.OPERATION_CANCELLED,
            context=context,
            attempts=attempts,
            **extra_context,
        )


class ServerConnectionError(PmmAdminError):
    """Raised when the PMM server cannot be reached at the transport level.

    Covers connect failures, TLS verification failures and timeouts. Not
    retried: the operator has to fix the address, port or SSL flags.
    """

    default_subsystem = EnumSubsystem.AGENT_API

    def __init__(
        self,
        message: str,
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.SERVER_CONNECTION_FAILED,
            context=context,
            **extra_context,
        )


class BulkOperationError(PmmAdminError):
    """Aggregates per-item failures of a best-effort bulk operation.

    Rendered as one ``* <error>`` line per failure.
    """

    def __init__(
        self,
        errors: Sequence[Exception],
        context: ModelAdminErrorContext | None = None,
        **extra_context: object,
    ) -> None:
        self.errors: list[Exception] = list(errors)
        message = "".join(f"\n* {error}" for error in self.errors)
        super().__init__(
            message=message,
            error_code=EnumAdminErrorCode.BULK_OPERATION_FAILED,
            context=context,
            error_count=len(self.errors),
            **extra_context,
        )


__all__ = [
    "REPAIR_HINT",
    "AgentNotConnectedError",
    "AgentRegistrationError",
    "AgentRendezvousTimeoutError",
    "AliasConflictError",
    "BulkOperationError",
    "CatalogError",
    "DuplicateServiceError",
    "InstanceNotFoundError",
    "NoServiceError",
    "NodeIdentityConflictError",
    "PmmAdminError",
    "PortInUseError",
    "PortRangeExhaustedError",
    "ProtocolConfigurationError",
    "RendezvousCancelledError",
    "ServerConnectionError",
    "SupervisorError",
]
