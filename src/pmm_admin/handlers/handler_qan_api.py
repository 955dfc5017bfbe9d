# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""QAN API Handler - blocking httpx client for the query-analytics API.

Speaks the wire protocol of ``<server>/qan-api``: instance lookup, create,
undelete and soft delete, the agent command relay and the liveness ping.
Status codes are checked here; what they mean for the instance lifecycle
is decided by ServiceAgentRendezvous.

Status Handling:
    - Lookups map 404 to None
    - The command relay maps 404 to AgentNotConnectedError (agent has not
      connected to the API yet) so a retry policy can act on it
    - Any other unexpected status raises RemoteAPIError carrying method,
      URL, status and body
    - Transport failures raise ServerConnectionError

Security:
    Basic auth credentials travel in the Authorization header, never in the
    URL. Logged and raised URLs go through redact_url_credentials anyway.
"""

from __future__ import annotations

import logging
import socket

import httpx

from pmm_admin.enums import EnumSubsystem
from pmm_admin.errors import (
    AgentNotConnectedError,
    ModelAdminErrorContext,
    RemoteAPIError,
    ServerConnectionError,
)
from pmm_admin.handlers.model_qan_api_config import ModelQanApiConfig
from pmm_admin.models.model_agent_command import ModelAgentCommand
from pmm_admin.models.model_agent_instance import ModelAgentInstance
from pmm_admin.models.model_ping_result import ModelPingResult
from pmm_admin.utils.util_error_sanitization import redact_url_credentials

logger = logging.getLogger(__name__)

API_VERSION_HEADER: str = "X-Percona-Qan-Api-Version"


class QanApiHandler:
    """Synchronous QAN API client.

    One httpx.Client per handler, with the client-wide timeout, TLS
    verification and basic auth taken from ModelQanApiConfig. Use as a
    context manager or call ``close()``.

    Example:
        >>> config = ModelQanApiConfig(server_url="http://pmm.example.com")
        >>> with QanApiHandler(config) as api:
        ...     api.ping().is_pmm_server
    """

    def __init__(
        self,
        config: ModelQanApiConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._hostname = socket.gethostname()
        auth: tuple[str, str] | None = None
        if config.username and config.password is not None:
            auth = (config.username, config.password.get_secret_value())
        event_hooks: dict[str, list] = {"request": [], "response": []}
        if config.verbose:
            event_hooks = {
                "request": [self._log_request],
                "response": [self._log_response],
            }
        self._client = httpx.Client(
            base_url=config.api_base_url + "/",
            auth=auth,
            verify=config.verify_ssl,
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=transport,
            event_hooks=event_hooks,
        )

    def __enter__(self) -> QanApiHandler:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def config(self) -> ModelQanApiConfig:
        return self._config

    @property
    def hostname(self) -> str:
        """Hostname of this client, used as the command issuer."""
        return self._hostname

    def close(self) -> None:
        self._client.close()

    @staticmethod
    def _log_request(request: httpx.Request) -> None:
        logger.debug(
            "QAN API request",
            extra={
                "method": request.method,
                "url": redact_url_credentials(str(request.url)),
                "body_size": len(request.content or b""),
            },
        )

    @staticmethod
    def _log_response(response: httpx.Response) -> None:
        request = response.request
        logger.debug(
            "QAN API response",
            extra={
                "method": request.method,
                "url": redact_url_credentials(str(request.url)),
                "status_code": response.status_code,
            },
        )

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json: object = None,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send one request and map transport failures to ServerConnectionError."""
        try:
            response = self._client.request(
                method, url, params=params, json=json, content=content
            )
            response.read()
            return response
        except httpx.TimeoutException as e:
            raise ServerConnectionError(
                f"{method} {self._display_url(url)}: timed out after "
                f"{self._config.timeout_seconds}s",
                context=self._context(method, url),
            ) from e
        except httpx.HTTPError as e:
            raise ServerConnectionError(
                f"{method} {self._display_url(url)}: {type(e).__name__}: {e}",
                context=self._context(method, url),
            ) from e

    def _display_url(self, url: str) -> str:
        return redact_url_credentials(str(self._client.build_request("GET", url).url))

    def _context(self, method: str, url: str) -> ModelAdminErrorContext:
        return ModelAdminErrorContext(
            subsystem=EnumSubsystem.AGENT_API,
            operation=method,
            target_name=self._display_url(url),
        )

    def _remote_error(self, response: httpx.Response, expected: int) -> RemoteAPIError:
        request = response.request
        url = redact_url_credentials(str(request.url))
        return RemoteAPIError(
            method=request.method,
            url=url,
            status_code=response.status_code,
            expected_status=expected,
            body=response.content,
            context=ModelAdminErrorContext(
                subsystem=EnumSubsystem.AGENT_API,
                operation=request.method,
                target_name=url,
            ),
        )

    def ping(self) -> ModelPingResult:
        """Call ``GET /ping``. Never raises on status, only on transport errors."""
        response = self._send("GET", "ping")
        return ModelPingResult(
            status_code=response.status_code,
            api_version=response.headers.get(API_VERSION_HEADER),
        )

    def find_instance(
        self, subsystem: str, name: str, parent_uuid: str
    ) -> ModelAgentInstance | None:
        """Look an instance up by ``(subsystem, name, parent_uuid)``.

        The server may ignore ``parent_uuid`` in the filter; callers check
        the returned record's parent themselves.
        """
        response = self._send(
            "GET",
            "instances",
            params={"type": subsystem, "name": name, "parent_uuid": parent_uuid},
        )
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise self._remote_error(response, 200)
        return ModelAgentInstance.model_validate_json(response.content)

    def get_instance(self, uuid: str) -> ModelAgentInstance | None:
        response = self._send("GET", f"instances/{uuid}")
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise self._remote_error(response, 200)
        return ModelAgentInstance.model_validate_json(response.content)

    def create_instance(self, instance: ModelAgentInstance) -> str:
        """Create an instance and return its UUID.

        The response body is ignored; the UUID is the last path segment of
        the ``Location`` header.
        """
        response = self._send("POST", "instances", json=instance.to_wire())
        if response.status_code != 201:
            raise self._remote_error(response, 201)
        location = response.headers.get("Location", "")
        uuid = location.rstrip("/").rsplit("/", 1)[-1]
        if not uuid:
            raise self._remote_error(response, 201)
        logger.info(
            "Created QAN instance",
            extra={"instance_uuid": uuid, "subsystem": instance.subsystem},
        )
        return uuid

    def update_instance(self, instance: ModelAgentInstance) -> None:
        response = self._send(
            "PUT", f"instances/{instance.uuid}", json=instance.to_wire()
        )
        if response.status_code != 204:
            raise self._remote_error(response, 204)

    def delete_instance(self, uuid: str) -> bool:
        """Soft-delete an instance. Return False if it did not exist."""
        response = self._send("DELETE", f"instances/{uuid}")
        if response.status_code == 404:
            return False
        if response.status_code != 204:
            raise self._remote_error(response, 204)
        logger.info("Deleted QAN instance", extra={"instance_uuid": uuid})
        return True

    def send_command(self, agent_id: str, command: ModelAgentCommand) -> None:
        """Relay one command to a connected agent.

        Raises:
            AgentNotConnectedError: The API answered 404 (agent not connected).
            RemoteAPIError: Any status other than 200 or 404.
        """
        response = self._send(
            "PUT", f"agents/{agent_id}/cmd", json=command.to_wire()
        )
        if response.status_code == 404:
            raise AgentNotConnectedError(agent_id)
        if response.status_code != 200:
            raise self._remote_error(response, 200)

    def request(
        self,
        method: str,
        url: str,
        expected_status: int,
        content: bytes | None = None,
    ) -> httpx.Response:
        """Send a raw request to the PMM server and check its status.

        ``url`` may be relative to the QAN API root or absolute (Prometheus
        endpoints live outside ``/qan-api``).
        """
        response = self._send(method, url, content=content)
        if response.status_code != expected_status:
            raise self._remote_error(response, expected_status)
        return response

    def server_url(self, path: str) -> str:
        """Return an absolute URL under the server root."""
        return f"{self._config.server_url.rstrip('/')}/{path.lstrip('/')}"

    def describe(self) -> dict[str, object]:
        return {
            "handler_type": "qan_api",
            "api_base_url": redact_url_credentials(self._config.api_base_url),
            "verify_ssl": self._config.verify_ssl,
            "timeout_seconds": self._config.timeout_seconds,
            "authenticated": self._config.username is not None,
        }


__all__: list[str] = ["API_VERSION_HEADER", "QanApiHandler"]
