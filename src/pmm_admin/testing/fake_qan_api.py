# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Fake QAN API server for tests, served through ``httpx.MockTransport``.

Implements the endpoints QanApiHandler uses, with the real server's
quirks: instance lookup ignores ``parent_uuid`` when ``ignore_parent`` is
set, created instances are reported through ``Location`` only, deletes
are soft, and command relay answers 404 until the agent has "connected".

Example:
    >>> server = FakeQanApi()
    >>> agent_id = server.add_agent()
    >>> api = QanApiHandler(ModelQanApiConfig(server_url="http://pmm"), server.transport)
"""

from __future__ import annotations

import base64
import json
import uuid as uuid_module
from datetime import UTC, datetime

import httpx

from pmm_admin.handlers.handler_qan_api import API_VERSION_HEADER
from pmm_admin.models.model_agent_instance import UNDELETED_AT

_API_PREFIX = "/qan-api/"
_PROMETHEUS_QUERY = "/prometheus/api/v1/query"


class FakeQanApi:
    """In-memory QAN API.

    Attributes:
        instances: UUID -> wire-format instance dict
        commands: ``(agent_id, cmd, data)`` of every accepted command
        command_attempts: Number of command relays received, 404s included
        connect_after: Answer 404 to this many relays before accepting
        requests: ``(method, path)`` of every request
        prometheus_up: ``(instance, job)`` -> value of the ``up`` series
    """

    def __init__(self, api_version: str = "1.0.0") -> None:
        self.api_version = api_version
        self.instances: dict[str, dict[str, object]] = {}
        self.commands: list[tuple[str, str, bytes]] = []
        self.command_attempts = 0
        self.connect_after = 0
        self.ignore_parent = False
        self.keep_deleted_on_update = False
        self.status_overrides: dict[tuple[str, str], int] = {}
        self.requests: list[tuple[str, str]] = []
        self.prometheus_up: dict[tuple[str, str], int] = {}

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def add_agent(self, agent_uuid: str | None = None) -> str:
        agent_uuid = agent_uuid or uuid_module.uuid4().hex
        self.instances[agent_uuid] = {
            "UUID": agent_uuid,
            "Subsystem": "agent",
            "ParentUUID": uuid_module.uuid4().hex,
            "Name": "agent",
            "Deleted": UNDELETED_AT.isoformat(),
        }
        return agent_uuid

    def add_instance(
        self,
        subsystem: str,
        name: str,
        parent_uuid: str,
        deleted: bool = False,
        dsn: str = "",
    ) -> str:
        instance_uuid = uuid_module.uuid4().hex
        deleted_at = datetime.now(UTC) if deleted else UNDELETED_AT
        self.instances[instance_uuid] = {
            "UUID": instance_uuid,
            "Subsystem": subsystem,
            "ParentUUID": parent_uuid,
            "Name": name,
            "DSN": dsn,
            "Deleted": deleted_at.isoformat(),
        }
        return instance_uuid

    def is_deleted(self, instance_uuid: str) -> bool:
        deleted = str(self.instances[instance_uuid].get("Deleted", ""))
        return bool(deleted) and not deleted.startswith(("1970", "0001"))

    def handle(self, request: httpx.Request) -> httpx.Response:
        method = request.method
        path = request.url.path
        self.requests.append((method, path))
        override = self.status_overrides.get((method, path))
        if override is not None:
            return httpx.Response(override, json={"Error": "injected failure"})
        if method == "GET" and path == _PROMETHEUS_QUERY:
            return self._prometheus_query()
        if not path.startswith(_API_PREFIX):
            return httpx.Response(404)
        parts = path[len(_API_PREFIX) :].strip("/").split("/")

        if parts == ["ping"]:
            return httpx.Response(200, headers={API_VERSION_HEADER: self.api_version})
        if parts[0] == "instances":
            return self._instances(request, parts[1:])
        if parts[0] == "agents" and len(parts) == 3 and parts[2] == "cmd":
            return self._command(request, parts[1])
        return httpx.Response(404)

    def _instances(self, request: httpx.Request, rest: list[str]) -> httpx.Response:
        method = request.method
        if not rest:
            if method == "GET":
                return self._find(request)
            if method == "POST":
                body = json.loads(request.content)
                instance_uuid = uuid_module.uuid4().hex
                body["UUID"] = instance_uuid
                body["Deleted"] = UNDELETED_AT.isoformat()
                self.instances[instance_uuid] = body
                # The real server reports an unusable URL, only the UUID matters.
                return httpx.Response(
                    201, headers={"Location": f"http://localhost/instances/{instance_uuid}"}
                )
            return httpx.Response(405)

        instance_uuid = rest[0]
        if instance_uuid not in self.instances:
            return httpx.Response(404, json={"Error": "not found"})
        if method == "GET":
            return httpx.Response(200, json=self.instances[instance_uuid])
        if method == "PUT":
            body = json.loads(request.content)
            if self.keep_deleted_on_update:
                body["Deleted"] = self.instances[instance_uuid].get("Deleted")
            self.instances[instance_uuid] = {**self.instances[instance_uuid], **body}
            return httpx.Response(204)
        if method == "DELETE":
            self.instances[instance_uuid]["Deleted"] = datetime.now(UTC).isoformat()
            return httpx.Response(204)
        return httpx.Response(405)

    def _find(self, request: httpx.Request) -> httpx.Response:
        params = request.url.params
        for instance in self.instances.values():
            if instance.get("Subsystem") != params.get("type"):
                continue
            if instance.get("Name") != params.get("name"):
                continue
            if not self.ignore_parent and instance.get("ParentUUID") != params.get(
                "parent_uuid"
            ):
                continue
            return httpx.Response(200, json=instance)
        return httpx.Response(404, json={"Error": "not found"})

    def _prometheus_query(self) -> httpx.Response:
        result = [
            {
                "metric": {"__name__": "up", "instance": instance, "job": job},
                "value": [0, str(value)],
            }
            for (instance, job), value in self.prometheus_up.items()
        ]
        return httpx.Response(
            200,
            json={"status": "success", "data": {"resultType": "vector", "result": result}},
        )

    def _command(self, request: httpx.Request, agent_id: str) -> httpx.Response:
        self.command_attempts += 1
        if agent_id not in self.instances or self.command_attempts <= self.connect_after:
            return httpx.Response(404, json={"Error": "agent not connected"})
        body = json.loads(request.content)
        self.commands.append((agent_id, body["Cmd"], base64.b64decode(body["Data"])))
        return httpx.Response(200, json={})


__all__: list[str] = ["FakeQanApi"]
