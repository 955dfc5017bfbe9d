# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Agent Rendezvous Service.

Manages the QAN side of query analytics: the local agent's identity, the
remote instance records it collects for, and the commands that attach an
instance to the agent.

Instance Lifecycle:
    UNKNOWN -> lookup -> NOT_FOUND | FOUND_ACTIVE | FOUND_SOFT_DELETED
        NOT_FOUND           create (POST), then fetch by Location UUID
        FOUND_SOFT_DELETED  undelete (PUT), fetch again; create a new
                            instance if the API left it deleted
        FOUND_ACTIVE        reuse as is
    -> RECONCILED

    Instances are never hard-deleted by this client. Re-adding an alias
    that was removed earlier brings back the same UUID, so historical
    query data stays attached to it.

Command Relay:
    Commands go through ``PUT /agents/<id>/cmd``. The agent may not have
    connected yet (it was just started); RendezvousRetryPolicy retries the
    relay while the API answers 404.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from pmm_admin.enums import EnumInstanceState
from pmm_admin.errors import AgentRegistrationError, InstanceNotFoundError
from pmm_admin.models.model_agent_command import (
    CMD_START_TOOL,
    CMD_STOP_TOOL,
    ModelAgentCommand,
)
from pmm_admin.models.model_agent_instance import ModelAgentInstance
from pmm_admin.services.service_rendezvous_retry import RendezvousRetryPolicy
from pmm_admin.utils.util_dsn import sanitize_dsn

if TYPE_CHECKING:
    from pmm_admin.handlers.handler_agent_installer import AgentInstallerHandler
    from pmm_admin.handlers.handler_qan_api import QanApiHandler
    from pmm_admin.models.model_qan_tool_config import ModelQanToolConfig
    from pmm_admin.models.model_target_info import ModelTargetInfo

logger = logging.getLogger(__name__)

INSTANCE_FILE_MODE: int = 0o600


class ServiceAgentRendezvous:
    """Find-or-create of agent instances and command relay to the agent.

    Args:
        api: QAN API transport
        installer: Local agent identity and registration
        retry_policy: Policy applied to command relay (default 10 x 1s)
    """

    def __init__(
        self,
        api: QanApiHandler,
        installer: AgentInstallerHandler,
        retry_policy: RendezvousRetryPolicy | None = None,
    ) -> None:
        self._api = api
        self._installer = installer
        self._retry_policy = retry_policy or RendezvousRetryPolicy()

    @property
    def retry_policy(self) -> RendezvousRetryPolicy:
        return self._retry_policy

    def get_agent_id(self) -> str:
        return self._installer.get_agent_id()

    def ensure_agent(self) -> tuple[str, str]:
        """Make sure the local agent is registered and known to the API.

        Registers the agent when it has no config file, and again when the
        API no longer knows its ID (orphaned local installation).

        Returns:
            ``(agent_id, parent_uuid)`` of the agent's own instance record.

        Raises:
            AgentRegistrationError: Registration failed, or the API does not
                know the agent even after registering it again.
        """
        if not self._installer.is_registered():
            logger.info("QAN agent not registered, registering")
            self._installer.register()

        agent_id = self._installer.get_agent_id()
        agent = self._api.get_instance(agent_id)
        if agent is None:
            logger.warning(
                "QAN agent unknown to the API, registering again",
                extra={"agent_id": agent_id},
            )
            self._installer.register()
            agent_id = self._installer.get_agent_id()
            agent = self._api.get_instance(agent_id)
            if agent is None:
                raise AgentRegistrationError(
                    f"agent {agent_id} is not known to QAN API after registration",
                    agent_id=agent_id,
                )
        return agent_id, agent.parent_uuid

    def lookup_instance(
        self, subsystem: str, name: str, parent_uuid: str
    ) -> tuple[EnumInstanceState, ModelAgentInstance | None]:
        """Classify the remote instance named ``name`` under ``parent_uuid``."""
        instance = self._api.find_instance(subsystem, name, parent_uuid)
        # The API may ignore the parent_uuid filter and return the first match.
        if instance is None or instance.parent_uuid != parent_uuid:
            return EnumInstanceState.NOT_FOUND, None
        if instance.is_deleted:
            return EnumInstanceState.FOUND_SOFT_DELETED, instance
        return EnumInstanceState.FOUND_ACTIVE, instance

    def _undelete(self, instance: ModelAgentInstance) -> ModelAgentInstance | None:
        self._api.update_instance(instance.undeleted())
        refreshed = self._api.get_instance(instance.uuid)
        if refreshed is None or refreshed.is_deleted:
            logger.warning(
                "QAN API left instance deleted, creating a new one",
                extra={"instance_uuid": instance.uuid},
            )
            return None
        logger.info("Undeleted QAN instance", extra={"instance_uuid": instance.uuid})
        return refreshed

    def _create(
        self, subsystem: str, name: str, parent_uuid: str, info: ModelTargetInfo
    ) -> ModelAgentInstance:
        uuid = self._api.create_instance(
            ModelAgentInstance(
                subsystem=subsystem,
                parent_uuid=parent_uuid,
                name=name,
                dsn=sanitize_dsn(info.dsn),
                distro=info.distro,
                version=info.version,
            )
        )
        created = self._api.get_instance(uuid)
        if created is None:
            raise InstanceNotFoundError(
                f"instance {uuid} vanished right after creation", instance_uuid=uuid
            )
        return created

    def find_or_create_instance(
        self,
        subsystem: str,
        name: str,
        parent_uuid: str,
        info: ModelTargetInfo,
    ) -> ModelAgentInstance:
        """Return an active instance for ``(subsystem, name, parent_uuid)``.

        Reuses an active one, undeletes a soft-deleted one, creates one
        otherwise.
        """
        state, instance = self.lookup_instance(subsystem, name, parent_uuid)
        if state is EnumInstanceState.FOUND_SOFT_DELETED and instance is not None:
            instance = self._undelete(instance)
            if instance is None:
                state = EnumInstanceState.NOT_FOUND
        if state is EnumInstanceState.NOT_FOUND or instance is None:
            instance = self._create(subsystem, name, parent_uuid, info)
        logger.debug(
            "Instance reconciled",
            extra={
                "instance_uuid": instance.uuid,
                "subsystem": subsystem,
                "initial_state": state.value,
                "state": EnumInstanceState.RECONCILED.value,
            },
        )
        return instance

    def write_instance_file(self, instance: ModelAgentInstance, dsn: str) -> Path:
        """Write the agent's local instance file with the real DSN.

        This file and the exporter environment are the only places the
        unsanitized DSN is stored on disk outside the main config.
        """
        instance_dir = self._installer.paths.agent_instance_dir
        instance_dir.mkdir(parents=True, exist_ok=True)
        path = instance_dir / f"{instance.uuid}.json"
        payload = instance.model_copy(update={"dsn": dsn}).to_wire()
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, INSTANCE_FILE_MODE)
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=4)
        os.chmod(path, INSTANCE_FILE_MODE)
        return path

    def delete_instance(self, uuid: str) -> bool:
        """Soft-delete an instance. Return False if it was already gone."""
        return self._api.delete_instance(uuid)

    def send_command(self, agent_id: str, cmd: str, data: bytes) -> None:
        """Relay a command, waiting for the agent to connect if needed."""
        command = ModelAgentCommand(
            user=f"pmm-admin@{self._api.hostname}",
            cmd=cmd,
            data=data,
        )
        self._retry_policy.run(
            lambda: self._api.send_command(agent_id, command),
            target=f"{agent_id}/{cmd}",
        )
        logger.info("Agent command sent", extra={"agent_id": agent_id, "cmd": cmd})

    def start_qan(self, agent_id: str, qan_config: ModelQanToolConfig) -> None:
        data = json.dumps(qan_config.to_wire()).encode("utf-8")
        self.send_command(agent_id, CMD_START_TOOL, data)

    def stop_qan(self, agent_id: str, uuid: str) -> None:
        self.send_command(agent_id, CMD_STOP_TOOL, uuid.encode("utf-8"))


__all__: list[str] = ["INSTANCE_FILE_MODE", "ServiceAgentRendezvous"]
