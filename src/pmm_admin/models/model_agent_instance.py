# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Agent Instance Model.

A QAN instance record, owned by the remote QAN API. The client finds or
creates one per ``(subsystem, name, parent_uuid)`` and toggles its deleted
timestamp instead of hard-deleting it.

Wire Format:
    The API speaks PascalCase JSON (``UUID``, ``ParentUUID``, ``Subsystem``,
    ``Name``, ``DSN``, ``Distro``, ``Version``, ``Created``, ``Deleted``).
    Field aliases map it; ``to_wire()`` produces the request body.

Deleted Semantics:
    The API stores "not deleted" as ``1970-01-01T00:00:01Z`` (or the zero
    time). Any later timestamp means the record is soft-deleted.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

UNDELETED_AT: datetime = datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)


class ModelAgentInstance(BaseModel):
    """QAN API instance record."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    uuid: str = Field(default="", alias="UUID")
    subsystem: str = Field(default="", alias="Subsystem")
    parent_uuid: str = Field(default="", alias="ParentUUID")
    name: str = Field(default="", alias="Name")
    dsn: str = Field(default="", alias="DSN")
    distro: str = Field(default="", alias="Distro")
    version: str = Field(default="", alias="Version")
    created_at: datetime | None = Field(default=None, alias="Created")
    deleted_at: datetime | None = Field(default=None, alias="Deleted")

    @property
    def is_deleted(self) -> bool:
        """Return True if the record is soft-deleted."""
        return self.deleted_at is not None and self.deleted_at.year > 1970

    def undeleted(self) -> ModelAgentInstance:
        """Return a copy with the deleted timestamp cleared."""
        return self.model_copy(update={"deleted_at": UNDELETED_AT})

    def to_wire(self) -> dict[str, object]:
        """Serialize to the API's JSON shape."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


__all__ = ["UNDELETED_AT", "ModelAgentInstance"]
