# SPDX-License-Identifier: MIT
# Copyright (c) 2025 OmniNode Team
"""Structured Service Metadata Model.

The catalog stores classification data as a flat list of prefixed tags
(``alias_db1``, ``scheme_https``, ``cluster_main``, ``nodetype_mongod``,
``replset_rs0``). This model is the typed form used by coordination code;
conversion to and from tags happens only at the catalog boundary
(``to_tags`` / ``from_tags``).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

TAG_ALIAS: str = "alias_"
TAG_NODE_TYPE: str = "nodetype_"
TAG_REPLSET: str = "replset_"
TAG_CLUSTER: str = "cluster_"
TAG_SCHEME: str = "scheme_"


class ModelServiceMetadata(BaseModel):
    """Typed view of a catalog record's tags.

    Attributes:
        aliases: Operator-chosen names of the monitored instances. Metrics
            records carry one; a queries record carries one per instance
            its agent collects from.
        scheme: Exporter scrape scheme (``https`` or ``http``)
        cluster: Optional cluster label
        node_type: Optional MongoDB node type label
        replset: Optional MongoDB replica set label
        extra_tags: Tags without a known prefix, preserved verbatim

    Example:
        >>> meta = ModelServiceMetadata.from_tags(["alias_db1", "scheme_https"])
        >>> meta.aliases
        ('db1',)
        >>> meta.with_alias("db2").to_tags()
        ['alias_db1', 'alias_db2', 'scheme_https']
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    aliases: tuple[str, ...] = Field(
        default=(),
        description="Aliases of monitored instances, in registration order",
    )
    scheme: str | None = Field(default=None, description="Scrape scheme")
    cluster: str | None = Field(default=None, description="Cluster label")
    node_type: str | None = Field(default=None, description="MongoDB node type")
    replset: str | None = Field(default=None, description="MongoDB replica set")
    extra_tags: tuple[str, ...] = Field(
        default=(),
        description="Unrecognized tags kept for round-tripping",
    )

    @classmethod
    def from_tags(cls, tags: list[str] | tuple[str, ...] | None) -> ModelServiceMetadata:
        """Parse a flat catalog tag list."""
        aliases: list[str] = []
        extra: list[str] = []
        fields: dict[str, str] = {}
        for tag in tags or ():
            if tag.startswith(TAG_ALIAS):
                aliases.append(tag[len(TAG_ALIAS) :])
            elif tag.startswith(TAG_SCHEME):
                fields["scheme"] = tag[len(TAG_SCHEME) :]
            elif tag.startswith(TAG_CLUSTER):
                fields["cluster"] = tag[len(TAG_CLUSTER) :]
            elif tag.startswith(TAG_NODE_TYPE):
                fields["node_type"] = tag[len(TAG_NODE_TYPE) :]
            elif tag.startswith(TAG_REPLSET):
                fields["replset"] = tag[len(TAG_REPLSET) :]
            else:
                extra.append(tag)
        return cls(aliases=tuple(aliases), extra_tags=tuple(extra), **fields)

    def to_tags(self) -> list[str]:
        """Serialize to the flat catalog tag list."""
        tags = [f"{TAG_ALIAS}{alias}" for alias in self.aliases]
        if self.scheme is not None:
            tags.append(f"{TAG_SCHEME}{self.scheme}")
        if self.cluster is not None:
            tags.append(f"{TAG_CLUSTER}{self.cluster}")
        if self.node_type is not None:
            tags.append(f"{TAG_NODE_TYPE}{self.node_type}")
        if self.replset is not None:
            tags.append(f"{TAG_REPLSET}{self.replset}")
        tags.extend(self.extra_tags)
        return tags

    @staticmethod
    def alias_tag(alias: str) -> str:
        """Return the catalog tag that encodes an alias."""
        return f"{TAG_ALIAS}{alias}"

    def has_alias(self, alias: str) -> bool:
        return alias in self.aliases

    def with_alias(self, alias: str) -> ModelServiceMetadata:
        """Return a copy with the alias appended (no-op if already present)."""
        if alias in self.aliases:
            return self
        return self.model_copy(update={"aliases": (*self.aliases, alias)})

    def without_alias(self, alias: str) -> ModelServiceMetadata:
        """Return a copy with the alias removed."""
        return self.model_copy(
            update={"aliases": tuple(a for a in self.aliases if a != alias)}
        )


__all__ = [
    "TAG_ALIAS",
    "TAG_CLUSTER",
    "TAG_NODE_TYPE",
    "TAG_REPLSET",
    "TAG_SCHEME",
    "ModelServiceMetadata",
]
