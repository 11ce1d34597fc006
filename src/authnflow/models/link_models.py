"""Link and operation descriptor models for authnflow.

Links are the server-advertised next actions of a transaction. Each one
wraps an ``Operation``: the concrete request the transport should issue.

Copyright (c) 2025 authnflow. All rights reserved.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import MalformedResponseError


class Operation(BaseModel):
    """Target of a link: where and how to submit."""

    model_config = ConfigDict(frozen=True)

    name: str | None = None
    href: str
    method: str = "POST"
    query: dict[str, str] = Field(default_factory=dict)

    def with_query(self, **params: str | bool | None) -> Operation:
        """Return a copy with extra query parameters (``None`` values are dropped)."""
        query = dict(self.query)
        for key, value in params.items():
            if value is None:
                continue
            query[key] = str(value).lower() if isinstance(value, bool) else value
        return self.model_copy(update={"query": query})


class Link(BaseModel):
    """A relation name bound to an operation."""

    model_config = ConfigDict(frozen=True)

    relation: str
    operation: Operation

    @property
    def name(self) -> str | None:
        return self.operation.name

    @property
    def href(self) -> str:
        return self.operation.href


def parse_links(raw_links: Any) -> tuple[Link, ...]:
    """Parse a ``_links`` object into ``Link`` values.

    An entry may be a single object or an array of objects. Entries without
    an ``href`` are skipped.
    """
    if not isinstance(raw_links, dict):
        return ()

    links: list[Link] = []
    for relation, value in raw_links.items():
        entries = value if isinstance(value, list) else [value]
        for entry in entries:
            if not isinstance(entry, dict) or not entry.get("href"):
                continue
            hints = entry.get("hints") or {}
            if not isinstance(hints, dict):
                msg = f"Link '{relation}' has non-object 'hints'"
                raise MalformedResponseError(msg, field="hints", details=entry)
            allow = hints.get("allow") or ["POST"]
            if not isinstance(allow, list):
                allow = [allow]
            operation = Operation(
                name=entry.get("name"),
                href=entry["href"],
                method=str(allow[0]).upper(),
            )
            links.append(Link(relation=relation, operation=operation))
    return tuple(links)
