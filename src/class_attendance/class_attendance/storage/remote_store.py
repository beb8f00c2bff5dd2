from __future__ import annotations

import copy
from typing import Any, Optional, Protocol

from ..core.enums import AggregateKind


class RemoteDocumentStore(Protocol):
    """Asynchronous per-user document store holding the four aggregates.

    ``put`` overwrites the whole document and reports failure as ``False``.
    ``get`` returns ``None`` when the document does not exist; transport
    failures may raise and are handled by the sync coordinator.
    """

    async def get(self, uid: str, kind: AggregateKind) -> Optional[Any]:
        raise NotImplementedError

    async def put(self, uid: str, kind: AggregateKind, value: Any) -> bool:
        raise NotImplementedError

    async def delete(self, uid: str, kind: AggregateKind) -> bool:
        raise NotImplementedError

    async def close(self) -> None:
        """Release transport resources (sessions, sockets)."""
        raise NotImplementedError


class InMemoryRemoteDocumentStore(RemoteDocumentStore):
    """Remote store kept in process memory (development and tests)."""

    def __init__(self):
        self._docs: dict[tuple[str, AggregateKind], Any] = {}

    async def get(self, uid: str, kind: AggregateKind) -> Optional[Any]:
        doc = self._docs.get((uid, kind))
        return copy.deepcopy(doc) if doc is not None else None

    async def put(self, uid: str, kind: AggregateKind, value: Any) -> bool:
        self._docs[(uid, kind)] = copy.deepcopy(value)
        return True

    async def delete(self, uid: str, kind: AggregateKind) -> bool:
        return self._docs.pop((uid, kind), None) is not None

    async def close(self) -> None:
        return None
