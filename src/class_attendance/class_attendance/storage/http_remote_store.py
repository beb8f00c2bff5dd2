"""Remote document store over HTTP.

Documents live at ``{base_url}/users/{uid}/data/{kind}``. Each aggregate is
wrapped the way the hosted database keeps it: settings as the settings object
itself, subjects under ``list``, the timetable under ``schedule`` and the
ledger under ``records``, each stamped with ``updatedAt``.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import aiohttp

from ..core.enums import AggregateKind
from .remote_store import RemoteDocumentStore

logger = logging.getLogger(__name__)

_WRAP_FIELD = {
    AggregateKind.SUBJECTS: "list",
    AggregateKind.TIMETABLE: "schedule",
    AggregateKind.ATTENDANCE: "records",
}


def wrap_document(kind: AggregateKind, value: Any) -> dict:
    stamp = datetime.now(timezone.utc).isoformat()
    field = _WRAP_FIELD.get(kind)
    if field is None:
        return {**value, "updatedAt": stamp}
    return {field: value, "updatedAt": stamp}


def unwrap_document(kind: AggregateKind, body: dict) -> Any:
    field = _WRAP_FIELD.get(kind)
    if field is None:
        return {k: v for k, v in body.items() if k != "updatedAt"}
    return body.get(field)


class HttpRemoteDocumentStore(RemoteDocumentStore):
    def __init__(self, base_url: str, *, token: Optional[str] = None):
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._http_session: Optional[aiohttp.ClientSession] = None

    def _url(self, uid: str, kind: AggregateKind) -> str:
        return f"{self._base_url}/users/{uid}/data/{kind.value}"

    def _session(self) -> aiohttp.ClientSession:
        if self._http_session is None or self._http_session.closed:
            headers = {"Accept": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._http_session = aiohttp.ClientSession(headers=headers)
        return self._http_session

    @property
    def closed(self) -> bool:
        return self._http_session is None or self._http_session.closed

    async def close(self) -> None:
        if self._http_session is not None and not self._http_session.closed:
            await self._http_session.close()
        self._http_session = None

    async def get(self, uid: str, kind: AggregateKind) -> Optional[Any]:
        async with self._session().get(self._url(uid, kind)) as response:
            if response.status == 404:
                return None
            response.raise_for_status()
            body = await response.json()
        return unwrap_document(kind, body or {})

    async def put(self, uid: str, kind: AggregateKind, value: Any) -> bool:
        try:
            async with self._session().put(self._url(uid, kind), json=wrap_document(kind, value)) as response:
                if response.status >= 400:
                    logger.warning("remote put %s for %s failed: HTTP %s", kind.value, uid, response.status)
                    return False
                return True
        except aiohttp.ClientError as e:
            logger.warning("remote put %s for %s failed: %s", kind.value, uid, e)
            return False

    async def delete(self, uid: str, kind: AggregateKind) -> bool:
        try:
            async with self._session().delete(self._url(uid, kind)) as response:
                return response.status < 400 or response.status == 404
        except aiohttp.ClientError as e:
            logger.warning("remote delete %s for %s failed: %s", kind.value, uid, e)
            return False
