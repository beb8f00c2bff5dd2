"""Local/remote mirroring of the four aggregates.

Policy:

- the local store is the source of truth for every read;
- each local write is followed by a fire-and-forget overwrite of the matching
  remote document (no retry, failures only logged);
- on login the four remote documents are pulled and overwrite the local ones;
- no merging: the whole document is the unit, the last writer wins.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from concurrent.futures import Future
from typing import Any, Coroutine, Mapping, Optional, Sequence

from ..attendance.model import AttendanceRecord
from ..core.enums import AggregateKind
from ..settings.model import ScheduleConfig
from ..storage.remote_store import RemoteDocumentStore
from ..storage.repository import AggregateStore, LocalAggregateRepository, optional_document
from ..subjects.model import Subject
from ..timetable.model import WeeklyAssignments
from ..users.identity import IdentityProvider
from .background import BackgroundLoop

logger = logging.getLogger(__name__)


class SyncCoordinator(AggregateStore):
    def __init__(
        self,
        local: LocalAggregateRepository,
        remote: RemoteDocumentStore,
        identity: IdentityProvider,
        *,
        background: Optional[BackgroundLoop] = None,
    ):
        self._local = local
        self._remote = remote
        self._identity = identity
        self._background = background
        self._tasks: set[asyncio.Task] = set()
        # Done-callbacks of background futures run on the loop thread.
        self._futures: set[Future] = set()
        self._futures_lock = threading.Lock()

    # -- reads: always local --

    def load_settings(self) -> ScheduleConfig:
        return self._local.load_settings()

    def load_subjects(self) -> list[Subject]:
        return self._local.load_subjects()

    def load_timetable(self) -> WeeklyAssignments:
        return self._local.load_timetable()

    def load_attendance(self) -> list[AttendanceRecord]:
        return self._local.load_attendance()

    # -- writes: local first, then mirror --

    def save_settings(self, config: ScheduleConfig) -> None:
        self._local.save_settings(config)
        self.on_local_mutation(AggregateKind.SETTINGS)

    def save_subjects(self, subjects: Sequence[Subject]) -> None:
        self._local.save_subjects(subjects)
        self.on_local_mutation(AggregateKind.SUBJECTS)

    def save_timetable(self, weekly: WeeklyAssignments) -> None:
        self._local.save_timetable(weekly)
        self.on_local_mutation(AggregateKind.TIMETABLE)

    def save_attendance(self, records: Sequence[AttendanceRecord]) -> None:
        self._local.save_attendance(records)
        self.on_local_mutation(AggregateKind.ATTENDANCE)

    def on_local_mutation(self, kind: AggregateKind) -> None:
        uid = self._identity.current_uid()
        if not uid:
            logger.debug("no signed-in user; %s kept local only", kind.value)
            return
        # Snapshot now so a later local write cannot leak into this push.
        doc = self._local.load_document(kind)
        self._spawn(self.push(uid, kind, doc))

    async def push(self, uid: str, kind: AggregateKind, doc: Any) -> bool:
        try:
            ok = await self._remote.put(uid, kind, doc)
        except Exception:
            logger.exception("remote push of %s for %s raised", kind.value, uid)
            return False
        if not ok:
            logger.warning("remote push of %s for %s failed", kind.value, uid)
        return bool(ok)

    def _spawn(self, coro: Coroutine[Any, Any, Any]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            task = loop.create_task(coro)
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)
            return

        if self._background is None:
            self._background = BackgroundLoop()
        future = self._background.submit(coro)
        with self._futures_lock:
            self._futures.add(future)
        future.add_done_callback(self._forget_future)

    def _forget_future(self, future: Future) -> None:
        with self._futures_lock:
            self._futures.discard(future)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for every push scheduled so far (tests, shutdown).

        With a ``timeout``, pushes still pending afterwards are logged and left running.
        """
        with self._futures_lock:
            futures = self._futures.copy()
        pending = [*self._tasks, *(asyncio.wrap_future(f) for f in futures)]
        if not pending:
            return
        if timeout is None:
            await asyncio.gather(*pending, return_exceptions=True)
            return
        _, still_pending = await asyncio.wait(pending, timeout=timeout)
        if still_pending:
            logger.warning("%s remote push(es) still pending after %ss", len(still_pending), timeout)

    # -- login / logout --

    async def pull_on_login(self, uid: str) -> bool:
        """Overwrite local aggregates with the remote ones (remote wins at login).

        A kind whose fetch fails keeps its local value; a kind missing remotely
        is reset to its default. Returns True when all four were fetched.
        """
        kinds = list(AggregateKind)
        results = await asyncio.gather(*(self._remote.get(uid, k) for k in kinds), return_exceptions=True)

        ok = True
        for kind, result in zip(kinds, results):
            if isinstance(result, BaseException):
                logger.error("remote pull of %s for %s failed: %s", kind.value, uid, result)
                ok = False
                continue
            self._local.save_document(kind, optional_document(result, kind))

        logger.info("pulled remote data for %s (complete=%s)", uid, ok)
        return ok

    def clear(self) -> None:
        self._local.clear()

    # -- backup / restore --

    async def export_all(self, uid: str) -> dict[str, Any]:
        kinds = list(AggregateKind)
        docs = await asyncio.gather(*(self._remote.get(uid, k) for k in kinds))
        return {k.value: optional_document(d, k) for k, d in zip(kinds, docs)}

    async def import_all(self, uid: str, data: Mapping[str, Any]) -> bool:
        """Write the supplied aggregates remotely (whole documents), then locally."""
        kinds = [k for k in AggregateKind if data.get(k.value) is not None]
        results = await asyncio.gather(*(self.push(uid, k, data[k.value]) for k in kinds))
        for kind in kinds:
            self._local.save_document(kind, data[kind.value])
        return all(results)

    async def delete_all(self, uid: str) -> bool:
        results = await asyncio.gather(*(self._remote.delete(uid, k) for k in AggregateKind), return_exceptions=True)
        failed = [r for r in results if r is not True]
        if failed:
            logger.warning("remote delete for %s incomplete: %s", uid, failed)
        return not failed
