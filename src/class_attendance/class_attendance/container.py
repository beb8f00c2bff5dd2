from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.ledger import AttendanceLedger
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .settings.service import SettingsService
from .stats.service import StatsService
from .storage.http_remote_store import HttpRemoteDocumentStore
from .storage.local_store import InMemoryKeyValueStore, LocalKeyValueStore
from .storage.mysql_local_store import MySQLKeyValueStore
from .storage.remote_store import InMemoryRemoteDocumentStore, RemoteDocumentStore
from .storage.repository import LocalAggregateRepository
from .subjects.service import SubjectService
from .sync.background import BackgroundLoop
from .sync.coordinator import SyncCoordinator
from .timetable.service import TimetableService
from .users.identity import IdentityProvider, SessionIdentity
from .users.service import SessionService


@dataclass(frozen=True)
class Container:
    background: BackgroundLoop

    local_store: LocalKeyValueStore
    local_repo: LocalAggregateRepository
    remote_store: RemoteDocumentStore
    identity: IdentityProvider
    sync: SyncCoordinator

    ledger: AttendanceLedger
    settings_service: SettingsService
    subject_service: SubjectService
    timetable_service: TimetableService
    attendance_service: AttendanceService
    stats_service: StatsService
    session_service: SessionService

    def shutdown(self) -> None:
        """Wait for pending pushes, close the remote store and stop the background loop."""
        try:
            self.background.run(self.sync.drain(timeout=5))
            self.background.run(self.remote_store.close())
        finally:
            self.background.stop()


def build_local_store(kind: str, db_config: Optional[dict] = None) -> LocalKeyValueStore:
    if kind == "mysql":
        if not db_config:
            raise ValueError("LOCAL_STORE=mysql requires DB_CONFIG")
        return MySQLKeyValueStore(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))
    if kind == "memory":
        return InMemoryKeyValueStore()
    raise ValueError(f"Unknown LOCAL_STORE {kind!r}")


def build_remote_store(kind: str, url: Optional[str] = None, token: Optional[str] = None) -> RemoteDocumentStore:
    if kind == "http":
        if not url:
            raise ValueError("REMOTE_STORE=http requires REMOTE_STORE_URL")
        return HttpRemoteDocumentStore(url, token=token)
    if kind == "memory":
        return InMemoryRemoteDocumentStore()
    raise ValueError(f"Unknown REMOTE_STORE {kind!r}")


def build_container(
    *,
    local_store: LocalKeyValueStore,
    remote_store: RemoteDocumentStore,
    identity: Optional[IdentityProvider] = None,
    background: Optional[BackgroundLoop] = None,
) -> Container:
    background = background or BackgroundLoop()
    identity = identity or SessionIdentity()

    local_repo = LocalAggregateRepository(local_store)
    sync = SyncCoordinator(local_repo, remote_store, identity, background=background)

    # Every service writes through the coordinator so each save is mirrored.
    ledger = AttendanceLedger(sync)
    settings_service = SettingsService(sync)
    subject_service = SubjectService(sync)
    timetable_service = TimetableService(sync)
    attendance_service = AttendanceService(ledger, timetable_service)
    stats_service = StatsService(ledger, sync)
    session_service = SessionService(identity, sync)

    return Container(
        background=background,
        local_store=local_store,
        local_repo=local_repo,
        remote_store=remote_store,
        identity=identity,
        sync=sync,
        ledger=ledger,
        settings_service=settings_service,
        subject_service=subject_service,
        timetable_service=timetable_service,
        attendance_service=attendance_service,
        stats_service=stats_service,
        session_service=session_service,
    )
