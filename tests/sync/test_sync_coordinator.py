from __future__ import annotations

import asyncio
from datetime import date

import pytest

from src.class_attendance.class_attendance.attendance.ledger import AttendanceLedger
from src.class_attendance.class_attendance.core.enums import AggregateKind, Weekday
from src.class_attendance.class_attendance.settings.model import ScheduleConfig
from src.class_attendance.class_attendance.storage.local_store import InMemoryKeyValueStore
from src.class_attendance.class_attendance.storage.remote_store import InMemoryRemoteDocumentStore
from src.class_attendance.class_attendance.storage.repository import LocalAggregateRepository
from src.class_attendance.class_attendance.subjects.model import Subject
from src.class_attendance.class_attendance.sync.background import BackgroundLoop
from src.class_attendance.class_attendance.sync.coordinator import SyncCoordinator
from src.class_attendance.class_attendance.users.identity import InMemoryIdentity


class FailingRemote(InMemoryRemoteDocumentStore):
    def __init__(self, *, fail_get: bool = False):
        super().__init__()
        self.fail_get = fail_get
        self.put_calls = 0

    async def get(self, uid, kind):
        if self.fail_get:
            raise ConnectionError("offline")
        return await super().get(uid, kind)

    async def put(self, uid, kind, value):
        self.put_calls += 1
        raise ConnectionError("offline")


class StalledRemote(InMemoryRemoteDocumentStore):
    async def put(self, uid, kind, value):
        await asyncio.Event().wait()


def _coordinator(remote=None, uid="u1"):
    local = LocalAggregateRepository(InMemoryKeyValueStore())
    remote = remote or InMemoryRemoteDocumentStore()
    return local, remote, SyncCoordinator(local, remote, InMemoryIdentity(uid))


@pytest.mark.asyncio
async def test_local_write_is_mirrored_remotely():
    local, remote, sync = _coordinator()

    sync.save_subjects([Subject("s1", "Maths")])
    await sync.drain()

    assert await remote.get("u1", AggregateKind.SUBJECTS) == [{"id": "s1", "name": "Maths", "type": "theory"}]


@pytest.mark.asyncio
async def test_push_snapshot_taken_at_mutation_time():
    _, remote, sync = _coordinator()
    ledger = AttendanceLedger(sync)

    ledger.mark_holiday(date(2026, 1, 5))
    ledger.unmark_holiday(date(2026, 1, 5))
    await sync.drain()

    # Both pushes ran; the last one carries the final (empty) ledger.
    assert await remote.get("u1", AggregateKind.ATTENDANCE) == []


@pytest.mark.asyncio
async def test_no_identity_means_local_only():
    local, remote, sync = _coordinator(uid=None)

    sync.save_settings(ScheduleConfig(per_weekday={Weekday.MON: 4}))
    await sync.drain()

    assert await remote.get("u1", AggregateKind.SETTINGS) is None
    assert local.load_settings().total_periods(Weekday.MON) == 4


@pytest.mark.asyncio
async def test_remote_failure_is_swallowed_and_local_kept():
    remote = FailingRemote()
    local, _, sync = _coordinator(remote)

    sync.save_subjects([Subject("s1", "Maths")])
    await sync.drain()

    assert remote.put_calls == 1
    assert [s.name for s in local.load_subjects()] == ["Maths"]


@pytest.mark.asyncio
async def test_stalled_remote_does_not_block_local_reads():
    local, _, sync = _coordinator(StalledRemote())

    sync.save_subjects([Subject("s1", "Maths")])

    # Local state is visible immediately; the push never completes.
    assert [s.name for s in sync.load_subjects()] == ["Maths"]
    with pytest.raises(asyncio.TimeoutError):
        await asyncio.wait_for(sync.drain(), timeout=0.05)


@pytest.mark.asyncio
async def test_pull_on_login_overwrites_local():
    local, remote, sync = _coordinator()
    local.save_subjects([Subject("local", "Local only")])
    local.save_settings(ScheduleConfig(per_weekday={Weekday.MON: 8}))
    await remote.put("u1", AggregateKind.SUBJECTS, [{"id": "r1", "name": "Remote", "type": "lab"}])
    await remote.put("u1", AggregateKind.ATTENDANCE, [{"date": "2026-01-05", "isHoliday": True, "holidayReason": "Fest"}])

    assert await sync.pull_on_login("u1") is True

    assert [s.subject_id for s in local.load_subjects()] == ["r1"]
    # Absent remotely -> reset to default.
    assert local.load_settings() == ScheduleConfig.default()
    assert local.load_timetable() == {}
    assert local.load_attendance()[0].holiday_reason == "Fest"


@pytest.mark.asyncio
async def test_failed_pull_leaves_local_untouched():
    local, _, sync = _coordinator(FailingRemote(fail_get=True))
    local.save_subjects([Subject("local", "Local only")])

    assert await sync.pull_on_login("u1") is False
    assert [s.subject_id for s in local.load_subjects()] == ["local"]


def test_push_from_sync_code_uses_background_loop():
    local = LocalAggregateRepository(InMemoryKeyValueStore())
    remote = InMemoryRemoteDocumentStore()
    background = BackgroundLoop()
    sync = SyncCoordinator(local, remote, InMemoryIdentity("u1"), background=background)
    try:
        for n in range(1, 6):
            sync.save_settings(ScheduleConfig(per_weekday={Weekday.FRI: n}))
        background.run(sync.drain())
        doc = background.run(remote.get("u1", AggregateKind.SETTINGS))
    finally:
        background.stop()

    assert doc["perWeekday"]["Fri"] == {"totalPeriods": 5}


@pytest.mark.asyncio
async def test_backup_import_and_export():
    local, remote, sync = _coordinator()
    data = {"subjects": [{"id": "s9", "name": "Biology", "type": "lab"}], "timetable": {"Mon": []}}

    assert await sync.import_all("u1", data) is True
    exported = await sync.export_all("u1")

    assert exported["subjects"] == data["subjects"]
    assert exported["attendance"] == []
    assert [s.subject_id for s in local.load_subjects()] == ["s9"]


@pytest.mark.asyncio
async def test_delete_all():
    _, remote, sync = _coordinator()
    sync.save_subjects([Subject("s1", "Maths")])
    await sync.drain()

    # Only subjects existed remotely, so the other three deletes report False.
    assert await sync.delete_all("u1") is False
    assert await remote.get("u1", AggregateKind.SUBJECTS) is None
