import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer as DocumentServer

from src.class_attendance.class_attendance.core.enums import AggregateKind
from src.class_attendance.class_attendance.storage.http_remote_store import HttpRemoteDocumentStore, unwrap_document, wrap_document


def test_wrap_document_shapes():
    subjects = wrap_document(AggregateKind.SUBJECTS, [{"id": "s1"}])
    settings = wrap_document(AggregateKind.SETTINGS, {"periodDurationMinutes": 45})

    assert subjects["list"] == [{"id": "s1"}]
    assert "updatedAt" in subjects
    assert settings["periodDurationMinutes"] == 45
    assert unwrap_document(AggregateKind.SETTINGS, settings) == {"periodDurationMinutes": 45}
    assert unwrap_document(AggregateKind.TIMETABLE, {"schedule": {"Mon": []}}) == {"Mon": []}


def _document_app(docs):
    async def get_doc(request):
        key = (request.match_info["uid"], request.match_info["kind"])
        if key not in docs:
            raise web.HTTPNotFound()
        return web.json_response(docs[key])

    async def put_doc(request):
        if request.headers.get("Authorization") != "Bearer t0ken":
            raise web.HTTPUnauthorized()
        docs[(request.match_info["uid"], request.match_info["kind"])] = await request.json()
        return web.json_response({"ok": True})

    async def delete_doc(request):
        docs.pop((request.match_info["uid"], request.match_info["kind"]), None)
        return web.json_response({"ok": True})

    app = web.Application()
    app.router.add_get("/users/{uid}/data/{kind}", get_doc)
    app.router.add_put("/users/{uid}/data/{kind}", put_doc)
    app.router.add_delete("/users/{uid}/data/{kind}", delete_doc)
    return app

@pytest.mark.asyncio
async def test_put_get_delete_against_server():
    docs = {}

    async with DocumentServer(_document_app(docs)) as server:
        store = HttpRemoteDocumentStore(str(server.make_url("/")), token="t0ken")
        try:
            assert await store.get("u1", AggregateKind.ATTENDANCE) is None
            assert await store.put("u1", AggregateKind.ATTENDANCE, [{"date": "2026-01-05", "isHoliday": True}]) is True
            assert await store.get("u1", AggregateKind.ATTENDANCE) == [{"date": "2026-01-05", "isHoliday": True}]
            assert await store.delete("u1", AggregateKind.ATTENDANCE) is True
        finally:
            await store.close()

    assert docs == {}


@pytest.mark.asyncio
async def test_rejected_put_reports_false():
    async with DocumentServer(_document_app({})) as server:
        store = HttpRemoteDocumentStore(str(server.make_url("/")), token="wrong")
        try:
            assert await store.put("u1", AggregateKind.SUBJECTS, []) is False
        finally:
            await store.close()


@pytest.mark.asyncio
async def test_close_releases_the_session():
    async with DocumentServer(_document_app({})) as server:
        store = HttpRemoteDocumentStore(str(server.make_url("/")))
        await store.get("u1", AggregateKind.SETTINGS)
        await store.close()

        assert store.closed
        # A later call opens a new session.
        assert await store.get("u1", AggregateKind.SETTINGS) is None
        await store.close()
