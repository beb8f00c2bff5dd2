import pytest

from src.class_attendance.class_attendance.storage.mysql_local_store import MySQLKeyValueStore


class FakeCursor:
    def __init__(self, table):
        self._table = table
        self._row = None

    def execute(self, sql, params):
        statement = " ".join(sql.split())
        if statement.startswith("SELECT"):
            key = params[0]
            self._row = {"store_value": self._table[key]} if key in self._table else None
        elif statement.startswith("INSERT"):
            key, value = params
            self._table[key] = value
        elif statement.startswith("DELETE"):
            self._table.pop(params[0], None)
        else:
            raise AssertionError(statement)

    def fetchone(self):
        return self._row

    def close(self):
        pass


class FakeConnection:
    def __init__(self, table, fail=False):
        self._table = table
        self._fail = fail
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        if self._fail:
            raise RuntimeError("connection lost")
        return FakeCursor(self._table)

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, fail=False):
        self.table = {}
        self.connections = []
        self._fail = fail

    def connect(self):
        conn = FakeConnection(self.table, self._fail)
        self.connections.append(conn)
        return conn


def test_set_get_remove():
    factory = FakeConnFactory()
    store = MySQLKeyValueStore(factory)

    assert store.get("attendance_records") is None
    store.set("attendance_records", "[]")
    store.set("attendance_records", '[{"date": "2026-01-05"}]')
    assert store.get("attendance_records") == '[{"date": "2026-01-05"}]'

    store.remove("attendance_records")
    assert store.get("attendance_records") is None
    assert all(c.committed for c in factory.connections)


def test_failure_rolls_back_and_propagates():
    factory = FakeConnFactory(fail=True)
    store = MySQLKeyValueStore(factory)

    with pytest.raises(RuntimeError):
        store.set("attendance_subjects_v2", "[]")
    assert factory.connections[0].rolled_back is True
