"""
Tests for the in-memory and SQL report stores
"""
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import StaticPool

from src.core.exceptions import ReportNotFound, StaleReport, StoreUnavailable
from src.crowdsource.validation import VoteKind, apply_vote
from src.database.connection import DatabaseConnection, is_memory_sqlite
from src.database.memory import InMemoryReportStore
from src.database.repository import SqlReportStore, SqlSensorStore
from src.ingestion.sensors import SensorSimulator


@pytest.fixture
def sql_store():
    db = DatabaseConnection("sqlite://")
    db.create_tables()
    yield SqlReportStore(db)
    db.close()


@pytest.fixture(params=["memory", "sql"])
def store(request, sql_store):
    if request.param == "memory":
        return InMemoryReportStore()
    return sql_store


class TestReportStores:
    """Behaviour shared by every ReportStore."""

    def test_create_assigns_id(self, store, make_report):
        created = store.create(make_report())

        assert created.id
        assert created.version == 0
        assert created.upvotes == 0

    def test_list_in_insertion_order(self, store, make_report):
        ids = [store.create(make_report(location=name)).id for name in ["A", "B", "C"]]

        assert [r.id for r in store.list()] == ids
        assert [r.location for r in store.list()] == ["A", "B", "C"]

    def test_update_replaces_record(self, store, make_report):
        created = store.create(make_report())
        result = apply_vote(created, VoteKind.UP)

        stored = store.update(created.id, result.report)

        assert stored.upvotes == 1
        assert stored.version == 1
        assert store.list()[0].upvotes == 1

    def test_update_keeps_timestamp(self, store, make_report):
        created = store.create(make_report())
        stored = store.update(created.id, replace(created, upvotes=1))

        assert stored.timestamp == created.timestamp

    def test_stale_update_rejected(self, store, make_report):
        created = store.create(make_report())
        store.update(created.id, apply_vote(created, VoteKind.UP).report)

        # Second voter still holds version 0
        with pytest.raises(StaleReport):
            store.update(created.id, apply_vote(created, VoteKind.DOWN).report)

        assert store.list()[0].downvotes == 0

    def test_update_missing_report(self, store, make_report):
        with pytest.raises(ReportNotFound):
            store.update("missing", make_report("missing"))


class TestSqlStore:
    """SQL-specific behaviour."""

    def test_database_errors_become_store_unavailable(self):
        db = MagicMock()
        db.get_session.side_effect = OperationalError("SELECT", {}, Exception("down"))
        store = SqlReportStore(db)

        with pytest.raises(StoreUnavailable):
            store.list()

    def test_sensor_store_returns_latest_per_station(self, sql_store):
        sensors = SqlSensorStore(sql_store.db)
        simulator = SensorSimulator(seed=4)
        sensors.add(simulator.read_all())
        latest = simulator.read_all()
        sensors.add(latest)

        readings = sensors.list()

        assert len(readings) == 3
        assert [r.current_water_level for r in readings] == [r.current_water_level for r in latest]


class TestDatabaseConnection:
    """Pool selection per database URL."""

    @pytest.mark.parametrize("url,expected", [
        ("sqlite://", True),
        ("sqlite:///:memory:", True),
        ("sqlite:///./flooddatasync.db", False),
        ("postgresql://user:pw@localhost/flood", False),
    ])
    def test_memory_sqlite_detection(self, url, expected):
        assert is_memory_sqlite(url) is expected

    def test_memory_database_shares_one_connection(self):
        db = DatabaseConnection("sqlite://")
        assert isinstance(db.engine.pool, StaticPool)
        db.close()

    def test_file_database_uses_regular_pool(self, tmp_path, make_report):
        db = DatabaseConnection(f"sqlite:///{tmp_path / 'reports.db'}")
        db.create_tables()
        store = SqlReportStore(db)

        assert not isinstance(db.engine.pool, StaticPool)

        created = store.create(make_report())
        with ThreadPoolExecutor(max_workers=2) as pool:
            listed = pool.submit(store.list).result()
            stored = pool.submit(store.update, created.id, apply_vote(created, VoteKind.UP).report).result()

        assert [r.id for r in listed] == [created.id]
        assert stored.upvotes == 1
        db.close()
