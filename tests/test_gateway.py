"""Persistence gateway tests with a real aiosqlite store."""

import pytest
from sqlalchemy import insert, select, text

from shipdesk.storage.gateway import Database, ExecuteResult
from shipdesk.storage.models import Carrier


async def test_execute_returns_inserted_id(database) -> None:
    first = await database.execute(
        insert(Carrier.__table__).values(name="中通快递")
    )
    second = await database.execute(
        insert(Carrier.__table__).values(name="圆通速递")
    )
    await database.persist()

    assert first == ExecuteResult(inserted_id=1, rows_affected=1)
    assert second.inserted_id == 2


async def test_query_all_returns_dict_rows(database) -> None:
    await database.execute(insert(Carrier.__table__).values(name="韵达快递"))
    await database.persist()

    rows = await database.query_all(select(Carrier.__table__))
    assert len(rows) == 1
    assert rows[0]["name"] == "韵达快递"
    assert rows[0]["contact_person"] == ""
    assert rows[0]["created_at"] is not None


async def test_query_one_returns_none_without_match(database) -> None:
    row = await database.query_one(
        select(Carrier.__table__).where(Carrier.id == 99)
    )
    assert row is None


async def test_query_error_is_logged_not_raised(database, caplog) -> None:
    rows = await database.query_all(text("SELECT * FROM no_such_table"))
    assert rows == []
    assert "Query failed" in caplog.text


async def test_execute_error_returns_zero_result(database) -> None:
    result = await database.execute(
        text("INSERT INTO no_such_table VALUES (1)")
    )
    assert result == ExecuteResult(inserted_id=0, rows_affected=0)


async def test_out_of_range_id_query_returns_no_rows(database, caplog) -> None:
    row = await database.query_one(
        select(Carrier.__table__).where(Carrier.id == 2**70)
    )

    assert row is None
    assert "Query failed" in caplog.text


async def test_out_of_range_id_execute_returns_zero_result(database) -> None:
    result = await database.execute(
        insert(Carrier.__table__).values(id=2**70, name="overflow")
    )

    assert result == ExecuteResult()
    assert await database.query_all(select(Carrier.__table__)) == []


async def test_failed_execute_rolls_back_pending_writes(database) -> None:
    await database.execute(insert(Carrier.__table__).values(name="pending"))
    await database.execute(text("INSERT INTO no_such_table VALUES (1)"))
    await database.persist()

    assert await database.query_all(select(Carrier.__table__)) == []


async def test_create_schema_is_repeatable(database) -> None:
    # The additive contact_person column already exists; re-running the
    # migration must be a no-op.
    await database.create_schema()
    await database.create_schema()

    rows = await database.query_all(text("PRAGMA table_info(addresses)"))
    columns = [row["name"] for row in rows]
    assert columns.count("contact_person") == 1


async def test_persisted_data_survives_reconnect(tmp_path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'shipdesk.db'}"
    db = Database(url)
    await db.connect()
    await db.create_schema()
    await db.execute(insert(Carrier.__table__).values(name="申通快递"))
    await db.persist()
    await db.close()

    reopened = Database(url)
    await reopened.connect()
    rows = await reopened.query_all(select(Carrier.name))
    await reopened.close()
    assert rows == [{"name": "申通快递"}]


async def test_unpersisted_data_is_lost_on_close(tmp_path) -> None:
    url = f"sqlite+aiosqlite:///{tmp_path / 'shipdesk.db'}"
    db = Database(url)
    await db.connect()
    await db.create_schema()
    await db.execute(insert(Carrier.__table__).values(name="lost"))
    await db.close()

    reopened = Database(url)
    await reopened.connect()
    rows = await reopened.query_all(select(Carrier.name))
    await reopened.close()
    assert rows == []


def test_connection_requires_connect() -> None:
    db = Database("sqlite+aiosqlite://")
    with pytest.raises(RuntimeError, match="not connected"):
        db.connection  # noqa: B018
