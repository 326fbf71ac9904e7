"""User Record Store — CRUD semantics over the users table.

Tests cover:
    - insert assigns id and created_at
    - list_all is empty on a fresh table and newest-first afterwards
    - find_by_id / delete_by_id raise ResourceNotFoundError for unknown ids,
      including ids the int4 key can never hold
    - created_at has a database default for rows inserted without the ORM
    - storage faults surface as DatabaseError and leave no row behind
    - ensure_schema is idempotent
"""

import pytest
from sqlalchemy import inspect, text
from sqlalchemy.exc import OperationalError

from app.core.errors import DatabaseError, ResourceNotFoundError
from app.infrastructure.user_store import UserStore, ensure_schema


async def test_insert_assigns_id_and_timestamp(test_db):
    store = UserStore(test_db)
    user = await store.insert("Alice", 30, "/uploads/image-1-1.png")

    assert user.id == 1
    assert user.name == "Alice"
    assert user.age == 30
    assert user.image_path == "/uploads/image-1-1.png"
    assert user.created_at is not None


async def test_ids_increase(test_db):
    store = UserStore(test_db)
    first = await store.insert("A", 20, "/uploads/image-1-1.png")
    second = await store.insert("B", 21, "/uploads/image-2-2.png")
    assert second.id > first.id


async def test_list_all_empty(test_db):
    assert await UserStore(test_db).list_all() == []


async def test_list_all_newest_first(test_db):
    store = UserStore(test_db)
    for i in range(3):
        await store.insert(f"user{i}", 20 + i, f"/uploads/image-{i}-{i}.png")

    users = await store.list_all()

    assert [u.name for u in users] == ["user2", "user1", "user0"]
    stamps = [u.created_at for u in users]
    assert stamps == sorted(stamps, reverse=True)


async def test_find_by_id(test_db):
    store = UserStore(test_db)
    created = await store.insert("Alice", 30, "/uploads/image-1-1.png")
    found = await store.find_by_id(created.id)
    assert found.id == created.id
    assert found.image_path == created.image_path


async def test_find_by_id_missing_raises(test_db):
    with pytest.raises(ResourceNotFoundError) as exc:
        await UserStore(test_db).find_by_id(404)
    assert exc.value.resource_id == "404"


async def test_delete_by_id_removes_row(test_db):
    store = UserStore(test_db)
    user = await store.insert("Alice", 30, "/uploads/image-1-1.png")
    await store.delete_by_id(user.id)
    assert await store.list_all() == []


async def test_delete_by_id_missing_raises(test_db):
    with pytest.raises(ResourceNotFoundError):
        await UserStore(test_db).delete_by_id(12)


async def test_insert_storage_fault_raises_database_error(test_db, monkeypatch):
    store = UserStore(test_db)

    async def broken_commit():
        raise OperationalError("INSERT INTO users", {}, Exception("connection lost"))

    monkeypatch.setattr(test_db, "commit", broken_commit)
    with pytest.raises(DatabaseError) as exc:
        await store.insert("Alice", 30, "/uploads/image-1-1.png")
    assert exc.value.operation == "insert"
    assert "connection lost" not in exc.value.message

    monkeypatch.undo()
    assert await store.list_all() == []


async def test_list_storage_fault_raises_database_error(test_db, monkeypatch):
    async def broken_execute(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("timeout"))

    monkeypatch.setattr(test_db, "execute", broken_execute)
    with pytest.raises(DatabaseError) as exc:
        await UserStore(test_db).list_all()
    assert exc.value.operation == "list"


async def test_ensure_schema_is_idempotent(test_engine):
    await ensure_schema(test_engine)
    await ensure_schema(test_engine)

    async with test_engine.connect() as conn:
        tables = await conn.run_sync(lambda c: inspect(c).get_table_names())
        columns = await conn.run_sync(
            lambda c: {col["name"] for col in inspect(c).get_columns("users")},
        )
    assert tables == ["users"]
    assert columns == {"id", "name", "age", "image_path", "created_at"}


@pytest.mark.parametrize("user_id", [0, -1, 2**31, 99999999999999999999])
async def test_ids_outside_key_range_are_not_found(test_db, user_id):
    store = UserStore(test_db)
    with pytest.raises(ResourceNotFoundError):
        await store.find_by_id(user_id)
    with pytest.raises(ResourceNotFoundError):
        await store.delete_by_id(user_id)


async def test_created_at_defaults_for_rows_inserted_outside_orm(test_engine):
    async with test_engine.begin() as conn:
        await conn.execute(text(
            "INSERT INTO users (name, age, image_path) "
            "VALUES ('Raw', 40, '/uploads/image-1-1.png')",
        ))
        stamp = (await conn.execute(
            text("SELECT created_at FROM users WHERE name = 'Raw'"),
        )).scalar_one()
    assert stamp is not None
