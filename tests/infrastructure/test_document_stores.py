"""Tests for the document store adapters."""

import asyncio
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError

from src.domain.errors import PersistenceError
from src.infrastructure.document_store import SqlAlchemyDocumentStore
from src.infrastructure.in_memory_document_store import InMemoryDocumentStore
from src.utils.document_utils import merge_documents


class _EnginePort:
    def __init__(self, engine):
        self.engine = engine

    def get_documents_engine(self):
        return self.engine


@pytest.fixture
def sql_store(tmp_path):
    """SQL document store backed by a temporary SQLite file."""
    engine = create_engine(f"sqlite:///{tmp_path / 'docs.db'}", future=True)
    store = SqlAlchemyDocumentStore(_EnginePort(engine), logger=MagicMock())
    yield store
    engine.dispose()


def test_merge_documents_merges_maps_and_replaces_lists() -> None:
    """Nested maps merge key by key; lists and scalars are replaced."""
    stored = {
        "name": "Mira",
        "transactions": [{"amount": 1}],
        "chatGroups": {"Trip": [{"text": "a"}], "Flat": []},
        "extra": "kept",
    }
    update = {
        "name": "Mira K",
        "transactions": [],
        "chatGroups": {"Trip": [{"text": "b"}]},
    }

    merged = merge_documents(stored, update)

    assert merged == {
        "name": "Mira K",
        "transactions": [],
        "chatGroups": {"Trip": [{"text": "b"}], "Flat": []},
        "extra": "kept",
    }
    assert stored["chatGroups"]["Trip"] == [{"text": "a"}]


def test_sql_store_returns_none_for_missing_document(sql_store) -> None:
    """Reading an unknown key yields None."""
    assert asyncio.run(sql_store.read("nobody")) is None


def test_sql_store_create_then_merge(sql_store) -> None:
    """A replace-write creates the row and merge-writes update it."""

    async def scenario():
        await sql_store.write(
            "user-1",
            {"name": "User", "monthlyLimit": 0, "createdAt": 1},
            merge=False,
        )
        await sql_store.write("user-1", {"monthlyLimit": 30000})
        return await sql_store.read("user-1")

    document = asyncio.run(scenario())

    assert document == {"name": "User", "monthlyLimit": 30000, "createdAt": 1}


def test_sql_store_replace_drops_unlisted_fields(sql_store) -> None:
    """Writing without merge replaces the stored document."""

    async def scenario():
        await sql_store.write("user-1", {"name": "A", "phone": "1"})
        await sql_store.write("user-1", {"name": "B"}, merge=False)
        return await sql_store.read("user-1")

    assert asyncio.run(scenario()) == {"name": "B"}


def test_sql_store_rejects_corrupt_json(sql_store) -> None:
    """Undecodable stored bodies surface as PersistenceError."""
    sql_store.prepare_destination()
    engine = sql_store._db_port.get_documents_engine()
    with engine.begin() as conn:
        conn.exec_driver_sql(
            "INSERT INTO user_documents (user_id, body) VALUES ('u', '{oops')"
        )

    with pytest.raises(PersistenceError):
        asyncio.run(sql_store.read("u"))


def test_sql_store_wraps_driver_errors() -> None:
    """SQLAlchemy errors are converted at the adapter boundary."""
    engine = MagicMock()
    engine.begin.side_effect = OperationalError("stmt", {}, Exception("down"))
    store = SqlAlchemyDocumentStore(_EnginePort(engine), logger=MagicMock())

    with pytest.raises(PersistenceError):
        asyncio.run(store.write("user-1", {"name": "A"}))


def test_in_memory_store_copies_and_merges() -> None:
    """The in-memory store isolates callers from stored state."""
    store = InMemoryDocumentStore({"user-1": {"profile": {"a": 1}}})
    payload = {"profile": {"b": 2}, "goals": [1]}

    async def scenario():
        await store.write("user-1", payload)
        payload["goals"].append(2)
        document = await store.read("user-1")
        document["goals"].append(3)
        return await store.read("user-1")

    document = asyncio.run(scenario())

    assert document == {"profile": {"a": 1, "b": 2}, "goals": [1]}
    assert store.writes[0][2] is True
    assert asyncio.run(store.read("missing")) is None
