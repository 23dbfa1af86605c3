"""Shared fixtures for Donkey tests."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from sqlmodel import Session, SQLModel

from donkey import Donkey, DonkeyConfig
from donkey.fs.database import DatabasePathStore
from donkey.fs.sessions import create_store_engine

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Engine

USERS = ["alice", "bob", "carol"]


@pytest.fixture
def engine() -> Engine:
    """In-memory SQLite engine with all tables created."""
    eng = create_store_engine("sqlite://")
    SQLModel.metadata.create_all(eng)
    return eng


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as s:
        yield s


@pytest.fixture
def raw_store(session: Session) -> DatabasePathStore:
    """Store over empty tables: no users, no directories."""
    return DatabasePathStore(session)


@pytest.fixture
def config() -> DonkeyConfig:
    """Flat layout: homes directly under ``/``, trash under ``/trash``."""
    return DonkeyConfig(database_url="sqlite://", home_root="/", trash_root="/trash")


@pytest.fixture
def donkey(config: DonkeyConfig) -> Iterator[Donkey]:
    """Provisioned service with alice, bob and carol."""
    d = Donkey(config)
    d.provision(USERS)
    yield d
    d.close()


@pytest.fixture
def store(donkey: Donkey) -> Iterator[DatabasePathStore]:
    """One store session shared by the test and the services it calls."""
    with donkey.session() as s:
        yield s


@pytest.fixture
def seeded(store: DatabasePathStore) -> DatabasePathStore:
    """alice owns ``/alice/docs/report.txt`` and ``/alice/proj/{a.txt,sub/b.txt}``."""
    store.mkdir("/alice/docs", owner="alice")
    store.create_file("/alice/docs/report.txt", owner="alice", size_bytes=42)
    store.mkdir("/alice/proj", owner="alice")
    store.create_file("/alice/proj/a.txt", owner="alice")
    store.mkdir("/alice/proj/sub", owner="alice")
    store.create_file("/alice/proj/sub/b.txt", owner="alice")
    return store
