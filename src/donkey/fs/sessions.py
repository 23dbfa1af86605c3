"""StoreSessionFactory: engine construction and per-request store sessions."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from .database import DatabasePathStore

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy import Engine

    from donkey.config import DonkeyConfig

logger = logging.getLogger(__name__)


def create_store_engine(database_url: str) -> Engine:
    """Create a SQLAlchemy engine for *database_url*.

    In-memory SQLite URLs get a ``StaticPool`` so every session shares
    the one database, from any worker thread.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict[str, object] = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, echo=False, **kwargs)
    return create_engine(database_url, echo=False, pool_pre_ping=True)


class StoreSessionFactory:
    """Opens ``DatabasePathStore`` sessions for one configuration.

    Usage::

        factory = StoreSessionFactory(config)
        with factory.session() as store:
            store.exists("/iplant/home/alice")
    """

    def __init__(self, config: DonkeyConfig, engine: Engine | None = None) -> None:
        self.config = config
        self.engine = engine or create_store_engine(config.database_url)

    def create_tables(self) -> None:
        SQLModel.metadata.create_all(self.engine)

    @contextmanager
    def session(self) -> Iterator[DatabasePathStore]:
        """Yield a store bound to a fresh session; always closed on exit."""
        store = DatabasePathStore(Session(self.engine), acting_user=self.config.irods_user)
        try:
            yield store
        finally:
            store.close()

    def dispose(self) -> None:
        self.engine.dispose()


def provision_user(store: DatabasePathStore, config: DonkeyConfig, username: str) -> str:
    """Register *username* and create its home directory if missing.

    Returns the home directory path.
    """
    store.add_user(username)
    home = config.user_home_dir(username)
    if not store.exists(home):
        store.mkdirs(config.home_root)
        store.mkdir(home, owner=username)
        logger.info("Provisioned home directory %s", home)
    return home


def provision_store(factory: StoreSessionFactory, usernames: list[str] | None = None) -> None:
    """Create tables, the service account, the home and trash roots, and user homes."""
    config = factory.config
    factory.create_tables()
    with factory.session() as store:
        store.add_user(config.irods_user, user_type="rodsadmin")
        store.mkdirs(config.home_root)
        store.mkdirs(config.trash_root)
        for username in usernames or []:
            provision_user(store, config, username)
