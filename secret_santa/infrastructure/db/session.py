# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from secret_santa.shared.config import DatabaseConfig, load_config
from secret_santa.shared.logging import logger


class Base(DeclarativeBase):
    pass


def _serialize_sqlite_writers(engine: Engine) -> None:
    """Open every SQLite transaction with ``BEGIN IMMEDIATE``.

    pysqlite defers ``BEGIN`` until the first write and SQLite has no
    ``SELECT ... FOR UPDATE``, so without this the membership snapshot would
    be read outside the write lock.
    """

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(connection: Connection) -> None:
        connection.exec_driver_sql("BEGIN IMMEDIATE")


def build_engine(config: DatabaseConfig) -> Engine:
    kwargs: dict[str, object] = {"echo": config.echo, "pool_pre_ping": True}
    is_sqlite = config.url.startswith("sqlite")
    if is_sqlite:
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": config.pool_timeout,
        }
    if ":memory:" not in config.url and config.url not in ("sqlite://", "sqlite+pysqlite://"):
        kwargs.update(
            pool_size=config.pool_size,
            max_overflow=config.max_overflow,
            pool_timeout=config.pool_timeout,
        )
    engine = create_engine(config.url, **kwargs)
    if is_sqlite:
        _serialize_sqlite_writers(engine)
    return engine


ENGINE: Engine = build_engine(load_config().database)

SessionLocal = sessionmaker(
    bind=ENGINE, autoflush=False, autocommit=False, expire_on_commit=False
)


def init_db(engine: Engine | None = None) -> None:
    Base.metadata.create_all(bind=engine or ENGINE)
    logger.info("Database schema ensured")
