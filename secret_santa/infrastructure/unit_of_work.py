# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Database unit of work implementation."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractContextManager
from dataclasses import dataclass, field

from sqlalchemy.exc import DBAPIError, DisconnectionError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session

from secret_santa.domain.groups.repositories import GroupMembershipRepository, MembershipUnitOfWork
from secret_santa.infrastructure.repositories.groups import SqlAlchemyGroupRepository
from secret_santa.shared.errors.base import TransientStoreError
from secret_santa.shared.logging import logger

# Driver and pool failures; the caller may retry the whole operation.
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    DBAPIError,
    DisconnectionError,
    PoolTimeoutError,
)


@dataclass
class SqlAlchemyUnitOfWork(AbstractContextManager, MembershipUnitOfWork):
    """SQLAlchemy-backed unit of work.

    Commits on clean exit unless ``rollback()`` was called inside the block.
    """

    session_factory: Callable[[], Session]
    repository_factory: Callable[[Session], GroupMembershipRepository] = field(
        default=SqlAlchemyGroupRepository
    )

    def __post_init__(self) -> None:
        self._session: Session | None = None
        self._groups: GroupMembershipRepository | None = None
        self._rolled_back = False

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        self._session = self.session_factory()
        self._groups = self.repository_factory(self._session)
        self._rolled_back = False
        logger.debug("uow: session opened")
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        assert self._session is not None
        try:
            if exc:
                logger.warning(f"uow: rollback due to {exc_type.__name__}")
                self._session.rollback()
                if isinstance(exc, TRANSIENT_ERRORS):
                    raise TransientStoreError(type(exc).__name__) from exc
            elif not self._rolled_back:
                self._session.commit()
                logger.debug("uow: committed")
        except TRANSIENT_ERRORS as finalise_exc:
            logger.exception("uow: exception while finalising")
            self._session.rollback()
            raise TransientStoreError(type(finalise_exc).__name__) from finalise_exc
        finally:
            self._session.close()
            logger.debug("uow: session closed")
            self._session = None
            self._groups = None

    @property
    def groups(self) -> GroupMembershipRepository:
        if self._groups is None:
            msg = "UnitOfWork repository accessed before entering context"
            raise RuntimeError(msg)
        return self._groups

    def commit(self) -> None:
        if self._session is None:
            raise RuntimeError("UnitOfWork not started")
        self._session.commit()
        self._rolled_back = False
        logger.debug("uow: manual commit")

    def rollback(self) -> None:
        if self._session is None:
            return
        self._session.rollback()
        self._rolled_back = True
        logger.debug("uow: manual rollback")


def unit_of_work_factory(
    session_factory: Callable[[], Session],
    repository_factory: Callable[[Session], GroupMembershipRepository] = SqlAlchemyGroupRepository,
) -> Callable[[], SqlAlchemyUnitOfWork]:
    """Bind a session factory so each call yields a fresh unit of work."""

    def _factory() -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(session_factory, repository_factory)

    return _factory
