from __future__ import annotations

import uuid
from collections.abc import Iterator
from datetime import UTC, datetime
from uuid import UUID

import pytest
from sqlalchemy import create_engine, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DatabaseError, OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from secret_santa.application.use_cases.groups import RemoveParticipantUseCase
from secret_santa.domain.groups import ExclusionRule, RemovalFailure
from secret_santa.infrastructure.db import Base
from secret_santa.infrastructure.db.models import ExclusionRuleRow, GroupParticipantRow, GroupRow
from secret_santa.infrastructure.db.session import build_engine
from secret_santa.infrastructure.repositories.groups import SqlAlchemyGroupRepository
from secret_santa.infrastructure.unit_of_work import SqlAlchemyUnitOfWork, unit_of_work_factory
from secret_santa.shared.config import DatabaseConfig
from secret_santa.shared.errors.base import TransientStoreError


@pytest.fixture()
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def _seed_group(
    session_factory: sessionmaker[Session],
    *,
    members: tuple[str, ...] = ("O", "A", "B"),
    rules: tuple[tuple[str, str], ...] = (("A", "B"),),
    draw_completed: bool = False,
) -> UUID:
    group_id = uuid.uuid4()
    with session_factory() as session:
        session.add(
            GroupRow(
                id=group_id,
                name="Office party",
                organizer_user_id="O",
                draw_completed_at=datetime.now(UTC) if draw_completed else None,
            )
        )
        session.add_all(GroupParticipantRow(group_id=group_id, user_id=m) for m in members)
        session.add_all(
            ExclusionRuleRow(group_id=group_id, user_id_1=a, user_id_2=b, created_by_user_id="O")
            for a, b in rules
        )
        session.commit()
    return group_id


def _members(session_factory: sessionmaker[Session], group_id: UUID) -> set[str]:
    with session_factory() as session:
        return set(
            session.scalars(
                select(GroupParticipantRow.user_id).where(GroupParticipantRow.group_id == group_id)
            )
        )


def _rules(session_factory: sessionmaker[Session], group_id: UUID) -> dict[UUID, tuple[str, str]]:
    with session_factory() as session:
        rows = session.scalars(
            select(ExclusionRuleRow).where(ExclusionRuleRow.group_id == group_id)
        ).all()
        return {row.id: (row.user_id_1, row.user_id_2) for row in rows}


def _use_case(session_factory, repository_factory=SqlAlchemyGroupRepository):
    return RemoveParticipantUseCase(
        unit_of_work=unit_of_work_factory(session_factory, repository_factory)
    )


def test_repository_loads_group_snapshot(session_factory: sessionmaker[Session]) -> None:
    group_id = _seed_group(session_factory)

    with SqlAlchemyUnitOfWork(session_factory) as uow:
        group = uow.groups.load_for_mutation(group_id)
        missing = uow.groups.load_for_mutation(uuid.uuid4())

    assert group is not None
    assert group.id == group_id
    assert group.organizer_user_id == "O"
    assert group.participant_ids == frozenset({"O", "A", "B"})
    assert group.has_draw_completed() is False
    assert missing is None


def test_removal_deletes_member_and_referencing_rules(
    session_factory: sessionmaker[Session],
) -> None:
    group_id = _seed_group(session_factory)

    result = _use_case(session_factory).execute(group_id, "A", "O")

    assert result.is_success
    assert _members(session_factory, group_id) == {"O", "B"}
    assert _rules(session_factory, group_id) == {}


def test_removal_bumps_group_modification_time(session_factory: sessionmaker[Session]) -> None:
    group_id = _seed_group(session_factory)

    _use_case(session_factory).execute(group_id, "A", "O")

    with session_factory() as session:
        assert session.get(GroupRow, group_id).updated_at is not None


def test_cascade_preserves_unrelated_rules_and_other_groups(
    session_factory: sessionmaker[Session],
) -> None:
    group_id = _seed_group(
        session_factory,
        members=("O", "A", "B", "C", "D"),
        rules=(("A", "B"), ("C", "A"), ("C", "D"), ("B", "D")),
    )
    other_group_id = _seed_group(session_factory, rules=(("A", "B"),))
    kept_before = {
        rule_id: pair
        for rule_id, pair in _rules(session_factory, group_id).items()
        if "A" not in pair
    }

    result = _use_case(session_factory).execute(group_id, "A", "O")

    assert result.is_success
    assert _rules(session_factory, group_id) == kept_before
    assert len(_rules(session_factory, other_group_id)) == 1
    assert _members(session_factory, other_group_id) == {"O", "A", "B"}


def test_cascade_removes_self_referencing_pair(session_factory: sessionmaker[Session]) -> None:
    group_id = _seed_group(session_factory, rules=(("A", "A"), ("O", "B")))

    result = _use_case(session_factory).execute(group_id, "A", "O")

    assert result.is_success
    assert list(_rules(session_factory, group_id).values()) == [("O", "B")]


def test_cascade_returns_the_removed_rules(session_factory: sessionmaker[Session]) -> None:
    group_id = _seed_group(session_factory, rules=(("A", "B"), ("O", "A"), ("O", "B")))

    with SqlAlchemyUnitOfWork(session_factory) as uow:
        removed = uow.groups.delete_exclusion_rules_referencing(group_id, "A")

    assert sorted((rule.user_id_1, rule.user_id_2) for rule in removed) == [("A", "B"), ("O", "A")]
    assert all(rule.group_id == group_id and rule.references("A") for rule in removed)
    assert list(_rules(session_factory, group_id).values()) == [("O", "B")]


def test_completed_draw_leaves_database_untouched(
    session_factory: sessionmaker[Session],
) -> None:
    group_id = _seed_group(session_factory, draw_completed=True)
    rules_before = _rules(session_factory, group_id)

    result = _use_case(session_factory).execute(group_id, "A", "O")

    assert result.failure is RemovalFailure.DRAW_ALREADY_COMPLETED
    assert _members(session_factory, group_id) == {"O", "A", "B"}
    assert _rules(session_factory, group_id) == rules_before


def test_second_removal_reports_participant_not_found(
    session_factory: sessionmaker[Session],
) -> None:
    group_id = _seed_group(session_factory)
    use_case = _use_case(session_factory)

    assert use_case.execute(group_id, "A", "O").is_success
    assert use_case.execute(group_id, "A", "O").failure is RemovalFailure.PARTICIPANT_NOT_FOUND


class FailingCascadeRepository(SqlAlchemyGroupRepository):
    def delete_exclusion_rules_referencing(
        self, group_id: UUID, user_id: str
    ) -> tuple[ExclusionRule, ...]:
        raise OperationalError("DELETE FROM exclusion_rules", {}, Exception("database is locked"))


def test_failed_cascade_rolls_back_membership_delete(
    session_factory: sessionmaker[Session],
) -> None:
    group_id = _seed_group(session_factory)

    result = _use_case(session_factory, FailingCascadeRepository).execute(group_id, "A", "O")

    assert result.failure is RemovalFailure.TRANSIENT_FAILURE
    assert _members(session_factory, group_id) == {"O", "A", "B"}
    assert list(_rules(session_factory, group_id).values()) == [("A", "B")]
    with session_factory() as session:
        assert session.get(GroupRow, group_id).updated_at is None


class CorruptStoreRepository(SqlAlchemyGroupRepository):
    def delete_exclusion_rules_referencing(
        self, group_id: UUID, user_id: str
    ) -> tuple[ExclusionRule, ...]:
        raise DatabaseError(
            "DELETE FROM exclusion_rules", {}, Exception("database disk image is malformed")
        )


def test_database_error_is_reported_as_transient(session_factory: sessionmaker[Session]) -> None:
    group_id = _seed_group(session_factory)

    result = _use_case(session_factory, CorruptStoreRepository).execute(group_id, "A", "O")

    assert result.failure is RemovalFailure.TRANSIENT_FAILURE
    assert _members(session_factory, group_id) == {"O", "A", "B"}


class FailingCommitSession(Session):
    def commit(self) -> None:
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))


def test_failed_commit_is_reported_as_transient(engine: Engine) -> None:
    healthy = sessionmaker(bind=engine, expire_on_commit=False)
    group_id = _seed_group(healthy)
    failing = sessionmaker(bind=engine, class_=FailingCommitSession)

    result = _use_case(failing).execute(group_id, "A", "O")

    assert result.failure is RemovalFailure.TRANSIENT_FAILURE
    assert _members(healthy, group_id) == {"O", "A", "B"}


def test_rejected_attempt_skips_commit(engine: Engine) -> None:
    healthy = sessionmaker(bind=engine, expire_on_commit=False)
    group_id = _seed_group(healthy)
    failing = sessionmaker(bind=engine, class_=FailingCommitSession)

    result = _use_case(failing).execute(group_id, "A", "B")

    assert result.failure is RemovalFailure.NOT_ORGANIZER


class BrokenRepository(SqlAlchemyGroupRepository):
    def delete_exclusion_rules_referencing(
        self, group_id: UUID, user_id: str
    ) -> tuple[ExclusionRule, ...]:
        raise RuntimeError("unexpected")


def test_unexpected_errors_propagate_after_rollback(
    session_factory: sessionmaker[Session],
) -> None:
    group_id = _seed_group(session_factory)

    with pytest.raises(RuntimeError):
        _use_case(session_factory, BrokenRepository).execute(group_id, "A", "O")

    assert _members(session_factory, group_id) == {"O", "A", "B"}


def test_unit_of_work_translates_store_errors(session_factory: sessionmaker[Session]) -> None:
    with pytest.raises(TransientStoreError) as excinfo:
        with SqlAlchemyUnitOfWork(session_factory):
            raise OperationalError("SELECT 1", {}, Exception("connection reset"))

    assert excinfo.value.reason == "OperationalError"
    assert isinstance(excinfo.value.__cause__, OperationalError)


def test_unit_of_work_guards_access_outside_context(
    session_factory: sessionmaker[Session],
) -> None:
    uow = SqlAlchemyUnitOfWork(session_factory)

    with pytest.raises(RuntimeError):
        _ = uow.groups
    with pytest.raises(RuntimeError):
        uow.commit()


@pytest.fixture()
def file_engine(tmp_path) -> Iterator[Engine]:
    engine = build_engine(
        DatabaseConfig(
            DATABASE_URL=f"sqlite:///{tmp_path / 'secret_santa.db'}",
            DATABASE_POOL_TIMEOUT=0.2,
        )
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


def test_concurrent_removals_of_one_member_succeed_once(file_engine: Engine) -> None:
    factory = sessionmaker(bind=file_engine, expire_on_commit=False)
    group_id = _seed_group(factory)
    competing = _use_case(factory)
    competing_results = []

    class CompetingRemovalRepository(SqlAlchemyGroupRepository):
        def load_for_mutation(self, group_id: UUID):
            group = super().load_for_mutation(group_id)
            competing_results.append(competing.execute(group_id, "A", "O"))
            return group

    result = _use_case(factory, CompetingRemovalRepository).execute(group_id, "A", "O")

    assert result.is_success
    assert competing_results[0].failure is RemovalFailure.TRANSIENT_FAILURE
    assert _members(factory, group_id) == {"O", "B"}
    assert _rules(factory, group_id) == {}


def test_draw_cannot_complete_while_removal_holds_the_group(file_engine: Engine) -> None:
    factory = sessionmaker(bind=file_engine, expire_on_commit=False)
    group_id = _seed_group(factory)

    class DrawDuringRemovalRepository(SqlAlchemyGroupRepository):
        def load_for_mutation(self, group_id: UUID):
            group = super().load_for_mutation(group_id)
            with factory() as draw_session, pytest.raises(OperationalError):
                draw_session.execute(
                    update(GroupRow)
                    .where(GroupRow.id == group_id)
                    .values(draw_completed_at=datetime.now(UTC))
                )
                draw_session.commit()
            return group

    result = _use_case(factory, DrawDuringRemovalRepository).execute(group_id, "A", "O")

    assert result.is_success
    assert _members(factory, group_id) == {"O", "B"}
    with factory() as session:
        assert session.get(GroupRow, group_id).draw_completed_at is None
