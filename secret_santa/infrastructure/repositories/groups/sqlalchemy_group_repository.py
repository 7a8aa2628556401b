# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, or_, select, update
from sqlalchemy.orm import Session

from secret_santa.domain.groups.entities import ExclusionRule, Group
from secret_santa.domain.groups.repositories import GroupMembershipRepository
from secret_santa.infrastructure.db.models import ExclusionRuleRow, GroupParticipantRow, GroupRow


class SqlAlchemyGroupRepository(GroupMembershipRepository):
    """Group membership store bound to the session of one unit of work."""

    def __init__(self, session: Session):
        self._session = session

    def load_for_mutation(self, group_id: UUID) -> Group | None:
        # Row lock keeps a concurrent draw or removal out until this transaction ends
        row = self._session.execute(
            select(GroupRow).where(GroupRow.id == group_id).with_for_update()
        ).scalar_one_or_none()
        if row is None:
            return None
        participant_ids = self._session.scalars(
            select(GroupParticipantRow.user_id).where(GroupParticipantRow.group_id == group_id)
        ).all()
        return Group(
            id=row.id,
            organizer_user_id=row.organizer_user_id,
            participant_ids=frozenset(participant_ids),
            draw_completed_at=row.draw_completed_at,
        )

    def delete_membership(self, group_id: UUID, user_id: str) -> int:
        result = self._session.execute(
            delete(GroupParticipantRow)
            .where(
                GroupParticipantRow.group_id == group_id,
                GroupParticipantRow.user_id == user_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def delete_exclusion_rules_referencing(
        self, group_id: UUID, user_id: str
    ) -> tuple[ExclusionRule, ...]:
        referencing = (
            ExclusionRuleRow.group_id == group_id,
            or_(ExclusionRuleRow.user_id_1 == user_id, ExclusionRuleRow.user_id_2 == user_id),
        )
        rows = self._session.execute(
            select(
                ExclusionRuleRow.id,
                ExclusionRuleRow.user_id_1,
                ExclusionRuleRow.user_id_2,
            ).where(*referencing)
        ).all()
        self._session.execute(
            delete(ExclusionRuleRow)
            .where(*referencing)
            .execution_options(synchronize_session=False)
        )
        return tuple(
            ExclusionRule(id=rule_id, group_id=group_id, user_id_1=first, user_id_2=second)
            for rule_id, first, second in rows
        )

    def touch(self, group_id: UUID, at: datetime) -> None:
        self._session.execute(
            update(GroupRow)
            .where(GroupRow.id == group_id)
            .values(updated_at=at)
            .execution_options(synchronize_session=False)
        )
