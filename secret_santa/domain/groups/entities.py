# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Group aggregate snapshot and its dependent exclusion rules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from secret_santa.domain.exceptions import InvariantViolation


class GroupStatus(StrEnum):
    FORMING = "forming"
    DRAW_COMPLETED = "draw_completed"


@dataclass(slots=True, frozen=True)
class Group:
    """Authoritative group state as loaded for a single mutation attempt.

    The snapshot is read-only; membership changes go through the
    membership use cases so that dependent exclusion rules are kept in step.
    """

    id: UUID
    organizer_user_id: str
    participant_ids: frozenset[str]
    draw_completed_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "participant_ids", frozenset(self.participant_ids))
        if not self.organizer_user_id:
            raise InvariantViolation("organizer id must not be empty", field="organizer_user_id")
        if self.organizer_user_id not in self.participant_ids:
            raise InvariantViolation(
                "organizer must be a participant of the group", field="participant_ids"
            )

    def is_organizer(self, user_id: str) -> bool:
        return user_id == self.organizer_user_id

    def has_draw_completed(self) -> bool:
        return self.draw_completed_at is not None

    def has_participant(self, user_id: str) -> bool:
        return user_id in self.participant_ids

    @property
    def status(self) -> GroupStatus:
        if self.has_draw_completed():
            return GroupStatus.DRAW_COMPLETED
        return GroupStatus.FORMING


@dataclass(slots=True, frozen=True)
class ExclusionRule:
    """Unordered pair of participants that must not be matched in the draw."""

    id: UUID
    group_id: UUID
    user_id_1: str
    user_id_2: str

    def references(self, user_id: str) -> bool:
        return user_id in (self.user_id_1, self.user_id_2)
