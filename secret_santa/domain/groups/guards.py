# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Ordered guard chain for participant removal.

Guards run top to bottom against one snapshot and the first blocking guard
decides the outcome. Authorization sits directly after the existence check so
that a non-organizer never learns which business rule would have applied.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .entities import Group
from .results import RemovalFailure


@dataclass(slots=True, frozen=True)
class RemovalAttempt:
    group: Group | None
    user_id_to_remove: str
    requesting_user_id: str


Guard = Callable[[RemovalAttempt], bool]


def _group_missing(attempt: RemovalAttempt) -> bool:
    return attempt.group is None


def _requester_not_organizer(attempt: RemovalAttempt) -> bool:
    group = attempt.group
    return group is not None and not group.is_organizer(attempt.requesting_user_id)


def _draw_completed(attempt: RemovalAttempt) -> bool:
    return attempt.group is not None and attempt.group.has_draw_completed()


def _target_is_organizer(attempt: RemovalAttempt) -> bool:
    return attempt.group is not None and attempt.group.is_organizer(attempt.user_id_to_remove)


def _target_not_member(attempt: RemovalAttempt) -> bool:
    group = attempt.group
    return group is not None and not group.has_participant(attempt.user_id_to_remove)


REMOVAL_GUARDS: tuple[tuple[Guard, RemovalFailure], ...] = (
    (_group_missing, RemovalFailure.GROUP_NOT_FOUND),
    (_requester_not_organizer, RemovalFailure.NOT_ORGANIZER),
    (_draw_completed, RemovalFailure.DRAW_ALREADY_COMPLETED),
    (_target_is_organizer, RemovalFailure.CANNOT_REMOVE_ORGANIZER),
    (_target_not_member, RemovalFailure.PARTICIPANT_NOT_FOUND),
)


def check_removal(attempt: RemovalAttempt) -> RemovalFailure | None:
    """Return the first failure that blocks the attempt, or None when it may proceed."""

    for blocked, failure in REMOVAL_GUARDS:
        if blocked(attempt):
            return failure
    return None


__all__ = ["REMOVAL_GUARDS", "Guard", "RemovalAttempt", "check_removal"]
