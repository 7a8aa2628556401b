# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from secret_santa.domain.groups.guards import RemovalAttempt, check_removal
from secret_santa.domain.groups.repositories import MembershipUnitOfWork
from secret_santa.domain.groups.results import FailureKind, RemovalFailure, RemovalResult
from secret_santa.shared.errors.base import TransientStoreError
from secret_santa.shared.logging import logger


@dataclass(slots=True, frozen=True)
class RemoveParticipantCommand:
    group_id: UUID
    user_id_to_remove: str
    requesting_user_id: str


class RemoveParticipantUseCase:
    """Remove a participant and every exclusion rule that references them.

    The group is read and both deletes are applied inside one unit of work,
    so either the participant and their rules disappear together or nothing
    changes. Expected outcomes come back as a ``RemovalResult``; store
    failures are reported as ``RemovalFailure.TRANSIENT_FAILURE``.
    """

    def __init__(
        self,
        *,
        unit_of_work: Callable[[], MembershipUnitOfWork],
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._unit_of_work = unit_of_work
        self._clock = clock or (lambda: datetime.now(UTC))

    def execute(
        self, group_id: UUID, user_id_to_remove: str, requesting_user_id: str
    ) -> RemovalResult:
        logger.info(
            f"groups.remove_participant: group={group_id} target={user_id_to_remove} "
            f"requested_by={requesting_user_id}"
        )
        try:
            with self._unit_of_work() as uow:
                group = uow.groups.load_for_mutation(group_id)
                failure = check_removal(
                    RemovalAttempt(
                        group=group,
                        user_id_to_remove=user_id_to_remove,
                        requesting_user_id=requesting_user_id,
                    )
                )
                if failure is None:
                    deleted = uow.groups.delete_membership(group_id, user_id_to_remove)
                    if deleted == 0:
                        # Membership vanished after the snapshot was read
                        failure = RemovalFailure.PARTICIPANT_NOT_FOUND
                if failure is not None:
                    uow.rollback()
                    self._log_rejection(group_id, user_id_to_remove, requesting_user_id, failure)
                    return RemovalResult.failed(failure)

                removed_rules = uow.groups.delete_exclusion_rules_referencing(
                    group_id, user_id_to_remove
                )
                uow.groups.touch(group_id, self._clock())
        except TransientStoreError as exc:
            logger.warning(
                f"groups.remove_participant: transient failure group={group_id} "
                f"target={user_id_to_remove} reason={exc.reason}"
            )
            return RemovalResult.failed(RemovalFailure.TRANSIENT_FAILURE)

        logger.info(
            f"groups.remove_participant: ok group={group_id} target={user_id_to_remove} "
            f"exclusion_rules_removed={len(removed_rules)}"
        )
        return RemovalResult.success()

    def handle(self, command: RemoveParticipantCommand) -> RemovalResult:
        return self.execute(
            command.group_id, command.user_id_to_remove, command.requesting_user_id
        )

    @staticmethod
    def _log_rejection(
        group_id: UUID, user_id_to_remove: str, requesting_user_id: str, failure: RemovalFailure
    ) -> None:
        message = (
            f"groups.remove_participant: rejected {failure} group={group_id} "
            f"target={user_id_to_remove} requested_by={requesting_user_id}"
        )
        if failure.kind is FailureKind.AUTHORIZATION:
            logger.warning(message)
        else:
            logger.info(message)


__all__ = ["RemoveParticipantCommand", "RemoveParticipantUseCase"]
