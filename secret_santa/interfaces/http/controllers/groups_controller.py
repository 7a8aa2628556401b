# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from uuid import UUID

from flask import Blueprint, Response
from pydantic import ValidationError

from secret_santa.application.use_cases.groups import RemoveParticipantUseCase
from secret_santa.domain.groups.exceptions import (
    CannotRemoveOrganizerError,
    DrawAlreadyCompletedError,
    GroupNotFoundError,
    NotOrganizerError,
    ParticipantNotFoundError,
)
from secret_santa.domain.groups.results import RemovalFailure
from secret_santa.interfaces.http.dto.groups import RemoveParticipantRequestDTO
from secret_santa.interfaces.http.identity import current_user_id
from secret_santa.shared.errors.base import AppError, ServiceUnavailableError
from secret_santa.shared.errors.validation import raise_validation_error
from secret_santa.shared.logging import logger

_FAILURE_ERRORS: dict[RemovalFailure, type[AppError]] = {
    RemovalFailure.GROUP_NOT_FOUND: GroupNotFoundError,
    RemovalFailure.NOT_ORGANIZER: NotOrganizerError,
    RemovalFailure.DRAW_ALREADY_COMPLETED: DrawAlreadyCompletedError,
    RemovalFailure.CANNOT_REMOVE_ORGANIZER: CannotRemoveOrganizerError,
    RemovalFailure.PARTICIPANT_NOT_FOUND: ParticipantNotFoundError,
    RemovalFailure.TRANSIENT_FAILURE: ServiceUnavailableError,
}


def error_for(failure: RemovalFailure) -> AppError:
    return _FAILURE_ERRORS[failure]()


class GroupsController:
    def __init__(self, *, remove_participant_use_case: RemoveParticipantUseCase) -> None:
        self._remove_participant_use_case = remove_participant_use_case

    def remove_participant(self, group_id: UUID, user_id: str) -> tuple[Response, int]:
        requesting_user_id = current_user_id()
        try:
            dto = RemoveParticipantRequestDTO(
                group_id=group_id,
                user_id_to_remove=user_id,
                requesting_user_id=requesting_user_id,
            )
        except ValidationError as exc:
            raise_validation_error(exc)

        result = self._remove_participant_use_case.execute(
            dto.group_id, dto.user_id_to_remove, dto.requesting_user_id
        )
        if result.failure is not None:
            raise error_for(result.failure)

        logger.info(f"groups.remove_participant: ok group={dto.group_id}")
        return Response(status=204), 204

    def as_blueprint(self) -> Blueprint:
        bp = Blueprint("groups", __name__, url_prefix="/api/groups")
        bp.add_url_rule(
            "/<uuid:group_id>/participants/<string:user_id>",
            view_func=self.remove_participant,
            methods=["DELETE"],
        )
        return bp
