# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from secret_santa.shared.errors.base import DomainError


class GroupNotFoundError(DomainError):
    code = "group_not_found"
    status = HTTPStatus.NOT_FOUND


class NotOrganizerError(DomainError):
    code = "not_organizer"
    status = HTTPStatus.FORBIDDEN


class DrawAlreadyCompletedError(DomainError):
    code = "draw_already_completed"


class CannotRemoveOrganizerError(DomainError):
    code = "cannot_remove_organizer"


class ParticipantNotFoundError(DomainError):
    code = "participant_not_found"
    status = HTTPStatus.NOT_FOUND
