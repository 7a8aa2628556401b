# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class FailureKind(StrEnum):
    NOT_FOUND = "not_found"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    TRANSIENT = "transient"


class RemovalFailure(StrEnum):
    GROUP_NOT_FOUND = "group_not_found"
    NOT_ORGANIZER = "not_organizer"
    DRAW_ALREADY_COMPLETED = "draw_already_completed"
    CANNOT_REMOVE_ORGANIZER = "cannot_remove_organizer"
    PARTICIPANT_NOT_FOUND = "participant_not_found"
    TRANSIENT_FAILURE = "transient_failure"

    @property
    def kind(self) -> FailureKind:
        return _FAILURE_KINDS[self]

    @property
    def is_retryable(self) -> bool:
        return self.kind is FailureKind.TRANSIENT


_FAILURE_KINDS: dict[RemovalFailure, FailureKind] = {
    RemovalFailure.GROUP_NOT_FOUND: FailureKind.NOT_FOUND,
    RemovalFailure.NOT_ORGANIZER: FailureKind.AUTHORIZATION,
    RemovalFailure.DRAW_ALREADY_COMPLETED: FailureKind.BUSINESS_RULE,
    RemovalFailure.CANNOT_REMOVE_ORGANIZER: FailureKind.BUSINESS_RULE,
    RemovalFailure.PARTICIPANT_NOT_FOUND: FailureKind.NOT_FOUND,
    RemovalFailure.TRANSIENT_FAILURE: FailureKind.TRANSIENT,
}


@dataclass(slots=True, frozen=True)
class RemovalResult:
    failure: RemovalFailure | None = None

    @property
    def is_success(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls) -> RemovalResult:
        return cls()

    @classmethod
    def failed(cls, failure: RemovalFailure) -> RemovalResult:
        return cls(failure=failure)
