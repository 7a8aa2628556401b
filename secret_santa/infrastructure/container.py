# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from collections.abc import Callable
from functools import cached_property

from sqlalchemy.orm import Session

from secret_santa.application.use_cases.groups import RemoveParticipantUseCase
from secret_santa.infrastructure.db import SessionLocal
from secret_santa.infrastructure.unit_of_work import SqlAlchemyUnitOfWork, unit_of_work_factory
from secret_santa.interfaces.http.controllers.groups_controller import GroupsController


class Container:
    def __init__(self, session_factory: Callable[[], Session] | None = None) -> None:
        self._session_factory = session_factory or SessionLocal

    @cached_property
    def unit_of_work(self) -> Callable[[], SqlAlchemyUnitOfWork]:
        return unit_of_work_factory(self._session_factory)

    @cached_property
    def remove_participant_use_case(self) -> RemoveParticipantUseCase:
        return RemoveParticipantUseCase(unit_of_work=self.unit_of_work)

    @cached_property
    def groups_controller(self) -> GroupsController:
        return GroupsController(
            remove_participant_use_case=self.remove_participant_use_case,
        )


container = Container()
