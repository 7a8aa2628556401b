# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import UUID

from .entities import ExclusionRule, Group


class GroupMembershipRepository(Protocol):
    def load_for_mutation(self, group_id: UUID) -> Group | None: ...
    def delete_membership(self, group_id: UUID, user_id: str) -> int: ...
    def delete_exclusion_rules_referencing(
        self, group_id: UUID, user_id: str
    ) -> tuple[ExclusionRule, ...]: ...
    def touch(self, group_id: UUID, at: datetime) -> None: ...


class MembershipUnitOfWork(Protocol):
    """One transaction over group membership.

    Commits on clean exit unless ``rollback()`` was called inside the block.
    Store failures surface as ``TransientStoreError`` after the transaction
    has been rolled back.
    """

    def __enter__(self) -> MembershipUnitOfWork: ...

    def __exit__(self, exc_type, exc, tb) -> None: ...

    @property
    def groups(self) -> GroupMembershipRepository: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
