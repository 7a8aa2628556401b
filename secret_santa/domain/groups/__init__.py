# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .entities import ExclusionRule, Group, GroupStatus
from .guards import REMOVAL_GUARDS, RemovalAttempt, check_removal
from .repositories import GroupMembershipRepository, MembershipUnitOfWork
from .results import FailureKind, RemovalFailure, RemovalResult

__all__ = [
    "ExclusionRule",
    "Group",
    "GroupStatus",
    "REMOVAL_GUARDS",
    "RemovalAttempt",
    "check_removal",
    "GroupMembershipRepository",
    "MembershipUnitOfWork",
    "FailureKind",
    "RemovalFailure",
    "RemovalResult",
]
