# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .sqlalchemy_group_repository import SqlAlchemyGroupRepository

__all__ = ["SqlAlchemyGroupRepository"]
