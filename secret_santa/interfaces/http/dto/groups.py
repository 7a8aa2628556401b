# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

USER_ID_MAX_LENGTH = 450


class RemoveParticipantRequestDTO(BaseModel):
    group_id: UUID
    user_id_to_remove: str = Field(min_length=1, max_length=USER_ID_MAX_LENGTH)
    requesting_user_id: str = Field(min_length=1, max_length=USER_ID_MAX_LENGTH)

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)
