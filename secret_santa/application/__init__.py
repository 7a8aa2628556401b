# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .use_cases.groups import RemoveParticipantCommand, RemoveParticipantUseCase

__all__ = ["RemoveParticipantCommand", "RemoveParticipantUseCase"]
