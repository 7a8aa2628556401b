# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .remove_participant import RemoveParticipantCommand, RemoveParticipantUseCase

__all__ = ["RemoveParticipantCommand", "RemoveParticipantUseCase"]
