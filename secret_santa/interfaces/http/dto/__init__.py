# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .groups import RemoveParticipantRequestDTO

__all__ = ["RemoveParticipantRequestDTO"]
