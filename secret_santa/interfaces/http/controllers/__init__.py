# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .groups_controller import GroupsController, error_for

__all__ = ["GroupsController", "error_for"]
