# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Membership management for Secret Santa gift-exchange groups."""

__version__ = "0.1.0"
