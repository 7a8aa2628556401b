# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Requester identity as forwarded by the upstream authenticator."""

from __future__ import annotations

from flask import g, request

from secret_santa.shared.config import load_config
from secret_santa.shared.errors.base import UnauthorizedError
from secret_santa.shared.logging import logger


def current_user_id() -> str:
    header = load_config().security.identity_header
    user_id = (request.headers.get(header) or "").strip()
    if not user_id:
        logger.warning(f"No {header} header on {request.method} {request.path}")
        raise UnauthorizedError()
    g.user_id = user_id
    return user_id
