# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from http import HTTPStatus

from flask import Flask, Response, g, jsonify, request
from werkzeug.exceptions import HTTPException

from secret_santa.shared.logging import logger

from .base import AppError


def handle_app_error(error: AppError) -> tuple[Response, HTTPStatus]:
    response = jsonify(error.to_dict())
    return response, error.status


def register_error_handler(app: Flask) -> None:
    @app.errorhandler(AppError)
    def _handle_app_error(exc: AppError):
        # Rejections are routine; only an unavailable store is worth a warning
        log = logger.warning if exc.status >= HTTPStatus.INTERNAL_SERVER_ERROR else logger.info
        log(
            f"{request.method} {request.path} -> {int(exc.status)} {exc.code} "
            f"user={getattr(g, 'user_id', None)}"
        )
        return handle_app_error(exc)

    @app.errorhandler(HTTPException)
    def _handle_http(exc: HTTPException):
        return exc

    @app.errorhandler(Exception)
    def _handle_unexpected(exc: Exception):
        logger.opt(exception=exc).error(
            f"Unhandled {type(exc).__name__} on {request.method} {request.path}"
        )
        return jsonify({"error": "internal_error"}), HTTPStatus.INTERNAL_SERVER_ERROR
