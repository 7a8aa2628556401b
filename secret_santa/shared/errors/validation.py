# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from typing import Any, NoReturn

from pydantic import ValidationError as PydanticValidationError

from .base import ValidationError


def format_pydantic_errors(exc: PydanticValidationError) -> dict[str, Any]:
    """Flatten pydantic errors into the payload carried by a 422 response.

    Input values are left out so that identifiers echoed from the URL do not
    end up in error bodies or logs.
    """

    errors: list[dict[str, Any]] = []
    for error in exc.errors(include_url=False, include_input=False):
        field = ".".join(str(part) for part in error.get("loc", ()) if part is not None)
        entry: dict[str, Any] = {"field": field or "unknown", "type": error["type"]}
        if error.get("ctx"):
            entry["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(entry)

    return {
        "fields": sorted({entry["field"] for entry in errors if entry["field"] != "unknown"}),
        "errors": errors,
    }


def raise_validation_error(exc: PydanticValidationError) -> NoReturn:
    raise ValidationError(context=format_pydantic_errors(exc)) from exc


__all__ = [
    "format_pydantic_errors",
    "raise_validation_error",
]
