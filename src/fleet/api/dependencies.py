"""Shared request dependencies and error helpers for the routers."""

from __future__ import annotations

from fastapi import HTTPException, status

from ..data.store import FleetStore, get_store
from ..services.timewindows import Clock, system_clock
from ..services.validation import FieldValidationError


def store_dependency() -> FleetStore:
    return get_store()


def clock_dependency() -> Clock:
    return system_clock


def bad_request(exc: ValueError) -> HTTPException:
    if isinstance(exc, FieldValidationError):
        detail: object = {"field": exc.field, "reason": exc.reason}
    else:
        detail = str(exc)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def not_found(kind: str, identifier: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{kind} '{identifier}' not found")
