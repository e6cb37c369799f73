"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from ...data.store import FleetStore
from ..dependencies import store_dependency

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/store", status_code=status.HTTP_200_OK)
def health_store(store: FleetStore = Depends(store_dependency)) -> dict:
    """Entity counts held by the in-memory store."""
    return {
        "vehicles": len(store.list_vehicles()),
        "routes": len(store.list_routes()),
        "hubs": len(store.list_hubs()),
    }
