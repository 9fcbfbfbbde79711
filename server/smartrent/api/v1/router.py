from __future__ import annotations
"""server/smartrent/api/v1/router.py
~~~~~~~~~~~~~~~~~~~~~~~~
Router principal API v1.
"""
from fastapi import APIRouter

from smartrent.api.v1.endpoints import alerts, departments, health

api_router = APIRouter()
api_router.include_router(health.router, tags=["health"])
api_router.include_router(alerts.router, tags=["alerts"])
api_router.include_router(departments.router, tags=["departments"])
