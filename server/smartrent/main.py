from __future__ import annotations
"""server/smartrent/main.py
~~~~~~~~~~~~~~~~~~~~~~~~
Point d'entrée FastAPI.
"""
from typing import List

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from smartrent.api.v1.router import api_router
from smartrent.core.config import settings
from smartrent.core.logging import setup_logging
from smartrent.infrastructure.persistence.database.session import dispose_engine

app = FastAPI(title="SmartRent API", version="1.0.0")

allow_origins: List[str] = []
if origins := settings.CORS_ALLOW_ORIGINS:
    allow_origins = [o.strip() for o in origins.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins or ["*"],
    allow_credentials=bool(allow_origins),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def startup() -> None:
    setup_logging()


@app.on_event("shutdown")
async def shutdown() -> None:
    dispose_engine()


app.include_router(api_router, prefix="/api/v1")
