# server/smartrent/infrastructure/persistence/database/session.py
from __future__ import annotations

"""SQLAlchemy engine/session setup + FastAPI dependency."""

from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from smartrent.core.config import settings

_engine: Engine | None = None
_SessionLocal: sessionmaker | None = None


def _connect_options(database_url: str) -> tuple[dict, dict]:
    """
    Options dépendantes du dialecte :
    - PostgreSQL (psycopg) : connect_timeout
    - SQLite : pas de contrôle de thread ; StaticPool pour partager une base en mémoire
    """
    url = make_url(database_url)
    backend = url.get_backend_name()
    kwargs: dict = dict(future=True, pool_pre_ping=True)
    connect_args: dict = {}

    if backend.startswith("postgresql") or backend == "postgres":
        connect_args["connect_timeout"] = int(settings.DB_CONNECT_TIMEOUT)
    elif backend.startswith("sqlite"):
        connect_args["check_same_thread"] = False
        if (url.database or "").strip() in ("", ":memory:"):
            kwargs["poolclass"] = StaticPool
    return kwargs, connect_args


def init_engine() -> Engine:
    """Crée (une seule fois) l'Engine du process."""
    global _engine
    if _engine is None:
        kwargs, connect_args = _connect_options(settings.DATABASE_URL)
        _engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, **kwargs)
    return _engine


def init_sessionmaker() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            bind=init_engine(),
            future=True,
            autoflush=True,
            expire_on_commit=False,
        )
    return _SessionLocal


def dispose_engine() -> None:
    """Ferme le pool et oublie les singletons (arrêt de l'app, tests)."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


def get_session() -> Session:
    """Nouvelle Session (l'appelant la ferme)."""
    return init_sessionmaker()()


def get_db() -> Iterator[Session]:
    """
    Dépendance FastAPI (fermeture automatique) :
        def endpoint(db: Session = Depends(get_db)): ...
    """
    db = get_session()
    try:
        yield db
    finally:
        db.close()
