from __future__ import annotations
"""
server/smartrent/infrastructure/persistence/database/base.py

Base ORM SQLAlchemy 2.x.

L'import `from ...models import *` en fin de module est volontaire : il remplit
Base.metadata avec toutes les tables, si bien qu'un
`Base.metadata.create_all(bind=engine)` (SQLite des tests) crée le schéma complet.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base declarative pour tous les modèles."""
    pass


from smartrent.infrastructure.persistence.database.models import *  # noqa: F403,F401,E402

__all__ = ["Base"]
