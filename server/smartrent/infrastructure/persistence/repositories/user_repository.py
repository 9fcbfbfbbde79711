from __future__ import annotations
"""server/smartrent/infrastructure/persistence/repositories/user_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~
Repo users (lecture : contrôles d'existence des références).

Un rôle inconnu en base est lu comme `user` (moindre privilège).
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from smartrent.domain.department import User
from smartrent.domain.enums import UserRole
from smartrent.infrastructure.persistence.database.models.user import UserModel

logger = logging.getLogger(__name__)


def _role(value: str) -> UserRole:
    try:
        return UserRole(value)
    except ValueError:
        logger.warning("Rôle inconnu %r, traité comme %s", value, UserRole.USER.value)
        return UserRole.USER


class UserRepository:
    def __init__(self, session: Session) -> None:
        self.s = session

    def find_by_id(self, user_id: uuid.UUID) -> Optional[User]:
        row = self.s.get(UserModel, user_id)
        if row is None:
            return None
        return User(
            id=row.id,
            email=row.email,
            role=_role(row.role),
            first_name=row.first_name or "",
            last_name=row.last_name or "",
            is_active=row.is_active,
        )

    def exists(self, user_id: uuid.UUID) -> bool:
        n = self.s.scalar(select(func.count()).select_from(UserModel).where(UserModel.id == user_id))
        return bool(n)
