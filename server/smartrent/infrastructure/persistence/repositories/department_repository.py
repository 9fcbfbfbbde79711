from __future__ import annotations
"""server/smartrent/infrastructure/persistence/repositories/department_repository.py
~~~~~~~~~~~~~~~~~~~~~~~~
Repo departments.

- `exists` ne compte que les départements actifs (non supprimés).
- `create` convertit une violation d'unicité du code en ConflictError
  (cas de deux créations concurrentes passées entre le contrôle et l'insert) ;
  la session est laissée en échec, le rollback revient à l'appelant.
- `soft_delete` passe is_active à False ; la ligne reste en base.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from smartrent.core.utils.datetime import as_utc, utcnow
from smartrent.domain.department import Department
from smartrent.domain.enums import DepartmentStatus
from smartrent.domain.errors import ConflictError
from smartrent.infrastructure.persistence.database.models.department import DepartmentModel

logger = logging.getLogger(__name__)


def _to_entity(row: DepartmentModel) -> Department:
    return Department(
        id=row.id,
        code=row.code,
        name=row.name,
        status=DepartmentStatus(row.status),
        monthly_price=row.monthly_price,
        current_tenant_id=row.current_tenant_id,
        is_active=row.is_active,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
    )


class DepartmentRepository:
    def __init__(self, session: Session) -> None:
        self.s = session

    def find_by_id(self, department_id: uuid.UUID) -> Optional[Department]:
        row = self.s.get(DepartmentModel, department_id)
        return _to_entity(row) if row else None

    def find_by_code(self, code: str) -> Optional[Department]:
        row = self.s.scalar(select(DepartmentModel).where(DepartmentModel.code == code).limit(1))
        return _to_entity(row) if row else None

    def exists(self, department_id: uuid.UUID) -> bool:
        n = self.s.scalar(
            select(func.count())
            .select_from(DepartmentModel)
            .where(DepartmentModel.id == department_id, DepartmentModel.is_active.is_(True))
        )
        return bool(n)

    def create(self, department: Department) -> Department:
        row = DepartmentModel(
            id=uuid.uuid4(),
            code=department.code,
            name=department.name,
            status=DepartmentStatus(department.status).value,
            monthly_price=department.monthly_price,
            current_tenant_id=department.current_tenant_id,
            is_active=True,
            created_at=department.created_at,
            updated_at=department.updated_at,
        )
        self.s.add(row)
        try:
            self.s.flush()
        except IntegrityError as e:
            raise ConflictError(f"A department with code {department.code} already exists") from e
        logger.info("Département créé id=%s code=%s", row.id, row.code)
        return _to_entity(row)

    def soft_delete(self, department_id: uuid.UUID) -> bool:
        row = self.s.get(DepartmentModel, department_id)
        if row is None or not row.is_active:
            return False
        row.is_active = False
        row.updated_at = utcnow()
        self.s.flush()
        logger.info("Département désactivé id=%s", department_id)
        return True
