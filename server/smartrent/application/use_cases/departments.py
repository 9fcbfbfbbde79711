from __future__ import annotations
"""server/smartrent/application/use_cases/departments.py
~~~~~~~~~~~~~~~~~~~~~~~~
Use-cases départements (création, lecture, suppression logique).
"""
import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Optional

from smartrent.application.permissions import require_admin
from smartrent.application.results import UseCase
from smartrent.domain.department import Department
from smartrent.domain.enums import DepartmentStatus
from smartrent.domain.errors import ConflictError, NotFoundError, ValidationError
from smartrent.domain.repositories import DepartmentRepository

logger = logging.getLogger(__name__)


class CreateDepartmentUseCase(UseCase):
    failure_message = "Could not create the department"

    def __init__(self, departments: DepartmentRepository) -> None:
        self.departments = departments

    def _execute(
        self,
        *,
        code: str,
        name: str,
        requester_role: str,
        monthly_price: Decimal | int | str = 0,
        status: DepartmentStatus = DepartmentStatus.AVAILABLE,
        current_tenant_id: Optional[uuid.UUID] = None,
    ) -> Department:
        require_admin(requester_role, "create departments")
        code = (code or "").strip()
        name = (name or "").strip()
        if not code or not name:
            raise ValidationError("code and name are required")
        try:
            price = Decimal(str(monthly_price))
            status = DepartmentStatus(status)
        except (InvalidOperation, ValueError) as e:
            raise ValidationError(str(e) or "Invalid department data") from e
        if price < 0:
            raise ValidationError("monthly_price cannot be negative")

        if self.departments.find_by_code(code) is not None:
            raise ConflictError(f"A department with code {code} already exists")

        return self.departments.create(
            Department(
                code=code,
                name=name,
                monthly_price=price,
                status=status,
                current_tenant_id=current_tenant_id,
            )
        )


class GetDepartmentByIdUseCase(UseCase):
    failure_message = "Could not fetch the department"

    def __init__(self, departments: DepartmentRepository) -> None:
        self.departments = departments

    def _execute(self, *, department_id: uuid.UUID) -> Department:
        department = self.departments.find_by_id(department_id)
        if department is None or not department.is_active:
            raise NotFoundError("Department not found")
        return department


class DeleteDepartmentUseCase(UseCase):
    """Suppression logique ; refusée tant qu'un locataire occupe l'unité."""

    failure_message = "Could not delete the department"

    def __init__(self, departments: DepartmentRepository) -> None:
        self.departments = departments

    def _execute(self, *, department_id: uuid.UUID, requester_role: str) -> bool:
        require_admin(requester_role, "delete departments")
        department = self.departments.find_by_id(department_id)
        if department is None or not department.is_active:
            raise NotFoundError("Department not found")
        if department.is_occupied():
            raise ConflictError(
                "Cannot delete a department with an active tenant. Remove the tenant first."
            )
        if not self.departments.soft_delete(department_id):
            raise NotFoundError("Department not found")
        logger.info("Département %s supprimé (logique)", department_id)
        return True
