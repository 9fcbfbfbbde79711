from __future__ import annotations
"""server/smartrent/api/v1/endpoints/departments.py
~~~~~~~~~~~~~~~~~~~~~~~~
Endpoints départements (création, lecture, suppression logique).
"""
import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from smartrent.api.schemas.department import DepartmentIn, DepartmentOut
from smartrent.infrastructure.container import DepartmentUseCases
from smartrent.infrastructure.persistence.database.session import get_db
from smartrent.presentation.api.deps import CurrentUser, get_current_user, get_department_use_cases
from smartrent.presentation.api.responses import unwrap

router = APIRouter(prefix="/departments")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=DepartmentOut)
def create_department(
    payload: DepartmentIn,
    user: CurrentUser = Depends(get_current_user),
    uc: DepartmentUseCases = Depends(get_department_use_cases),
    db: Session = Depends(get_db),
) -> DepartmentOut:
    result = uc.create.execute(
        code=payload.code,
        name=payload.name,
        requester_role=user.role,
        monthly_price=payload.monthly_price,
        status=payload.status,
        current_tenant_id=payload.current_tenant_id,
    )
    return DepartmentOut.from_entity(unwrap(result, db))


@router.get("/{department_id}", response_model=DepartmentOut)
def get_department(
    department_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    uc: DepartmentUseCases = Depends(get_department_use_cases),
    db: Session = Depends(get_db),
) -> DepartmentOut:
    return DepartmentOut.from_entity(unwrap(uc.get_by_id.execute(department_id=department_id), db))


@router.delete("/{department_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_department(
    department_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    uc: DepartmentUseCases = Depends(get_department_use_cases),
    db: Session = Depends(get_db),
) -> Response:
    unwrap(uc.delete.execute(department_id=department_id, requester_role=user.role), db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
