from __future__ import annotations
"""
server/smartrent/api/schemas/department.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Pydantic schemas pour les départements.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from smartrent.domain.department import Department
from smartrent.domain.enums import DepartmentStatus


class DepartmentIn(BaseModel):
    # Code unique (ex: "A-101"), normalisé sans espaces autour.
    code: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=200)
    monthly_price: Decimal = Field(default=Decimal("0"), ge=0)
    status: DepartmentStatus = DepartmentStatus.AVAILABLE
    current_tenant_id: Optional[uuid.UUID] = None

    @field_validator("code", "name")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class DepartmentOut(BaseModel):
    id: uuid.UUID
    code: str
    name: str
    monthly_price: Decimal
    status: DepartmentStatus
    current_tenant_id: Optional[uuid.UUID] = None
    is_occupied: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_entity(cls, d: Department) -> "DepartmentOut":
        return cls(
            id=d.id,
            code=d.code,
            name=d.name,
            monthly_price=d.monthly_price,
            status=d.status,
            current_tenant_id=d.current_tenant_id,
            is_occupied=d.is_occupied(),
            created_at=d.created_at,
            updated_at=d.updated_at,
        )
