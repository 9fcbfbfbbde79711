from __future__ import annotations
"""server/smartrent/domain/department.py
~~~~~~~~~~~~~~~~~~~~~~~~
Département (unité locative) et utilisateur, vus par le cœur métier.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from smartrent.core.utils.datetime import utcnow
from smartrent.domain.enums import DepartmentStatus, UserRole


@dataclass
class Department:
    code: str
    name: str
    monthly_price: Decimal = Decimal("0")
    status: DepartmentStatus = DepartmentStatus.AVAILABLE
    current_tenant_id: Optional[uuid.UUID] = None
    is_active: bool = True
    id: Optional[uuid.UUID] = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def is_occupied(self) -> bool:
        return self.status == DepartmentStatus.OCCUPIED and self.current_tenant_id is not None


@dataclass
class User:
    id: uuid.UUID
    email: str
    role: UserRole = UserRole.USER
    first_name: str = ""
    last_name: str = ""
    is_active: bool = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
