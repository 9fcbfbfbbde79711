from __future__ import annotations
"""server/smartrent/infrastructure/persistence/database/models/__init__.py
~~~~~~~~~~~~~~~~~~~~~~~~
Modèles ORM (register for Alembic).
"""

from .user import UserModel
from .department import DepartmentModel
from .alert import AlertModel

__all__ = ["UserModel", "DepartmentModel", "AlertModel"]
