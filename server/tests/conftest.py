# server/tests/conftest.py
"""
Conftest *global* pour toute la suite de tests.

Points clés :
- Pose des ENV sûres avant tout import `smartrent.*` (SQLite in-memory, secret JWT de test).
- Pour les tests @unit uniquement :
  - Monte une DB SQLite in-memory partagée (StaticPool) + Base.create_all, FK actives.
  - Fournit la fixture `Session` (sessionmaker) et purge les tables entre tests.
- Fabriques de données de référence : users, départements, jetons Bearer.
"""

import os
import importlib
import pkgutil
import uuid
from decimal import Decimal

import pytest

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


# ============================================================================
# Helpers
# ============================================================================
def _is_unit(request: pytest.FixtureRequest) -> bool:
    """True si le test courant est marqué @pytest.mark.unit."""
    return request.node.get_closest_marker("unit") is not None


def pytest_configure(config) -> None:
    """
    S'exécute avant la collecte → les Settings() liront ces valeurs.
    """
    os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
    os.environ.setdefault("JWT_SECRET", "test-secret")
    os.environ.setdefault("LOG_LEVEL", "WARNING")


# ============================================================================
# UNIT-ONLY: DB SQLite in-memory partagée + Base.metadata.create_all
# ============================================================================
@pytest.fixture(scope="session")
def _sqlite_engine_unit():
    """
    Engine in-memory **partagé** entre connexions (StaticPool + check_same_thread=False)
    + activation des contraintes FK sur chaque connexion.
    """
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    from smartrent.infrastructure.persistence.database import base as db_base
    from smartrent.infrastructure.persistence.database import models as models_pkg

    for _finder, name, _ispkg in pkgutil.walk_packages(
        models_pkg.__path__, models_pkg.__name__ + "."
    ):
        importlib.import_module(name)

    db_base.Base.metadata.create_all(engine)
    return engine


@pytest.fixture(scope="session")
def _Session_unit(_sqlite_engine_unit):
    return sessionmaker(
        bind=_sqlite_engine_unit,
        future=True,
        autoflush=True,
        expire_on_commit=False,
    )


@pytest.fixture
def Session(request, _Session_unit):
    """
    Fournit un sessionmaker à utiliser comme `with Session() as s:` pour les tests unitaires.
    Sera *skippé* s'il est injecté dans un test non marqué @unit.
    """
    if not _is_unit(request):
        pytest.skip("Session fixture is only available for unit tests")
    return _Session_unit


# Purge DB entre tests unitaires (évite les fuites d'état)
@pytest.fixture(autouse=True)
def _clear_db_between_unit_tests(request, _Session_unit):
    """
    Après chaque test unitaire, on supprime le contenu de toutes les tables.
    ⚠️ Générateur : doit 'yield' aussi hors unit.
    """
    if not _is_unit(request):
        yield
        return

    yield
    from smartrent.infrastructure.persistence.database import base as db_base
    with _Session_unit() as s:
        for table in reversed(db_base.Base.metadata.sorted_tables):
            s.execute(table.delete())
        s.commit()


# ============================================================================
# Fabriques de données de référence
# ============================================================================
@pytest.fixture
def make_user(Session):
    """`make_user(role="user")` → id d'un utilisateur committé."""
    from smartrent.infrastructure.persistence.database.models.user import UserModel

    def _make(role: str = "user", *, is_active: bool = True) -> uuid.UUID:
        uid = uuid.uuid4()
        with Session() as s:
            s.add(UserModel(id=uid, email=f"{uid.hex[:12]}@example.test", role=role, is_active=is_active))
            s.commit()
        return uid

    return _make


@pytest.fixture
def make_department(Session):
    """`make_department(code=None, tenant_id=None)` → id d'un département committé."""
    from smartrent.infrastructure.persistence.database.models.department import DepartmentModel

    def _make(code: str | None = None, *, tenant_id: uuid.UUID | None = None) -> uuid.UUID:
        did = uuid.uuid4()
        with Session() as s:
            s.add(
                DepartmentModel(
                    id=did,
                    code=code or f"D-{did.hex[:6]}",
                    name="Depto test",
                    status="occupied" if tenant_id else "available",
                    monthly_price=Decimal("850.00"),
                    current_tenant_id=tenant_id,
                )
            )
            s.commit()
        return did

    return _make


@pytest.fixture
def admin_id(make_user) -> uuid.UUID:
    return make_user("admin")


@pytest.fixture
def tenant_id(make_user) -> uuid.UUID:
    return make_user("user")


@pytest.fixture
def department_id(make_department) -> uuid.UUID:
    return make_department("A-101")


@pytest.fixture
def bearer():
    """`bearer(user_id, role)` → en-têtes Authorization prêts pour TestClient."""
    from smartrent.core.security import create_access_token

    def _headers(user_id: uuid.UUID, role: str = "user") -> dict:
        token = create_access_token({"sub": str(user_id), "role": role})
        return {"Authorization": f"Bearer {token}"}

    return _headers
