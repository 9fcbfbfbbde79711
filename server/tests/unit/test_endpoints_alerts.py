# server/tests/unit/test_endpoints_alerts.py
import uuid

import pytest
from fastapi.testclient import TestClient

from smartrent.main import app
from smartrent.infrastructure.persistence.database.session import get_db as real_get_db

pytestmark = pytest.mark.unit

API = "/api/v1"


# -----------------------------------------------------------------------------
# get_db surchargé -> session SQLite mémoire (fixture Session)
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def override_deps(Session):
    def _get_db_for_tests():
        s = Session()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[real_get_db] = _get_db_for_tests
    yield
    app.dependency_overrides.pop(real_get_db, None)


@pytest.fixture
def client():
    return TestClient(app)


def _payload(department_id, **overrides):
    data = {
        "title": "Fuga de agua",
        "description": "Gotea la llave del baño",
        "category": "MANTENIMIENTO",
        "priority": "ALTA",
        "department_id": str(department_id),
    }
    data.update(overrides)
    return data


def _create(client, headers, department_id, **overrides) -> dict:
    r = client.post(f"{API}/alerts", json=_payload(department_id, **overrides), headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


# -----------------------------------------------------------------------------
# Authentification
# -----------------------------------------------------------------------------
def test_health(client):
    assert client.get(f"{API}/health").json() == {"status": "ok"}


def test_missing_bearer_is_401(client):
    r = client.get(f"{API}/alerts")
    assert r.status_code == 401
    assert r.json()["detail"] == "missing_token"


def test_garbage_token_is_401(client):
    r = client.get(f"{API}/alerts", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["detail"] == "invalid_token"


def test_unknown_user_is_401(client, bearer):
    r = client.get(f"{API}/alerts", headers=bearer(uuid.uuid4()))
    assert r.status_code == 401
    assert r.json()["detail"] == "user_not_found"


def test_disabled_user_is_403(client, bearer, make_user):
    uid = make_user(is_active=False)
    r = client.get(f"{API}/alerts", headers=bearer(uid))
    assert r.status_code == 403


def test_role_comes_from_database_not_token(client, bearer, tenant_id):
    # un jeton qui se prétend admin ne donne pas accès aux stats
    r = client.get(f"{API}/alerts/stats", headers=bearer(tenant_id, role="admin"))
    assert r.status_code == 403
    assert r.json()["detail"]["code"] == "FORBIDDEN"


# -----------------------------------------------------------------------------
# Référentiels
# -----------------------------------------------------------------------------
def test_enum_listings(client):
    cats = client.get(f"{API}/alerts/categories").json()
    assert {"value": "MANTENIMIENTO", "label": "Mantenimiento"} in cats
    assert len(cats) == 6

    prios = [p["value"] for p in client.get(f"{API}/alerts/priorities").json()]
    assert prios == ["BAJA", "MEDIA", "ALTA", "URGENTE"]

    statuses = client.get(f"{API}/alerts/statuses").json()
    assert {"value": "EN_PROGRESO", "label": "en progreso"} in statuses


# -----------------------------------------------------------------------------
# Alertes
# -----------------------------------------------------------------------------
def test_create_uses_caller_as_reporter(client, bearer, tenant_id, department_id):
    body = _create(client, bearer(tenant_id), department_id)
    assert body["reporter_id"] == str(tenant_id)
    assert body["status"] == "PENDIENTE"
    assert sorted(body["valid_transitions"]) == ["CANCELADO", "EN_PROGRESO"]
    assert body["version"] == 1


def test_create_rejects_unknown_category(client, bearer, tenant_id, department_id):
    r = client.post(
        f"{API}/alerts", json=_payload(department_id, category="JARDIN"), headers=bearer(tenant_id)
    )
    assert r.status_code == 422


def test_create_with_unknown_department_is_404(client, bearer, tenant_id):
    r = client.post(f"{API}/alerts", json=_payload(uuid.uuid4()), headers=bearer(tenant_id))
    assert r.status_code == 404
    assert r.json()["detail"] == {"code": "NOT_FOUND", "message": "Department not found"}


def test_user_reading_other_users_alert_is_403(client, bearer, tenant_id, make_user, department_id):
    alert = _create(client, bearer(tenant_id), department_id)
    intruder = make_user()
    r = client.get(f"{API}/alerts/{alert['id']}", headers=bearer(intruder))
    assert r.status_code == 403

    own = client.get(f"{API}/alerts/{alert['id']}", headers=bearer(tenant_id))
    assert own.status_code == 200


def test_invalid_transition_is_409_with_options(client, bearer, tenant_id, admin_id, department_id):
    alert = _create(client, bearer(tenant_id), department_id)
    r = client.put(
        f"{API}/alerts/{alert['id']}/status",
        json={"status": "RESUELTO"},
        headers=bearer(admin_id, "admin"),
    )
    assert r.status_code == 409
    detail = r.json()["detail"]
    assert detail["code"] == "INVALID_TRANSITION"
    assert detail["valid_transitions"] == ["CANCELADO", "EN_PROGRESO"]


def test_status_flow_and_notes(client, bearer, tenant_id, admin_id, department_id):
    alert = _create(client, bearer(tenant_id), department_id)
    admin = bearer(admin_id, "admin")

    r = client.put(f"{API}/alerts/{alert['id']}/status", json={"status": "EN_PROGRESO"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["assigned_to"] == str(admin_id)

    r = client.put(
        f"{API}/alerts/{alert['id']}/status",
        json={"status": "RESUELTO", "notes": "Cambiado el empaque"},
        headers=admin,
    )
    body = r.json()
    assert body["status"] == "RESUELTO"
    assert body["resolved_at"] is not None
    assert body["notes"][-1]["text"] == "Cambiado el empaque"
    assert body["notes"][-1]["formatted"].endswith(f"[{admin_id}]: Cambiado el empaque")

    r = client.post(f"{API}/alerts/{alert['id']}/notes", json={"note": "Gracias"}, headers=bearer(tenant_id))
    assert r.status_code == 200
    assert len(r.json()["notes"]) == 2


def test_user_cannot_change_status(client, bearer, tenant_id, department_id):
    alert = _create(client, bearer(tenant_id), department_id)
    r = client.put(
        f"{API}/alerts/{alert['id']}/status", json={"status": "CANCELADO"}, headers=bearer(tenant_id)
    )
    assert r.status_code == 403
    # aucune écriture : l'alerte est toujours en attente
    assert client.get(f"{API}/alerts/{alert['id']}", headers=bearer(tenant_id)).json()["status"] == "PENDIENTE"


def test_assign_priority_and_delete(client, bearer, tenant_id, admin_id, department_id):
    alert = _create(client, bearer(tenant_id), department_id)
    admin = bearer(admin_id, "admin")

    r = client.put(f"{API}/alerts/{alert['id']}/assign", json={"staff_id": str(admin_id)}, headers=admin)
    assert r.status_code == 200 and r.json()["assigned_to"] == str(admin_id)

    r = client.put(f"{API}/alerts/{alert['id']}/priority", json={"priority": "URGENTE"}, headers=admin)
    assert r.status_code == 200 and r.json()["priority"] == "URGENTE"

    r = client.delete(f"{API}/alerts/{alert['id']}", headers=admin)
    assert r.status_code == 204
    assert client.get(f"{API}/alerts/{alert['id']}", headers=admin).status_code == 404


def test_list_with_repeated_filters(client, bearer, tenant_id, admin_id, department_id):
    headers = bearer(tenant_id)
    _create(client, headers, department_id, category="RUIDO")
    _create(client, headers, department_id, category="LIMPIEZA")
    _create(client, headers, department_id, category="SEGURIDAD")

    r = client.get(
        f"{API}/alerts",
        params=[("category", "RUIDO"), ("category", "LIMPIEZA"), ("sort_by", "priority")],
        headers=headers,
    )
    assert r.status_code == 200
    body = r.json()
    assert body["pagination"]["total_count"] == 2
    assert {a["category"] for a in body["alerts"]} == {"RUIDO", "LIMPIEZA"}

    bad = client.get(f"{API}/alerts", params={"sort_by": "title"}, headers=headers)
    assert bad.status_code == 422


def test_stats_for_admin(client, bearer, tenant_id, admin_id, department_id):
    _create(client, bearer(tenant_id), department_id)
    r = client.get(f"{API}/alerts/stats", headers=bearer(admin_id, "admin"))
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 1
    assert body["active_count"] == 1
    assert len(body["monthly_trend"]) == 12


def test_note_length_is_checked_after_trimming(client, bearer, tenant_id, admin_id, department_id):
    alert = _create(client, bearer(tenant_id), department_id)

    padded = "   " + "x" * 499
    r = client.post(f"{API}/alerts/{alert['id']}/notes", json={"note": padded}, headers=bearer(tenant_id))
    assert r.status_code == 200, r.text
    assert r.json()["notes"][-1]["text"] == "x" * 499

    r = client.put(
        f"{API}/alerts/{alert['id']}/status",
        json={"status": "EN_PROGRESO", "notes": "  " + "y" * 500 + "  "},
        headers=bearer(admin_id, "admin"),
    )
    assert r.status_code == 200, r.text
    assert r.json()["notes"][-1]["text"] == "y" * 500

    too_long = client.post(
        f"{API}/alerts/{alert['id']}/notes", json={"note": "z" * 501}, headers=bearer(tenant_id)
    )
    assert too_long.status_code == 422
    assert too_long.json()["detail"]["code"] == "VALIDATION"


def test_blank_image_entries_do_not_count(client, bearer, tenant_id, department_id):
    images = ["https://cdn.example/1.jpg", "https://cdn.example/2.jpg", " https://cdn.example/3.jpg ", ""]
    body = _create(client, bearer(tenant_id), department_id, images=images)
    assert body["images"] == [
        "https://cdn.example/1.jpg",
        "https://cdn.example/2.jpg",
        "https://cdn.example/3.jpg",
    ]

    four = ["https://cdn.example/%d.jpg" % i for i in range(4)]
    r = client.post(f"{API}/alerts", json=_payload(department_id, images=four), headers=bearer(tenant_id))
    assert r.status_code == 422


def test_unknown_stored_role_is_treated_as_user(client, bearer, make_user, department_id):
    uid = make_user("superuser")
    headers = bearer(uid, "admin")

    assert client.get(f"{API}/alerts/stats", headers=headers).status_code == 403
    r = client.get(f"{API}/alerts", headers=headers)
    assert r.status_code == 200
    assert r.json()["pagination"]["total_count"] == 0
