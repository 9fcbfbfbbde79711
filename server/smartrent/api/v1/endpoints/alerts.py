from __future__ import annotations
"""
server/smartrent/api/v1/endpoints/alerts.py
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~
Endpoints alertes.

- Un endpoint = un use-case : l'endpoint traduit la requête en arguments,
  appelle `execute`, puis `unwrap` (commit si ok, rollback + HTTPException sinon).
- Le rapporteur d'une création est toujours l'utilisateur authentifié.
- Les routes fixes (/categories, /priorities, /statuses, /stats) sont déclarées
  avant /{alert_id}.
"""

import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from smartrent.api.schemas.alert import (
    AlertAssignIn,
    AlertCreateIn,
    AlertNoteIn,
    AlertOut,
    AlertPageOut,
    AlertPriorityIn,
    AlertStatsOut,
    AlertStatusIn,
    EnumOptionOut,
)
from smartrent.domain.enums import AlertCategory, AlertPriority, AlertStatus
from smartrent.domain.repositories import AlertFilters
from smartrent.infrastructure.container import AlertUseCases
from smartrent.infrastructure.persistence.database.session import get_db
from smartrent.presentation.api.deps import CurrentUser, get_alert_use_cases, get_current_user
from smartrent.presentation.api.responses import unwrap

router = APIRouter(prefix="/alerts")


def _capitalized(value: str) -> str:
    return value[:1] + value[1:].lower()


# ──────────────────────────────────────────────────────────────────────────────
# Référentiels (listes déroulantes)
# ──────────────────────────────────────────────────────────────────────────────

@router.get("/categories", response_model=list[EnumOptionOut])
async def list_categories() -> list[EnumOptionOut]:
    return [EnumOptionOut(value=c.value, label=_capitalized(c.value)) for c in AlertCategory]


@router.get("/priorities", response_model=list[EnumOptionOut])
async def list_priorities() -> list[EnumOptionOut]:
    return [EnumOptionOut(value=p.value, label=_capitalized(p.value)) for p in AlertPriority]


@router.get("/statuses", response_model=list[EnumOptionOut])
async def list_statuses() -> list[EnumOptionOut]:
    return [EnumOptionOut(value=s.value, label=s.value.replace("_", " ", 1).lower()) for s in AlertStatus]


# ──────────────────────────────────────────────────────────────────────────────
# Alertes
# ──────────────────────────────────────────────────────────────────────────────

@router.post("", status_code=status.HTTP_201_CREATED, response_model=AlertOut)
def create_alert(
    payload: AlertCreateIn,
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> AlertOut:
    result = uc.create.execute(
        title=payload.title,
        description=payload.description,
        category=payload.category,
        priority=payload.priority,
        reporter_id=user.id,
        department_id=payload.department_id,
        images=payload.images,
    )
    return AlertOut.from_entity(unwrap(result, db))


@router.get("", response_model=AlertPageOut)
def list_alerts(
    status_: Optional[list[AlertStatus]] = Query(None, alias="status"),
    category: Optional[list[AlertCategory]] = Query(None),
    priority: Optional[list[AlertPriority]] = Query(None),
    department_id: Optional[uuid.UUID] = None,
    assigned_to: Optional[uuid.UUID] = None,
    is_active: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=200),
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    page: int = Query(1),
    limit: Optional[int] = Query(None),
    sort_by: str = Query("createdAt"),
    sort_order: str = Query("desc"),
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> AlertPageOut:
    filters = AlertFilters(
        department_id=department_id,
        assigned_to=assigned_to,
        status=status_ or None,
        category=category or None,
        priority=priority or None,
        date_from=from_date,
        date_to=to_date,
        is_active=is_active,
    )
    result = uc.list.execute(
        requester_id=user.id,
        requester_role=user.role,
        filters=filters,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
        search=search,
    )
    return AlertPageOut.from_entity(unwrap(result, db))


@router.get("/stats", response_model=AlertStatsOut)
def alert_stats(
    department_id: Optional[uuid.UUID] = None,
    from_date: Optional[datetime] = None,
    to_date: Optional[datetime] = None,
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> AlertStatsOut:
    result = uc.stats.execute(
        requester_role=user.role,
        department_id=department_id,
        date_from=from_date,
        date_to=to_date,
    )
    return AlertStatsOut.from_entity(unwrap(result, db))


@router.get("/{alert_id}", response_model=AlertOut)
def get_alert(
    alert_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> AlertOut:
    result = uc.get_by_id.execute(alert_id=alert_id, requester_id=user.id, requester_role=user.role)
    return AlertOut.from_entity(unwrap(result, db))


@router.put("/{alert_id}/status", response_model=AlertOut)
def update_alert_status(
    alert_id: uuid.UUID,
    payload: AlertStatusIn,
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> AlertOut:
    result = uc.update_status.execute(
        alert_id=alert_id,
        new_status=payload.status,
        requester_id=user.id,
        requester_role=user.role,
        notes=payload.notes,
    )
    return AlertOut.from_entity(unwrap(result, db))


@router.post("/{alert_id}/notes", response_model=AlertOut)
def add_alert_note(
    alert_id: uuid.UUID,
    payload: AlertNoteIn,
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> AlertOut:
    result = uc.add_note.execute(
        alert_id=alert_id,
        note=payload.note,
        author_id=user.id,
        requester_role=user.role,
    )
    return AlertOut.from_entity(unwrap(result, db))


@router.put("/{alert_id}/assign", response_model=AlertOut)
def assign_alert(
    alert_id: uuid.UUID,
    payload: AlertAssignIn,
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> AlertOut:
    result = uc.assign.execute(
        alert_id=alert_id,
        staff_id=payload.staff_id,
        requester_id=user.id,
        requester_role=user.role,
    )
    return AlertOut.from_entity(unwrap(result, db))


@router.put("/{alert_id}/priority", response_model=AlertOut)
def update_alert_priority(
    alert_id: uuid.UUID,
    payload: AlertPriorityIn,
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> AlertOut:
    result = uc.update_priority.execute(
        alert_id=alert_id,
        priority=payload.priority,
        requester_id=user.id,
        requester_role=user.role,
    )
    return AlertOut.from_entity(unwrap(result, db))


@router.delete("/{alert_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_alert(
    alert_id: uuid.UUID,
    user: CurrentUser = Depends(get_current_user),
    uc: AlertUseCases = Depends(get_alert_use_cases),
    db: Session = Depends(get_db),
) -> Response:
    unwrap(uc.delete.execute(alert_id=alert_id, requester_role=user.role), db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
