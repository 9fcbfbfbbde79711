from __future__ import annotations
"""server/smartrent/domain/alert.py
~~~~~~~~~~~~~~~~~~~~~~~~
Entité Alert : signalement de maintenance rattaché à un département.

Invariants gardés par l'entité :
- titre 1..100 caractères, description 1..500 (non vides après trim) ;
- au plus MAX_IMAGES images ;
- notes en ajout seul (jamais supprimées ni modifiées) ;
- resolved_at posé une seule fois, au premier passage à RESOLVED.

Les transitions de statut passent par la table de `alert_states`.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Optional

from smartrent.core.utils.datetime import as_utc, days_between_ceil, utcnow
from smartrent.domain import alert_states
from smartrent.domain.enums import (
    ACTIVE_STATUSES,
    AlertCategory,
    AlertPriority,
    AlertStatus,
)
from smartrent.domain.errors import ValidationError

MAX_TITLE_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 500
MAX_IMAGES = 3


@dataclass(frozen=True)
class AlertNote:
    """Note horodatée et signée. Immuable une fois créée."""

    author_id: uuid.UUID
    text: str
    created_at: datetime = field(default_factory=utcnow)

    def format(self) -> str:
        """Forme lisible historique : « [<ISO>] [<auteur>]: <texte> »."""
        return f"[{self.created_at.isoformat()}] [{self.author_id}]: {self.text}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "author_id": str(self.author_id),
            "text": self.text,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AlertNote":
        return cls(
            author_id=uuid.UUID(str(data["author_id"])),
            text=data["text"],
            created_at=as_utc(datetime.fromisoformat(data["created_at"])),
        )


def _validate_text(value: str | None, *, field_name: str, max_length: int) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} is required")
    if len(value) > max_length:
        raise ValidationError(f"{field_name} cannot exceed {max_length} characters")
    return value.strip()


def _validate_images(images: Iterable[str] | None) -> list[str]:
    out = list(images or [])
    if len(out) > MAX_IMAGES:
        raise ValidationError(f"An alert cannot have more than {MAX_IMAGES} images")
    return out


class Alert:
    def __init__(
        self,
        *,
        title: str,
        description: str,
        category: AlertCategory,
        priority: AlertPriority,
        reporter_id: uuid.UUID,
        department_id: uuid.UUID,
        images: Iterable[str] | None = None,
        id: uuid.UUID | None = None,
    ) -> None:
        self._id = id
        self._title = _validate_text(title, field_name="title", max_length=MAX_TITLE_LENGTH)
        self._description = _validate_text(
            description, field_name="description", max_length=MAX_DESCRIPTION_LENGTH
        )
        try:
            self._category = AlertCategory(category)
            self._priority = AlertPriority(priority)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        self._reporter_id = reporter_id
        self._department_id = department_id
        self._images = _validate_images(images)

        now = utcnow()
        self._status = AlertStatus.PENDING
        self._assigned_to: uuid.UUID | None = None
        self._notes: list[AlertNote] = []
        self._created_at = now
        self._updated_at = now
        self._resolved_at: datetime | None = None
        self._version = 0

    # ------------------------------------------------------------------
    # Reconstruction depuis le stockage (pas de logique de cycle de vie)
    # ------------------------------------------------------------------
    @classmethod
    def restore(
        cls,
        *,
        id: uuid.UUID,
        title: str,
        description: str,
        category: AlertCategory,
        priority: AlertPriority,
        status: AlertStatus,
        reporter_id: uuid.UUID,
        department_id: uuid.UUID,
        assigned_to: uuid.UUID | None,
        images: Iterable[str] | None,
        notes: Iterable[AlertNote] | None,
        created_at: datetime,
        updated_at: datetime,
        resolved_at: datetime | None,
        version: int,
    ) -> "Alert":
        alert = cls(
            id=id,
            title=title,
            description=description,
            category=category,
            priority=priority,
            reporter_id=reporter_id,
            department_id=department_id,
            images=images,
        )
        alert._status = AlertStatus(status)
        alert._assigned_to = assigned_to
        alert._notes = list(notes or [])
        alert._created_at = as_utc(created_at)
        alert._updated_at = as_utc(updated_at)
        alert._resolved_at = as_utc(resolved_at)
        alert._version = version
        return alert

    # ------------------------------------------------------------------
    # Accès
    # ------------------------------------------------------------------
    @property
    def id(self) -> uuid.UUID | None:
        return self._id

    @property
    def title(self) -> str:
        return self._title

    @property
    def description(self) -> str:
        return self._description

    @property
    def category(self) -> AlertCategory:
        return self._category

    @property
    def priority(self) -> AlertPriority:
        return self._priority

    @property
    def status(self) -> AlertStatus:
        return self._status

    @property
    def reporter_id(self) -> uuid.UUID:
        return self._reporter_id

    @property
    def department_id(self) -> uuid.UUID:
        return self._department_id

    @property
    def assigned_to(self) -> uuid.UUID | None:
        return self._assigned_to

    @property
    def images(self) -> list[str]:
        return list(self._images)

    @property
    def notes(self) -> list[AlertNote]:
        return list(self._notes)

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def updated_at(self) -> datetime:
        return self._updated_at

    @property
    def resolved_at(self) -> datetime | None:
        return self._resolved_at

    @property
    def version(self) -> int:
        return self._version

    # ------------------------------------------------------------------
    # Machine à états
    # ------------------------------------------------------------------
    def valid_transitions(self) -> frozenset[AlertStatus]:
        return alert_states.valid_transitions(self._status)

    def can_transition_to(self, new_status: AlertStatus) -> bool:
        return alert_states.can_transition(self._status, new_status)

    def transition_to(self, new_status: AlertStatus) -> None:
        target = alert_states.ensure_transition(self._status, new_status)
        now = utcnow()
        self._status = target
        self._updated_at = now
        if target is AlertStatus.RESOLVED and self._resolved_at is None:
            self._resolved_at = now

    def state_description(self) -> str:
        return alert_states.describe(self._status)

    # ------------------------------------------------------------------
    # Mutations hors cycle de vie
    # ------------------------------------------------------------------
    def assign_to(self, staff_id: uuid.UUID) -> None:
        self._assigned_to = staff_id
        self._touch()

    def add_note(self, text: str, author_id: uuid.UUID) -> AlertNote:
        if text is None or not text.strip():
            raise ValidationError("Note cannot be empty")
        note = AlertNote(author_id=author_id, text=text.strip())
        self._notes.append(note)
        self._touch()
        return note

    def update_priority(self, new_priority: AlertPriority) -> None:
        try:
            self._priority = AlertPriority(new_priority)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        self._touch()

    def add_image(self, url: str) -> None:
        if len(self._images) >= MAX_IMAGES:
            raise ValidationError(f"An alert cannot have more than {MAX_IMAGES} images")
        self._images.append(url)
        self._touch()

    def remove_image(self, url: str) -> None:
        if url in self._images:
            self._images.remove(url)
            self._touch()

    # ------------------------------------------------------------------
    # Prédicats
    # ------------------------------------------------------------------
    def is_active(self) -> bool:
        return self._status in ACTIVE_STATUSES

    def is_resolved(self) -> bool:
        return self._status is AlertStatus.RESOLVED

    def is_cancelled(self) -> bool:
        return self._status is AlertStatus.CANCELLED

    def is_high_priority(self) -> bool:
        return self._priority in (AlertPriority.HIGH, AlertPriority.URGENT)

    def days_open(self, now: Optional[datetime] = None) -> int:
        end = self._resolved_at or now or utcnow()
        return days_between_ceil(self._created_at, end)

    def _touch(self) -> None:
        self._updated_at = utcnow()

    def __repr__(self) -> str:
        return f"<Alert id={self._id} status={self._status.value} priority={self._priority.value}>"
