from __future__ import annotations
"""server/smartrent/application/results.py
~~~~~~~~~~~~~~~~~~~~~~~~
Résultat « tagué » des use-cases et garde commune.

Aucune exception ne sort d'un use-case :
- DomainError  -> échec portant son ErrorCode et son message ;
- autre erreur -> logguée avec la trace, échec INTERNAL au message générique
  (aucun détail interne renvoyé à l'appelant).
Pas de retry : l'appelant peut simplement rejouer la requête.
"""
import logging
from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar

from smartrent.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class UseCaseResult(Generic[T]):
    ok: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[ErrorCode] = None
    details: Optional[dict[str, Any]] = None

    @classmethod
    def success(cls, value: T = None) -> "UseCaseResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(
        cls, code: ErrorCode, message: str, details: Optional[dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        return cls(ok=False, error=message, error_code=code, details=details)


class UseCase:
    """
    Base des use-cases : `execute(**kwargs)` appelle `_execute(**kwargs)` sous garde.

    Les sous-classes déclarent leurs collaborateurs dans `__init__` et leurs
    paramètres dans `_execute` (appel par mots-clés uniquement).
    """

    failure_message = "Internal server error"

    def execute(self, **kwargs) -> UseCaseResult:
        try:
            return UseCaseResult.success(self._execute(**kwargs))
        except DomainError as e:
            return UseCaseResult.failure(e.code, e.message, _details(e))
        except Exception:
            logger.exception("%s: erreur inattendue", type(self).__name__)
            return UseCaseResult.failure(ErrorCode.INTERNAL, self.failure_message)

    def _execute(self, **kwargs):  # pragma: no cover - abstrait
        raise NotImplementedError


def _details(e: DomainError) -> Optional[dict[str, Any]]:
    valid = getattr(e, "valid", None)
    if valid is None:
        return None
    return {"valid_transitions": [getattr(s, "value", s) for s in valid]}
