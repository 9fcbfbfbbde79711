# server/tests/unit/domain/test_alert_states.py
import pytest

from smartrent.domain import alert_states
from smartrent.domain.enums import AlertStatus
from smartrent.domain.errors import ErrorCode, InvalidTransitionError

pytestmark = pytest.mark.unit

P, IP, R, C = AlertStatus.PENDING, AlertStatus.IN_PROGRESS, AlertStatus.RESOLVED, AlertStatus.CANCELLED


@pytest.mark.parametrize(
    "current,target,expected",
    [
        (P, IP, True),
        (P, C, True),
        (P, R, False),
        (P, P, False),
        (IP, R, True),
        (IP, C, True),
        (IP, P, False),
        (R, P, False),
        (R, IP, False),
        (R, C, False),
        (C, P, False),
        (C, R, False),
    ],
)
def test_transition_table(current, target, expected):
    assert alert_states.can_transition(current, target) is expected


def test_terminal_statuses_have_no_exit():
    assert alert_states.is_terminal(R)
    assert alert_states.is_terminal(C)
    assert not alert_states.is_terminal(P)
    assert not alert_states.is_terminal(IP)
    assert alert_states.valid_transitions(R) == frozenset()


def test_unknown_target_is_rejected_without_error():
    assert alert_states.can_transition(P, "ARCHIVADO") is False


def test_ensure_transition_accepts_wire_values():
    assert alert_states.ensure_transition(P, "EN_PROGRESO") is IP


def test_invalid_transition_message_lists_options():
    with pytest.raises(InvalidTransitionError) as exc:
        alert_states.ensure_transition(P, R)
    err = exc.value
    assert err.code is ErrorCode.INVALID_TRANSITION
    assert "PENDIENTE" in err.message and "RESUELTO" in err.message
    assert err.valid == [C, IP]  # triés par valeur
    assert "CANCELADO, EN_PROGRESO" in err.message


def test_invalid_transition_from_terminal_says_none():
    with pytest.raises(InvalidTransitionError) as exc:
        alert_states.ensure_transition(C, P)
    assert exc.value.message.endswith("Valid transitions: none")


def test_every_status_has_a_description():
    for status in AlertStatus:
        assert alert_states.describe(status)
