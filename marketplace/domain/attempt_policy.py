"""
Skills-test rules for a single (worker, role) pair.

    not_started ──pass──▶ passed (terminal)
         │
        fail
         ▼
      locked ──lockout expires──▶ retakeable ──pass/fail──▶ passed | locked
"""

from collections.abc import Iterable
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal

from marketplace.domain.enums import FinanceRole, RoleTestState
from marketplace.domain.errors import AlreadyPassed, LockedOut, NoQuestionsAvailable
from marketplace.domain.models import TestAttempt


def score_answers(correct: int, total: int, role: str = "this role") -> int:
    """Percentage of correct answers, rounded half up."""
    if total <= 0:
        raise NoQuestionsAvailable(role)
    pct = Decimal(correct) * 100 / Decimal(total)
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def is_passing(score: int, pass_threshold: int) -> bool:
    return score >= pass_threshold


def lockout_for(
    score: int, attempted_at: datetime, pass_threshold: int, lockout_days: int
) -> datetime | None:
    if is_passing(score, pass_threshold):
        return None
    return attempted_at + timedelta(days=lockout_days)


def _for_role(attempts: Iterable[TestAttempt], role: FinanceRole) -> list[TestAttempt]:
    return [a for a in attempts if a.role == role]


def active_lockout(
    attempts: Iterable[TestAttempt], role: FinanceRole, now: datetime
) -> datetime | None:
    """Latest lockout for the role that is still in the future, if any."""
    pending = [
        a.lockout_until
        for a in _for_role(attempts, role)
        if not a.passed and a.lockout_until is not None and a.lockout_until > now
    ]
    return max(pending) if pending else None


def role_test_state(
    attempts: Iterable[TestAttempt], role: FinanceRole, now: datetime
) -> RoleTestState:
    role_attempts = _for_role(attempts, role)
    if not role_attempts:
        return RoleTestState.NOT_STARTED
    if any(a.passed for a in role_attempts):
        return RoleTestState.PASSED
    if active_lockout(role_attempts, role, now) is not None:
        return RoleTestState.LOCKED
    return RoleTestState.RETAKEABLE


def ensure_can_attempt(
    attempts: Iterable[TestAttempt], role: FinanceRole, now: datetime
) -> None:
    """Raise AlreadyPassed or LockedOut when a new attempt is not allowed."""
    role_attempts = _for_role(attempts, role)
    if any(a.passed for a in role_attempts):
        raise AlreadyPassed(role.value)
    until = active_lockout(role_attempts, role, now)
    if until is not None:
        raise LockedOut(role.value, until)
