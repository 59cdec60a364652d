"""
Domain exceptions raised by the verification services.

Routers translate these into HTTP responses; store-level failures are
never wrapped and propagate as-is.
"""

from datetime import datetime


class VerificationError(Exception):
    """Base class for every rule violation in the verification domain."""


class LockedOut(VerificationError):
    """A failed attempt's cooldown has not expired yet."""

    def __init__(self, role: str, lockout_until: datetime) -> None:
        self.role = role
        self.lockout_until = lockout_until
        super().__init__(
            f"Test for {role} is locked until {lockout_until.isoformat()}"
        )


class AlreadyPassed(VerificationError):
    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Test for {role} has already been passed")


class NoQuestionsAvailable(VerificationError):
    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(
            f"No test questions are available for {role}. Try again later."
        )


class MissingRejectionReason(VerificationError):
    def __init__(self) -> None:
        super().__init__("A rejection reason is required")


class MissingSuspensionReason(VerificationError):
    def __init__(self) -> None:
        super().__init__("A suspension reason is required")


class RecordNotFound(VerificationError):
    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class StaleSubmission(VerificationError):
    """The row changed since the reviewer loaded it."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(
            f"{kind} {record_id} was modified by someone else. Reload and retry."
        )


class ForcedPassesDisabled(VerificationError):
    def __init__(self) -> None:
        super().__init__("Forced test passes are disabled on this deployment")


class RoleNotDeclared(VerificationError):
    """Tests are only offered for roles on the worker's profile."""

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"{role} is not one of this worker's declared roles")


class NoActiveTest(VerificationError):
    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(
            f"No test in progress for {role}. Start the test before submitting."
        )
