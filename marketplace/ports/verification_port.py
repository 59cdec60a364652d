from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from marketplace.domain.enums import SubmissionKind


class VerificationPort(ABC):
    """Port for the raw verification records of a worker."""

    # ── Test attempts ─────────────────────────────────────────

    @abstractmethod
    async def list_test_attempts(self, worker_id: str) -> list[dict[str, Any]]:
        """All test attempts of a worker, newest first."""
        ...

    @abstractmethod
    async def insert_test_attempts(
        self, rows: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Insert one or more attempts and return the created rows."""
        ...

    @abstractmethod
    async def delete_forced_attempts(self, worker_id: str) -> int:
        """Delete the attempts an admin forced as passed; returns the count."""
        ...

    # ── Test sessions ─────────────────────────────────────────

    @abstractmethod
    async def create_test_session(self, data: dict[str, Any]) -> dict[str, Any]:
        """Record the questions served to a worker for one role."""
        ...

    @abstractmethod
    async def get_open_test_session(
        self, worker_id: str, role: str
    ) -> dict[str, Any] | None:
        """Latest session for the worker and role that has not been submitted."""
        ...

    @abstractmethod
    async def close_test_session(
        self, session_id: str, submitted_at: datetime
    ) -> dict[str, Any] | None:
        """
        Mark a session submitted. Only an open session is written, so a
        second submit of the same session returns None.
        """
        ...

    # ── Worker submissions ────────────────────────────────────

    @abstractmethod
    async def list_references(self, worker_id: str) -> list[dict[str, Any]]:
        """All references of a worker, newest first."""
        ...

    @abstractmethod
    async def list_id_verifications(self, worker_id: str) -> list[dict[str, Any]]:
        """All ID and insurance documents of a worker, newest first."""
        ...

    @abstractmethod
    async def create_submission(
        self, kind: SubmissionKind, data: dict[str, Any]
    ) -> dict[str, Any]:
        """Insert a reference, ID document or qualification upload."""
        ...

    # ── Admin review ──────────────────────────────────────────

    @abstractmethod
    async def get_submission(
        self, kind: SubmissionKind, submission_id: str
    ) -> dict[str, Any] | None:
        """Fetch a single submission of the given kind."""
        ...

    @abstractmethod
    async def list_submissions(
        self, kind: SubmissionKind, status: str | None = None
    ) -> list[dict[str, Any]]:
        """Review queue for a kind, newest first, with the worker's name."""
        ...

    @abstractmethod
    async def update_submission(
        self,
        kind: SubmissionKind,
        submission_id: str,
        data: dict[str, Any],
        expected_updated_at: datetime | None = None,
    ) -> dict[str, Any] | None:
        """
        Update a submission.

        When `expected_updated_at` is given, only a row whose `updated_at`
        still equals it is written. Returns the updated row, or None when
        nothing matched.
        """
        ...
