"""
Admin moderation — approval decisions, submission review queues and
account suspension.
"""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from marketplace.domain.enums import (
    AccountKind,
    ApprovalStatus,
    DocumentStatus,
    ReferenceStatus,
    ReviewDecision,
    SubmissionKind,
)
from marketplace.domain.errors import (
    MissingRejectionReason,
    MissingSuspensionReason,
    RecordNotFound,
    StaleSubmission,
)
from marketplace.ports.database_port import DatabasePort
from marketplace.services.skills_test_service import utcnow

logger = logging.getLogger(__name__)

_SUBMISSION_LABELS = {
    SubmissionKind.REFERENCE: "Reference",
    SubmissionKind.ID_DOCUMENT: "ID verification",
    SubmissionKind.QUALIFICATION: "Qualification",
}


class ModerationService:
    """State transitions only an admin may perform."""

    def __init__(
        self, db: DatabasePort, clock: Callable[[], datetime] = utcnow
    ) -> None:
        self._db = db
        self._clock = clock

    async def decide_approval(
        self,
        worker_id: str,
        decision: ApprovalStatus,
        admin_id: str,
        notes: str | None = None,
    ) -> dict[str, Any]:
        """
        Move a worker to active or declined.

        The verification score is deliberately not consulted. A worker who
        was already decided may be decided again.
        """
        if decision == ApprovalStatus.PENDING:
            raise ValueError("decision must be 'active' or 'declined'")

        worker = await self._db.get_worker(worker_id)
        if not worker:
            raise RecordNotFound("Worker", worker_id)

        previous = worker.get("approval_status") or ApprovalStatus.PENDING.value
        if previous != ApprovalStatus.PENDING.value:
            logger.warning(
                "Approval revised: worker=%s %s -> %s by=%s",
                worker_id, previous, decision.value, admin_id,
            )

        updated = await self._db.update_worker(
            worker_id,
            {
                "approval_status": decision.value,
                "approved_at": self._clock().isoformat(),
                "approved_by": admin_id,
                "approval_notes": notes or None,
            },
        )
        if updated is None:
            raise RecordNotFound("Worker", worker_id)

        logger.info("Worker %s set to %s by %s", worker_id, decision.value, admin_id)
        return updated

    async def list_submissions(
        self, kind: SubmissionKind, status: str | None = None
    ) -> list[dict[str, Any]]:
        return await self._db.list_submissions(kind, status)

    async def review_submission(
        self,
        kind: SubmissionKind,
        submission_id: str,
        decision: ReviewDecision,
        admin_id: str,
        reason: str | None = None,
        notes: str | None = None,
        expected_updated_at: datetime | None = None,
    ) -> dict[str, Any]:
        """
        Verify or reject a reference, ID document or qualification.

        Rejection needs a non-blank reason. Passing `expected_updated_at`
        turns the write into a compare-and-set that fails with
        StaleSubmission if another reviewer got there first.
        """
        rejecting = decision == ReviewDecision.REJECTED
        if rejecting and not (reason and reason.strip()):
            raise MissingRejectionReason()

        label = _SUBMISSION_LABELS[kind]
        if not await self._db.get_submission(kind, submission_id):
            raise RecordNotFound(label, submission_id)

        now = self._clock().isoformat()
        if kind == SubmissionKind.REFERENCE:
            data: dict[str, Any] = {
                "status": (
                    ReferenceStatus.DECLINED if rejecting else ReferenceStatus.VERIFIED
                ).value,
                "admin_notes": notes or reason or None,
                "updated_at": now,
            }
        else:
            data = {
                "status": (
                    DocumentStatus.REJECTED if rejecting else DocumentStatus.VERIFIED
                ).value,
                "rejection_reason": reason.strip() if rejecting else None,
                "verified_at": None if rejecting else now,
                "verified_by": None if rejecting else admin_id,
                "updated_at": now,
            }

        updated = await self._db.update_submission(
            kind, submission_id, data, expected_updated_at
        )
        if updated is None:
            if expected_updated_at is not None:
                logger.warning(
                    "Stale review rejected: %s %s by %s", label, submission_id, admin_id
                )
                raise StaleSubmission(label, submission_id)
            raise RecordNotFound(label, submission_id)

        logger.info(
            "%s %s marked %s by %s", label, submission_id, data["status"], admin_id
        )
        return updated

    # ── Suspension ────────────────────────────────────────────

    async def _update_account(
        self, kind: AccountKind, account_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        if kind == AccountKind.WORKER:
            updated = await self._db.update_worker(account_id, data)
        else:
            updated = await self._db.update_business(account_id, data)
        if updated is None:
            raise RecordNotFound(kind.value.capitalize(), account_id)
        return updated

    async def suspend_account(
        self, kind: AccountKind, account_id: str, reason: str | None
    ) -> dict[str, Any]:
        if not (reason and reason.strip()):
            raise MissingSuspensionReason()

        updated = await self._update_account(
            kind,
            account_id,
            {
                "is_suspended": True,
                "suspended_at": self._clock().isoformat(),
                "suspension_reason": reason.strip(),
            },
        )
        logger.info("%s %s suspended", kind.value, account_id)
        return updated

    async def unsuspend_account(
        self, kind: AccountKind, account_id: str
    ) -> dict[str, Any]:
        updated = await self._update_account(
            kind,
            account_id,
            {"is_suspended": False, "suspended_at": None, "suspension_reason": None},
        )
        logger.info("%s %s unsuspended", kind.value, account_id)
        return updated
