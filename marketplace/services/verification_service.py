"""
Verification read model — score, channel statuses and the admin
approval queue, all derived on read from the raw records.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from marketplace.domain import attempt_policy, scoring
from marketplace.domain.enums import (
    ApprovalStatus,
    DocumentStatus,
    ReferenceStatus,
    SubmissionKind,
)
from marketplace.domain.errors import RecordNotFound
from marketplace.domain.models import (
    ChannelStatuses,
    DocumentCreate,
    IdVerification,
    Reference,
    ReferenceCreate,
    RoleTestSummary,
    TestAttempt,
    VerificationSummary,
    WorkerApprovalItem,
    WorkerProfile,
)
from marketplace.ports.database_port import DatabasePort
from marketplace.services.skills_test_service import utcnow

logger = logging.getLogger(__name__)


class VerificationService:
    """Computes verification state for a worker from the store's raw rows."""

    def __init__(
        self, db: DatabasePort, clock: Callable[[], datetime] = utcnow
    ) -> None:
        self._db = db
        self._clock = clock

    async def _get_worker(self, worker_id: str) -> WorkerProfile:
        row = await self._db.get_worker(worker_id)
        if not row:
            raise RecordNotFound("Worker", worker_id)
        return WorkerProfile(**row)

    async def _load_records(
        self, worker_id: str
    ) -> tuple[list[TestAttempt], list[Reference], list[IdVerification]]:
        attempts, refs, docs = await asyncio.gather(
            self._db.list_test_attempts(worker_id),
            self._db.list_references(worker_id),
            self._db.list_id_verifications(worker_id),
        )
        return (
            [TestAttempt(**a) for a in attempts],
            [Reference(**r) for r in refs],
            [IdVerification(**d) for d in docs],
        )

    async def compute_score(self, worker_id: str) -> int:
        await self._get_worker(worker_id)
        attempts, refs, docs = await self._load_records(worker_id)
        return scoring.compute_verification_score(attempts, refs, docs)

    async def get_channel_statuses(self, worker_id: str) -> ChannelStatuses:
        worker = await self._get_worker(worker_id)
        attempts, refs, docs = await self._load_records(worker_id)
        return scoring.channel_statuses(worker.roles, attempts, refs, docs)

    async def get_summary(self, worker_id: str) -> VerificationSummary:
        """Score, channel statuses and per-role test state in one read."""
        worker = await self._get_worker(worker_id)
        attempts, refs, docs = await self._load_records(worker_id)
        now = self._clock()

        return VerificationSummary(
            worker_id=worker.id,
            score=scoring.compute_verification_score(attempts, refs, docs),
            channels=scoring.channel_statuses(worker.roles, attempts, refs, docs),
            approval_status=worker.approval_status,
            roles=[
                RoleTestSummary(
                    role=role,
                    state=attempt_policy.role_test_state(attempts, role, now),
                    lockout_until=attempt_policy.active_lockout(attempts, role, now),
                )
                for role in worker.roles
            ],
        )

    async def list_workers_for_approval(
        self, status: ApprovalStatus | None = None
    ) -> list[WorkerApprovalItem]:
        rows = await self._db.list_workers(status.value if status else None)
        workers = [WorkerProfile(**r) for r in rows]

        records = await asyncio.gather(
            *(self._load_records(str(w.id)) for w in workers)
        )

        return [
            WorkerApprovalItem(
                id=w.id,
                name=w.name,
                roles=w.roles,
                approval_status=w.approval_status,
                approved_at=w.approved_at,
                approval_notes=w.approval_notes,
                is_suspended=w.is_suspended,
                verification_score=scoring.compute_verification_score(*recs),
            )
            for w, recs in zip(workers, records)
        ]

    # ── Worker submissions ────────────────────────────────────

    async def add_reference(
        self, worker_id: str, body: ReferenceCreate
    ) -> dict[str, Any]:
        await self._get_worker(worker_id)
        row = await self._db.create_submission(
            SubmissionKind.REFERENCE,
            {
                "worker_profile_id": worker_id,
                "status": ReferenceStatus.PENDING.value,
                **body.model_dump(),
            },
        )
        logger.info("Reference added for worker %s", worker_id)
        return row

    async def add_document(
        self, worker_id: str, body: DocumentCreate
    ) -> dict[str, Any]:
        await self._get_worker(worker_id)
        row = await self._db.create_submission(
            SubmissionKind.ID_DOCUMENT,
            {
                "worker_profile_id": worker_id,
                "status": DocumentStatus.PENDING.value,
                **body.model_dump(),
            },
        )
        logger.info(
            "%s document submitted for worker %s",
            "Insurance" if body.is_insurance else "ID", worker_id,
        )
        return row
