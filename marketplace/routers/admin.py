"""
Admin endpoints — approval queue, submission review, suspensions and
the skills-test question bank.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status

from marketplace.dependencies import (
    get_moderation_service,
    get_question_bank_service,
    get_skills_test_service,
    get_verification_service,
)
from marketplace.domain.enums import (
    AccountKind,
    ApprovalStatus,
    FinanceRole,
    SubmissionKind,
)
from marketplace.domain.errors import VerificationError
from marketplace.domain.models import (
    ApprovalRequest,
    SubmissionReviewRequest,
    SuspensionRequest,
    TestQuestionCreate,
    TestQuestionUpdate,
    VerificationSummary,
    WorkerApprovalItem,
)
from marketplace.routers.errors import to_http
from marketplace.services.auth_service import require_admin
from marketplace.services.moderation_service import ModerationService
from marketplace.services.question_bank_service import QuestionBankService
from marketplace.services.skills_test_service import SkillsTestService
from marketplace.services.verification_service import VerificationService


router = APIRouter(prefix="/admin", tags=["Admin"])


# ── Workers ───────────────────────────────────────────────────


@router.get("/workers", response_model=list[WorkerApprovalItem])
async def list_workers(
    approval_status: ApprovalStatus | None = None,
    admin: dict[str, Any] = Depends(require_admin),
    svc: VerificationService = Depends(get_verification_service),
):
    """Approval queue: every worker with their current verification score."""
    return await svc.list_workers_for_approval(approval_status)


@router.get("/workers/{worker_id}/verification", response_model=VerificationSummary)
async def get_worker_verification(
    worker_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    svc: VerificationService = Depends(get_verification_service),
):
    try:
        return await svc.get_summary(worker_id)
    except VerificationError as e:
        raise to_http(e)


@router.post("/workers/{worker_id}/approval")
async def decide_approval(
    worker_id: str,
    body: ApprovalRequest,
    admin: dict[str, Any] = Depends(require_admin),
    svc: ModerationService = Depends(get_moderation_service),
):
    """Approve (active) or decline a worker. The score is advisory only."""
    try:
        worker = await svc.decide_approval(
            worker_id, body.decision, admin_id=admin["user_id"], notes=body.notes
        )
    except VerificationError as e:
        raise to_http(e)
    return {"ok": True, "approval_status": worker["approval_status"]}


@router.post("/workers/{worker_id}/forced-passes", status_code=status.HTTP_201_CREATED)
async def force_pass_all_roles(
    worker_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    svc: SkillsTestService = Depends(get_skills_test_service),
):
    """Mark every declared role as passed (test fixtures / demos only)."""
    try:
        created = await svc.force_pass_all_roles(worker_id, admin_id=admin["user_id"])
    except VerificationError as e:
        raise to_http(e)
    return {"ok": True, "roles": [row["role"] for row in created]}


@router.delete("/workers/{worker_id}/forced-passes")
async def revoke_forced_passes(
    worker_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    svc: SkillsTestService = Depends(get_skills_test_service),
):
    try:
        removed = await svc.revoke_forced_passes(worker_id)
    except VerificationError as e:
        raise to_http(e)
    return {"ok": True, "removed": removed}


# ── Submission queues ─────────────────────────────────────────


@router.get("/submissions/{kind}")
async def list_submissions(
    kind: SubmissionKind,
    submission_status: str | None = None,
    admin: dict[str, Any] = Depends(require_admin),
    svc: ModerationService = Depends(get_moderation_service),
):
    return await svc.list_submissions(kind, submission_status)


@router.post("/submissions/{kind}/{submission_id}/review")
async def review_submission(
    kind: SubmissionKind,
    submission_id: str,
    body: SubmissionReviewRequest,
    admin: dict[str, Any] = Depends(require_admin),
    svc: ModerationService = Depends(get_moderation_service),
):
    """Verify or reject a reference, ID document or qualification."""
    try:
        row = await svc.review_submission(
            kind,
            submission_id,
            body.decision,
            admin_id=admin["user_id"],
            reason=body.reason,
            notes=body.notes,
            expected_updated_at=body.expected_updated_at,
        )
    except VerificationError as e:
        raise to_http(e)
    return {"ok": True, "status": row["status"], "updated_at": row.get("updated_at")}


# ── Suspension ────────────────────────────────────────────────


@router.post("/accounts/{kind}/{account_id}/suspend")
async def suspend_account(
    kind: AccountKind,
    account_id: str,
    body: SuspensionRequest,
    admin: dict[str, Any] = Depends(require_admin),
    svc: ModerationService = Depends(get_moderation_service),
):
    try:
        await svc.suspend_account(kind, account_id, body.reason)
    except VerificationError as e:
        raise to_http(e)
    return {"ok": True, "is_suspended": True}


@router.post("/accounts/{kind}/{account_id}/unsuspend")
async def unsuspend_account(
    kind: AccountKind,
    account_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    svc: ModerationService = Depends(get_moderation_service),
):
    try:
        await svc.unsuspend_account(kind, account_id)
    except VerificationError as e:
        raise to_http(e)
    return {"ok": True, "is_suspended": False}


# ── Question bank ─────────────────────────────────────────────


@router.get("/questions")
async def list_questions(
    role: FinanceRole | None = None,
    admin: dict[str, Any] = Depends(require_admin),
    svc: QuestionBankService = Depends(get_question_bank_service),
):
    return await svc.list_questions(role)


@router.post("/questions", status_code=status.HTTP_201_CREATED)
async def create_question(
    body: TestQuestionCreate,
    admin: dict[str, Any] = Depends(require_admin),
    svc: QuestionBankService = Depends(get_question_bank_service),
):
    return await svc.create_question(body)


@router.patch("/questions/{question_id}")
async def update_question(
    question_id: str,
    body: TestQuestionUpdate,
    admin: dict[str, Any] = Depends(require_admin),
    svc: QuestionBankService = Depends(get_question_bank_service),
):
    try:
        return await svc.update_question(question_id, body)
    except VerificationError as e:
        raise to_http(e)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, detail=str(e)
        )


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: str,
    admin: dict[str, Any] = Depends(require_admin),
    svc: QuestionBankService = Depends(get_question_bank_service),
):
    try:
        await svc.delete_question(question_id)
    except VerificationError as e:
        raise to_http(e)
    return None
