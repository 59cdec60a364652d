"""
Worker-facing verification endpoints — thin HTTP layer, delegates all
logic to services.
"""

from typing import Any

from fastapi import APIRouter, Depends, status

from marketplace.dependencies import get_skills_test_service, get_verification_service
from marketplace.domain.enums import FinanceRole
from marketplace.domain.errors import VerificationError
from marketplace.domain.models import (
    ChannelStatuses,
    DocumentCreate,
    ReferenceCreate,
    TestResult,
    TestSession,
    TestSubmission,
    VerificationSummary,
)
from marketplace.routers.errors import to_http
from marketplace.services.auth_service import get_current_worker
from marketplace.services.skills_test_service import SkillsTestService
from marketplace.services.verification_service import VerificationService

router = APIRouter(prefix="/verification", tags=["Verification"])


@router.get("/me", response_model=VerificationSummary)
async def get_my_verification(
    worker: dict[str, Any] = Depends(get_current_worker),
    svc: VerificationService = Depends(get_verification_service),
):
    """Score, channel statuses and per-role test state for the caller."""
    try:
        return await svc.get_summary(str(worker["id"]))
    except VerificationError as e:
        raise to_http(e)


@router.get("/me/score")
async def get_my_score(
    worker: dict[str, Any] = Depends(get_current_worker),
    svc: VerificationService = Depends(get_verification_service),
):
    try:
        score = await svc.compute_score(str(worker["id"]))
    except VerificationError as e:
        raise to_http(e)
    return {"worker_id": str(worker["id"]), "score": score}


@router.get("/me/channels", response_model=ChannelStatuses)
async def get_my_channels(
    worker: dict[str, Any] = Depends(get_current_worker),
    svc: VerificationService = Depends(get_verification_service),
):
    try:
        return await svc.get_channel_statuses(str(worker["id"]))
    except VerificationError as e:
        raise to_http(e)


@router.post("/tests/{role}/start", response_model=TestSession)
async def start_skills_test(
    role: FinanceRole,
    worker: dict[str, Any] = Depends(get_current_worker),
    svc: SkillsTestService = Depends(get_skills_test_service),
):
    """Serve a timed test for one of the caller's roles."""
    try:
        return await svc.start_test(str(worker["id"]), role)
    except VerificationError as e:
        raise to_http(e)


@router.post("/tests/{role}/submit", response_model=TestResult)
async def submit_skills_test(
    role: FinanceRole,
    body: TestSubmission,
    worker: dict[str, Any] = Depends(get_current_worker),
    svc: SkillsTestService = Depends(get_skills_test_service),
):
    """Score the submitted answers; a failure locks the role for a while."""
    try:
        return await svc.submit_attempt(str(worker["id"]), role, body.answers)
    except VerificationError as e:
        raise to_http(e)


@router.post("/references", status_code=status.HTTP_201_CREATED)
async def add_reference(
    body: ReferenceCreate,
    worker: dict[str, Any] = Depends(get_current_worker),
    svc: VerificationService = Depends(get_verification_service),
):
    try:
        return await svc.add_reference(str(worker["id"]), body)
    except VerificationError as e:
        raise to_http(e)


@router.post("/documents", status_code=status.HTTP_201_CREATED)
async def add_document(
    body: DocumentCreate,
    worker: dict[str, Any] = Depends(get_current_worker),
    svc: VerificationService = Depends(get_verification_service),
):
    """Register an already-uploaded ID or insurance document for review."""
    try:
        return await svc.add_document(str(worker["id"]), body)
    except VerificationError as e:
        raise to_http(e)
