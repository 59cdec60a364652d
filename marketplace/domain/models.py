"""
Pydantic models for requests, responses, and internal data transfer.
Pure data — no I/O, no side effects.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from marketplace.domain.enums import (
    ApprovalStatus,
    DocumentChannelStatus,
    DocumentStatus,
    FinanceRole,
    ReferencesStatus,
    ReferenceStatus,
    ReviewDecision,
    RoleTestState,
    TestingStatus,
    VisibilityMode,
)


# ── Worker ────────────────────────────────────────────────────


class WorkerProfile(BaseModel):
    """Row of `worker_profiles` (only the columns this service reads)."""

    id: UUID
    profile_id: UUID | None = None
    name: str
    pseudonym: str | None = None
    visibility_mode: VisibilityMode | None = None
    roles: list[FinanceRole] = Field(default_factory=list)
    approval_status: ApprovalStatus = ApprovalStatus.PENDING
    approval_notes: str | None = None
    approved_at: datetime | None = None
    approved_by: UUID | None = None
    is_suspended: bool = False
    suspended_at: datetime | None = None
    suspension_reason: str | None = None
    created_at: datetime | None = None

    @field_validator("roles", mode="before")
    @classmethod
    def _null_roles(cls, v):
        return v or []

    @field_validator("approval_status", mode="before")
    @classmethod
    def _null_approval(cls, v):
        return v or ApprovalStatus.PENDING

    @field_validator("is_suspended", mode="before")
    @classmethod
    def _null_suspended(cls, v):
        return bool(v)


# ── Verification records ──────────────────────────────────────


class TestAttempt(BaseModel):
    """One skills-test attempt for one role."""

    id: UUID | None = None
    worker_profile_id: UUID
    role: FinanceRole
    score: int = Field(..., ge=0, le=100)
    passed: bool
    attempted_at: datetime | None = None
    lockout_until: datetime | None = None
    forced_by: UUID | None = None


class Reference(BaseModel):
    id: UUID | None = None
    worker_profile_id: UUID
    referee_name: str
    referee_email: str
    referee_role: str | None = None
    referee_company: str | None = None
    status: ReferenceStatus = ReferenceStatus.PENDING
    admin_notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _null_status(cls, v):
        return v or ReferenceStatus.PENDING


class IdVerification(BaseModel):
    """An identity document, or an insurance document when `is_insurance`."""

    id: UUID | None = None
    worker_profile_id: UUID
    document_type: str
    document_url: str
    is_insurance: bool = False
    status: DocumentStatus = DocumentStatus.PENDING
    rejection_reason: str | None = None
    verified_at: datetime | None = None
    verified_by: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _null_status(cls, v):
        return v or DocumentStatus.PENDING

    @field_validator("is_insurance", mode="before")
    @classmethod
    def _null_insurance(cls, v):
        return bool(v)


class ChannelStatuses(BaseModel):
    """Computed per-channel progress, replaces the stored status row."""

    testing: TestingStatus
    references: ReferencesStatus
    id_verification: DocumentChannelStatus
    insurance: DocumentChannelStatus


class RoleTestSummary(BaseModel):
    role: FinanceRole
    state: RoleTestState
    lockout_until: datetime | None = None


class VerificationSummary(BaseModel):
    """Response for GET /verification/me."""

    worker_id: UUID
    score: int
    channels: ChannelStatuses
    approval_status: ApprovalStatus
    roles: list[RoleTestSummary] = Field(default_factory=list)


class WorkerApprovalItem(BaseModel):
    """Row of the admin approval queue."""

    id: UUID
    name: str
    roles: list[FinanceRole] = Field(default_factory=list)
    approval_status: ApprovalStatus
    approved_at: datetime | None = None
    approval_notes: str | None = None
    is_suspended: bool = False
    verification_score: int


# ── Skills test ───────────────────────────────────────────────


class TestQuestion(BaseModel):
    id: UUID
    role: FinanceRole
    question_text: str
    options: list[str]
    correct_answer: int
    created_at: datetime | None = None


class TestQuestionCreate(BaseModel):
    """Request body for POST /admin/questions."""

    role: FinanceRole
    question_text: str = Field(..., min_length=1)
    options: list[str] = Field(..., min_length=2)
    correct_answer: int = Field(..., ge=0)

    @model_validator(mode="after")
    def _check_options(self) -> TestQuestionCreate:
        if any(not o.strip() for o in self.options):
            raise ValueError("Options must not be blank")
        if self.correct_answer >= len(self.options):
            raise ValueError("correct_answer must index one of the options")
        return self


class TestQuestionUpdate(BaseModel):
    role: FinanceRole | None = None
    question_text: str | None = None
    options: list[str] | None = None
    correct_answer: int | None = None


class ServedQuestion(BaseModel):
    """A question as shown to the worker — no answer key."""

    id: UUID
    question_text: str
    options: list[str]


class TestSession(BaseModel):
    """Response for POST /verification/tests/{role}/start."""

    role: FinanceRole
    questions: list[ServedQuestion]
    time_limit_seconds: int
    pass_threshold: int


class ServedTest(BaseModel):
    """Row of `test_sessions`: the questions served by one start_test call."""

    id: UUID
    worker_profile_id: UUID
    role: FinanceRole
    question_ids: list[UUID]
    started_at: datetime
    submitted_at: datetime | None = None


class AnswerSubmission(BaseModel):
    question_id: UUID
    answer: int | None = None  # None = left blank / timed out


class TestSubmission(BaseModel):
    """Request body for POST /verification/tests/{role}/submit."""

    answers: list[AnswerSubmission]


class TestResult(BaseModel):
    score: int
    passed: bool
    lockout_until: datetime | None = None


# ── Worker submissions ────────────────────────────────────────


class ReferenceCreate(BaseModel):
    referee_name: str = Field(..., min_length=1)
    referee_email: EmailStr
    referee_role: str | None = None
    referee_company: str | None = None


class DocumentCreate(BaseModel):
    document_type: str = Field(..., min_length=1)
    document_url: str = Field(..., min_length=1)
    is_insurance: bool = False


# ── Admin actions ─────────────────────────────────────────────


class ApprovalRequest(BaseModel):
    """Request body for POST /admin/workers/{id}/approval."""

    decision: ApprovalStatus
    notes: str | None = None

    @field_validator("decision")
    @classmethod
    def _no_pending(cls, v: ApprovalStatus) -> ApprovalStatus:
        if v == ApprovalStatus.PENDING:
            raise ValueError("decision must be 'active' or 'declined'")
        return v


class SubmissionReviewRequest(BaseModel):
    decision: ReviewDecision
    reason: str | None = None
    notes: str | None = None
    # Optimistic-concurrency token: the row's updated_at as the reviewer saw it
    expected_updated_at: datetime | None = None


class SuspensionRequest(BaseModel):
    reason: str
