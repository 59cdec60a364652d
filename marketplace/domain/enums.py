"""Enums shared across the domain layer."""

from enum import Enum


class FinanceRole(str, Enum):
    ACCOUNTS_PAYABLE = "accounts_payable"
    ACCOUNTS_RECEIVABLE = "accounts_receivable"
    BOOKKEEPER = "bookkeeper"
    PAYROLL_CLERK = "payroll_clerk"
    MANAGEMENT_ACCOUNTANT = "management_accountant"
    CREDIT_CONTROLLER = "credit_controller"
    FINANCIAL_CONTROLLER = "financial_controller"
    FINANCE_MANAGER = "finance_manager"
    CFO_FPA = "cfo_fpa"


class VisibilityMode(str, Enum):
    ANONYMOUS = "anonymous"
    FULLY_DISCLOSED = "fully_disclosed"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    ACTIVE = "active"
    DECLINED = "declined"


class ReferenceStatus(str, Enum):
    PENDING = "pending"
    VERIFIED = "verified"
    DECLINED = "declined"


class DocumentStatus(str, Enum):
    """Status of an ID, insurance or qualification upload."""

    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class TestingStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    PASSED = "passed"


class ReferencesStatus(str, Enum):
    NOT_STARTED = "not_started"
    PENDING = "pending"
    VERIFIED = "verified"


class DocumentChannelStatus(str, Enum):
    NOT_SUBMITTED = "not_submitted"
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class RoleTestState(str, Enum):
    NOT_STARTED = "not_started"
    PASSED = "passed"
    LOCKED = "locked"
    RETAKEABLE = "retakeable"


class SubmissionKind(str, Enum):
    REFERENCE = "reference"
    ID_DOCUMENT = "id_document"
    QUALIFICATION = "qualification"


class ReviewDecision(str, Enum):
    VERIFIED = "verified"
    REJECTED = "rejected"


class AccountKind(str, Enum):
    WORKER = "worker"
    BUSINESS = "business"
