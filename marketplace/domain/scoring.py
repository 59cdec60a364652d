"""
Verification score and per-channel statuses.

Everything here is a pure function over already-fetched records, so the
same inputs always produce the same result and input order never matters.
"""

from collections.abc import Iterable, Sequence

from marketplace.domain.enums import (
    DocumentChannelStatus,
    DocumentStatus,
    FinanceRole,
    ReferencesStatus,
    ReferenceStatus,
    TestingStatus,
)
from marketplace.domain.models import (
    ChannelStatuses,
    IdVerification,
    Reference,
    TestAttempt,
)

CHANNEL_POINTS = 25
REQUIRED_VERIFIED_REFERENCES = 2


def compute_verification_score(
    test_attempts: Iterable[TestAttempt],
    references: Iterable[Reference],
    id_verifications: Iterable[IdVerification],
) -> int:
    """
    25 points for each channel with at least one piece of passing evidence.

    Existence only: repeated failures never lower the score, and two
    verified references are worth the same as one.
    """
    documents = list(id_verifications)
    channels = (
        any(a.passed for a in test_attempts),
        any(r.status == ReferenceStatus.VERIFIED for r in references),
        any(
            not d.is_insurance and d.status == DocumentStatus.VERIFIED
            for d in documents
        ),
        any(d.is_insurance and d.status == DocumentStatus.VERIFIED for d in documents),
    )
    return CHANNEL_POINTS * sum(channels)


def testing_status(
    roles: Sequence[FinanceRole], test_attempts: Iterable[TestAttempt]
) -> TestingStatus:
    # Stray attempts without declared roles are orphans, not progress
    if not roles:
        return TestingStatus.NOT_STARTED

    passed_roles = {a.role for a in test_attempts if a.passed}
    declared = set(roles)
    if declared <= passed_roles:
        return TestingStatus.PASSED
    if declared & passed_roles:
        return TestingStatus.IN_PROGRESS
    return TestingStatus.NOT_STARTED


def references_status(references: Iterable[Reference]) -> ReferencesStatus:
    refs = list(references)
    if not refs:
        return ReferencesStatus.NOT_STARTED
    verified = sum(1 for r in refs if r.status == ReferenceStatus.VERIFIED)
    if verified >= REQUIRED_VERIFIED_REFERENCES:
        return ReferencesStatus.VERIFIED
    return ReferencesStatus.PENDING


def document_status(
    id_verifications: Iterable[IdVerification], insurance: bool
) -> DocumentChannelStatus:
    """Status of either the identity or the insurance channel."""
    docs = [d for d in id_verifications if d.is_insurance == insurance]
    if not docs:
        return DocumentChannelStatus.NOT_SUBMITTED
    if any(d.status == DocumentStatus.VERIFIED for d in docs):
        return DocumentChannelStatus.VERIFIED
    if all(d.status == DocumentStatus.REJECTED for d in docs):
        return DocumentChannelStatus.REJECTED
    return DocumentChannelStatus.PENDING


def channel_statuses(
    roles: Sequence[FinanceRole],
    test_attempts: Iterable[TestAttempt],
    references: Iterable[Reference],
    id_verifications: Iterable[IdVerification],
) -> ChannelStatuses:
    documents = list(id_verifications)
    return ChannelStatuses(
        testing=testing_status(roles, test_attempts),
        references=references_status(references),
        id_verification=document_status(documents, insurance=False),
        insurance=document_status(documents, insurance=True),
    )
