"""Translation of domain errors into HTTP responses."""

from fastapi import HTTPException, status

from marketplace.domain.errors import (
    AlreadyPassed,
    ForcedPassesDisabled,
    LockedOut,
    MissingRejectionReason,
    MissingSuspensionReason,
    NoActiveTest,
    NoQuestionsAvailable,
    RecordNotFound,
    RoleNotDeclared,
    StaleSubmission,
    VerificationError,
)

_STATUS_CODES: dict[type[VerificationError], int] = {
    LockedOut: status.HTTP_423_LOCKED,
    AlreadyPassed: status.HTTP_409_CONFLICT,
    NoQuestionsAvailable: status.HTTP_503_SERVICE_UNAVAILABLE,
    MissingRejectionReason: status.HTTP_422_UNPROCESSABLE_CONTENT,
    MissingSuspensionReason: status.HTTP_422_UNPROCESSABLE_CONTENT,
    RecordNotFound: status.HTTP_404_NOT_FOUND,
    StaleSubmission: status.HTTP_409_CONFLICT,
    ForcedPassesDisabled: status.HTTP_403_FORBIDDEN,
    RoleNotDeclared: status.HTTP_403_FORBIDDEN,
    NoActiveTest: status.HTTP_409_CONFLICT,
}


def to_http(exc: VerificationError) -> HTTPException:
    code = _STATUS_CODES.get(type(exc), status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, LockedOut):
        return HTTPException(
            status_code=code,
            detail={"message": str(exc), "lockout_until": exc.lockout_until.isoformat()},
        )
    return HTTPException(status_code=code, detail=str(exc))
