"""Application exception types."""

from app.domain.authorization import Denied, DenialReason
from app.domain.outcomes import Failure, FailureKind
from app.schemas.error import ErrorBody, ErrorResponse

_FAILURE_STATUS: dict[FailureKind, tuple[int, str]] = {
    FailureKind.UNAUTHENTICATED: (401, "UNAUTHORIZED"),
    FailureKind.FORBIDDEN: (403, "FORBIDDEN"),
    FailureKind.NOT_FOUND: (404, "NOT_FOUND"),
    FailureKind.VALIDATION: (400, "VALIDATION_ERROR"),
    FailureKind.CONFLICT: (409, "CONFLICT"),
}


class ApiError(Exception):
    """Structured API error that maps directly to the error envelope."""

    def __init__(self, status_code: int, code: str, message: str) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(error=ErrorBody(code=code, message=message))
        super().__init__(message)

    @classmethod
    def from_failure(cls, failure: Failure) -> "ApiError":
        status_code, code = _FAILURE_STATUS[failure.kind]
        return cls(status_code=status_code, code=code, message=failure.message)

    @classmethod
    def from_denial(cls, denial: Denied) -> "ApiError":
        kind = FailureKind.UNAUTHENTICATED if denial.reason is DenialReason.UNAUTHENTICATED else FailureKind.FORBIDDEN
        return cls.from_failure(Failure(kind, denial.message))


__all__ = ["ApiError"]
