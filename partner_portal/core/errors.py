"""Domain errors raised by the service layer.

Every error carries a stable ``code`` so clients do not have to match on
message strings. The API layer renders them as::

    {"detail": "<message>", "code": "<code>", ...extra}
"""
import enum


class ErrorCode(str, enum.Enum):
    CONFLICT = "conflict"
    USER_ALREADY_EXISTS = "user_already_exists"
    NOT_FOUND = "not_found"
    WALLET_NOT_FOUND = "wallet_not_found"
    INVALID_PERMISSION_REFERENCE = "invalid_permission_reference"
    POLICY_VIOLATION = "policy_violation"
    VALIDATION_ERROR = "validation_error"


class PortalError(Exception):
    status_code = 400
    code = ErrorCode.VALIDATION_ERROR

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        return {"detail": self.message, "code": self.code.value, **self.extra}


class Conflict(PortalError):
    status_code = 409
    code = ErrorCode.CONFLICT


class UserAlreadyExists(Conflict):
    code = ErrorCode.USER_ALREADY_EXISTS


class NotFound(PortalError):
    status_code = 404
    code = ErrorCode.NOT_FOUND


class WalletNotFound(NotFound):
    code = ErrorCode.WALLET_NOT_FOUND


class InvalidPermissionReference(PortalError):
    status_code = 422
    code = ErrorCode.INVALID_PERMISSION_REFERENCE


class PolicyViolation(PortalError):
    status_code = 403
    code = ErrorCode.POLICY_VIOLATION


class ValidationFailed(PortalError):
    status_code = 400
    code = ErrorCode.VALIDATION_ERROR
