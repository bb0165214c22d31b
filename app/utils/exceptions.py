from fastapi import HTTPException, status


# ═══════════════════════════════════════════════════════════════════════════════
# ERROR CODES: machine-readable constants shown on error pages and in logs
# ═══════════════════════════════════════════════════════════════════════════════
class ErrorCode:
    VALIDATION_ERROR        = "VALIDATION_ERROR"
    API_ERROR               = "API_ERROR"
    API_UNREACHABLE         = "API_UNREACHABLE"
    INVALID_RESPONSE        = "INVALID_RESPONSE"
    SCOPE_MISSING           = "SCOPE_MISSING"
    INTERNAL_SERVER_ERROR   = "INTERNAL_SERVER_ERROR"


# ═══════════════════════════════════════════════════════════════════════════════
# BASE EXCEPTION
# ═══════════════════════════════════════════════════════════════════════════════
class AppException(HTTPException):
    """
    Base exception for all application-level errors.
    Carries a machine-readable error_code and a human-readable message.
    """
    def __init__(
        self,
        status_code: int,
        message: str,
        error_code: str,
        details: list | None = None,
        field: str | None = None,
    ):
        super().__init__(status_code=status_code, detail={
            "message": message,
            "error": {
                "code": error_code,
                "details": details,
                "field": field,
            }
        })
        self.message = message
        self.error_code = error_code

    def __str__(self) -> str:
        return self.message


# ═══════════════════════════════════════════════════════════════════════════════
# CONCRETE EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════════════════

class ApiError(AppException):
    """
    Raised by the car API client for every failed call.

    `message` is the server's own error message when it sent one, otherwise a
    per-operation fallback such as "Failed to fetch cars". `operation` names
    the client method that failed.
    """
    def __init__(
        self,
        message: str,
        operation: str,
        status_code: int = status.HTTP_502_BAD_GATEWAY,
        error_code: str = ErrorCode.API_ERROR,
    ):
        super().__init__(status_code, message, error_code)
        self.operation = operation


class ScopeMissingException(AppException):
    def __init__(self):
        super().__init__(status.HTTP_400_BAD_REQUEST, "Neptun code is missing", ErrorCode.SCOPE_MISSING)


