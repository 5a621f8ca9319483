"""
core/errors.py -- Error taxonomy shared by the auth/ and orgs/ services.

Services raise these instead of HTTPException so they stay usable outside a
request (tests, scripts). api/main.py registers one exception handler that
maps every ServiceError onto the standard {"error": {...}} envelope.

    ServiceError (base, 500)
    ├── ValidationError (400)  -- caller input missing or malformed
    ├── AuthError (401)        -- bad credentials or missing authorization
    ├── NotFoundError (404)    -- referenced entity absent
    ├── ConflictError (409)    -- uniqueness violation
    └── InternalError (500)    -- store or signing failure

InternalError messages are fixed strings. The underlying exception is logged
where it is caught and chained with `raise ... from exc`; it never reaches
the response body.

Layer rule: core/ is the kernel. No imports from api/, auth/, or orgs/.
"""

from __future__ import annotations


class ServiceError(Exception):
    """Base class for all errors a service operation can raise.

    Attributes:
        message:     Client-safe, human-readable message.
        code:        Machine-readable error code for the response envelope.
        status_code: HTTP status the boundary layer should use.
    """

    status_code: int = 500
    code: str = "internal_error"
    default_message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, *, code: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "detail": None}


class ValidationError(ServiceError):
    status_code = 400
    code = "validation_error"
    default_message = "Request validation failed."


class AuthError(ServiceError):
    """Credential or authorization failure.

    At the login boundary this is deliberately identical for an unknown
    username and a wrong password. Organization checks raise it with
    status_code=403.
    """

    status_code = 401
    code = "bad_credentials"
    default_message = "Invalid username or password."


class NotFoundError(ServiceError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found."


class ConflictError(ServiceError):
    status_code = 409
    code = "conflict"
    default_message = "Resource already exists."


class InternalError(ServiceError):
    status_code = 500
    code = "internal_error"
    default_message = "An unexpected error occurred."
