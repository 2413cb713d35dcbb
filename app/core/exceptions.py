"""
Domain exceptions.

Services raise these; the API layer turns them into HTTP responses using
the status_code each class carries.
"""


class RosterError(Exception):
    """Base exception for all roster errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidCredentials(RosterError):
    """Unknown username or wrong password (deliberately indistinguishable)."""

    status_code = 401
    default_message = "Invalid credentials"


class Unauthenticated(RosterError):
    """Missing, malformed, tampered or expired bearer token."""

    status_code = 401
    default_message = "Unauthorized - Invalid or missing JWT token"


class UsernameConflict(RosterError):
    status_code = 409
    default_message = "Username already exists"


class NotFound(RosterError):
    status_code = 404
    default_message = "Not found"


class StudentNotFound(NotFound):
    def __init__(self, student_id: int):
        self.student_id = student_id
        super().__init__(f"Student not found with id: {student_id}")


class ValidationError(RosterError):
    status_code = 400
    default_message = "Invalid request data"


class MalformedInput(ValidationError):
    """Uploaded CSV is structurally unusable (empty, no data rows)."""

    default_message = "Invalid CSV format"


class InternalError(RosterError):
    pass


# ============================================================
# TOKEN ERRORS
# Raised by TokenService.verify, collapsed into Unauthenticated by the gate
# ============================================================

class TokenError(RosterError):
    status_code = 401
    default_message = "Invalid token"


class MalformedToken(TokenError):
    default_message = "Token could not be parsed"


class InvalidToken(TokenError):
    default_message = "Token signature is invalid"


class ExpiredToken(TokenError):
    default_message = "Token has expired"
