class QuizRoomError(Exception):
    """Base class for errors reported back to a REST or socket caller."""

    status_code = 400

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class RequestValidationError(QuizRoomError):
    status_code = 400


class AuthenticationError(QuizRoomError):
    status_code = 401


class AuthorizationError(QuizRoomError):
    status_code = 403


class NotFoundError(QuizRoomError):
    status_code = 404


class ConflictError(QuizRoomError):
    status_code = 409


def describe_validation_error(exc):
    """Flatten a pydantic ValidationError into one readable line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "__root__")
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"
