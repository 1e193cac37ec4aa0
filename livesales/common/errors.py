class AppError(Exception):
    """Base error rendered to clients as ``{"error": message}``."""

    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(AppError):
    status_code = 400
    default_message = "Validation error"


class Unauthorized(AppError):
    status_code = 401
    default_message = "Access denied"


class NotFound(AppError):
    status_code = 404
    default_message = "Resource not found"


class NotFoundOrUnauthorized(NotFound):
    # Ownership failures look exactly like a missing row
    default_message = "Not found or unauthorized"


class Conflict(AppError):
    status_code = 400
    default_message = "Duplicate entry"


class InsufficientStock(AppError):
    status_code = 400
    default_message = "Insufficient stock"
