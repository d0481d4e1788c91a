"""Application error taxonomy.

Every error carries the HTTP status it maps to; the handlers registered in
``eventbook.main`` render them into the standard response envelope.
"""
from typing import Dict, List, Optional


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message or self.message)
        if message:
            self.message = message
        if status_code:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, message: Optional[str] = None, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.errors = errors or []


class UnknownTierError(ValidationError):
    def __init__(self, tier: str):
        super().__init__(
            f"Unknown ticket type: {tier}",
            errors=[{"field": "tickets.type", "message": f"Unknown ticket type '{tier}'"}],
        )
        self.tier = tier


class InvalidQuantityError(ValidationError):
    def __init__(self, quantity):
        super().__init__(
            "Ticket quantity must be a positive integer",
            errors=[{"field": "tickets.quantity", "message": f"Invalid quantity {quantity!r}"}],
        )
        self.quantity = quantity


class NotFoundError(AppError):
    status_code = 404
    message = "Resource not found"


class EventNotFoundError(NotFoundError):
    message = "Event not found"


class BookingNotFoundError(NotFoundError):
    message = "Booking not found"


class AuthError(AppError):
    status_code = 401
    message = "Not authorized"


class ForbiddenError(AuthError):
    status_code = 403
    message = "Not enough permissions"


class ConflictError(AppError):
    status_code = 409
    message = "Conflict"


class InsufficientInventoryError(ConflictError):
    def __init__(self, tier: str, requested: int, available: Optional[int] = None):
        detail = f"Not enough {tier} tickets available"
        if available is not None:
            detail += f" (requested {requested}, available {available})"
        super().__init__(detail)
        self.tier = tier
        self.requested = requested
        self.available = available


class InvalidStatusTransitionError(ConflictError):
    def __init__(self, current: str, target: str):
        super().__init__(f"Cannot change booking status from {current} to {target}")
        self.current = current
        self.target = target


class DuplicateReferenceError(AppError):
    """Booking reference or QR token collided with an existing booking."""
    message = "Booking reference collision"
