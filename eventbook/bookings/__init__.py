"""
Booking Module

Ticket booking for events. A booking is priced from the event's tier price
table, takes its tickets out of the event inventory and is stored with a
unique booking reference and QR token, all inside one database transaction.

Key Components:
- pricing.py: Tier price lookup and booking totals
- references.py: Booking reference and QR token generation
- inventory.py: Per-tier inventory decrement and release under row locks
- booking_service.py: Transactional booking creation, listing and status changes
- router.py: FastAPI endpoints for booking management
- schemas.py: Pydantic models for booking requests and responses
"""

from .router import router
from .booking_service import BookingService, STATUS_TRANSITIONS
from .inventory import InventoryAdjuster
from .references import ReferenceGenerator
from .pricing import resolve_total, price_booking, price_lines
from .schemas import (
    BookingCreateRequest, BookingOut, BookingStatus, BookingStatusUpdate,
    PaymentStatus, TicketLine, TicketRequest
)

__all__ = [
    "router",
    "BookingService",
    "STATUS_TRANSITIONS",
    "InventoryAdjuster",
    "ReferenceGenerator",
    "resolve_total",
    "price_booking",
    "price_lines",
    "BookingCreateRequest",
    "BookingOut",
    "BookingStatus",
    "BookingStatusUpdate",
    "PaymentStatus",
    "TicketLine",
    "TicketRequest",
]
