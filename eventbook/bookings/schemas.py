from pydantic import BaseModel, Field, ConfigDict, StrictInt
from typing import List, Optional, Literal
from datetime import datetime, date
from decimal import Decimal
from enum import Enum

from eventbook.bookings.pricing import MAX_TICKET_QUANTITY

class BookingStatus(str, Enum):
    """Booking status enumeration"""
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    COMPLETED = "completed"

class PaymentStatus(str, Enum):
    """Payment status enumeration"""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"

# Request Models
class TicketRequest(BaseModel):
    """One requested ticket line"""
    type: str = Field(..., min_length=1, max_length=20)
    quantity: StrictInt = Field(..., gt=0, le=MAX_TICKET_QUANTITY)

class BookingCreateRequest(BaseModel):
    """Request to book tickets for an event"""
    model_config = ConfigDict(populate_by_name=True)
    
    event_id: int = Field(..., alias="eventId")
    tickets: List[TicketRequest] = Field(..., min_length=1)
    idempotency_key: Optional[str] = Field(None, alias="idempotencyKey", min_length=1, max_length=100)

class BookingStatusUpdate(BaseModel):
    status: BookingStatus

# Response Models
class TicketLine(BaseModel):
    """Ticket line with the unit price frozen at booking time"""
    type: str
    quantity: int
    price: Decimal

class BookingOut(BaseModel):
    """Booking details"""
    id: int
    user_id: int
    event_id: int
    tickets: List[TicketLine]
    total_amount: Decimal
    booking_reference: str
    qr_code: str
    status: BookingStatus
    payment_status: PaymentStatus
    booking_date: Optional[datetime] = None
    event_name: Optional[str] = None
    event_date: Optional[date] = None
    event_location: Optional[str] = None
    image: Optional[str] = None
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    
    @classmethod
    def from_booking(cls, booking, include_user: bool = False) -> "BookingOut":
        data = dict(
            id=booking.id,
            user_id=booking.user_id,
            event_id=booking.event_id,
            tickets=booking.tickets,
            total_amount=booking.total_amount,
            booking_reference=booking.booking_reference,
            qr_code=booking.qr_code,
            status=booking.status,
            payment_status=booking.payment_status,
            booking_date=booking.booking_date,
        )
        if booking.event is not None:
            data.update(
                event_name=booking.event.name,
                event_date=booking.event.date,
                event_location=booking.event.location,
                image=booking.event.image,
            )
        if include_user and booking.user is not None:
            data.update(user_name=booking.user.name, user_email=booking.user.email)
        return cls(**data)
