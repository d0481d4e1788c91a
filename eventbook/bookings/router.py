from fastapi import APIRouter, Depends, Header, Query, Request, Response, status
from sqlalchemy.orm import Session
from typing import Optional

from eventbook.database import get_db
from eventbook.auth.dependencies import get_current_user, require_admin
from eventbook.bookings.schemas import BookingCreateRequest, BookingOut, BookingStatusUpdate
from eventbook.bookings.booking_service import BookingService
from eventbook.models import User
from eventbook.responses import Pagination, success

router = APIRouter()

def get_booking_service(request: Request, db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db, max_attempts=request.app.state.settings.BOOKING_RETRY_ATTEMPTS)

def _serialize(booking, include_user: bool = False) -> dict:
    return BookingOut.from_booking(booking, include_user=include_user).model_dump(mode="json")

@router.post("", status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingCreateRequest,
    response: Response,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key", max_length=100),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Book tickets for an event"""
    booking, created = booking_service.create_booking(
        user_id=current_user.id,
        event_id=payload.event_id,
        tickets=payload.tickets,
        idempotency_key=idempotency_key or payload.idempotency_key,
    )
    if not created:
        response.status_code = status.HTTP_200_OK
        return success(_serialize(booking), message="Booking already exists")
    return success(_serialize(booking), message="Booking created successfully")

@router.get("/my-bookings")
def get_my_bookings(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Bookings per page"),
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Get the caller's bookings, newest first"""
    bookings = booking_service.get_user_bookings(current_user.id, page=page, limit=limit)
    total = booking_service.count_bookings(user_id=current_user.id)
    return success(
        [_serialize(booking) for booking in bookings],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )

@router.get("")
def get_all_bookings(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Bookings per page"),
    current_user: User = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Get all bookings (admin only)"""
    bookings = booking_service.get_all_bookings(page=page, limit=limit)
    total = booking_service.count_bookings()
    return success(
        [_serialize(booking, include_user=True) for booking in bookings],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )

@router.get("/{booking_id}")
def get_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Get booking details by ID"""
    booking = booking_service.get_booking_for_user(booking_id, current_user)
    return success(_serialize(booking, include_user=current_user.is_admin))

@router.patch("/{booking_id}/status")
def update_booking_status(
    booking_id: int,
    payload: BookingStatusUpdate,
    current_user: User = Depends(require_admin),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Change a booking's status (admin only)"""
    booking = booking_service.update_status(booking_id, payload.status.value)
    return success(_serialize(booking, include_user=True), message="Booking status updated")

@router.post("/{booking_id}/cancel")
def cancel_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    booking_service: BookingService = Depends(get_booking_service)
):
    """Cancel one of the caller's bookings"""
    booking = booking_service.cancel_booking(booking_id, current_user)
    return success(_serialize(booking), message="Booking cancelled")
