import logging
import time
from typing import Dict, List, Optional, Sequence, Set, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session, joinedload

from eventbook.bookings.inventory import InventoryAdjuster
from eventbook.bookings.pricing import price_booking, quantities_by_tier
from eventbook.bookings.references import ReferenceGenerator
from eventbook.bookings.schemas import BookingStatus, PaymentStatus
from eventbook.errors import (
    BookingNotFoundError, DuplicateReferenceError, EventNotFoundError,
    ForbiddenError, InvalidStatusTransitionError
)
from eventbook.models import Booking, User

logger = logging.getLogger(__name__)

# Allowed status changes; cancelled and completed are terminal
STATUS_TRANSITIONS: Dict[str, Set[str]] = {
    BookingStatus.PENDING.value: {BookingStatus.CONFIRMED.value, BookingStatus.CANCELLED.value},
    BookingStatus.CONFIRMED.value: {BookingStatus.COMPLETED.value, BookingStatus.CANCELLED.value},
    BookingStatus.CANCELLED.value: set(),
    BookingStatus.COMPLETED.value: set(),
}


class BookingService:
    """Service for creating and managing event bookings"""
    
    def __init__(
        self,
        db: Session,
        references: Optional[ReferenceGenerator] = None,
        max_attempts: int = 3,
        backoff_base: float = 0.05
    ):
        self.db = db
        self.references = references or ReferenceGenerator()
        self.inventory = InventoryAdjuster(db)
        self.max_attempts = max(1, max_attempts)
        self.backoff_base = backoff_base
    
    def create_booking(
        self,
        user_id: int,
        event_id: int,
        tickets: Sequence,
        idempotency_key: Optional[str] = None
    ) -> Tuple[Booking, bool]:
        """Book tickets in a single transaction.
        
        Pricing, the availability check, the inventory decrement and the
        booking insert commit together or not at all. Reference collisions
        and transient lock errors retry the whole transaction.
        
        Returns the booking and whether it was newly created; a repeated
        idempotency key returns the original booking.
        """
        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._create_once(user_id, event_id, tickets, idempotency_key)
            except DuplicateReferenceError:
                logger.warning(
                    "Booking reference collision for user %s, regenerating (attempt %s/%s)",
                    user_id, attempt, self.max_attempts
                )
                if attempt >= self.max_attempts:
                    raise
            except OperationalError as e:
                self.db.rollback()
                logger.warning("Booking transaction failed on attempt %s/%s: %s", attempt, self.max_attempts, e)
                if attempt >= self.max_attempts:
                    raise
                time.sleep(self.backoff_base * (2 ** (attempt - 1)))
    
    def _create_once(
        self,
        user_id: int,
        event_id: int,
        tickets: Sequence,
        idempotency_key: Optional[str]
    ) -> Tuple[Booking, bool]:
        reference = qr_code = None
        try:
            if idempotency_key:
                existing = self._find_by_idempotency_key(user_id, idempotency_key)
                if existing:
                    self.db.rollback()
                    logger.info("Replayed booking %s for idempotency key", existing.id)
                    return existing, False
            
            event = self.inventory.lock_event(event_id)
            if not event:
                raise EventNotFoundError()
            
            lines, total_amount = price_booking(event, tickets)
            
            for tier, quantity in quantities_by_tier(lines).items():
                self.inventory.decrement_available(event.id, tier, quantity)
            
            reference = self.references.new_reference()
            qr_code = self.references.new_qr_token()
            booking = Booking(
                user_id=user_id,
                event_id=event.id,
                tickets=[
                    {"type": line["type"], "quantity": line["quantity"], "price": str(line["price"])}
                    for line in lines
                ],
                total_amount=total_amount,
                booking_reference=reference,
                qr_code=qr_code,
                status=BookingStatus.CONFIRMED.value,
                payment_status=PaymentStatus.PAID.value,
                idempotency_key=idempotency_key,
            )
            self.db.add(booking)
            self.db.flush()
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if idempotency_key:
                existing = self._find_by_idempotency_key(user_id, idempotency_key)
                if existing:
                    return existing, False
            if reference and self._reference_taken(reference, qr_code):
                raise DuplicateReferenceError()
            raise
        except Exception:
            self.db.rollback()
            raise
        
        logger.info(
            "Created booking %s (%s) for user %s on event %s, total %s",
            booking.id, reference, user_id, event_id, total_amount
        )
        return self.get_booking(booking.id), True
    
    def _find_by_idempotency_key(self, user_id: int, idempotency_key: str) -> Optional[Booking]:
        return self.db.query(Booking).filter(
            Booking.user_id == user_id,
            Booking.idempotency_key == idempotency_key
        ).first()
    
    def _reference_taken(self, reference: str, qr_code: str) -> bool:
        taken = self.db.query(Booking.id).filter(
            or_(Booking.booking_reference == reference, Booking.qr_code == qr_code)
        ).first() is not None
        self.db.rollback()
        return taken
    
    def get_booking(self, booking_id: int) -> Optional[Booking]:
        """Get booking by ID with its event and user"""
        return self.db.query(Booking).options(
            joinedload(Booking.event), joinedload(Booking.user)
        ).filter(Booking.id == booking_id).first()
    
    def get_booking_for_user(self, booking_id: int, user: User) -> Booking:
        """Get a booking visible to user: their own, or any for admins"""
        booking = self.get_booking(booking_id)
        if not booking or (booking.user_id != user.id and not user.is_admin):
            raise BookingNotFoundError()
        return booking
    
    def get_user_bookings(self, user_id: int, page: int = 1, limit: int = 10) -> List[Booking]:
        """Get a user's bookings, newest first"""
        return self.db.query(Booking).options(joinedload(Booking.event)).filter(
            Booking.user_id == user_id
        ).order_by(
            Booking.booking_date.desc(), Booking.id.desc()
        ).offset((page - 1) * limit).limit(limit).all()
    
    def get_all_bookings(self, page: int = 1, limit: int = 10) -> List[Booking]:
        """Get all bookings, newest first"""
        return self.db.query(Booking).options(
            joinedload(Booking.event), joinedload(Booking.user)
        ).order_by(
            Booking.booking_date.desc(), Booking.id.desc()
        ).offset((page - 1) * limit).limit(limit).all()
    
    def count_bookings(self, user_id: Optional[int] = None) -> int:
        query = self.db.query(Booking)
        if user_id is not None:
            query = query.filter(Booking.user_id == user_id)
        return query.count()
    
    def update_status(self, booking_id: int, status: str) -> Booking:
        """Move a booking to a new status following STATUS_TRANSITIONS.
        
        Cancelling returns the booked tickets to the event inventory in the
        same transaction.
        """
        status = BookingStatus(status).value
        try:
            booking = self.db.query(Booking).filter(
                Booking.id == booking_id
            ).with_for_update().populate_existing().first()
            if not booking:
                raise BookingNotFoundError()
            
            if status not in STATUS_TRANSITIONS[booking.status]:
                raise InvalidStatusTransitionError(booking.status, status)
            
            if status == BookingStatus.CANCELLED.value:
                for tier, quantity in quantities_by_tier(booking.tickets).items():
                    self.inventory.release(booking.event_id, tier, quantity)
                if booking.payment_status == PaymentStatus.PAID.value:
                    booking.payment_status = PaymentStatus.REFUNDED.value
            
            previous = booking.status
            booking.status = status
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        
        logger.info("Booking %s status %s -> %s", booking_id, previous, status)
        return self.get_booking(booking_id)
    
    def cancel_booking(self, booking_id: int, user: User) -> Booking:
        """Cancel a booking on behalf of its owner or an admin"""
        booking = self.get_booking(booking_id)
        if not booking:
            raise BookingNotFoundError()
        if booking.user_id != user.id and not user.is_admin:
            raise ForbiddenError("Not allowed to cancel this booking")
        return self.update_status(booking_id, BookingStatus.CANCELLED.value)
