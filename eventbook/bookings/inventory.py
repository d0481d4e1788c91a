import logging
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session

from eventbook.errors import EventNotFoundError, InsufficientInventoryError, UnknownTierError
from eventbook.models import Event, TICKET_TIERS

logger = logging.getLogger(__name__)


class InventoryAdjuster:
    """Per-tier ticket inventory changes.

    Runs inside the caller's transaction and never commits; the booking
    service owns the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    def lock_event(self, event_id: int) -> Optional[Event]:
        """Load an active event holding a row lock until the transaction ends"""
        return (
            self.db.query(Event)
            .filter(Event.id == event_id, Event.is_active == True)
            .with_for_update()
            .populate_existing()
            .first()
        )

    def decrement_available(self, event_id: int, tier: str, quantity: int) -> None:
        """Take quantity tickets of tier, failing instead of going negative"""
        column = self._column(tier)
        result = self.db.execute(
            update(Event)
            .where(Event.id == event_id, column >= quantity)
            .values({column: column - quantity})
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 1:
            return

        available = self.db.query(column).filter(Event.id == event_id).scalar()
        if available is None:
            raise EventNotFoundError()
        logger.info(
            "Rejected %s %s tickets for event %s, %s left", quantity, tier, event_id, available
        )
        raise InsufficientInventoryError(tier, quantity, available)

    def release(self, event_id: int, tier: str, quantity: int) -> None:
        """Return tickets of a cancelled booking to the event"""
        column = self._column(tier)
        self.db.execute(
            update(Event)
            .where(Event.id == event_id)
            .values({column: column + quantity})
            .execution_options(synchronize_session=False)
        )

    @staticmethod
    def _column(tier: str):
        if tier not in TICKET_TIERS:
            raise UnknownTierError(tier)
        return getattr(Event, f"available_tickets_{tier}")
