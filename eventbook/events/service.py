import logging
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple
from eventbook.models import Event, TICKET_TIERS
from eventbook.events.schemas import EventCreate, EventUpdate
from eventbook.errors import EventNotFoundError

logger = logging.getLogger(__name__)

class EventService:
    @staticmethod
    def get_event_by_id(db: Session, event_id: int) -> Optional[Event]:
        """Get an active event by ID"""
        return db.query(Event).filter(Event.id == event_id, Event.is_active == True).first()
    
    @staticmethod
    def get_events(
        db: Session,
        skip: int = 0,
        limit: int = 10,
        category: Optional[str] = None
    ) -> Tuple[List[Event], int]:
        """Get active events ordered by date, with the total count"""
        query = db.query(Event).filter(Event.is_active == True)
        if category:
            query = query.filter(Event.category == category)
        
        total = query.count()
        events = query.order_by(Event.date.asc(), Event.time.asc(), Event.id.asc()).offset(skip).limit(limit).all()
        return events, total
    
    @staticmethod
    def create_event(db: Session, event: EventCreate, organizer_id: int) -> Event:
        """Create a new event owned by organizer_id"""
        db_event = Event(
            name=event.name,
            description=event.description,
            date=event.date,
            time=event.time,
            location=event.location,
            venue=event.venue,
            image=event.image,
            ticket_price_regular=event.ticket_price.regular,
            ticket_price_vip=event.ticket_price.vip,
            available_tickets_regular=event.available_tickets.regular,
            available_tickets_vip=event.available_tickets.vip,
            category=event.category,
            organizer_id=organizer_id,
        )
        db.add(db_event)
        db.commit()
        db.refresh(db_event)
        logger.info("Created event %s by organizer %s", db_event.id, organizer_id)
        return db_event
    
    @staticmethod
    def update_event(db: Session, event_id: int, event_update: EventUpdate) -> Event:
        """Apply a partial update to an active event"""
        db_event = EventService.get_event_by_id(db, event_id)
        if not db_event:
            raise EventNotFoundError()
        
        update_data = event_update.model_dump(exclude_unset=True, exclude_none=True)
        ticket_price = update_data.pop("ticket_price", None) or {}
        available_tickets = update_data.pop("available_tickets", None) or {}
        
        for field, value in update_data.items():
            setattr(db_event, field, value)
        for tier in TICKET_TIERS:
            if ticket_price.get(tier) is not None:
                setattr(db_event, f"ticket_price_{tier}", ticket_price[tier])
            if available_tickets.get(tier) is not None:
                setattr(db_event, f"available_tickets_{tier}", available_tickets[tier])
        
        db.commit()
        db.refresh(db_event)
        return db_event
    
    @staticmethod
    def delete_event(db: Session, event_id: int) -> None:
        """Soft delete; bookings keep referencing the row"""
        db_event = EventService.get_event_by_id(db, event_id)
        if not db_event:
            raise EventNotFoundError()
        db_event.is_active = False
        db.commit()
        logger.info("Deactivated event %s", event_id)
