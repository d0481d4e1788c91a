from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from eventbook.database import get_db
from eventbook.auth.dependencies import require_admin
from eventbook.events.schemas import EventCreate, EventUpdate, EventOut, EventCategory
from eventbook.events.service import EventService
from eventbook.errors import EventNotFoundError
from eventbook.models import User
from eventbook.responses import Pagination, success

router = APIRouter()

def _serialize(event) -> dict:
    return EventOut.model_validate(event).model_dump(mode="json")

@router.get("")
def get_events(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(10, ge=1, le=100, description="Events per page"),
    category: Optional[EventCategory] = Query(None, description="Filter by category"),
    db: Session = Depends(get_db)
):
    """List active events ordered by date"""
    events, total = EventService.get_events(db, skip=(page - 1) * limit, limit=limit, category=category)
    return success(
        [_serialize(event) for event in events],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )

@router.get("/{event_id}")
def get_event(event_id: int, db: Session = Depends(get_db)):
    """Get event details by ID"""
    event = EventService.get_event_by_id(db, event_id)
    if not event:
        raise EventNotFoundError()
    return success(_serialize(event))

@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(
    event: EventCreate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Create an event (admin only)"""
    db_event = EventService.create_event(db, event, organizer_id=current_user.id)
    return success(_serialize(db_event), message="Event created successfully")

@router.put("/{event_id}")
def update_event(
    event_id: int,
    event_update: EventUpdate,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Update an event (admin only)"""
    db_event = EventService.update_event(db, event_id, event_update)
    return success(_serialize(db_event), message="Event updated successfully")

@router.delete("/{event_id}")
def delete_event(
    event_id: int,
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Soft delete an event (admin only)"""
    EventService.delete_event(db, event_id)
    return success(message="Event deleted successfully")
