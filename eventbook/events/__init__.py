"""
Events Module

Event catalogue with per-tier pricing and inventory. Listing and detail
endpoints are public; create, update and soft delete require the admin role.
"""

from .router import router
from .service import EventService
from .schemas import EventCreate, EventUpdate, EventOut, TierPrices, TierAvailability

__all__ = [
    "router",
    "EventService",
    "EventCreate",
    "EventUpdate",
    "EventOut",
    "TierPrices",
    "TierAvailability",
]
