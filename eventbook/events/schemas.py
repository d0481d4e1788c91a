from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal
from datetime import date as date_type, time as time_type, datetime
from decimal import Decimal

EventCategory = Literal["music", "sports", "conference", "theater", "festival", "other"]

class TierPrices(BaseModel):
    """Price per ticket tier"""
    regular: Decimal = Field(..., ge=0)
    vip: Decimal = Field(..., ge=0)

class TierAvailability(BaseModel):
    """Remaining sellable tickets per tier"""
    regular: int = Field(100, ge=0)
    vip: int = Field(50, ge=0)

class PartialTierPrices(BaseModel):
    regular: Optional[Decimal] = Field(None, ge=0)
    vip: Optional[Decimal] = Field(None, ge=0)

class PartialTierAvailability(BaseModel):
    regular: Optional[int] = Field(None, ge=0)
    vip: Optional[int] = Field(None, ge=0)

class EventCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    date: date_type
    time: time_type
    location: str = Field(..., min_length=1, max_length=200)
    venue: str = Field(..., min_length=1, max_length=100)
    image: str = Field("🎭", max_length=255)
    ticket_price: TierPrices = Field(..., alias="ticketPrice")
    available_tickets: TierAvailability = Field(default_factory=TierAvailability, alias="availableTickets")
    category: EventCategory = "other"

class EventUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)
    
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    date: Optional[date_type] = None
    time: Optional[time_type] = None
    location: Optional[str] = Field(None, max_length=200)
    venue: Optional[str] = Field(None, max_length=100)
    image: Optional[str] = Field(None, max_length=255)
    ticket_price: Optional[PartialTierPrices] = Field(None, alias="ticketPrice")
    available_tickets: Optional[PartialTierAvailability] = Field(None, alias="availableTickets")
    category: Optional[EventCategory] = None

class EventOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    
    id: int
    name: str
    description: str
    date: date_type
    time: time_type
    location: str
    venue: str
    image: Optional[str] = None
    ticket_price: TierPrices
    available_tickets: TierAvailability
    category: str
    organizer_id: Optional[int] = None
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
