from decimal import Decimal
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Date, Time, Text, ForeignKey, Numeric, JSON, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from eventbook.database import Base

TICKET_TIERS = ("regular", "vip")
EVENT_CATEGORIES = ("music", "sports", "conference", "theater", "festival", "other")

# ================================
# Users
# ================================
class User(Base):
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(100), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=False)
    role = Column(String(10), nullable=False, default="user")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Relationships
    events = relationship("Event", back_populates="organizer")
    bookings = relationship("Booking", back_populates="user")
    
    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

# ================================
# Events
# ================================
class Event(Base):
    __tablename__ = "events"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(Date, nullable=False)
    time = Column(Time, nullable=False)
    location = Column(String(200), nullable=False)
    venue = Column(String(100), nullable=False)
    image = Column(String(255), default="🎭")
    ticket_price_regular = Column(Numeric(10, 2), nullable=False)
    ticket_price_vip = Column(Numeric(10, 2), nullable=False)
    available_tickets_regular = Column(Integer, nullable=False, default=100)
    available_tickets_vip = Column(Integer, nullable=False, default=50)
    category = Column(String(20), nullable=False, default="other")
    organizer_id = Column(Integer, ForeignKey("users.id"))
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    # Relationships
    organizer = relationship("User", back_populates="events")
    bookings = relationship("Booking", back_populates="event")
    
    @property
    def ticket_price(self) -> dict:
        """Price table keyed by tier"""
        return {tier: Decimal(getattr(self, f"ticket_price_{tier}")) for tier in TICKET_TIERS}
    
    @property
    def available_tickets(self) -> dict:
        return {tier: getattr(self, f"available_tickets_{tier}") for tier in TICKET_TIERS}

# ================================
# Bookings
# ================================
class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_bookings_user_idempotency_key"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    tickets = Column(JSON, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    booking_date = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    status = Column(String(20), nullable=False, default="confirmed")
    payment_status = Column(String(20), nullable=False, default="paid")
    qr_code = Column(String(100), unique=True, nullable=False)
    booking_reference = Column(String(50), unique=True, nullable=False)
    idempotency_key = Column(String(100))
    notes = Column(Text)
    
    # Relationships
    user = relationship("User", back_populates="bookings")
    event = relationship("Event", back_populates="bookings")
