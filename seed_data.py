#!/usr/bin/env python3

import os
from datetime import date, time, timedelta
from decimal import Decimal

from eventbook.config import get_settings
from eventbook.database import Database
from eventbook.auth.utils import get_password_hash
from eventbook.models import User, Event

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@eventbook.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

SAMPLE_EVENTS = [
    dict(name="Summer Music Festival", description="Three stages of live music.", days_ahead=30,
         time=time(18, 0), location="Central Park", venue="Main Stage", image="🎵",
         regular=Decimal("50.00"), vip=Decimal("75.00"), category="music"),
    dict(name="Tech Conference 2025", description="Talks and workshops on modern software.", days_ahead=45,
         time=time(9, 0), location="Convention Center", venue="Hall A", image="💻",
         regular=Decimal("120.00"), vip=Decimal("250.00"), category="conference"),
    dict(name="City Derby", description="Season opener at the city stadium.", days_ahead=14,
         time=time(20, 30), location="City Stadium", venue="North Stand", image="⚽",
         regular=Decimal("35.00"), vip=Decimal("90.00"), category="sports"),
    dict(name="Hamlet", description="A new staging of the classic tragedy.", days_ahead=21,
         time=time(19, 30), location="Old Town", venue="Royal Theater", image="🎭",
         regular=Decimal("40.00"), vip=Decimal("80.00"), category="theater"),
]

def create_seed_data(database: Database):
    database.create_all()
    db = database.session()
    
    try:
        print("🚀 Creating seed data for EventBook...")
        
        admin = db.query(User).filter(User.email == ADMIN_EMAIL).first()
        if admin:
            print("✅ Admin user already exists")
        else:
            admin = User(
                name="System Administrator",
                email=ADMIN_EMAIL,
                password=get_password_hash(ADMIN_PASSWORD),
                phone="+1234567890",
                role="admin",
            )
            db.add(admin)
            db.flush()
            print(f"✅ Default admin user created: {ADMIN_EMAIL}")
        
        created = 0
        for sample in SAMPLE_EVENTS:
            if db.query(Event).filter(Event.name == sample["name"]).first():
                continue
            db.add(Event(
                name=sample["name"],
                description=sample["description"],
                date=date.today() + timedelta(days=sample["days_ahead"]),
                time=sample["time"],
                location=sample["location"],
                venue=sample["venue"],
                image=sample["image"],
                ticket_price_regular=sample["regular"],
                ticket_price_vip=sample["vip"],
                available_tickets_regular=100,
                available_tickets_vip=50,
                category=sample["category"],
                organizer_id=admin.id,
            ))
            created += 1
        
        db.commit()
        print(f"✅ Successfully created seed data: {created} new events")
        
    except Exception as e:
        print(f"❌ Error creating seed data: {e}")
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    database = Database(get_settings())
    try:
        create_seed_data(database)
    finally:
        database.dispose()
