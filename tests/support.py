import os
import tempfile
import unittest
from datetime import date, time, timedelta
from decimal import Decimal

from fastapi.testclient import TestClient

from eventbook.auth.utils import create_access_token, get_password_hash
from eventbook.config import Settings
from eventbook.database import Database
from eventbook.main import create_app
from eventbook.models import Event, User

PASSWORD = "secret123"


def make_settings(db_path: str, **overrides) -> Settings:
    values = dict(
        DATABASE_URL=f"sqlite:///{db_path}",
        SECRET_KEY="test-secret-key",
        NODE_ENV="test",
        BOOKING_RETRY_ATTEMPTS=3,
    )
    values.update(overrides)
    return Settings(**values)


class DatabaseTestCase(unittest.TestCase):
    """Fresh SQLite file database per test"""

    settings_overrides = {}

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.db_path = os.path.join(self.temp_dir.name, "eventbook_test.db")
        self.settings = make_settings(self.db_path, **self.settings_overrides)
        self.database = Database(self.settings)
        self.database.create_all()

    def tearDown(self):
        self.database.dispose()
        self.temp_dir.cleanup()

    def create_user(self, email="user@example.com", role="user", name="Test User", is_active=True) -> int:
        with self.database.session() as db:
            user = User(
                name=name,
                email=email,
                password=get_password_hash(PASSWORD),
                phone="+10000000000",
                role=role,
                is_active=is_active,
            )
            db.add(user)
            db.commit()
            return user.id

    def create_event(self, regular="50.00", vip="75.00", available_regular=100, available_vip=50,
                     organizer_id=None, is_active=True, name="Summer Music Festival") -> int:
        with self.database.session() as db:
            event = Event(
                name=name,
                description="Live music all night",
                date=date.today() + timedelta(days=30),
                time=time(18, 0),
                location="Central Park",
                venue="Main Stage",
                ticket_price_regular=Decimal(regular),
                ticket_price_vip=Decimal(vip),
                available_tickets_regular=available_regular,
                available_tickets_vip=available_vip,
                category="music",
                organizer_id=organizer_id,
                is_active=is_active,
            )
            db.add(event)
            db.commit()
            return event.id

    def availability(self, event_id: int) -> dict:
        with self.database.session() as db:
            return dict(db.get(Event, event_id).available_tickets)


class ApiTestCase(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.app = create_app(self.settings, self.database)
        self.client = TestClient(self.app)

    def tearDown(self):
        self.client.close()
        super().tearDown()

    def token_for(self, user_id: int, role: str = "user") -> str:
        return create_access_token({"sub": str(user_id), "role": role}, self.settings)

    def auth_headers(self, user_id: int, role: str = "user") -> dict:
        return {"Authorization": f"Bearer {self.token_for(user_id, role)}"}
