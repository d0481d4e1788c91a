"""HTTP client for the booking API.

Network failures surface as ``NetworkError`` so callers can retry. Only a
client built with ``demo_mode=True`` fabricates bookings locally, and those
bookings are marked ``"demo": True``.
"""
import logging
import secrets
import string
import time
import uuid
from decimal import Decimal
from typing import Any, Dict, List, Optional

import httpx

from eventbook.client.cart import Cart

logger = logging.getLogger(__name__)


class ClientError(Exception):
    pass


class NetworkError(ClientError):
    """The API could not be reached; safe to retry"""


class APIError(ClientError):
    def __init__(self, status_code: int, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class EventBookClient:
    def __init__(
        self,
        base_url: str,
        demo_mode: bool = False,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None
    ):
        self.demo_mode = demo_mode
        self.token: Optional[str] = None
        self.user: Optional[Dict[str, Any]] = None
        self.cart = Cart()
        self._http = httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout, transport=transport)

    def close(self):
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.TransportError as e:
            raise NetworkError(f"{method} {path} failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {"success": False, "message": response.text or response.reason_phrase}

        if response.is_error:
            raise APIError(response.status_code, body.get("message", "Request failed"), body.get("errors"))
        return body

    # Auth
    def register(self, name: str, email: str, password: str, phone: str) -> Dict[str, Any]:
        body = self._request("POST", "/auth/register", json={
            "name": name, "email": email, "password": password, "phone": phone
        })
        return self._store_session(body["data"])

    def login(self, email: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return self._store_session(body["data"])

    def logout(self):
        self.token = None
        self.user = None
        self.cart.clear()

    def _store_session(self, data: Dict[str, Any]) -> Dict[str, Any]:
        self.token = data["token"]
        self.user = {k: v for k, v in data.items() if k != "token"}
        return self.user

    # Events
    def list_events(self, page: int = 1, limit: int = 10) -> List[Dict[str, Any]]:
        return self._request("GET", "/events", params={"page": page, "limit": limit})["data"]

    def get_event(self, event_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/events/{event_id}")["data"]

    # Bookings
    def book(self, event_id: int, tickets: List[Dict[str, Any]], idempotency_key: Optional[str] = None) -> Dict[str, Any]:
        return self._book(event_id, tickets, self.cart, idempotency_key)

    def _book(
        self,
        event_id: int,
        tickets: List[Dict[str, Any]],
        cart: Cart,
        idempotency_key: Optional[str] = None
    ) -> Dict[str, Any]:
        idempotency_key = idempotency_key or uuid.uuid4().hex
        try:
            body = self._request(
                "POST", "/bookings",
                json={"eventId": event_id, "tickets": tickets},
                headers={"Idempotency-Key": idempotency_key},
            )
        except NetworkError:
            if not self.demo_mode:
                raise
            logger.warning("API unreachable, returning demo booking for event %s", event_id)
            return self._demo_booking(event_id, tickets, cart)
        return body["data"]

    def my_bookings(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        body = self._request("GET", "/bookings/my-bookings", params={"page": page, "limit": limit})
        return {"bookings": body["data"], "pagination": body["pagination"]}

    def checkout(self, cart: Optional[Cart] = None) -> List[Dict[str, Any]]:
        """Book every event in cart, the client's own cart by default.

        Each event's lines leave the cart as soon as its booking succeeds, so
        a failed checkout can be retried without rebooking earlier events.
        """
        cart = cart if cart is not None else self.cart
        if cart.is_empty:
            raise ClientError("Cart is empty")
        bookings = []
        for payload in cart.to_booking_payloads():
            bookings.append(self._book(payload["eventId"], payload["tickets"], cart))
            for ticket in payload["tickets"]:
                cart.remove(payload["eventId"], ticket["type"])
        return bookings

    def _demo_booking(self, event_id: int, tickets: List[Dict[str, Any]], cart: Cart) -> Dict[str, Any]:
        suffix = "".join(secrets.choice(string.ascii_uppercase + string.digits) for _ in range(5))
        total = sum(
            (item.subtotal for item in cart.items if item.event_id == event_id),
            Decimal("0"),
        )
        return {
            "id": f"DEMO-{int(time.time() * 1000)}",
            "event_id": event_id,
            "tickets": tickets,
            "total_amount": str(total),
            "booking_reference": f"DEMO{suffix}",
            "status": "confirmed",
            "payment_status": "pending",
            "demo": True,
        }
