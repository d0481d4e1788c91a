import json
import unittest
from decimal import Decimal

import httpx

from eventbook.client import APIError, Cart, ClientError, EventBookClient, NetworkError


class CartTests(unittest.TestCase):
    def setUp(self):
        self.cart = Cart()

    def test_adding_same_line_merges_quantity(self):
        self.cart.add(1, "Concert A", "regular", 2, "50.00")
        self.cart.add(1, "Concert A", "regular", 1, "50.00")
        self.assertEqual(len(self.cart.items), 1)
        self.assertEqual(self.cart.items[0].quantity, 3)
        self.assertEqual(self.cart.items[0].subtotal, Decimal("150.00"))

    def test_total_and_update(self):
        self.cart.add(1, "Concert A", "regular", 2, 50)
        self.cart.add(1, "Concert A", "vip", 1, 75)
        self.assertEqual(self.cart.total, Decimal("175"))

        self.cart.update_quantity(1, "vip", 3)
        self.assertEqual(self.cart.total, Decimal("325"))

        self.cart.update_quantity(1, "regular", 0)
        self.assertEqual([item.tier for item in self.cart.items], ["vip"])

    def test_update_missing_line_raises(self):
        with self.assertRaises(KeyError):
            self.cart.update_quantity(5, "vip", 1)

    def test_rejects_non_positive_quantity(self):
        with self.assertRaises(ValueError):
            self.cart.add(1, "Concert A", "regular", 0, 50)

    def test_booking_payloads_group_by_event(self):
        self.cart.add(1, "Concert A", "regular", 2, 50)
        self.cart.add(2, "Movie B", "vip", 1, 30)
        self.cart.add(1, "Concert A", "vip", 1, 75)
        self.assertEqual(self.cart.to_booking_payloads(), [
            {"eventId": 1, "tickets": [{"type": "regular", "quantity": 2}, {"type": "vip", "quantity": 1}]},
            {"eventId": 2, "tickets": [{"type": "vip", "quantity": 1}]},
        ])


class FakeApi:
    """Minimal stand-in for the booking API behind httpx.MockTransport"""

    def __init__(self, offline=False):
        self.offline = offline
        self.requests = []
        self.next_booking_id = 1

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path == "/api/auth/login":
            credentials = json.loads(request.content)
            if credentials["password"] != "secret123":
                return httpx.Response(401, json={"success": False, "message": "Invalid email or password"})
            return httpx.Response(200, json={"success": True, "data": {
                "id": 7, "name": "Jamie", "email": credentials["email"], "role": "user", "token": "tok-7"
            }})
        if path == "/api/bookings" and request.method == "POST":
            payload = json.loads(request.content)
            booking = {"id": self.next_booking_id, "event_id": payload["eventId"], "tickets": payload["tickets"]}
            self.next_booking_id += 1
            return httpx.Response(201, json={"success": True, "data": booking})
        if path == "/api/bookings/my-bookings":
            return httpx.Response(200, json={
                "success": True, "data": [],
                "pagination": {"page": 1, "limit": 10, "total": 0, "pages": 0},
            })
        return httpx.Response(404, json={"success": False, "message": "Not found"})


class EventBookClientTests(unittest.TestCase):
    def make_client(self, api, demo_mode=False):
        client = EventBookClient("http://testserver/api", demo_mode=demo_mode, transport=httpx.MockTransport(api))
        self.addCleanup(client.close)
        return client

    def test_login_stores_token_and_sends_it(self):
        api = FakeApi()
        client = self.make_client(api)

        user = client.login("jamie@example.com", "secret123")
        client.my_bookings()

        self.assertEqual(user["id"], 7)
        self.assertNotIn("token", user)
        self.assertEqual(api.requests[-1].headers["Authorization"], "Bearer tok-7")

    def test_api_errors_carry_status(self):
        client = self.make_client(FakeApi())
        with self.assertRaises(APIError) as ctx:
            client.login("jamie@example.com", "bad")
        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(ctx.exception.message, "Invalid email or password")

    def test_book_sends_idempotency_key(self):
        api = FakeApi()
        client = self.make_client(api)
        client.book(3, [{"type": "vip", "quantity": 1}], idempotency_key="abc")
        self.assertEqual(api.requests[-1].headers["Idempotency-Key"], "abc")

    def test_network_failure_is_retryable_error(self):
        client = self.make_client(FakeApi(offline=True))
        with self.assertRaises(NetworkError):
            client.book(3, [{"type": "vip", "quantity": 1}])

    def test_demo_mode_fabricates_flagged_booking(self):
        client = self.make_client(FakeApi(offline=True), demo_mode=True)
        client.cart.add(3, "Concert A", "vip", 2, "75.00")

        booking = client.book(3, [{"type": "vip", "quantity": 2}])

        self.assertTrue(booking["demo"])
        self.assertTrue(booking["booking_reference"].startswith("DEMO"))
        self.assertEqual(booking["total_amount"], "150.00")

    def test_checkout_books_each_event_and_empties_cart(self):
        api = FakeApi()
        client = self.make_client(api)
        client.cart.add(1, "Concert A", "regular", 2, 50)
        client.cart.add(2, "Movie B", "vip", 1, 30)

        bookings = client.checkout()

        self.assertEqual([b["event_id"] for b in bookings], [1, 2])
        self.assertTrue(client.cart.is_empty)

    def test_checkout_accepts_separate_cart(self):
        client = self.make_client(FakeApi())
        client.cart.add(9, "Untouched", "regular", 1, 10)
        cart = Cart()
        cart.add(4, "Play C", "regular", 3, 20)

        bookings = client.checkout(cart)

        self.assertEqual([b["event_id"] for b in bookings], [4])
        self.assertTrue(cart.is_empty)
        self.assertEqual(len(client.cart.items), 1)

    def test_failed_checkout_keeps_unbooked_lines(self):
        client = self.make_client(FakeApi(offline=True))
        client.cart.add(1, "Concert A", "regular", 2, 50)
        with self.assertRaises(NetworkError):
            client.checkout()
        self.assertEqual(len(client.cart.items), 1)

    def test_checkout_with_empty_cart(self):
        with self.assertRaises(ClientError):
            self.make_client(FakeApi()).checkout()

    def test_logout_discards_session_and_cart(self):
        client = self.make_client(FakeApi())
        client.login("jamie@example.com", "secret123")
        client.cart.add(1, "Concert A", "regular", 1, 50)

        client.logout()

        self.assertIsNone(client.token)
        self.assertTrue(client.cart.is_empty)


if __name__ == "__main__":
    unittest.main()
