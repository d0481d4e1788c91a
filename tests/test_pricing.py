import unittest
from decimal import Decimal
from types import SimpleNamespace

from eventbook.bookings.pricing import (
    MAX_TICKET_QUANTITY, price_booking, price_lines, quantities_by_tier, resolve_total
)
from eventbook.bookings.schemas import TicketRequest
from eventbook.errors import InvalidQuantityError, UnknownTierError, ValidationError


def make_event(regular="50.00", vip="75.00"):
    return SimpleNamespace(ticket_price={"regular": Decimal(regular), "vip": Decimal(vip)})


class ResolveTotalTests(unittest.TestCase):
    def test_regular_tickets_total(self):
        event = make_event()
        total = resolve_total(event, [{"type": "regular", "quantity": 2}])
        self.assertEqual(total, Decimal("100.00"))

    def test_mixed_tiers_sum_price_times_quantity(self):
        event = make_event(regular="19.99", vip="75.50")
        lines = [TicketRequest(type="regular", quantity=3), TicketRequest(type="vip", quantity=2)]
        self.assertEqual(resolve_total(event, lines), Decimal("210.97"))

    def test_total_is_deterministic_for_same_snapshot(self):
        event = make_event()
        lines = [{"type": "vip", "quantity": 4}, {"type": "regular", "quantity": 1}]
        self.assertEqual(resolve_total(event, lines), resolve_total(event, lines))
        self.assertEqual(resolve_total(event, lines), Decimal("350.00"))

    def test_accepts_plain_mapping_event(self):
        event = {"ticket_price": {"regular": Decimal("10"), "vip": Decimal("20")}}
        self.assertEqual(resolve_total(event, [{"type": "vip", "quantity": 3}]), Decimal("60.00"))

    def test_unknown_tier_raises(self):
        with self.assertRaises(UnknownTierError) as ctx:
            resolve_total(make_event(), [{"type": "student", "quantity": 1}])
        self.assertEqual(ctx.exception.tier, "student")
        self.assertIsInstance(ctx.exception, ValidationError)

    def test_non_positive_or_non_integer_quantities_raise(self):
        for quantity in (0, -1, 1.5, "2", True, None):
            with self.subTest(quantity=quantity):
                with self.assertRaises(InvalidQuantityError):
                    resolve_total(make_event(), [{"type": "regular", "quantity": quantity}])

    def test_quantity_capped_per_line(self):
        total = resolve_total(make_event(), [{"type": "regular", "quantity": MAX_TICKET_QUANTITY}])
        self.assertEqual(total, Decimal("50.00") * MAX_TICKET_QUANTITY)
        for quantity in (MAX_TICKET_QUANTITY + 1, 10 ** 20):
            with self.subTest(quantity=quantity):
                with self.assertRaises(InvalidQuantityError):
                    resolve_total(make_event(), [{"type": "regular", "quantity": quantity}])

    def test_quantity_checked_before_tier(self):
        with self.assertRaises(InvalidQuantityError):
            resolve_total(make_event(), [{"type": "student", "quantity": 0}])


class PriceLinesTests(unittest.TestCase):
    def test_lines_carry_unit_price(self):
        lines = price_lines(make_event(), [{"type": "vip", "quantity": 2}])
        self.assertEqual(lines, [{"type": "vip", "quantity": 2, "price": Decimal("75.00")}])

    def test_price_booking_returns_lines_and_matching_total(self):
        tickets = [{"type": "regular", "quantity": 3}, {"type": "vip", "quantity": 1}]
        lines, total = price_booking(make_event(regular="19.99"), tickets)
        self.assertEqual([line["price"] for line in lines], [Decimal("19.99"), Decimal("75.00")])
        self.assertEqual(total, Decimal("134.97"))
        self.assertEqual(total, resolve_total(make_event(regular="19.99"), tickets))

    def test_quantities_by_tier_merges_repeated_tiers(self):
        lines = price_lines(make_event(), [
            {"type": "regular", "quantity": 1},
            {"type": "vip", "quantity": 2},
            {"type": "regular", "quantity": 3},
        ])
        self.assertEqual(quantities_by_tier(lines), {"regular": 4, "vip": 2})
        self.assertEqual(list(quantities_by_tier(lines)), ["regular", "vip"])


if __name__ == "__main__":
    unittest.main()
