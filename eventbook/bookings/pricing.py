"""Ticket pricing.

Totals are computed from the event's tier price table at booking time and
frozen into the booking's ticket lines, so later price edits never change
what a customer paid. Both functions are pure: the same event snapshot and
lines always produce the same result.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from eventbook.errors import InvalidQuantityError, UnknownTierError

CENT = Decimal("0.01")
MAX_TICKET_QUANTITY = 1000


def _unpack(line: Any) -> Tuple[str, Any]:
    if isinstance(line, Mapping):
        return line.get("type"), line.get("quantity")
    return line.type, line.quantity


def _price_table(event: Any) -> Mapping[str, Decimal]:
    if isinstance(event, Mapping):
        return event.get("ticket_price") or {}
    return event.ticket_price


def price_lines(event: Any, ticket_lines: Sequence[Any]) -> List[Dict[str, Any]]:
    """Attach the unit price to every requested line.

    Raises UnknownTierError for a tier missing from the event's price table
    and InvalidQuantityError for anything but an integer quantity between 1
    and MAX_TICKET_QUANTITY.
    """
    prices = _price_table(event)
    priced = []
    for line in ticket_lines:
        tier, quantity = _unpack(line)
        if isinstance(quantity, bool) or not isinstance(quantity, int) or not 0 < quantity <= MAX_TICKET_QUANTITY:
            raise InvalidQuantityError(quantity)
        if tier not in prices:
            raise UnknownTierError(tier)
        unit_price = Decimal(prices[tier]).quantize(CENT, rounding=ROUND_HALF_UP)
        priced.append({"type": tier, "quantity": quantity, "price": unit_price})
    return priced


def price_booking(event: Any, ticket_lines: Sequence[Any]) -> Tuple[List[Dict[str, Any]], Decimal]:
    """Priced lines together with their total"""
    lines = price_lines(event, ticket_lines)
    total = sum((line["price"] * line["quantity"] for line in lines), Decimal("0"))
    return lines, total.quantize(CENT, rounding=ROUND_HALF_UP)


def resolve_total(event: Any, ticket_lines: Sequence[Any]) -> Decimal:
    """Sum of unit price times quantity over all lines"""
    return price_booking(event, ticket_lines)[1]


def quantities_by_tier(priced_lines: Sequence[Mapping[str, Any]]) -> Dict[str, int]:
    """Collapse lines into total quantity per tier, keeping first-seen order"""
    totals: Dict[str, int] = {}
    for line in priced_lines:
        totals[line["type"]] = totals.get(line["type"], 0) + line["quantity"]
    return totals
