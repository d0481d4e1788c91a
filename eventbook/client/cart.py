from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, List, Optional


@dataclass
class CartItem:
    event_id: int
    event_name: str
    tier: str
    quantity: int
    unit_price: Decimal

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Cart:
    """Ordered line items for one client session"""

    items: List[CartItem] = field(default_factory=list)

    def add(self, event_id: int, event_name: str, tier: str, quantity: int, unit_price) -> CartItem:
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        existing = self.find(event_id, tier)
        if existing:
            existing.quantity += quantity
            return existing
        item = CartItem(event_id, event_name, tier, quantity, Decimal(str(unit_price)))
        self.items.append(item)
        return item

    def find(self, event_id: int, tier: str) -> Optional[CartItem]:
        for item in self.items:
            if item.event_id == event_id and item.tier == tier:
                return item
        return None

    def update_quantity(self, event_id: int, tier: str, quantity: int) -> None:
        """Set a line's quantity; zero or less drops the line"""
        if quantity <= 0:
            self.remove(event_id, tier)
            return
        item = self.find(event_id, tier)
        if item is None:
            raise KeyError(f"{tier} tickets for event {event_id} not in cart")
        item.quantity = quantity

    def remove(self, event_id: int, tier: str) -> None:
        self.items = [i for i in self.items if not (i.event_id == event_id and i.tier == tier)]

    def clear(self) -> None:
        self.items = []

    @property
    def total(self) -> Decimal:
        return sum((item.subtotal for item in self.items), Decimal("0"))

    @property
    def is_empty(self) -> bool:
        return not self.items

    def to_booking_payloads(self) -> List[dict]:
        """One booking request per event, tiers in cart order"""
        payloads: Dict[int, dict] = {}
        for item in self.items:
            payload = payloads.setdefault(item.event_id, {"eventId": item.event_id, "tickets": []})
            payload["tickets"].append({"type": item.tier, "quantity": item.quantity})
        return list(payloads.values())
