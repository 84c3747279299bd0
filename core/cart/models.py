"""Cart models: items, volatile sessions, durable records, and the public projection."""
from dataclasses import dataclass, field
from typing import List


@dataclass
class CartItem:
    """Single line in a cart. Identity is the sku."""
    sku: str
    quantity: int

    def copy(self) -> "CartItem":
        return CartItem(sku=self.sku, quantity=self.quantity)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"sku": self.sku, "quantity": self.quantity}


def clone_items(items: List[CartItem]) -> List[CartItem]:
    """Independent copy of an item list; nothing is shared by reference."""
    return [item.copy() for item in items]


@dataclass
class Session:
    """Volatile, TTL-bound item list held by the session layer."""
    session_id: str
    expires_at: float  # milliseconds on the store's clock
    items: List[CartItem] = field(default_factory=list)

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CartRecord:
    """
    Durable mapping from cart id to its current session.

    ``session_id`` is only a pointer: the session may already be expired or
    evicted. ``items`` is the last item list observed from the session layer
    and is what gets replayed on recovery.
    """
    cart_id: str
    session_id: str
    items: List[CartItem] = field(default_factory=list)

    def copy(self) -> "CartRecord":
        return CartRecord(
            cart_id=self.cart_id,
            session_id=self.session_id,
            items=clone_items(self.items),
        )


@dataclass
class ExperienceCart:
    """What callers see: the stable cart id and its current items."""
    cart_id: str
    items: List[CartItem]

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON responses."""
        return {
            "cart_id": self.cart_id,
            "items": [item.to_dict() for item in self.items],
        }
