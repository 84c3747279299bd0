"""In-memory durable store for cart records (no TTL)."""
import threading
from typing import Dict, List, Optional

from .models import CartRecord


class CartStore:
    """
    Maps cart id -> CartRecord.

    Records are copied on the way in and on the way out, so mutating a
    returned record never changes stored state.
    """

    def __init__(self):
        self._records: Dict[str, CartRecord] = {}
        self._lock = threading.Lock()

    def get(self, cart_id: str) -> Optional[CartRecord]:
        with self._lock:
            record = self._records.get(cart_id)
            return record.copy() if record else None

    def save(self, record: CartRecord) -> None:
        """Upsert by cart id, replacing the previous record wholesale."""
        with self._lock:
            self._records[record.cart_id] = record.copy()

    def delete(self, cart_id: str) -> None:
        with self._lock:
            self._records.pop(cart_id, None)

    def list_records(self) -> List[CartRecord]:
        with self._lock:
            return [record.copy() for record in self._records.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
