"""
Session Store - volatile, TTL-bound cart sessions

Stands in for the external commerce system that owns the real cart context.
Sessions expire a fixed TTL after creation and are never extended; expiry is
checked lazily on access and an expired session is dropped on first sight,
so the next access reports it missing instead of expired.

All items cross the boundary by copy.
"""
import threading
import time
import uuid
from typing import Callable, Dict, List, Optional, Tuple

from core.config import DEFAULT_SESSION_TTL_MS
from core.errors import ItemNotFound, SessionExpired, SessionMissing
from core.logging import get_logger, sanitize_id_for_logging
from .models import CartItem, Session, clone_items

logger = get_logger(__name__)


def monotonic_ms() -> float:
    """Default clock: monotonic milliseconds."""
    return time.monotonic() * 1000


def new_session_id() -> str:
    return f"ctx_{uuid.uuid4().hex}"


class SessionStore:
    """
    In-memory session layer.

    Usage:
        store = SessionStore(ttl_ms=1000, now=lambda: clock)
        session_id, items = await store.create_session()
        items = await store.add_item(session_id, CartItem("PLAN", 1))
    """

    def __init__(
        self,
        ttl_ms: Optional[int] = None,
        now: Optional[Callable[[], float]] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        self.ttl_ms = ttl_ms if ttl_ms and ttl_ms > 0 else DEFAULT_SESSION_TTL_MS
        self._now = now or monotonic_ms
        self._id_factory = id_factory or new_session_id
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.Lock()

    async def create_session(self) -> Tuple[str, List[CartItem]]:
        """Mint a fresh empty session. Always succeeds."""
        session_id = self._id_factory()
        session = Session(session_id=session_id, expires_at=self._now() + self.ttl_ms)
        with self._lock:
            self._sessions[session_id] = session
        return session_id, []

    async def get_items(self, session_id: str) -> List[CartItem]:
        with self._lock:
            session = self._active_session(session_id)
            return clone_items(session.items)

    async def add_item(self, session_id: str, item: CartItem) -> List[CartItem]:
        """Add item, summing quantities when the sku is already present."""
        with self._lock:
            session = self._active_session(session_id)
            existing = next((i for i in session.items if i.sku == item.sku), None)
            if existing:
                existing.quantity += item.quantity
            else:
                session.items.append(item.copy())
            return clone_items(session.items)

    async def set_items(self, session_id: str, items: List[CartItem]) -> List[CartItem]:
        """Replace the whole item list (recovery replay)."""
        with self._lock:
            session = self._active_session(session_id)
            session.items = clone_items(items)
            return clone_items(session.items)

    async def remove_item(self, session_id: str, sku: str) -> List[CartItem]:
        with self._lock:
            session = self._active_session(session_id)
            remaining = [i for i in session.items if i.sku != sku]
            if len(remaining) == len(session.items):
                raise ItemNotFound(sku)
            session.items = remaining
            return clone_items(session.items)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def _active_session(self, session_id: str) -> Session:
        # Caller holds self._lock
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionMissing(session_id)

        if session.is_expired(self._now()):
            del self._sessions[session_id]
            logger.debug(f"Evicted expired session {sanitize_id_for_logging(session_id)}")
            raise SessionExpired(session_id)

        return session
