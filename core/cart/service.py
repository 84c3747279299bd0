"""
Cart orchestrator: stable cart ids on top of expiring sessions.

Every session-touching operation runs under the same recovery protocol:
try against the record's session; if the session is missing or expired,
mint a new one, replay the last-known snapshot into it, repoint the record,
and retry exactly once. A second session failure is terminal.
"""
import asyncio
import uuid
import weakref
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, List, Optional, Tuple, TypeVar

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from core.errors import (
    ERROR_INVALID_QUANTITY,
    ERROR_INVALID_SKU,
    CartNotFound,
    CartRecoveryFailed,
    SessionFailure,
    ValidationError,
)
from core.logging import get_logger, sanitize_id_for_logging, sanitize_string_for_logging
from .models import CartItem, CartRecord, ExperienceCart, clone_items
from .sessions import SessionStore
from .storage import CartStore

logger = get_logger(__name__)

T = TypeVar("T")

# One recovery, one retry
MAX_SESSION_ATTEMPTS = 2


def new_cart_id() -> str:
    return f"exp_{uuid.uuid4().hex}"


class CartOrchestrator:
    """
    The only place with cart policy.

    Features:
    - Transparent recovery from session expiry with snapshot replay
    - Snapshot refreshed on every successful read or mutation
    - Per-cart serialization of whole operations

    Usage:
        orchestrator = CartOrchestrator(SessionStore(), CartStore())
        cart = await orchestrator.create_cart()
        cart = await orchestrator.add_item(cart.cart_id, CartItem("PLAN", 1))
    """

    def __init__(
        self,
        sessions: SessionStore,
        store: CartStore,
        cart_id_factory: Optional[Callable[[], str]] = None,
    ):
        self.sessions = sessions
        self.store = store
        self._cart_id_factory = cart_id_factory or new_cart_id
        self._locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()

    async def create_cart(self) -> ExperienceCart:
        """Create a cart backed by a brand new session."""
        cart_id = self._cart_id_factory()
        session_id, items = await self.sessions.create_session()
        self.store.save(CartRecord(cart_id=cart_id, session_id=session_id, items=clone_items(items)))
        logger.info(f"Created cart {sanitize_id_for_logging(cart_id)}")
        return ExperienceCart(cart_id=cart_id, items=clone_items(items))

    async def get_cart(self, cart_id: str) -> ExperienceCart:
        """Read items through the session layer and refresh the snapshot."""
        async with self._cart_scope(cart_id):
            record = self._get_record_or_raise(cart_id)
            items, record = await self._run_with_recovery(record, self.sessions.get_items)
            return self._persist(record, items)

    async def add_item(self, cart_id: str, item: CartItem) -> ExperienceCart:
        """
        Add an item; quantities for an existing sku are summed.

        Raises:
            ValidationError: bad sku or quantity (checked before any store access)
            CartNotFound: unknown cart id
            CartRecoveryFailed: the replacement session failed too
        """
        self._validate_item(item)
        async with self._cart_scope(cart_id):
            record = self._get_record_or_raise(cart_id)
            items, record = await self._run_with_recovery(
                record,
                lambda session_id: self.sessions.add_item(session_id, item),
            )
            return self._persist(record, items)

    async def remove_item(self, cart_id: str, sku: str) -> ExperienceCart:
        """Remove a sku. ItemNotFound passes through untouched and triggers no recovery."""
        self._validate_sku(sku)
        async with self._cart_scope(cart_id):
            record = self._get_record_or_raise(cart_id)
            items, record = await self._run_with_recovery(
                record,
                lambda session_id: self.sessions.remove_item(session_id, sku),
            )
            return self._persist(record, items)

    async def delete_cart(self, cart_id: str) -> None:
        """Forget the cart. Idempotent; the session is left to expire."""
        async with self._cart_scope(cart_id):
            self.store.delete(cart_id)
        logger.info(f"Deleted cart {sanitize_id_for_logging(cart_id)}")

    def list_carts(self) -> List[CartRecord]:
        """All durable records, for diagnostics."""
        return self.store.list_records()

    # ==================== RECOVERY PROTOCOL ====================

    async def _run_with_recovery(
        self,
        record: CartRecord,
        operation: Callable[[str], Awaitable[T]],
    ) -> Tuple[T, CartRecord]:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(MAX_SESSION_ATTEMPTS),
            retry=retry_if_exception_type(SessionFailure),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        record = await self._recover(record)
                    result = await operation(record.session_id)
        except SessionFailure as e:
            logger.error(
                f"Recovery failed for cart {sanitize_id_for_logging(record.cart_id)}: "
                f"replacement session rejected ({type(e).__name__})"
            )
            raise CartRecoveryFailed(record.cart_id) from e
        return result, record

    async def _recover(self, record: CartRecord) -> CartRecord:
        """Point the record at a fresh session seeded with the last snapshot."""
        logger.warning(
            f"Session {sanitize_id_for_logging(record.session_id)} for cart "
            f"{sanitize_id_for_logging(record.cart_id)} is gone, recovering"
        )
        try:
            session_id, _ = await self.sessions.create_session()
            if record.items:
                await self.sessions.set_items(session_id, record.items)
        except Exception as e:
            logger.error(
                f"Could not seed replacement session for cart {sanitize_id_for_logging(record.cart_id)}: {e}"
            )
            raise CartRecoveryFailed(record.cart_id, str(e)) from e

        # Snapshot stays as-is until the retried operation succeeds
        recovered = CartRecord(
            cart_id=record.cart_id,
            session_id=session_id,
            items=clone_items(record.items),
        )
        self.store.save(recovered)
        logger.info(
            f"Recovered cart {sanitize_id_for_logging(record.cart_id)} into session "
            f"{sanitize_id_for_logging(session_id)} ({len(record.items)} items replayed)"
        )
        return recovered

    # ==================== HELPERS ====================

    @asynccontextmanager
    async def _cart_scope(self, cart_id: str):
        lock = self._locks.get(cart_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[cart_id] = lock
        async with lock:
            yield

    def _get_record_or_raise(self, cart_id: str) -> CartRecord:
        record = self.store.get(cart_id)
        if record is None:
            raise CartNotFound(cart_id)
        return record

    def _persist(self, record: CartRecord, items: List[CartItem]) -> ExperienceCart:
        self.store.save(
            CartRecord(cart_id=record.cart_id, session_id=record.session_id, items=clone_items(items))
        )
        return ExperienceCart(cart_id=record.cart_id, items=clone_items(items))

    def _validate_item(self, item: CartItem) -> None:
        if not isinstance(item, CartItem):
            raise ValidationError("item must have a sku and a quantity")
        self._validate_sku(item.sku)
        self._validate_quantity(item.quantity)

    @staticmethod
    def _validate_sku(sku: str) -> None:
        if not isinstance(sku, str) or not sku.strip():
            logger.debug(f"Rejected sku {sanitize_string_for_logging(repr(sku))}")
            raise ValidationError(ERROR_INVALID_SKU)

    @staticmethod
    def _validate_quantity(quantity: int) -> None:
        # bool is an int subclass; True is not a quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(ERROR_INVALID_QUANTITY)


def build_cart_orchestrator(session_ttl_ms: Optional[int] = None) -> CartOrchestrator:
    """Wire a fresh orchestrator over fresh in-memory stores."""
    return CartOrchestrator(SessionStore(ttl_ms=session_ttl_ms), CartStore())
