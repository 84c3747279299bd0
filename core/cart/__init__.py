"""Cart package: models, session layer, durable store, and orchestrator."""
from .models import CartItem, CartRecord, ExperienceCart, Session
from .sessions import SessionStore
from .storage import CartStore
from .service import CartOrchestrator, build_cart_orchestrator

__all__ = [
    "CartItem",
    "CartRecord",
    "ExperienceCart",
    "Session",
    "SessionStore",
    "CartStore",
    "CartOrchestrator",
    "build_cart_orchestrator",
]
