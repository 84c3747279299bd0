"""
Shared Dependencies for Routers

The orchestrator lives on app.state so tests can build an app
around their own instances.
"""

from fastapi import Request

from core.cart import CartOrchestrator


def get_cart_orchestrator(request: Request) -> CartOrchestrator:
    """Orchestrator bound to the running app."""
    return request.app.state.cart_orchestrator
