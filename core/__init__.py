"""
Cart Continuity Core

This package contains the core components:
- cart: session layer, durable cart store, and the recovery orchestrator
- config: environment-driven application config
- errors: error kinds and messages shared with the HTTP layer
- logging: centralized logging setup
- auth, routers: FastAPI plumbing that calls into cart

Note: Imports are lazy so that importing core.errors or core.config
does not pull in FastAPI.
"""

__version__ = "1.0.0"

__all__ = [
    "build_cart_orchestrator",
    "load_config",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "build_cart_orchestrator":
        from core.cart import build_cart_orchestrator
        return build_cart_orchestrator
    elif name == "load_config":
        from core.config import load_config
        return load_config
    raise AttributeError(f"module 'core' has no attribute '{name}'")
