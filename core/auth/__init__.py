"""Authentication package."""
from .api_key import API_KEY_HEADER, verify_api_key

__all__ = [
    "API_KEY_HEADER",
    "verify_api_key",
]
