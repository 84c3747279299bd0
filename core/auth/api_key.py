"""API key validation for cart routes."""
import hmac

from fastapi import Header, Request

from core.errors import UnauthorizedError

API_KEY_HEADER = "x-api-key"


async def verify_api_key(
    request: Request,
    x_api_key: str | None = Header(None, alias=API_KEY_HEADER),
):
    """
    Verify the shared API key sent in the x-api-key header.

    The expected key comes from the app config; an empty key disables the check.
    """
    expected = request.app.state.config.api_key

    if not expected:
        return True

    if not x_api_key or not hmac.compare_digest(x_api_key, expected):
        raise UnauthorizedError()

    return True
