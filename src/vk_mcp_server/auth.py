"""Per-request VK access token extraction for the multi-tenant HTTP servers."""

from __future__ import annotations

from typing import Mapping

from .errors import MissingAccessTokenError

TOKEN_HEADERS = ("x-vk-access-token", "x-access-token")


def extract_access_token(headers: Mapping[str, str]) -> str:
    """Return the VK token carried by a request.

    Looks at ``Authorization: Bearer <token>`` first, then the
    ``X-VK-Access-Token`` and ``X-Access-Token`` headers.
    """
    lowered = {key.lower(): value for key, value in headers.items()}

    auth = (lowered.get("authorization") or "").strip()
    if auth.lower().startswith("bearer "):
        token = auth[7:].strip()
        if token:
            return token

    for name in TOKEN_HEADERS:
        token = (lowered.get(name) or "").strip()
        if token:
            return token

    raise MissingAccessTokenError("VK access token required in Authorization header (Bearer <token>)")
