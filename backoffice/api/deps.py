from fastapi import Request

from backoffice.db import get_db  # noqa: F401


def get_client_info(request: Request) -> dict:
    """Return the caller's user agent and IP address for audit fields."""
    forwarded = request.headers.get("x-forwarded-for")
    ip_address = forwarded.split(",")[0].strip() if forwarded else None
    if not ip_address and request.client:
        ip_address = request.client.host
    return {
        "user_agent": request.headers.get("user-agent"),
        "ip_address": ip_address,
    }
