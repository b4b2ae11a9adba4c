"""
Request identity.

Authentication lives upstream; by the time a request reaches this API the
caller's id is carried in the `X-User-Id` header. Requests without it act as
the shared guest user.
"""
from typing import Optional

from fastapi import Header

from app.core.config import settings


def get_current_user_id(
    x_user_id: Optional[str] = Header(default=None, description="Caller's user id."),
) -> str:
    if x_user_id is None or not x_user_id.strip():
        return settings.GUEST_USER_ID
    return x_user_id.strip()
