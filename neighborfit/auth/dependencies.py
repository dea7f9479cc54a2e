from __future__ import annotations

from fastapi import HTTPException, Request
from pydantic import ValidationError

from .models import CurrentUser


def get_current_user(request: Request) -> CurrentUser | None:
    """Return the session user, or ``None`` if absent or malformed."""
    data = request.session.get("user")
    if not data:
        return None
    try:
        return CurrentUser.model_validate(data)
    except ValidationError:
        # Cookie from an older session layout; treat as logged out
        return None


def require_user(request: Request) -> CurrentUser:
    """Raise 401 unless a user with an id is logged in."""
    user = get_current_user(request)
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user
