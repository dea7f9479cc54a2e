from __future__ import annotations

from typing import Any

import bcrypt

from ..matching.models import PreferenceProfile

_users: dict[str, dict[str, Any]] = {}
_preferences: dict[str, PreferenceProfile] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def _seed_users() -> None:
    """Pre-seed demo users on import."""
    _users["alex"] = {"id": "u-alex", "name": "Alex", "password_hash": _hash_password("alex123")}
    _users["sam"] = {"id": "u-sam", "name": "Sam", "password_hash": _hash_password("sam123")}


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify credentials. Returns ``{id, username, name}`` or ``None``."""
    record = _users.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return {"id": record["id"], "username": username, "name": record["name"]}
    return None


def get_preferences(user_id: str) -> PreferenceProfile:
    """Return the stored profile, or an empty one for users who never saved any."""
    return _preferences.get(user_id, PreferenceProfile())


def set_preferences(user_id: str, profile: PreferenceProfile) -> PreferenceProfile:
    _preferences[user_id] = profile
    return profile


def clear_preferences() -> None:
    _preferences.clear()


_seed_users()
