# ZonePark/api/session_manager.py

import threading
from typing import Dict, Optional, Tuple
from datetime import datetime, timedelta
from .Models.User import User

# Simple in-memory token store: token -> (User, expires_at or None)
_SESSIONS: Dict[str, Tuple[User, Optional[datetime]]] = {}
_LOCK = threading.Lock()


def add_session(token: str, user: User, ttl_minutes: Optional[int] = None) -> None:
    """
    Store a user for a given token. Without ttl_minutes the token never expires.
    """
    expires_at = datetime.now() + timedelta(minutes=ttl_minutes) if ttl_minutes else None
    with _LOCK:
        _SESSIONS[token] = (user, expires_at)


def get_session(token: str) -> Optional[User]:
    """
    Return the User for this token, or None if unknown or expired.
    """
    with _LOCK:
        entry = _SESSIONS.get(token)
        if entry is None:
            return None
        user, expires_at = entry
        if expires_at is not None and expires_at <= datetime.now():
            del _SESSIONS[token]
            return None
        return user


def update_session_user(user: User) -> None:
    """
    Swap in the fresh User object for every token of this user, e.g. after a profile update.
    """
    with _LOCK:
        for token, (stored, expires_at) in list(_SESSIONS.items()):
            if stored.id == user.id:
                _SESSIONS[token] = (user, expires_at)


def remove_session(token: str) -> Optional[User]:
    """
    Remove a session and return the User that was stored, if any.
    """
    with _LOCK:
        entry = _SESSIONS.pop(token, None)
    return entry[0] if entry else None
