# Alles voor inloggen: wachtwoorden hashen en de bearer token uit de request halen.

import uuid
from typing import Optional

import bcrypt
from fastapi import HTTPException, Request, status

from ZonePark.api import session_manager
from ZonePark.api.Models.User import User


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # geen geldige bcrypt hash in de db
        return False


def new_token() -> str:
    return str(uuid.uuid4())


def extract_bearer_token(headers) -> Optional[str]:
    auth_header = headers.get("Authorization")
    if not auth_header:
        return None

    parts = auth_header.split(" ", 1)
    if len(parts) != 2:
        return None

    scheme, token = parts
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def get_current_user(request: Request) -> User:
    """FastAPI dependency to get current user from the bearer token in the Authorization header."""
    token = extract_bearer_token(request.headers)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthenticated.")

    user = session_manager.get_session(token)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or expired token.")
    return user
