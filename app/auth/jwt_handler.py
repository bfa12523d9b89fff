from typing import Optional
from app.core.security import verify_token

def decode_access_token(token: Optional[str]) -> Optional[dict]:
    """Payload of a valid access token, None otherwise (jose rejects expired tokens)"""
    if not token:
        return None
    payload = verify_token(token)
    if not payload or payload.get("type") != "access":
        return None
    return payload

def get_token_user_id(token: Optional[str]) -> Optional[int]:
    """User id carried in the ``sub`` claim of a valid access token"""
    payload = decode_access_token(token)
    if payload is None:
        return None
    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        return None
