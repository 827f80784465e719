"""Password hashing and signed auth-cookie tokens."""
import base64
import hashlib
import hmac
import time

from passlib.context import CryptContext

from study_dashboard.core.config import get_settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def _signature(payload: bytes) -> str:
    key = get_settings().secret_key.encode("utf-8")
    return hmac.new(key, payload, hashlib.sha256).hexdigest()


def create_session_token(user_id: int, issued_at: int | None = None) -> str:
    """Token format: base64url(user_id:issued_at).hexdigest"""
    ts = int(time.time()) if issued_at is None else issued_at
    payload = f"{user_id}:{ts}".encode("utf-8")
    encoded = base64.urlsafe_b64encode(payload).decode("ascii").rstrip("=")
    return f"{encoded}.{_signature(payload)}"


def verify_session_token(token: str | None, max_age: int | None = None) -> int | None:
    """Return the user id carried by a valid, unexpired token; None otherwise."""
    if not token or "." not in token:
        return None
    if max_age is None:
        max_age = get_settings().auth_cookie_max_age
    encoded, sig = token.rsplit(".", 1)
    try:
        payload = base64.urlsafe_b64decode(encoded + "=" * (-len(encoded) % 4))
    except ValueError:
        return None
    if not hmac.compare_digest(_signature(payload), sig):
        return None
    try:
        raw_user_id, raw_ts = payload.decode("utf-8").split(":", 1)
        user_id, ts = int(raw_user_id), int(raw_ts)
    except (UnicodeDecodeError, ValueError):
        return None
    if abs(time.time() - ts) > max_age:
        return None
    return user_id
