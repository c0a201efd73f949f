import secrets
from datetime import datetime, timedelta, timezone

from passlib.context import CryptContext
from jose import jwt, JWTError

from app.utils.config import settings


pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds)

SESSION_TOKEN_TYPE = "session"


class InvalidSessionToken(Exception):
    """Raised when a session token fails signature, expiry or shape checks."""


def verify_password(plain: str, hashed: str) -> bool:
    """Verify plaintext password against a bcrypt hash."""
    return pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Hash a plaintext password using bcrypt."""
    return pwd_context.hash(plain)


def generate_verification_code() -> str:
    """Six decimal digits, never starting with zero."""
    return str(100000 + secrets.randbelow(900000))


def generate_reset_token() -> str:
    """40 hex characters from 20 random bytes."""
    return secrets.token_hex(20)


def expiry_from_now(minutes: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(minutes=minutes)


def create_session_token(subject: str, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT identifying a user for the session cookie."""
    now = datetime.now(timezone.utc)
    expires_delta = expires_delta or timedelta(days=settings.session_token_expires_days)
    payload = {
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
        "typ": SESSION_TOKEN_TYPE,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_session_token(token: str) -> str:
    """Return the user id carried by a valid session token."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise InvalidSessionToken(str(exc)) from exc
    user_id = payload.get("sub")
    if not user_id or payload.get("typ") != SESSION_TOKEN_TYPE:
        raise InvalidSessionToken("missing subject or wrong token type")
    return user_id
