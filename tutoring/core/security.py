# tutoring/core/security.py
import secrets
import uuid
from datetime import datetime, timedelta

from jose import jwt, JWTError
from passlib.context import CryptContext

from tutoring.core.cache import EvictionCache
from tutoring.core.config import settings

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")

# jti of logged-out tokens. No size cap: an entry may only leave once the
# token it names has expired anyway.
revoked_tokens = EvictionCache(
    ttl_ms=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60 * 1000,
    max_size=None,
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: timedelta | None = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    # jti: unique per token, logout revokes exactly one
    to_encode.update({"exp": expire, "jti": uuid.uuid4().hex})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decodes the JWT and returns its payload. Revoked tokens are rejected."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise JWTError("Could not validate credentials")
    if payload.get("jti") in revoked_tokens:
        raise JWTError("Token has been revoked")
    return payload


def revoke_token(token: str) -> None:
    payload = decode_access_token(token)
    revoked_tokens.cleanup()
    revoked_tokens.set(payload["jti"], True)


def generate_student_code() -> str:
    """6 digits, printed on the student's QR card."""
    return "".join(secrets.choice("0123456789") for _ in range(6))


def generate_password() -> str:
    # 5 distinct digits, easy to read out over the phone
    digits = list("0123456789")
    secrets.SystemRandom().shuffle(digits)
    return "".join(digits[:5])
