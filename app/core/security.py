from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from app.core.config import settings


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    username: str
    role: str


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # malformed hash in the users table
        return False


def issue_token(*, user_id: int, username: str, role: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "username": username,
        "role": role,
        "iat": now,
        "exp": now + timedelta(days=settings.jwt_expire_days),
    }
    return jwt.encode(payload, settings.jwt_secret.get_secret_value(), algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> TokenClaims:
    """
    Verify signature + expiry and return the caller claims.
    Raises jwt.InvalidTokenError (incl. ExpiredSignatureError) on any failure.
    """
    data = jwt.decode(token, settings.jwt_secret.get_secret_value(), algorithms=[settings.jwt_algorithm])
    try:
        return TokenClaims(user_id=int(data["id"]), username=str(data["username"]), role=str(data["role"]))
    except (KeyError, TypeError, ValueError) as e:
        raise jwt.InvalidTokenError("token is missing caller claims") from e
