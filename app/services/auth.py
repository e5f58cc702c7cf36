from dataclasses import dataclass
import jwt
from fastapi import Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.security import decode_token
from app.models.user import UserRole

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Actor:
    user_id: int
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_merchant(self) -> bool:
        return self.role == UserRole.merchant


async def get_actor(credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme)) -> Actor:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=401, detail="Not signed in")

    try:
        claims = decode_token(credentials.credentials)
        role = UserRole(claims.role)
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Session expired, sign in again")
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    return Actor(user_id=claims.user_id, username=claims.username, role=role)


def require_merchant(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_merchant:
        raise HTTPException(status_code=403, detail="Merchant role required")
    return actor


def require_admin(actor: Actor = Depends(get_actor)) -> Actor:
    if not actor.is_admin:
        raise HTTPException(status_code=403, detail="Admin role required")
    return actor
