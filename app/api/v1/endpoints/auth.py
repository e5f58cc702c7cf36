from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.core.security import issue_token
from app.models.user import User
from app.schemas.auth import LoginIn, ProfileOut, RegisterIn, TokenOut, UserOut
from app.services.accounts import authenticate_user, get_user, register_user
from app.services.auth import Actor, get_actor
from app.services.rate_limit import limit_auth_requests

router = APIRouter(prefix="/auth")


def _token_out(user: User) -> TokenOut:
    token = issue_token(user_id=user.id, username=user.username, role=user.role.value)
    return TokenOut(token=token, user=UserOut.model_validate(user))


@router.post("/register", response_model=TokenOut, dependencies=[Depends(limit_auth_requests)])
async def register(payload: RegisterIn, db: AsyncSession = Depends(get_db)) -> TokenOut:
    user = await register_user(
        db,
        username=payload.username,
        password=payload.password,
        role=payload.role,
        invite_code=payload.invite_code,
    )
    return _token_out(user)


@router.post("/login", response_model=TokenOut, dependencies=[Depends(limit_auth_requests)])
async def login(payload: LoginIn, db: AsyncSession = Depends(get_db)) -> TokenOut:
    user = await authenticate_user(db, username=payload.username, password=payload.password)
    return _token_out(user)


@router.get("/profile", response_model=ProfileOut)
async def profile(actor: Actor = Depends(get_actor), db: AsyncSession = Depends(get_db)) -> ProfileOut:
    user = await get_user(db, actor.user_id)
    return ProfileOut.model_validate(user)
