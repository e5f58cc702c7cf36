from __future__ import annotations

import logging

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import Conflict, NotFound
from app.core.security import hash_password, verify_password
from app.models.user import User, UserRole

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


async def register_user(
    db: AsyncSession,
    *,
    username: str,
    password: str,
    role: str,
    invite_code: str | None,
) -> User:
    """
    Create a merchant or admin account.
    Raises HTTPException 400 on bad input, 403 on a wrong admin invite code.
    """
    username = username.strip()
    if not username or not password:
        raise HTTPException(status_code=400, detail="Username and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise HTTPException(status_code=400, detail=f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    try:
        user_role = UserRole(role)
    except ValueError:
        raise HTTPException(status_code=400, detail="Role must be merchant or admin")

    if user_role == UserRole.admin and invite_code != settings.admin_invite_code:
        raise HTTPException(status_code=403, detail="Invalid admin invite code")

    existing = (await db.execute(select(User).where(User.username == username))).scalar_one_or_none()
    if existing:
        raise HTTPException(status_code=400, detail="Username already exists")

    user = User(username=username, password_hash=hash_password(password), role=user_role)
    try:
        db.add(user)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        log.exception("register failed: integrity error")
        raise Conflict("Username already exists")

    log.info("registered %s user %s", user.role.value, user.id)
    return user


async def authenticate_user(db: AsyncSession, *, username: str, password: str) -> User:
    if not username or not password:
        raise HTTPException(status_code=400, detail="Username and password are required")

    user = (await db.execute(select(User).where(User.username == username))).scalar_one_or_none()
    # same message for unknown user and wrong password
    if not user or not verify_password(password, user.password_hash):
        raise HTTPException(status_code=400, detail="Wrong username or password")
    return user


async def get_user(db: AsyncSession, user_id: int) -> User:
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if not user:
        raise NotFound("User not found")
    return user
