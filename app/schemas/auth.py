from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import UserRole


class RegisterIn(BaseModel):
    username: str = Field(default="", max_length=80)
    password: str = ""
    role: str = "merchant"
    invite_code: str | None = None


class LoginIn(BaseModel):
    username: str = ""
    password: str = ""


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: UserRole


class ProfileOut(UserOut):
    created_at: datetime


class TokenOut(BaseModel):
    token: str
    user: UserOut
