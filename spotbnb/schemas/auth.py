from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field

from spotbnb.schemas.base import ApiModel


class RegisterRequest(ApiModel):
    email: EmailStr
    username: str = Field(min_length=4, max_length=30, pattern=r"^[A-Za-z0-9_.-]+$")
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    password: str = Field(min_length=8, max_length=72)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserMeResponse(ApiModel):
    id: int
    email: EmailStr
    username: str
    first_name: str
    last_name: str
