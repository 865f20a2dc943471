from __future__ import annotations

from fastapi import APIRouter, Depends

from spotbnb.core.deps import get_current_user
from spotbnb.models.users import User
from spotbnb.schemas.auth import UserMeResponse

router = APIRouter(tags=["users"])


@router.get("/me", response_model=UserMeResponse)
def me(current: User = Depends(get_current_user)) -> UserMeResponse:
    return UserMeResponse.model_validate(current)
