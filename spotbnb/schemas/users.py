from __future__ import annotations

from spotbnb.schemas.base import ApiModel


class UserSummary(ApiModel):
    id: int
    first_name: str
    last_name: str
