from __future__ import annotations

from datetime import datetime
from typing import Any, Callable

from pydantic import ConfigDict, Field, ValidationInfo, field_validator

from spotbnb.schemas.base import ApiModel
from spotbnb.schemas.fields import decimal_in_range, integer_in_range, required_text
from spotbnb.schemas.users import UserSummary

NAME_MAX_LENGTH = 50
# Upper bound of the price column (32-bit INTEGER on PostgreSQL).
PRICE_MAX = 2**31 - 1


def _name(value: Any) -> str:
    name = required_text(value, "Name is required")
    if len(name) > NAME_MAX_LENGTH:
        raise ValueError("Name must be less than 50 characters")
    return name


_SPOT_RULES: dict[str, Callable[[Any], Any]] = {
    "address": lambda v: required_text(v, "Street address is required"),
    "city": lambda v: required_text(v, "City is required"),
    "state": lambda v: required_text(v, "State is required"),
    "country": lambda v: required_text(v, "Country is required"),
    "lat": lambda v: decimal_in_range(v, "Latitude is not valid", bound=90),
    "lng": lambda v: decimal_in_range(v, "Longitude is not valid", bound=180),
    "name": _name,
    "description": lambda v: required_text(v, "Description is required"),
    "price": lambda v: integer_in_range(
        v, "Price per day is required and cannot be zero", minimum=1, maximum=PRICE_MAX
    ),
}

SPOT_FIELDS = tuple(_SPOT_RULES)


class SpotCreate(ApiModel):
    # Missing fields must fail with their own message, not pydantic's "Field required".
    model_config = ConfigDict(validate_default=True)

    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    lat: float | None = None
    lng: float | None = None
    name: str | None = None
    description: str | None = None
    price: int | None = None

    @field_validator(*SPOT_FIELDS, mode="before")
    @classmethod
    def _check(cls, value: Any, info: ValidationInfo) -> Any:
        return _SPOT_RULES[info.field_name](value)


class SpotUpdate(ApiModel):
    """Partial update: only fields that are sent and not null are applied."""

    address: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    lat: float | None = None
    lng: float | None = None
    name: str | None = None
    description: str | None = None
    price: int | None = None

    @field_validator(*SPOT_FIELDS, mode="before")
    @classmethod
    def _check(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None:
            return None
        return _SPOT_RULES[info.field_name](value)

    def changes(self) -> dict[str, Any]:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class SpotResponse(ApiModel):
    id: int
    owner_id: int
    address: str
    city: str
    state: str
    country: str
    lat: float
    lng: float
    name: str
    description: str
    price: int
    created_at: datetime
    updated_at: datetime


class SpotListItem(SpotResponse):
    avg_rating: float | None
    preview_image: str | None


class SpotListResponse(ApiModel):
    spots: list[SpotListItem] = Field(alias="Spots")


class SpotImageCreate(ApiModel):
    url: str = Field(max_length=2048)
    preview: bool = False

    @field_validator("url", mode="before")
    @classmethod
    def _check_url(cls, value: Any) -> str:
        return required_text(value, "Image url is required")


class SpotImageResponse(ApiModel):
    id: int
    url: str
    preview: bool


class SpotDetailResponse(SpotResponse):
    num_reviews: int
    avg_star_rating: float | None
    spot_images: list[SpotImageResponse] = Field(alias="SpotImages")
    owner: UserSummary = Field(alias="Owner")


class SpotSummary(ApiModel):
    id: int
    owner_id: int
    address: str
    city: str
    state: str
    country: str
    lat: float
    lng: float
    name: str
    price: int
    preview_image: str | None
