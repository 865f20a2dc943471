from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from spotbnb.schemas.base import ApiModel
from spotbnb.schemas.fields import integer_in_range, required_text
from spotbnb.schemas.spots import SpotSummary
from spotbnb.schemas.users import UserSummary


class ReviewCreate(ApiModel):
    model_config = ConfigDict(validate_default=True)

    review: str | None = None
    stars: int | None = None

    @field_validator("review", mode="before")
    @classmethod
    def _check_review(cls, value: Any) -> str:
        return required_text(value, "Review text is required")

    @field_validator("stars", mode="before")
    @classmethod
    def _check_stars(cls, value: Any) -> int:
        return integer_in_range(value, "Stars must be an integer from 1 to 5", minimum=1, maximum=5)


class ReviewImageCreate(ApiModel):
    url: str = Field(max_length=2048)

    @field_validator("url", mode="before")
    @classmethod
    def _check_url(cls, value: Any) -> str:
        return required_text(value, "Image url is required")


class ReviewImageResponse(ApiModel):
    id: int
    url: str


class ReviewResponse(ApiModel):
    id: int
    user_id: int
    spot_id: int
    review: str
    stars: int
    created_at: datetime
    updated_at: datetime


class SpotReviewResponse(ReviewResponse):
    user: UserSummary = Field(alias="User")
    review_images: list[ReviewImageResponse] = Field(alias="ReviewImages")


class SpotReviewListResponse(ApiModel):
    reviews: list[SpotReviewResponse] = Field(alias="Reviews")


class UserReviewResponse(ReviewResponse):
    user: UserSummary = Field(alias="User")
    spot: SpotSummary = Field(alias="Spot")
    review_images: list[ReviewImageResponse] = Field(alias="ReviewImages")


class UserReviewListResponse(ApiModel):
    reviews: list[UserReviewResponse] = Field(alias="Reviews")


class ReviewPanelResponse(ApiModel):
    state: str
    action: str | None
    prompt: str | None
    rating_label: str
    num_reviews: int
    review_id: int | None
