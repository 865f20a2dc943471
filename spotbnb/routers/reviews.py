from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from spotbnb.core.deps import get_current_user, get_optional_user, review_id_path, spot_id_path
from spotbnb.db.session import get_db
from spotbnb.models.reviews import Review
from spotbnb.models.users import User
from spotbnb.routers.spots import to_spot_summary
from spotbnb.schemas.base import MessageResponse
from spotbnb.schemas.reviews import (
    ReviewCreate,
    ReviewImageCreate,
    ReviewImageResponse,
    ReviewPanelResponse,
    ReviewResponse,
    SpotReviewListResponse,
    SpotReviewResponse,
    UserReviewListResponse,
    UserReviewResponse,
)
from spotbnb.schemas.users import UserSummary
from spotbnb.services import reviews as review_service
from spotbnb.services.aggregation import spot_aggregate, spot_aggregates
from spotbnb.services.review_panel import build_review_panel
from spotbnb.services.spots import get_spot

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reviews"])


def _review_fields(r: Review) -> dict:
    return ReviewResponse.model_validate(r).model_dump()


def _to_spot_review(r: Review) -> SpotReviewResponse:
    return SpotReviewResponse(
        **_review_fields(r),
        user=UserSummary.model_validate(r.user),
        review_images=[ReviewImageResponse.model_validate(i) for i in r.images],
    )


@router.post("/spots/{spot_id}/reviews", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
def create_review(
    *,
    spot_id: int = Depends(spot_id_path),
    payload: ReviewCreate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewResponse:
    review = review_service.create_review(
        db, user_id=current.id, spot_id=spot_id, text=payload.review, stars=payload.stars
    )
    return ReviewResponse.model_validate(review)


@router.get("/spots/{spot_id}/reviews", response_model=SpotReviewListResponse)
def list_spot_reviews(
    spot_id: int = Depends(spot_id_path),
    db: Session = Depends(get_db),
) -> SpotReviewListResponse:
    reviews = review_service.list_reviews_for_spot(db, spot_id)
    return SpotReviewListResponse(reviews=[_to_spot_review(r) for r in reviews])


@router.get("/spots/{spot_id}/review-panel", response_model=ReviewPanelResponse)
def review_panel(
    spot_id: int = Depends(spot_id_path),
    viewer: User | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
) -> ReviewPanelResponse:
    spot = get_spot(db, spot_id)
    reviews = review_service.list_reviews_for_spot(db, spot.id)
    agg = spot_aggregate(db, spot.id)

    panel = build_review_panel(
        viewer_id=viewer.id if viewer else None,
        spot_owner_id=spot.owner_id,
        reviews=reviews,
        avg_rating=agg.avg_rating,
    )
    return ReviewPanelResponse(
        state=panel.state.value,
        action=panel.action,
        prompt=panel.prompt,
        rating_label=panel.rating_label,
        num_reviews=panel.num_reviews,
        review_id=panel.review_id,
    )


@router.get("/reviews/current", response_model=UserReviewListResponse)
def list_my_reviews(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserReviewListResponse:
    reviews = review_service.list_reviews_by_user(db, current.id)
    aggregates = spot_aggregates(db, [r.spot_id for r in reviews])
    items = [
        UserReviewResponse(
            **_review_fields(r),
            user=UserSummary.model_validate(r.user),
            spot=to_spot_summary(r.spot, aggregates[r.spot_id].preview_image),
            review_images=[ReviewImageResponse.model_validate(i) for i in r.images],
        )
        for r in reviews
    ]
    return UserReviewListResponse(reviews=items)


@router.delete("/reviews/{review_id}", response_model=MessageResponse)
def delete_review(
    review_id: int = Depends(review_id_path),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    review_service.delete_review(db, user_id=current.id, review_id=review_id)
    return MessageResponse(message="Successfully deleted", status_code=status.HTTP_200_OK)


@router.post(
    "/reviews/{review_id}/images",
    response_model=ReviewImageResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_review_image(
    *,
    review_id: int = Depends(review_id_path),
    payload: ReviewImageCreate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> ReviewImageResponse:
    image = review_service.add_review_image(db, user_id=current.id, review_id=review_id, url=payload.url)
    return ReviewImageResponse.model_validate(image)
