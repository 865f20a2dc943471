from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from spotbnb.core.config import settings
from spotbnb.core.errors import REVIEW_NOT_FOUND, Conflict, NotFound
from spotbnb.models.reviews import Review, ReviewImage
from spotbnb.services.spots import get_spot

logger = logging.getLogger(__name__)

DUPLICATE_REVIEW = "User already has a review for this spot"
TOO_MANY_IMAGES = "Maximum number of images for this resource was reached"


def find_user_review(db: Session, *, user_id: int, spot_id: int) -> Review | None:
    return db.scalar(select(Review).where(Review.user_id == user_id, Review.spot_id == spot_id))


def create_review(db: Session, *, user_id: int, spot_id: int, text: str, stars: int) -> Review:
    spot = get_spot(db, spot_id)

    if find_user_review(db, user_id=user_id, spot_id=spot.id):
        raise Conflict(DUPLICATE_REVIEW)

    review = Review(user_id=user_id, spot_id=spot.id, review=text, stars=stars)
    db.add(review)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent request inserted first; uq_reviews_user_spot rejected ours.
        db.rollback()
        logger.warning("Duplicate review rejected by constraint: user=%s spot=%s", user_id, spot.id)
        raise Conflict(DUPLICATE_REVIEW) from None

    db.refresh(review)
    logger.info("Review %s created for spot %s by user %s", review.id, spot.id, user_id)
    return review


def list_reviews_for_spot(db: Session, spot_id: int) -> list[Review]:
    spot = get_spot(db, spot_id)
    stmt = (
        select(Review)
        .where(Review.spot_id == spot.id)
        .options(selectinload(Review.user), selectinload(Review.images))
        .order_by(Review.id)
    )
    return list(db.scalars(stmt).all())


def list_reviews_by_user(db: Session, user_id: int) -> list[Review]:
    stmt = (
        select(Review)
        .where(Review.user_id == user_id)
        .options(selectinload(Review.user), selectinload(Review.spot), selectinload(Review.images))
        .order_by(Review.id)
    )
    return list(db.scalars(stmt).all())


def get_own_review(db: Session, *, user_id: int, review_id: int) -> Review:
    review = db.scalar(select(Review).where(Review.id == review_id, Review.user_id == user_id))
    if not review:
        raise NotFound(REVIEW_NOT_FOUND)
    return review


def delete_review(db: Session, *, user_id: int, review_id: int) -> None:
    review = get_own_review(db, user_id=user_id, review_id=review_id)
    db.delete(review)
    db.commit()
    logger.info("Review %s deleted by user %s", review_id, user_id)


def add_review_image(db: Session, *, user_id: int, review_id: int, url: str) -> ReviewImage:
    review = get_own_review(db, user_id=user_id, review_id=review_id)

    count = db.scalar(select(func.count(ReviewImage.id)).where(ReviewImage.review_id == review.id)) or 0
    if count >= settings.max_review_images:
        raise Conflict(TOO_MANY_IMAGES)

    image = ReviewImage(review_id=review.id, url=url.strip())
    db.add(image)
    db.commit()
    db.refresh(image)
    return image
