from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from spotbnb.models.reviews import Review
from spotbnb.models.spots import SpotImage


@dataclass(frozen=True)
class SpotAggregate:
    """Derived, non-persisted fields of a spot.

    ``avg_rating`` is ``None`` while the spot has no reviews and
    ``preview_image`` is ``None`` while no image is flagged as preview.
    """

    avg_rating: float | None = None
    num_reviews: int = 0
    preview_image: str | None = None


NO_AGGREGATE = SpotAggregate()


def spot_aggregates(db: Session, spot_ids: Iterable[int]) -> dict[int, SpotAggregate]:
    """Compute rating and preview image for a batch of spots.

    Two queries regardless of the batch size: one grouped AVG/COUNT over
    reviews and one over preview images. Spots without reviews or images get
    ``NO_AGGREGATE`` values.
    """

    ids = list(dict.fromkeys(spot_ids))
    if not ids:
        return {}

    rating_stmt = (
        select(Review.spot_id, func.count(Review.id), func.avg(Review.stars))
        .where(Review.spot_id.in_(ids))
        .group_by(Review.spot_id)
    )
    ratings = {spot_id: (int(cnt), float(avg)) for spot_id, cnt, avg in db.execute(rating_stmt) if cnt}

    # Ordered by id so the most recently added preview wins.
    preview_stmt = (
        select(SpotImage.spot_id, SpotImage.url)
        .where(SpotImage.spot_id.in_(ids), SpotImage.preview.is_(True))
        .order_by(SpotImage.id)
    )
    previews: dict[int, str] = {}
    for spot_id, url in db.execute(preview_stmt):
        previews[spot_id] = url

    result: dict[int, SpotAggregate] = {}
    for spot_id in ids:
        cnt, avg = ratings.get(spot_id, (0, None))
        result[spot_id] = SpotAggregate(avg_rating=avg, num_reviews=cnt, preview_image=previews.get(spot_id))
    return result


def spot_aggregate(db: Session, spot_id: int) -> SpotAggregate:
    return spot_aggregates(db, [spot_id]).get(spot_id, NO_AGGREGATE)
