from __future__ import annotations

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session, selectinload

from spotbnb.core.errors import SPOT_NOT_FOUND, NotFound
from spotbnb.models.spots import Spot, SpotImage
from spotbnb.schemas.spots import SpotCreate, SpotUpdate
from spotbnb.services.aggregation import SpotAggregate, spot_aggregate, spot_aggregates

logger = logging.getLogger(__name__)


def list_spots(db: Session, *, owner_id: int | None = None) -> list[tuple[Spot, SpotAggregate]]:
    """All spots in insertion order, optionally only those owned by ``owner_id``."""

    stmt = select(Spot)
    if owner_id is not None:
        stmt = stmt.where(Spot.owner_id == owner_id)
    spots = list(db.scalars(stmt.order_by(Spot.id)).all())

    aggregates = spot_aggregates(db, [s.id for s in spots])
    return [(s, aggregates[s.id]) for s in spots]


def get_spot(db: Session, spot_id: int) -> Spot:
    spot = db.get(Spot, spot_id)
    if not spot:
        raise NotFound(SPOT_NOT_FOUND)
    return spot


def get_owned_spot(db: Session, *, owner_id: int, spot_id: int) -> Spot:
    """Load a spot scoped to its owner.

    A spot owned by somebody else is reported exactly like a missing one.
    """

    spot = db.scalar(select(Spot).where(Spot.id == spot_id, Spot.owner_id == owner_id))
    if not spot:
        raise NotFound(SPOT_NOT_FOUND)
    return spot


def get_spot_detail(db: Session, spot_id: int) -> tuple[Spot, SpotAggregate]:
    spot = db.scalar(
        select(Spot)
        .where(Spot.id == spot_id)
        .options(selectinload(Spot.owner), selectinload(Spot.images))
    )
    if not spot:
        raise NotFound(SPOT_NOT_FOUND)
    return spot, spot_aggregate(db, spot.id)


def create_spot(db: Session, *, owner_id: int, payload: SpotCreate) -> Spot:
    spot = Spot(owner_id=owner_id, **payload.model_dump())
    db.add(spot)
    db.commit()
    db.refresh(spot)
    logger.info("Spot %s created by user %s", spot.id, owner_id)
    return spot


def update_spot(db: Session, *, owner_id: int, spot_id: int, payload: SpotUpdate) -> Spot:
    spot = get_owned_spot(db, owner_id=owner_id, spot_id=spot_id)

    changes = payload.changes()
    if not changes:
        return spot

    for field, value in changes.items():
        setattr(spot, field, value)
    db.add(spot)
    db.commit()
    db.refresh(spot)
    logger.info("Spot %s updated: %s", spot.id, sorted(changes))
    return spot


def delete_spot(db: Session, *, owner_id: int, spot_id: int) -> None:
    spot = get_owned_spot(db, owner_id=owner_id, spot_id=spot_id)
    db.delete(spot)
    db.commit()
    logger.info("Spot %s deleted by user %s", spot_id, owner_id)


def add_spot_image(db: Session, *, owner_id: int, spot_id: int, url: str, preview: bool) -> SpotImage:
    spot = get_owned_spot(db, owner_id=owner_id, spot_id=spot_id)

    if preview:
        # At most one preview image per spot: the new one replaces the old.
        db.execute(
            update(SpotImage)
            .where(SpotImage.spot_id == spot.id, SpotImage.preview.is_(True))
            .values(preview=False)
        )

    image = SpotImage(spot_id=spot.id, url=url.strip(), preview=preview)
    db.add(image)
    db.commit()
    db.refresh(image)
    return image
