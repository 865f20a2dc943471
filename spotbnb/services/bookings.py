from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, selectinload

from spotbnb.core.errors import SPOT_NOT_FOUND, Conflict, Forbidden, NotFound, ValidationFailed
from spotbnb.models.bookings import Booking
from spotbnb.models.spots import Spot
from spotbnb.services.spots import get_spot

logger = logging.getLogger(__name__)

BOOKING_CONFLICT = "Sorry, this spot is already booked for the specified dates"


def lock_spot_stmt(spot_id: int) -> Select:
    """Select the spot row FOR UPDATE.

    Holding the lock until commit serializes overlap check and insert for one
    spot. SQLite has no row locks and ignores the clause.
    """
    return select(Spot).where(Spot.id == spot_id).with_for_update()


def _overlapping(db: Session, *, spot_id: int, start_date: date, end_date: date) -> list[Booking]:
    # Half-open ranges: checking out on a day somebody else checks in is fine.
    stmt = select(Booking).where(
        Booking.spot_id == spot_id,
        Booking.start_date < end_date,
        Booking.end_date > start_date,
    )
    return list(db.scalars(stmt).all())


def create_booking(db: Session, *, user_id: int, spot_id: int, start_date: date, end_date: date) -> Booking:
    spot = db.scalar(lock_spot_stmt(spot_id))
    if not spot:
        raise NotFound(SPOT_NOT_FOUND)
    if spot.owner_id == user_id:
        raise Forbidden()

    if end_date <= start_date:
        raise ValidationFailed(errors={"endDate": "endDate cannot be on or before startDate"})

    clashes = _overlapping(db, spot_id=spot.id, start_date=start_date, end_date=end_date)
    if clashes:
        errors: dict[str, str] = {}
        for b in clashes:
            if b.start_date <= start_date < b.end_date:
                errors["startDate"] = "Start date conflicts with an existing booking"
            if b.start_date < end_date <= b.end_date:
                errors["endDate"] = "End date conflicts with an existing booking"
        if not errors:
            # New range fully surrounds an existing one.
            errors = {
                "startDate": "Start date conflicts with an existing booking",
                "endDate": "End date conflicts with an existing booking",
            }
        raise Conflict(BOOKING_CONFLICT, errors=errors)

    booking = Booking(spot_id=spot.id, user_id=user_id, start_date=start_date, end_date=end_date)
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info("Booking %s created for spot %s (%s..%s)", booking.id, spot.id, start_date, end_date)
    return booking


def list_bookings_for_spot(db: Session, spot_id: int) -> tuple[Spot, list[Booking]]:
    spot = get_spot(db, spot_id)
    stmt = (
        select(Booking)
        .where(Booking.spot_id == spot.id)
        .options(selectinload(Booking.user))
        .order_by(Booking.start_date, Booking.id)
    )
    return spot, list(db.scalars(stmt).all())


def list_bookings_by_user(db: Session, user_id: int) -> list[Booking]:
    stmt = (
        select(Booking)
        .where(Booking.user_id == user_id)
        .options(selectinload(Booking.spot))
        .order_by(Booking.start_date, Booking.id)
    )
    return list(db.scalars(stmt).all())
