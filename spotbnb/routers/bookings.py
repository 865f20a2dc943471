from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from spotbnb.core.deps import get_current_user, spot_id_path
from spotbnb.db.session import get_db
from spotbnb.models.bookings import Booking
from spotbnb.models.users import User
from spotbnb.routers.spots import to_spot_summary
from spotbnb.schemas.bookings import (
    BookingCreate,
    BookingResponse,
    GuestBookingResponse,
    OwnerBookingResponse,
    SpotBookingListResponse,
    UserBookingListResponse,
    UserBookingResponse,
)
from spotbnb.schemas.users import UserSummary
from spotbnb.services import bookings as booking_service
from spotbnb.services.aggregation import spot_aggregates

router = APIRouter(tags=["bookings"])


def _booking_fields(b: Booking) -> dict:
    return BookingResponse.model_validate(b).model_dump()


@router.post("/spots/{spot_id}/bookings", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(
    *,
    spot_id: int = Depends(spot_id_path),
    payload: BookingCreate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> BookingResponse:
    booking = booking_service.create_booking(
        db,
        user_id=current.id,
        spot_id=spot_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
    )
    return BookingResponse.model_validate(booking)


@router.get("/spots/{spot_id}/bookings", response_model=SpotBookingListResponse)
def list_spot_bookings(
    spot_id: int = Depends(spot_id_path),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotBookingListResponse:
    spot, bookings = booking_service.list_bookings_for_spot(db, spot_id)

    # Guests only learn which dates are taken.
    if spot.owner_id != current.id:
        return SpotBookingListResponse(bookings=[GuestBookingResponse.model_validate(b) for b in bookings])

    items = [OwnerBookingResponse(**_booking_fields(b), user=UserSummary.model_validate(b.user)) for b in bookings]
    return SpotBookingListResponse(bookings=items)


@router.get("/bookings/current", response_model=UserBookingListResponse)
def list_my_bookings(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> UserBookingListResponse:
    bookings = booking_service.list_bookings_by_user(db, current.id)
    aggregates = spot_aggregates(db, [b.spot_id for b in bookings])
    items = [
        UserBookingResponse(**_booking_fields(b), spot=to_spot_summary(b.spot, aggregates[b.spot_id].preview_image))
        for b in bookings
    ]
    return UserBookingListResponse(bookings=items)
