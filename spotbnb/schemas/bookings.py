from __future__ import annotations

from datetime import date, datetime

from pydantic import Field

from spotbnb.schemas.base import ApiModel
from spotbnb.schemas.spots import SpotSummary
from spotbnb.schemas.users import UserSummary


class BookingCreate(ApiModel):
    start_date: date
    end_date: date


class BookingResponse(ApiModel):
    id: int
    spot_id: int
    user_id: int
    start_date: date
    end_date: date
    created_at: datetime
    updated_at: datetime


class OwnerBookingResponse(BookingResponse):
    user: UserSummary = Field(alias="User")


class GuestBookingResponse(ApiModel):
    spot_id: int
    start_date: date
    end_date: date


class SpotBookingListResponse(ApiModel):
    bookings: list[OwnerBookingResponse | GuestBookingResponse] = Field(alias="Bookings")


class UserBookingResponse(BookingResponse):
    spot: SpotSummary = Field(alias="Spot")


class UserBookingListResponse(ApiModel):
    bookings: list[UserBookingResponse] = Field(alias="Bookings")
