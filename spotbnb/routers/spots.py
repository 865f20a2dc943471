from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from spotbnb.core.deps import get_current_user, spot_id_path
from spotbnb.db.session import get_db
from spotbnb.models.spots import Spot
from spotbnb.models.users import User
from spotbnb.schemas.base import MessageResponse
from spotbnb.schemas.spots import (
    SpotCreate,
    SpotDetailResponse,
    SpotImageCreate,
    SpotImageResponse,
    SpotListItem,
    SpotListResponse,
    SpotResponse,
    SpotSummary,
    SpotUpdate,
)
from spotbnb.schemas.users import UserSummary
from spotbnb.services import spots as spot_service
from spotbnb.services.aggregation import SpotAggregate

router = APIRouter(prefix="/spots", tags=["spots"])


def _spot_fields(spot: Spot) -> dict:
    return SpotResponse.model_validate(spot).model_dump()


def _to_spot_list_item(spot: Spot, agg: SpotAggregate) -> SpotListItem:
    return SpotListItem(**_spot_fields(spot), avg_rating=agg.avg_rating, preview_image=agg.preview_image)


def to_spot_summary(spot: Spot, preview_image: str | None) -> SpotSummary:
    return SpotSummary(
        id=spot.id,
        owner_id=spot.owner_id,
        address=spot.address,
        city=spot.city,
        state=spot.state,
        country=spot.country,
        lat=spot.lat,
        lng=spot.lng,
        name=spot.name,
        price=spot.price,
        preview_image=preview_image,
    )


@router.get("", response_model=SpotListResponse)
def list_spots(db: Session = Depends(get_db)) -> SpotListResponse:
    rows = spot_service.list_spots(db)
    return SpotListResponse(spots=[_to_spot_list_item(s, agg) for s, agg in rows])


@router.get("/current", response_model=SpotListResponse)
def list_my_spots(
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotListResponse:
    rows = spot_service.list_spots(db, owner_id=current.id)
    return SpotListResponse(spots=[_to_spot_list_item(s, agg) for s, agg in rows])


@router.get("/{spot_id}", response_model=SpotDetailResponse)
def get_spot(spot_id: int = Depends(spot_id_path), db: Session = Depends(get_db)) -> SpotDetailResponse:
    spot, agg = spot_service.get_spot_detail(db, spot_id)
    return SpotDetailResponse(
        **_spot_fields(spot),
        num_reviews=agg.num_reviews,
        avg_star_rating=agg.avg_rating,
        spot_images=[SpotImageResponse.model_validate(i) for i in spot.images],
        owner=UserSummary.model_validate(spot.owner),
    )


@router.post("", response_model=SpotResponse, status_code=status.HTTP_201_CREATED)
def create_spot(
    payload: SpotCreate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotResponse:
    spot = spot_service.create_spot(db, owner_id=current.id, payload=payload)
    return SpotResponse.model_validate(spot)


@router.put("/{spot_id}", response_model=SpotResponse)
def update_spot(
    *,
    spot_id: int = Depends(spot_id_path),
    payload: SpotUpdate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotResponse:
    spot = spot_service.update_spot(db, owner_id=current.id, spot_id=spot_id, payload=payload)
    return SpotResponse.model_validate(spot)


@router.delete("/{spot_id}", response_model=MessageResponse)
def delete_spot(
    spot_id: int = Depends(spot_id_path),
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MessageResponse:
    spot_service.delete_spot(db, owner_id=current.id, spot_id=spot_id)
    return MessageResponse(message="Successfully deleted", status_code=status.HTTP_200_OK)


@router.post("/{spot_id}/images", response_model=SpotImageResponse, status_code=status.HTTP_201_CREATED)
def add_spot_image(
    *,
    spot_id: int = Depends(spot_id_path),
    payload: SpotImageCreate,
    current: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> SpotImageResponse:
    image = spot_service.add_spot_image(
        db, owner_id=current.id, spot_id=spot_id, url=payload.url, preview=payload.preview
    )
    return SpotImageResponse.model_validate(image)
