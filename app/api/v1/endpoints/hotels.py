from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.models.hotel import Hotel, HotelStatus
from app.schemas.hotel import (
    BannerItem,
    HotelCreate,
    HotelOut,
    HotelSearchItem,
    HotelSearchOut,
    HotelUpdate,
    RejectIn,
)
from app.services import hotel_lifecycle as lifecycle
from app.services.auth import Actor, get_actor, require_admin, require_merchant
from app.services.hotels import (
    banner_hotels,
    create_hotel,
    get_hotel_or_404,
    list_merchant_hotels,
    list_review_hotels,
    lowest_room_price,
    search_hotels,
    update_hotel,
)

router = APIRouter(prefix="/hotels")


def _out(hotel: Hotel) -> HotelOut:
    return HotelOut.model_validate(hotel)


# Named routes must be declared before /hotels/{hotel_id}

@router.get("/search", response_model=HotelSearchOut)
async def search(
    city: str | None = None,
    keyword: str | None = None,
    star: int | None = Query(default=None, ge=1, le=5),
    tag: str | None = None,
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> HotelSearchOut:
    total, rows = await search_hotels(
        db,
        city=city,
        keyword=keyword,
        star=star,
        tag=tag,
        min_price=min_price,
        max_price=max_price,
        page=page,
        page_size=page_size,
    )
    data = [
        HotelSearchItem(**_out(h).model_dump(), lowest_price=lowest_room_price(h))
        for h in rows
    ]
    return HotelSearchOut(total=total, page=page, page_size=page_size, data=data)


@router.get("/banner", response_model=list[BannerItem])
async def banner(db: AsyncSession = Depends(get_db)) -> list[BannerItem]:
    return [BannerItem.model_validate(h) for h in await banner_hotels(db)]


@router.get("/my", response_model=list[HotelOut])
async def my_hotels(actor: Actor = Depends(require_merchant), db: AsyncSession = Depends(get_db)) -> list[HotelOut]:
    return [_out(h) for h in await list_merchant_hotels(db, actor=actor)]


@router.get("/review", response_model=list[HotelOut], dependencies=[Depends(require_admin)])
async def review_list(status: HotelStatus | None = None, db: AsyncSession = Depends(get_db)) -> list[HotelOut]:
    return [_out(h) for h in await list_review_hotels(db, status=status)]


@router.post("", response_model=HotelOut)
async def create(
    payload: HotelCreate,
    actor: Actor = Depends(require_merchant),
    db: AsyncSession = Depends(get_db),
) -> HotelOut:
    return _out(await create_hotel(db, actor=actor, payload=payload))


@router.get("/{hotel_id}", response_model=HotelOut)
async def detail(hotel_id: int, db: AsyncSession = Depends(get_db)) -> HotelOut:
    return _out(await get_hotel_or_404(db, hotel_id))


@router.put("/{hotel_id}", response_model=HotelOut)
async def update(
    hotel_id: int,
    payload: HotelUpdate,
    actor: Actor = Depends(require_merchant),
    db: AsyncSession = Depends(get_db),
) -> HotelOut:
    return _out(await update_hotel(db, hotel_id=hotel_id, actor=actor, payload=payload))


# Moderation transitions. Role checks happen inside the lifecycle service so
# a missing hotel is reported before a role mismatch.

@router.post("/{hotel_id}/submit", response_model=HotelOut)
async def submit(hotel_id: int, actor: Actor = Depends(get_actor), db: AsyncSession = Depends(get_db)) -> HotelOut:
    return _out(await lifecycle.submit_hotel(db, hotel_id=hotel_id, actor=actor))


@router.put("/{hotel_id}/approve", response_model=HotelOut)
async def approve(hotel_id: int, actor: Actor = Depends(get_actor), db: AsyncSession = Depends(get_db)) -> HotelOut:
    return _out(await lifecycle.approve_hotel(db, hotel_id=hotel_id, actor=actor))


@router.put("/{hotel_id}/reject", response_model=HotelOut)
async def reject(
    hotel_id: int,
    payload: RejectIn | None = None,
    actor: Actor = Depends(get_actor),
    db: AsyncSession = Depends(get_db),
) -> HotelOut:
    reason = payload.reason if payload else None
    return _out(await lifecycle.reject_hotel(db, hotel_id=hotel_id, actor=actor, reason=reason))


@router.put("/{hotel_id}/offline", response_model=HotelOut)
async def offline(hotel_id: int, actor: Actor = Depends(get_actor), db: AsyncSession = Depends(get_db)) -> HotelOut:
    return _out(await lifecycle.take_hotel_offline(db, hotel_id=hotel_id, actor=actor))


@router.put("/{hotel_id}/online", response_model=HotelOut)
async def online(hotel_id: int, actor: Actor = Depends(get_actor), db: AsyncSession = Depends(get_db)) -> HotelOut:
    return _out(await lifecycle.bring_hotel_online(db, hotel_id=hotel_id, actor=actor))
