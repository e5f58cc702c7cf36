from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Sequence

from sqlalchemy import String, cast, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, NotFound
from app.models.hotel import Hotel, HotelStatus, NearbyPlace, RoomType
from app.schemas.hotel import HotelCreate, HotelUpdate, NearbyPlaceIn, RoomIn
from app.services.auth import Actor
from app.services.hotel_lifecycle import load_hotel

BANNER_SIZE = 5


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _room_rows(rooms: Iterable[RoomIn]) -> list[RoomType]:
    return [
        RoomType(
            name=r.name,
            price=r.price,
            original_price=r.original_price,
            capacity=r.capacity,
            breakfast=r.breakfast,
            images=list(r.images),
        )
        for r in rooms
    ]


def _place_rows(places: Iterable[NearbyPlaceIn]) -> list[NearbyPlace]:
    return [NearbyPlace(type=p.type, name=p.name, distance=p.distance) for p in places]


def lowest_room_price(hotel: Hotel) -> float | None:
    prices = [r.price for r in hotel.room_types]
    return min(prices) if prices else None


async def get_hotel_or_404(db: AsyncSession, hotel_id: int) -> Hotel:
    hotel = await load_hotel(db, hotel_id, fresh=True)
    if hotel is None:
        raise NotFound("Hotel not found")
    return hotel


async def get_owned_hotel(db: AsyncSession, *, hotel_id: int, actor: Actor) -> Hotel:
    hotel = await get_hotel_or_404(db, hotel_id)
    if hotel.merchant_id != actor.user_id:
        raise Forbidden("No permission to modify this hotel")
    return hotel


async def create_hotel(db: AsyncSession, *, actor: Actor, payload: HotelCreate) -> Hotel:
    """New hotels always start in draft, owned by the calling merchant."""
    hotel = Hotel(
        merchant_id=actor.user_id,
        name_cn=payload.name_cn,
        name_en=payload.name_en,
        city=payload.city,
        address=payload.address,
        star=payload.star,
        opening_date=payload.opening_date,
        description=payload.description,
        tags=list(payload.tags),
        facilities=list(payload.facilities),
        images=list(payload.images),
        status=HotelStatus.draft,
        reject_reason="",
        room_types=_room_rows(payload.rooms),
        nearby_places=_place_rows(payload.nearby_places),
    )
    db.add(hotel)
    await db.commit()
    return await load_hotel(db, hotel.id, fresh=True)


async def update_hotel(db: AsyncSession, *, hotel_id: int, actor: Actor, payload: HotelUpdate) -> Hotel:
    """
    Partial update of descriptive content by the owning merchant.
    Status and reject_reason are not touched here.
    """
    hotel = await get_owned_hotel(db, hotel_id=hotel_id, actor=actor)

    fields = payload.model_dump(exclude_none=True, exclude={"rooms", "nearby_places"})
    for name, value in fields.items():
        setattr(hotel, name, value)

    if payload.rooms is not None:
        hotel.room_types = _room_rows(payload.rooms)
    if payload.nearby_places is not None:
        hotel.nearby_places = _place_rows(payload.nearby_places)

    hotel.updated_at = datetime.now(timezone.utc)
    await db.commit()
    return await load_hotel(db, hotel_id, fresh=True)


async def list_merchant_hotels(db: AsyncSession, *, actor: Actor) -> Sequence[Hotel]:
    stmt = (
        select(Hotel)
        .where(Hotel.merchant_id == actor.user_id)
        .order_by(Hotel.updated_at.desc(), Hotel.id.desc())
    )
    return (await db.execute(stmt)).scalars().all()


async def list_review_hotels(db: AsyncSession, *, status: HotelStatus | None = None) -> Sequence[Hotel]:
    stmt = select(Hotel)
    if status is not None:
        stmt = stmt.where(Hotel.status == status)
    stmt = stmt.order_by(Hotel.updated_at.desc(), Hotel.id.desc())
    return (await db.execute(stmt)).scalars().all()


async def search_hotels(
    db: AsyncSession,
    *,
    city: str | None = None,
    keyword: str | None = None,
    star: int | None = None,
    tag: str | None = None,
    min_price: float | None = None,
    max_price: float | None = None,
    page: int = 1,
    page_size: int = 10,
) -> tuple[int, Sequence[Hotel]]:
    """
    Public search over approved hotels only.
    Price bounds apply to the cheapest room; hotels without rooms always pass.
    Returns (total matching, page of hotels).
    """
    lowest = (
        select(func.min(RoomType.price))
        .where(RoomType.hotel_id == Hotel.id)
        .correlate(Hotel)
        .scalar_subquery()
    )

    conds = [Hotel.status == HotelStatus.approved]
    if city:
        conds.append(Hotel.city == city)
    if keyword:
        like = f"%{keyword}%"
        conds.append(or_(Hotel.name_cn.ilike(like), Hotel.name_en.ilike(like), Hotel.address.ilike(like)))
    if star is not None:
        conds.append(Hotel.star == star)
    if tag:
        # substring of the serialized JSON list, so "江景" also finds "江景房"
        conds.append(cast(Hotel.tags, String).like(f"%{escape_like(tag)}%", escape="\\"))
    if min_price is not None:
        conds.append(or_(lowest.is_(None), lowest >= min_price))
    if max_price is not None:
        conds.append(or_(lowest.is_(None), lowest <= max_price))

    total = (await db.execute(select(func.count(Hotel.id)).where(*conds))).scalar_one()

    stmt = (
        select(Hotel)
        .where(*conds)
        .order_by(Hotel.updated_at.desc(), Hotel.id.desc())
        .limit(page_size)
        .offset((page - 1) * page_size)
    )
    rows = (await db.execute(stmt)).scalars().all()
    return total, rows


async def banner_hotels(db: AsyncSession) -> Sequence[Hotel]:
    stmt = (
        select(Hotel)
        .where(Hotel.status == HotelStatus.approved)
        .order_by(Hotel.star.desc(), Hotel.updated_at.desc(), Hotel.id.desc())
        .limit(BANNER_SIZE)
    )
    return (await db.execute(stmt)).scalars().all()
