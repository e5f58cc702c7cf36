from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import Forbidden, NotFound
from app.models.hotel import Hotel, RoomType
from app.schemas.hotel import RoomIn, RoomUpdate
from app.services.auth import Actor
from app.services.hotels import get_owned_hotel


async def _get_owned_room(db: AsyncSession, *, room_id: int, actor: Actor) -> tuple[Hotel, RoomType]:
    room = (await db.execute(select(RoomType).where(RoomType.id == room_id))).scalar_one_or_none()
    if room is None:
        raise NotFound("Room type not found")

    hotel = (await db.execute(select(Hotel).where(Hotel.id == room.hotel_id))).scalar_one_or_none()
    if hotel is None or hotel.merchant_id != actor.user_id:
        raise Forbidden("No permission to modify this room type")
    return hotel, room


async def add_room(db: AsyncSession, *, hotel_id: int, actor: Actor, payload: RoomIn) -> RoomType:
    hotel = await get_owned_hotel(db, hotel_id=hotel_id, actor=actor)
    room = RoomType(
        name=payload.name,
        price=payload.price,
        original_price=payload.original_price,
        capacity=payload.capacity,
        breakfast=payload.breakfast,
        images=list(payload.images),
    )
    hotel.room_types.append(room)
    await db.commit()
    await db.refresh(room)
    return room


async def update_room(db: AsyncSession, *, room_id: int, actor: Actor, payload: RoomUpdate) -> RoomType:
    _, room = await _get_owned_room(db, room_id=room_id, actor=actor)

    for name, value in payload.model_dump(exclude_unset=True).items():
        # only original_price may be cleared with an explicit null
        if value is None and name != "original_price":
            continue
        setattr(room, name, value)

    await db.commit()
    await db.refresh(room)
    return room


async def delete_room(db: AsyncSession, *, room_id: int, actor: Actor) -> None:
    hotel, room = await _get_owned_room(db, room_id=room_id, actor=actor)
    # delete-orphan cascade removes the row
    hotel.room_types.remove(room)
    await db.commit()
