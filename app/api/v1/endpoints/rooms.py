from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.schemas.common import MessageResponse
from app.schemas.hotel import RoomIn, RoomOut, RoomUpdate
from app.services.auth import Actor, require_merchant
from app.services.rooms import add_room, delete_room, update_room

router = APIRouter()


@router.post("/hotels/{hotel_id}/rooms", response_model=RoomOut)
async def create_room(
    hotel_id: int,
    payload: RoomIn,
    actor: Actor = Depends(require_merchant),
    db: AsyncSession = Depends(get_db),
) -> RoomOut:
    room = await add_room(db, hotel_id=hotel_id, actor=actor, payload=payload)
    return RoomOut.model_validate(room)


@router.put("/rooms/{room_id}", response_model=RoomOut)
async def edit_room(
    room_id: int,
    payload: RoomUpdate,
    actor: Actor = Depends(require_merchant),
    db: AsyncSession = Depends(get_db),
) -> RoomOut:
    room = await update_room(db, room_id=room_id, actor=actor, payload=payload)
    return RoomOut.model_validate(room)


@router.delete("/rooms/{room_id}", response_model=MessageResponse)
async def remove_room(
    room_id: int,
    actor: Actor = Depends(require_merchant),
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    await delete_room(db, room_id=room_id, actor=actor)
    return MessageResponse(message="Deleted")
