from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from app.models.hotel import HotelStatus


class RoomIn(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    price: float = Field(ge=0)
    original_price: float | None = Field(default=None, ge=0)
    capacity: int = Field(default=2, ge=1)
    breakfast: bool = False
    images: list[str] = Field(default_factory=list)


class RoomUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=120)
    price: float | None = Field(default=None, ge=0)
    # explicit null clears the strike-through price
    original_price: float | None = Field(default=None, ge=0)
    capacity: int | None = Field(default=None, ge=1)
    breakfast: bool | None = None
    images: list[str] | None = None


class RoomOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    hotel_id: int
    name: str
    price: float
    original_price: float | None
    capacity: int
    breakfast: bool
    images: list[str]


class NearbyPlaceIn(BaseModel):
    type: Literal["attraction", "transport", "mall"]
    name: str = Field(min_length=1, max_length=120)
    distance: str = Field(min_length=1, max_length=40)


class NearbyPlaceOut(NearbyPlaceIn):
    model_config = ConfigDict(from_attributes=True)

    id: int
    hotel_id: int


class HotelCreate(BaseModel):
    name_cn: str = Field(min_length=1, max_length=200)
    name_en: str = Field(default="", max_length=200)
    city: str = Field(min_length=1, max_length=80)
    address: str = Field(min_length=1, max_length=300)
    star: int = Field(default=3, ge=1, le=5)
    opening_date: str = Field(default="", max_length=20)
    description: str = ""
    tags: list[str] = Field(default_factory=list)
    facilities: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    rooms: list[RoomIn] = Field(default_factory=list)
    nearby_places: list[NearbyPlaceIn] = Field(default_factory=list)


class HotelUpdate(BaseModel):
    name_cn: str | None = Field(default=None, min_length=1, max_length=200)
    name_en: str | None = Field(default=None, max_length=200)
    city: str | None = Field(default=None, min_length=1, max_length=80)
    address: str | None = Field(default=None, min_length=1, max_length=300)
    star: int | None = Field(default=None, ge=1, le=5)
    opening_date: str | None = Field(default=None, max_length=20)
    description: str | None = None
    tags: list[str] | None = None
    facilities: list[str] | None = None
    images: list[str] | None = None

    # when present, replaces the hotel's existing set
    rooms: list[RoomIn] | None = None
    nearby_places: list[NearbyPlaceIn] | None = None


class RejectIn(BaseModel):
    reason: str = ""


class HotelOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    merchant_id: int
    name_cn: str
    name_en: str
    city: str
    address: str
    star: int
    opening_date: str
    description: str
    tags: list[str]
    facilities: list[str]
    images: list[str]
    status: HotelStatus
    reject_reason: str
    created_at: datetime
    updated_at: datetime
    room_types: list[RoomOut]
    nearby_places: list[NearbyPlaceOut]


class HotelSearchItem(HotelOut):
    lowest_price: float | None = None


class HotelSearchOut(BaseModel):
    total: int
    page: int
    page_size: int
    data: list[HotelSearchItem]


class BannerItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name_cn: str
    name_en: str
    images: list[str]
    star: int
    city: str
