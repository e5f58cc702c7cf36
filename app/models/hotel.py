import enum

from sqlalchemy import JSON, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin


class HotelStatus(str, enum.Enum):
    draft = "draft"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    offline = "offline"


class Hotel(TimestampMixin, Base):
    __tablename__ = "hotels"
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # owner; set on create and never reassigned
    merchant_id: Mapped[int] = mapped_column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name_cn: Mapped[str] = mapped_column(String(200), nullable=False)
    name_en: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    city: Mapped[str] = mapped_column(String(80), nullable=False, index=True)
    address: Mapped[str] = mapped_column(String(300), nullable=False)
    star: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    opening_date: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    facilities: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    # Only changed through app.services.hotel_lifecycle
    status: Mapped[HotelStatus] = mapped_column(
        Enum(HotelStatus, name="hotel_status", native_enum=False, length=20, validate_strings=True),
        nullable=False,
        default=HotelStatus.draft,
        index=True,
    )
    reject_reason: Mapped[str] = mapped_column(Text, nullable=False, default="")

    room_types: Mapped[list["RoomType"]] = relationship(
        back_populates="hotel", lazy="selectin", cascade="all, delete-orphan", order_by="RoomType.id"
    )
    nearby_places: Mapped[list["NearbyPlace"]] = relationship(
        back_populates="hotel", lazy="selectin", cascade="all, delete-orphan", order_by="NearbyPlace.id"
    )


class RoomType(Base):
    __tablename__ = "room_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hotel_id: Mapped[int] = mapped_column(Integer, ForeignKey("hotels.id"), nullable=False, index=True)

    name: Mapped[str] = mapped_column(String(120), nullable=False)
    price: Mapped[float] = mapped_column(nullable=False)
    original_price: Mapped[float | None] = mapped_column(nullable=True)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    breakfast: Mapped[bool] = mapped_column(nullable=False, default=False)
    images: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    hotel: Mapped[Hotel] = relationship(back_populates="room_types")


class NearbyPlace(Base):
    __tablename__ = "nearby_places"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    hotel_id: Mapped[int] = mapped_column(Integer, ForeignKey("hotels.id"), nullable=False, index=True)

    # "attraction" | "transport" | "mall"
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    distance: Mapped[str] = mapped_column(String(40), nullable=False)

    hotel: Mapped[Hotel] = relationship(back_populates="nearby_places")
