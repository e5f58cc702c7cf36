from app.models.base import Base  # noqa: F401

from app.models.user import User, UserRole  # noqa: F401
from app.models.hotel import Hotel, HotelStatus, NearbyPlace, RoomType  # noqa: F401
from app.models.audit_log import AuditLog  # noqa: F401
