from fastapi import APIRouter

from app.api.v1.endpoints.health import router as health_router
from app.api.v1.endpoints.auth import router as auth_router
from app.api.v1.endpoints.hotels import router as hotels_router
from app.api.v1.endpoints.rooms import router as rooms_router
from app.api.v1.endpoints.uploads import router as uploads_router


router = APIRouter(prefix="/v1")
router.include_router(health_router, tags=["health"])
router.include_router(auth_router, tags=["auth"])
router.include_router(hotels_router, tags=["hotels"])
router.include_router(rooms_router, tags=["rooms"])
router.include_router(uploads_router, tags=["uploads"])
