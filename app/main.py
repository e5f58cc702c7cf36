import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api.v1.router import router as v1_router
from app.core.config import settings
from app.core.errors import DomainError
from app.core.telemetry import setup_telemetry
from app.schemas.common import ErrorResponse
from app.services.uploads import PUBLIC_PREFIX

logging.basicConfig(level=settings.log_level)
log = logging.getLogger(__name__)

app = FastAPI(title="EasyStay API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    log.info("%s %s -> %s: %s", request.method, request.url.path, exc.code, exc.message)
    body = ErrorResponse(code=exc.code, message=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


setup_telemetry(app)
app.include_router(v1_router)
app.mount(PUBLIC_PREFIX, StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")
