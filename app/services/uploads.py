from __future__ import annotations

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import PurePath

from fastapi import HTTPException, UploadFile

from app.core.config import settings
from app.services.storage import LocalObjectStore

log = logging.getLogger(__name__)

ALLOWED_IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp")
MAX_FILES_PER_REQUEST = 10
PUBLIC_PREFIX = "/uploads"


@dataclass(frozen=True)
class StoredUpload:
    url: str
    filename: str


def get_object_store() -> LocalObjectStore:
    return LocalObjectStore(settings.upload_dir)


def image_extension(filename: str | None) -> str:
    ext = PurePath(filename or "").suffix.lower()
    if ext not in ALLOWED_IMAGE_EXTENSIONS:
        raise HTTPException(status_code=400, detail="Only jpg/jpeg/png/gif/webp images are supported")
    return ext


def stored_name(ext: str) -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(3)}{ext}"


async def read_image(upload: UploadFile) -> tuple[str, bytes]:
    """Extension + size checks. Nothing is written."""
    ext = image_extension(upload.filename)

    data = await upload.read(settings.upload_max_bytes + 1)
    if len(data) > settings.upload_max_bytes:
        raise HTTPException(status_code=413, detail="File too large")
    return ext, data


def write_images(store: LocalObjectStore, images: list[tuple[str, bytes]]) -> list[StoredUpload]:
    """Write checked images; on failure remove the ones already written."""
    written: list[str] = []
    try:
        for ext, data in images:
            name = stored_name(ext)
            store.put_bytes(key=name, data=data)
            written.append(name)
    except OSError:
        for name in written:
            store.delete(key=name)
        log.exception("upload write failed, removed %d partial files", len(written))
        raise

    for name, (_, data) in zip(written, images):
        log.info("stored upload %s (%d bytes)", name, len(data))
    return [StoredUpload(url=f"{PUBLIC_PREFIX}/{name}", filename=name) for name in written]


async def store_images(store: LocalObjectStore, uploads: list[UploadFile]) -> list[StoredUpload]:
    # every file must pass before any is written
    images = [await read_image(u) for u in uploads]
    return write_images(store, images)


async def store_image(store: LocalObjectStore, upload: UploadFile) -> StoredUpload:
    return (await store_images(store, [upload]))[0]
