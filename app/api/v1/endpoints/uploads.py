from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.schemas.upload import UploadOut
from app.services.auth import get_actor
from app.services.storage import LocalObjectStore
from app.services.uploads import MAX_FILES_PER_REQUEST, get_object_store, store_image, store_images

router = APIRouter(prefix="/upload", dependencies=[Depends(get_actor)])


@router.post("", response_model=UploadOut)
async def upload_one(
    file: UploadFile | None = File(default=None),
    store: LocalObjectStore = Depends(get_object_store),
) -> UploadOut:
    if file is None:
        raise HTTPException(status_code=400, detail="No file selected")
    stored = await store_image(store, file)
    return UploadOut(url=stored.url, filename=stored.filename)


@router.post("/multiple", response_model=list[UploadOut])
async def upload_many(
    files: list[UploadFile] | None = File(default=None),
    store: LocalObjectStore = Depends(get_object_store),
) -> list[UploadOut]:
    if not files:
        raise HTTPException(status_code=400, detail="No file selected")
    if len(files) > MAX_FILES_PER_REQUEST:
        raise HTTPException(status_code=400, detail=f"At most {MAX_FILES_PER_REQUEST} files per request")

    stored = await store_images(store, files)
    return [UploadOut(url=s.url, filename=s.filename) for s in stored]
