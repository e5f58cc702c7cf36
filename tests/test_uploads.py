import pytest

from app.core.config import settings
from app.services.storage import LocalObjectStore
from app.services.uploads import write_images

from fixtures_seed import auth_header

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "upload_dir", str(tmp_path))
    return tmp_path


@pytest.mark.asyncio
async def test_upload_single_image(client, merchant, upload_dir):
    r = await client.post(
        "/v1/upload", files={"file": ("room.PNG", PNG, "image/png")}, headers=auth_header(merchant)
    )
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["filename"].endswith(".png")
    assert body["url"] == f"/uploads/{body['filename']}"
    assert (upload_dir / body["filename"]).read_bytes() == PNG


@pytest.mark.asyncio
async def test_upload_requires_login(client):
    r = await client.post("/v1/upload", files={"file": ("a.png", PNG, "image/png")})
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_upload_rejects_non_images(client, merchant):
    r = await client.post(
        "/v1/upload", files={"file": ("notes.txt", b"hello", "text/plain")}, headers=auth_header(merchant)
    )
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_upload_rejects_large_files(client, merchant, monkeypatch):
    monkeypatch.setattr(settings, "upload_max_bytes", 16)
    r = await client.post("/v1/upload", files={"file": ("big.jpg", b"x" * 17, "image/jpeg")}, headers=auth_header(merchant))
    assert r.status_code == 413


@pytest.mark.asyncio
async def test_upload_without_file(client, merchant):
    r = await client.post("/v1/upload", headers=auth_header(merchant))
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_upload_multiple(client, admin, upload_dir):
    files = [("files", (f"p{i}.webp", PNG, "image/webp")) for i in range(3)]
    r = await client.post("/v1/upload/multiple", files=files, headers=auth_header(admin))
    assert r.status_code == 200, r.text
    names = [item["filename"] for item in r.json()]

    assert len(set(names)) == 3
    assert all((upload_dir / n).exists() for n in names)


@pytest.mark.asyncio
async def test_upload_multiple_with_bad_file_writes_nothing(client, merchant, upload_dir):
    files = [
        ("files", ("ok.png", PNG, "image/png")),
        ("files", ("bad.txt", b"hello", "text/plain")),
    ]
    r = await client.post("/v1/upload/multiple", files=files, headers=auth_header(merchant))
    assert r.status_code == 400
    assert list(upload_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_upload_multiple_with_oversized_file_writes_nothing(client, merchant, upload_dir, monkeypatch):
    monkeypatch.setattr(settings, "upload_max_bytes", len(PNG))
    files = [
        ("files", ("a.png", PNG, "image/png")),
        ("files", ("b.png", PNG + b"\x00", "image/png")),
    ]
    r = await client.post("/v1/upload/multiple", files=files, headers=auth_header(merchant))
    assert r.status_code == 413
    assert list(upload_dir.iterdir()) == []


class _DiskFullStore(LocalObjectStore):
    """Accepts the first write, fails the second."""

    def __init__(self, base_dir):
        super().__init__(base_dir)
        self.writes = 0

    def put_bytes(self, *, key, data):
        self.writes += 1
        if self.writes > 1:
            raise OSError("No space left on device")
        return super().put_bytes(key=key, data=data)


def test_failed_write_removes_earlier_files(upload_dir):
    store = _DiskFullStore(str(upload_dir))

    with pytest.raises(OSError):
        write_images(store, [(".png", PNG), (".jpg", PNG)])
    assert list(upload_dir.iterdir()) == []
