import asyncio

import pytest

from realtor_genai.errors import InvalidInputError
from realtor_genai.images import MAX_IMAGE_BYTES, ImageStore, extract_file_path_from_url, object_path_for

from conftest import FakeObjectStore


PUBLIC = "https://storage.test/public/property-images/house.jpg"


@pytest.mark.parametrize(
    "url, expected",
    [
        ("https://abc.supabase.co/storage/v1/object/public/property-images/users/u1/a.png", "users/u1/a.png"),
        ("https://abc.supabase.co/storage/v1/object/sign/avatars/b.jpg?token=xyz", "b.jpg"),
        ("https://cdn.example.com/images/c.webp", "c.webp"),
    ],
)
def test_extract_file_path_from_url(url, expected):
    assert extract_file_path_from_url(url) == expected


def test_object_path_keeps_extension_and_prefix():
    first = object_path_for("Front Porch.JPG", "users/u1/")
    second = object_path_for("Front Porch.JPG", "users/u1/")

    assert first.startswith("users/u1/")
    assert first.endswith(".JPG")
    assert first != second


def test_upload_stores_bytes_and_returns_public_url():
    store = FakeObjectStore(public_url=PUBLIC)

    uploaded = asyncio.run(ImageStore(store).upload(b"png-bytes", "house.png", "image/png"))

    assert uploaded.url == PUBLIC
    assert uploaded.bucket == "property-images"
    assert store.uploaded[("property-images", uploaded.path)] == (b"png-bytes", "image/png")
    assert [c[0] for c in store.calls] == ["upload", "public"]


@pytest.mark.parametrize(
    "content, content_type, message",
    [
        (b"%PDF", "application/pdf", "Invalid file type"),
        (b"x" * (MAX_IMAGE_BYTES + 1), "image/jpeg", "exceeds limit of 5MB"),
        (b"", "image/png", "No file provided"),
    ],
)
def test_upload_rejects_bad_files(content, content_type, message):
    store = FakeObjectStore(public_url=PUBLIC)

    with pytest.raises(InvalidInputError, match=message):
        asyncio.run(ImageStore(store).upload(content, "file.bin", content_type))
    assert store.calls == []


def test_upload_route(client, object_store):
    response = client.post(
        "/api/images",
        files={"file": ("house.png", b"png-bytes", "image/png")},
        data={"bucket": "listing-photos", "path_prefix": "users/u1/"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["url"] == object_store.public_url
    assert body["bucket"] == "listing-photos"
    assert body["path"].startswith("users/u1/") and body["path"].endswith(".png")
    assert object_store.uploaded[("listing-photos", body["path"])] == (b"png-bytes", "image/png")


def test_upload_route_rejects_non_image(client, object_store):
    response = client.post("/api/images", files={"file": ("notes.txt", b"hello", "text/plain")})

    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid file type: text/plain")
    assert object_store.uploaded == {}


def test_delete_route_removes_object_named_by_url(client, object_store):
    url = "https://abc.supabase.co/storage/v1/object/public/property-images/users/u1/a.png"

    response = client.delete("/api/images", params={"url": url})

    assert response.status_code == 200
    assert response.json() == {"success": True, "path": "users/u1/a.png"}
    assert object_store.calls == [("remove", "property-images", "users/u1/a.png")]


def test_delete_route_requires_url(client, object_store):
    response = client.delete("/api/images")

    assert response.status_code == 400
    assert response.json() == {"error": "No URL provided for deletion"}
    assert object_store.calls == []
