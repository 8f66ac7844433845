from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass

import httpx

from realtor_genai.assets import DEFAULT_BUCKET
from realtor_genai.errors import InvalidInputError, UpstreamError
from realtor_genai.providers.base import ObjectStore

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024

_OBJECT_ROUTES = ("/storage/v1/object/public/", "/storage/v1/object/sign/")


def object_path_for(filename: str, path_prefix: str | None = None) -> str:
    """A collision-free object name that keeps the upload's extension."""
    ext = filename.rsplit(".", 1)[-1] if "." in filename else "bin"
    name = f"{uuid.uuid4().hex}.{ext}"
    return f"{path_prefix}{name}" if path_prefix else name


def extract_file_path_from_url(url: str) -> str:
    """Object path inside its bucket for a public or signed storage URL.

    Other URLs fall back to their last path segment.
    """
    try:
        path = httpx.URL(url).path
    except httpx.InvalidURL:
        return url.rsplit("/", 1)[-1]
    for route in _OBJECT_ROUTES:
        if route in path:
            bucket_and_path = path.split(route, 1)[1]
            _, _, object_path = bucket_and_path.partition("/")
            if object_path:
                return object_path
            return url.rsplit("/", 1)[-1]
    return path.rsplit("/", 1)[-1]


@dataclass(frozen=True)
class UploadedImage:
    bucket: str
    path: str
    url: str


class ImageStore:
    """Image uploads and deletions in the object store."""

    def __init__(self, store: ObjectStore, default_bucket: str = DEFAULT_BUCKET) -> None:
        self.store = store
        self.default_bucket = default_bucket

    async def upload(
        self,
        content: bytes,
        filename: str,
        content_type: str | None,
        bucket: str | None = None,
        path_prefix: str | None = None,
    ) -> UploadedImage:
        if not content:
            raise InvalidInputError("No file provided for upload")
        if not content_type or not content_type.startswith("image/"):
            raise InvalidInputError(f"Invalid file type: {content_type}. Only images are allowed.")
        if len(content) > MAX_IMAGE_BYTES:
            size_mb = len(content) / 1024 / 1024
            raise InvalidInputError(f"File size exceeds limit of 5MB. Current size: {size_mb:.2f}MB")

        bucket = bucket or self.default_bucket
        path = object_path_for(filename, path_prefix)
        logger.info("uploading %s (%s, %d bytes) to %s/%s", filename, content_type, len(content), bucket, path)
        await self.store.upload(bucket, path, content, content_type)

        url = await self.store.get_public_url(bucket, path)
        if not url:
            raise UpstreamError(f"no public URL available for {bucket}/{path}")
        return UploadedImage(bucket=bucket, path=path, url=url)

    async def delete(self, url: str, bucket: str | None = None) -> str:
        if not url:
            raise InvalidInputError("No URL provided for deletion")
        bucket = bucket or self.default_bucket
        path = extract_file_path_from_url(url)
        if not path:
            raise InvalidInputError(f"Could not extract file path from URL: {url}")
        logger.info("deleting %s/%s", bucket, path)
        await self.store.remove(bucket, [path])
        return path
