from __future__ import annotations

import logging
from typing import Any, Callable

from fastapi.concurrency import run_in_threadpool

from realtor_genai.errors import UpstreamError

logger = logging.getLogger(__name__)


def create_supabase_client(url: str, key: str) -> Any:
    from supabase import create_client

    return create_client(url, key)


class SupabaseStorageProvider:
    """Object-store access through a supabase client's storage API.

    The SDK is synchronous, so every call is pushed to the thread pool.
    Whatever the SDK raises (storage errors, transport errors from its
    HTTP client, malformed responses) comes back as ``UpstreamError``.
    """

    name = "supabase"

    def __init__(self, client: Any) -> None:
        self.client = client

    async def _call(self, action: str, fn: Callable[[], Any]) -> Any:
        try:
            return await run_in_threadpool(fn)
        except Exception as exc:
            logger.warning("supabase %s failed: %s", action, exc)
            raise UpstreamError(f"{action} failed: {exc}") from exc

    def _bucket(self, bucket: str) -> Any:
        return self.client.storage.from_(bucket)

    async def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str | None:
        data = await self._call(
            "signed URL creation", lambda: self._bucket(bucket).create_signed_url(path, expires_in)
        )
        if not isinstance(data, dict):
            return None
        # Older SDK releases only return the upper-case key.
        return data.get("signedURL") or data.get("signedUrl")

    async def get_public_url(self, bucket: str, path: str) -> str | None:
        url = await self._call("public URL lookup", lambda: self._bucket(bucket).get_public_url(path))
        return url or None

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> None:
        options = {"content-type": content_type, "cache-control": "3600", "upsert": "false"}
        await self._call("upload", lambda: self._bucket(bucket).upload(path, content, options))

    async def remove(self, bucket: str, paths: list[str]) -> None:
        await self._call("removal", lambda: self._bucket(bucket).remove(paths))
