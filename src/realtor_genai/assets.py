from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from realtor_genai.errors import UpstreamError
from realtor_genai.providers.base import ObjectStore

logger = logging.getLogger(__name__)

DEFAULT_BUCKET = "property-images"

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

# httpx has already decoded the body, and the response recomputes its own length.
_SKIPPED_HEADERS = {"content-length", "content-encoding", "transfer-encoding", "connection", "keep-alive"}


@dataclass(frozen=True)
class AssetRef:
    bucket: str
    path: str


@dataclass(frozen=True)
class FetchedAsset:
    body: bytes
    headers: dict[str, str]


@dataclass(frozen=True)
class AssetOutcome:
    strategy: str
    asset: FetchedAsset | None = None
    reason: str | None = None
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.asset is not None

    @classmethod
    def failed(cls, strategy: str, reason: str, status_code: int | None = None) -> "AssetOutcome":
        return cls(strategy=strategy, reason=reason, status_code=status_code)


def response_headers(asset: FetchedAsset) -> dict[str, str]:
    """Upstream headers with the fixed CORS headers laid over them."""
    headers = {k: v for k, v in asset.headers.items() if k.lower() not in _SKIPPED_HEADERS}
    # Drop any upstream spelling of a CORS header before overlaying ours.
    overlay = {k.lower() for k in CORS_HEADERS}
    headers = {k: v for k, v in headers.items() if k.lower() not in overlay}
    headers.update(CORS_HEADERS)
    return headers


async def fetch_url(http: httpx.AsyncClient, url: str, strategy: str) -> AssetOutcome:
    try:
        resp = await http.get(url)
    except httpx.HTTPError as exc:
        logger.warning("%s fetch failed: %s", strategy, exc)
        return AssetOutcome.failed(strategy, f"transport error: {exc}")
    if not resp.is_success:
        logger.warning("%s fetch returned %s", strategy, resp.status_code)
        return AssetOutcome.failed(strategy, f"upstream status {resp.status_code}", resp.status_code)
    return AssetOutcome(strategy=strategy, asset=FetchedAsset(body=resp.content, headers=dict(resp.headers)))


class AssetStrategy(Protocol):
    name: str

    async def attempt(self, ref: AssetRef, http: httpx.AsyncClient) -> AssetOutcome: ...


class SignedUrlStrategy:
    name = "signed_url"

    def __init__(self, store: ObjectStore, expires_in: int = 60 * 60) -> None:
        self.store = store
        self.expires_in = expires_in

    async def attempt(self, ref: AssetRef, http: httpx.AsyncClient) -> AssetOutcome:
        try:
            url = await self.store.create_signed_url(ref.bucket, ref.path, self.expires_in)
        except UpstreamError as exc:
            logger.warning("signed URL unavailable for %s/%s: %s", ref.bucket, ref.path, exc)
            return AssetOutcome.failed(self.name, str(exc), exc.status_code)
        if not url:
            return AssetOutcome.failed(self.name, "no signed URL issued")
        return await fetch_url(http, url, self.name)


class PublicUrlStrategy:
    name = "public_url"

    def __init__(self, store: ObjectStore) -> None:
        self.store = store

    async def attempt(self, ref: AssetRef, http: httpx.AsyncClient) -> AssetOutcome:
        try:
            url = await self.store.get_public_url(ref.bucket, ref.path)
        except UpstreamError as exc:
            logger.warning("public URL unavailable for %s/%s: %s", ref.bucket, ref.path, exc)
            return AssetOutcome.failed(self.name, str(exc), exc.status_code)
        if not url:
            return AssetOutcome.failed(self.name, "no public URL available")
        return await fetch_url(http, url, self.name)


@dataclass
class AssetResolver:
    """Evaluates strategies in order; the first success wins."""

    http: httpx.AsyncClient
    strategies: list[AssetStrategy] = field(default_factory=list)
    default_bucket: str = DEFAULT_BUCKET

    @classmethod
    def signed_then_public(
        cls,
        store: ObjectStore,
        http: httpx.AsyncClient,
        expires_in: int = 60 * 60,
        default_bucket: str = DEFAULT_BUCKET,
    ) -> "AssetResolver":
        return cls(
            http=http,
            strategies=[SignedUrlStrategy(store, expires_in), PublicUrlStrategy(store)],
            default_bucket=default_bucket,
        )

    def ref(self, path: str, bucket: str | None = None) -> AssetRef:
        return AssetRef(bucket=bucket or self.default_bucket, path=path)

    async def resolve(self, ref: AssetRef) -> list[AssetOutcome]:
        """Return every outcome tried; the last one is the success, if any."""
        outcomes: list[AssetOutcome] = []
        for strategy in self.strategies:
            outcome = await strategy.attempt(ref, self.http)
            outcomes.append(outcome)
            if outcome.ok:
                break
        return outcomes
