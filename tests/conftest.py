from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from realtor_genai.api.app import Services, create_app
from realtor_genai.assets import AssetResolver
from realtor_genai.copywriting.generator import CopyGenerator
from realtor_genai.errors import UpstreamError
from realtor_genai.images import ImageStore
from realtor_genai.storage import ProjectStore


class FakeCompletionClient:
    name = "fake"

    def __init__(self, replies: list[str] | None = None, fail_on: int | None = None) -> None:
        self.replies = replies
        self.fail_on = fail_on
        self.calls: list[dict[str, Any]] = []

    async def complete(self, prompt, temperature: float, max_tokens: int) -> str:
        index = len(self.calls)
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_tokens": max_tokens})
        if self.fail_on is not None and index == self.fail_on:
            raise UpstreamError("OpenAI API error: 500", status_code=500)
        if self.replies is not None:
            return self.replies[index]
        return f"  variation {index + 1}  \n"


class FakeObjectStore:
    name = "fake"

    def __init__(self, signed_url: str | None = None, public_url: str | None = None, signed_error: bool = False):
        self.signed_url = signed_url
        self.public_url = public_url
        self.signed_error = signed_error
        self.calls: list[tuple[str, str, str]] = []
        self.uploaded: dict[tuple[str, str], tuple[bytes, str]] = {}

    async def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str | None:
        self.calls.append(("signed", bucket, path))
        if self.signed_error:
            raise UpstreamError("Object not found", status_code=400)
        return self.signed_url

    async def get_public_url(self, bucket: str, path: str) -> str | None:
        self.calls.append(("public", bucket, path))
        return self.public_url

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> None:
        self.calls.append(("upload", bucket, path))
        self.uploaded[(bucket, path)] = (content, content_type)

    async def remove(self, bucket: str, paths: list[str]) -> None:
        for path in paths:
            self.calls.append(("remove", bucket, path))


class FakeUpstream:
    """Serves canned responses by URL through httpx.MockTransport."""

    def __init__(self, routes: dict[str, httpx.Response] | None = None) -> None:
        self.routes = routes or {}
        self.requested: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requested.append(url)
        return self.routes.get(url, httpx.Response(404, text="not found"))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class FakeQuery:
    def __init__(self, db: "FakeDatabase", table: str) -> None:
        self.db = db
        self.table = table
        self.ops: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name: str):
        def op(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self

        return op

    def execute(self):
        self.db.executed.append((self.table, self.ops))
        if self.db.error is not None:
            raise self.db.error
        return SimpleNamespace(data=self.db.rows.get(self.table, []))


class FakeDatabase:
    def __init__(self, rows: dict[str, list[dict[str, Any]]] | None = None, error: Exception | None = None):
        self.rows = rows or {}
        self.error = error
        self.executed: list[tuple[str, list]] = []

    def table(self, table_name: str) -> FakeQuery:
        return FakeQuery(self, table_name)

    def ops_for(self, table: str) -> list[list[tuple[str, tuple, dict]]]:
        return [ops for name, ops in self.executed if name == table]


@pytest.fixture
def completions() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore(
        signed_url="https://storage.test/signed/property-images/house.jpg?token=abc",
        public_url="https://storage.test/public/property-images/house.jpg",
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def database() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def services(completions, object_store, upstream, database) -> Services:
    return Services(
        copywriter=CopyGenerator(completions, max_tokens=800),
        assets=AssetResolver.signed_then_public(object_store, upstream.client()),
        images=ImageStore(object_store),
        store=ProjectStore(database),
    )


@pytest.fixture
def client(services) -> TestClient:
    return TestClient(create_app(services=services))
