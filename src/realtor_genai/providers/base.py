from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class ChatPrompt:
    system: str
    user: str


class CompletionClient(Protocol):
    name: str

    async def complete(self, prompt: ChatPrompt, temperature: float, max_tokens: int) -> str:
        """Return the text of a single completion, or raise UpstreamError."""
        ...


class ObjectStore(Protocol):
    name: str

    async def create_signed_url(self, bucket: str, path: str, expires_in: int) -> str | None: ...

    async def get_public_url(self, bucket: str, path: str) -> str | None: ...

    async def upload(self, bucket: str, path: str, content: bytes, content_type: str) -> None: ...

    async def remove(self, bucket: str, paths: list[str]) -> None: ...


class Database(Protocol):
    # Matches the supabase client's query-builder entry point.
    def table(self, table_name: str) -> Any: ...
