from __future__ import annotations

import logging
from typing import Any

from realtor_genai.errors import UpstreamError
from realtor_genai.providers.base import ChatPrompt

logger = logging.getLogger(__name__)


class OpenAIChatProvider:
    name = "openai"

    def __init__(self, api_key: str, model: str, http_client: Any = None) -> None:
        import openai

        self._openai = openai
        # One attempt per call; failures surface to the caller untouched.
        self.client = openai.AsyncOpenAI(api_key=api_key, max_retries=0, http_client=http_client)
        self.model = model

    async def complete(self, prompt: ChatPrompt, temperature: float, max_tokens: int) -> str:
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": prompt.system},
                    {"role": "user", "content": prompt.user},
                ],
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except self._openai.APIStatusError as exc:
            raise UpstreamError(f"OpenAI API error: {exc.status_code}", status_code=exc.status_code) from exc
        except self._openai.APIError as exc:
            raise UpstreamError(f"OpenAI API error: {exc}") from exc

        if not resp.choices:
            raise UpstreamError("OpenAI API returned no choices")
        content = resp.choices[0].message.content or ""
        text = content.strip()
        if not text:
            raise UpstreamError("OpenAI API returned empty content")
        return text

    async def aclose(self) -> None:
        await self.client.close()
