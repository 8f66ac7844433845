from __future__ import annotations

import logging

from realtor_genai.providers.base import ChatPrompt, CompletionClient

logger = logging.getLogger(__name__)

VARIATION_COUNT = 3
BASE_TEMPERATURE = 0.7
TEMPERATURE_STEP = 0.1


def variation_temperature(index: int) -> float:
    # Rounded so the sequence is exactly 0.7, 0.8, 0.9 rather than float drift.
    return round(BASE_TEMPERATURE + TEMPERATURE_STEP * index, 2)


class CopyGenerator:
    """Produces several variants of one prompt with rising temperature.

    Calls are made one after another. The first failing call aborts the run:
    its exception propagates, later calls are never made and no partial list
    is returned.
    """

    def __init__(self, client: CompletionClient, max_tokens: int = 800) -> None:
        self.client = client
        self.max_tokens = max_tokens

    async def generate_variations(
        self,
        prompt: ChatPrompt,
        count: int = VARIATION_COUNT,
        max_tokens: int | None = None,
    ) -> list[str]:
        limit = max_tokens or self.max_tokens
        variations: list[str] = []
        for i in range(count):
            temperature = variation_temperature(i)
            logger.debug("requesting variation %d/%d at temperature %.1f", i + 1, count, temperature)
            text = await self.client.complete(prompt, temperature=temperature, max_tokens=limit)
            variations.append(text.strip())
        return variations
