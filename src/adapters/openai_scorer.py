"""Relevance scorer backed by an OpenAI-compatible chat completions API.

Works with OpenAI directly or any compatible gateway (e.g. OpenRouter) via
``base_url``. Retries are disabled: a failed call is degraded by the ranker.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from openai import AsyncOpenAI

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "openai/gpt-4o-mini"


class OpenAIScorer:
    """Scorer adapter: one chat completion per call, returns the reply text."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        base_url: Optional[str] = None,
        client: Any = None,
        temperature: float = 0.2,
        max_tokens: int = 200,
        timeout: float = 30.0,
    ) -> None:
        self._client = client or AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            max_retries=0,
            timeout=timeout,
        )
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def complete(self, system_prompt: str, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=self._temperature,
            max_tokens=self._max_tokens,
        )
        if not response.choices:
            LOGGER.warning("Scorer %s returned no choices", self._model)
            return ""
        return response.choices[0].message.content or ""
