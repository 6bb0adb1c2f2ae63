from __future__ import annotations
from functools import lru_cache
from typing import Protocol
from openai import OpenAI

from app.core.config import settings
from app.core.errors import GenerationFailedError
from app.core.logging import get_logger

logger = get_logger(__name__)

SYSTEM_INSTRUCTION = "You are a book shop assistant who generates book descriptions."


class TextGenerator(Protocol):
    """Anything that turns a system instruction and a prompt into text."""

    def generate(self, system: str, prompt: str, max_tokens: int) -> str: ...


class OpenAITextGenerator:
    """
    Chat-completions backed generator.
    The client is built on first use so a missing API key surfaces as a
    generation failure instead of breaking application startup.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gpt-3.5-turbo",
        timeout: float = 30.0,
    ):
        self.api_key: str | None = api_key
        self.model: str = model
        self.timeout: float = timeout
        self._client: OpenAI | None = None

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout, max_retries=0)
        return self._client

    def generate(self, system: str, prompt: str, max_tokens: int) -> str:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            max_tokens=max_tokens,
        )
        if not completion.choices:
            raise ValueError("completion has no choices")
        content = completion.choices[0].message.content
        if content is None:
            raise ValueError("completion has no content")
        return content


class DescriptionGenerator:
    def __init__(self, generator: TextGenerator, max_tokens: int = 100):
        self.generator: TextGenerator = generator
        self.max_tokens: int = max_tokens

    def generate_description(self, prompt_text: str) -> str:
        """Return the provider's text verbatim, or raise GenerationFailedError."""
        try:
            return self.generator.generate(SYSTEM_INSTRUCTION, prompt_text, self.max_tokens)
        except Exception as exc:
            logger.exception("Error communicating with text provider")
            raise GenerationFailedError() from exc


@lru_cache()
def get_description_generator() -> DescriptionGenerator:
    generator = OpenAITextGenerator(
        api_key=settings.OPENAI_API_KEY,
        model=settings.OPENAI_MODEL,
        timeout=settings.OPENAI_TIMEOUT,
    )
    return DescriptionGenerator(generator, max_tokens=settings.DESCRIPTION_MAX_TOKENS)
