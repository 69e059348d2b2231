"""Optional external analysis paragraphs from a text-generation model."""

from __future__ import annotations

import logging
import os
import re
from typing import Protocol

from openai import OpenAI, OpenAIError

from common.config import SynthesisConfig
from synthesize_stories.instructions import ANALYSIS_INSTRUCTIONS, ANALYSIS_PROMPT_TEMPLATE

logger = logging.getLogger(__name__)

MAX_PARAGRAPHS = 2
_PARAGRAPH_SPLIT = re.compile(r"\n\s*\n+")


class AnalysisError(RuntimeError):
    """The external analysis could not be produced."""


class AnalysisGenerator(Protocol):
    def generate_analysis(self, text: str, max_tokens: int) -> list[str]:
        """Return short neutral paragraphs about text, or raise AnalysisError."""
        ...


def split_paragraphs(content: str | None) -> list[str]:
    if not content:
        return []
    paragraphs = [p.strip() for p in _PARAGRAPH_SPLIT.split(content.strip())]
    return [p for p in paragraphs if p][:MAX_PARAGRAPHS]


class OpenAIAnalysisGenerator:
    """AnalysisGenerator backed by the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        timeout: float = 20.0,
        temperature: float = 0.3,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def generate_analysis(self, text: str, max_tokens: int) -> list[str]:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": ANALYSIS_INSTRUCTIONS},
                    {"role": "user", "content": ANALYSIS_PROMPT_TEMPLATE.format(snippets=text)},
                ],
                max_tokens=max_tokens,
                temperature=self.temperature,
            )
        except OpenAIError as exc:
            raise AnalysisError(f"OpenAI request failed: {exc}") from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError) as exc:
            raise AnalysisError("Malformed OpenAI response") from exc

        paragraphs = split_paragraphs(content)
        if not paragraphs:
            raise AnalysisError("Empty OpenAI response")
        return paragraphs


def get_analysis_generator(config: SynthesisConfig) -> OpenAIAnalysisGenerator | None:
    """Return a generator if OPENAI_API_KEY is set, otherwise None."""
    api_key = (os.environ.get("OPENAI_API_KEY") or "").strip()
    if not api_key:
        logger.info("OPENAI_API_KEY not set, using heuristic analysis only")
        return None
    return OpenAIAnalysisGenerator(
        api_key=api_key,
        model=config.model,
        timeout=config.timeout_seconds,
        temperature=config.temperature,
    )
