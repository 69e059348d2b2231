"""Build structured story detail from member documents."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed

from load_documents.models import Document
from synthesize_stories.analysis import AnalysisGenerator
from synthesize_stories.extract import (
    MAX_QUOTES,
    extract_factual_sentences,
    extract_quotes,
    infer_role,
)
from synthesize_stories.models import ContentBlock, QuotedVoice, SynthesisResult

logger = logging.getLogger(__name__)

MAX_OPINION_BLOCKS = 3
DEFAULT_MAX_INPUT_CHARS = 4000
DEFAULT_MAX_TOKENS = 300
WHAT_TO_WATCH = (
    "What to watch: Developments may continue as more information becomes available. "
    "Check back for updates from primary sources."
)


def heuristic_analysis(documents: list[Document]) -> list[str]:
    """Placeholder interpretation used when no external analysis is available."""
    first_title = documents[0].title if documents else ""
    topic_hint = " ".join(first_title.split()[:5]) or "this story"
    return [
        f"Coverage from {len(documents)} sources. Multiple outlets are reporting on {topic_hint}.",
        WHAT_TO_WATCH,
    ]


def build_analysis_input(documents: list[Document], max_chars: int = DEFAULT_MAX_INPUT_CHARS) -> str:
    return "\n\n".join(f"[{d.publisher}] {d.summary}" for d in documents)[:max_chars]


def _external_analysis(
    documents: list[Document],
    analysis: AnalysisGenerator,
    max_input_chars: int,
    max_tokens: int,
) -> list[str]:
    """Paragraphs from the external generator, or [] on any failure."""
    try:
        paragraphs = analysis.generate_analysis(build_analysis_input(documents, max_input_chars), max_tokens)
    except Exception as exc:
        logger.warning("External analysis failed, keeping heuristic analysis: %s", exc)
        return []
    if not isinstance(paragraphs, list):
        logger.warning("External analysis returned %s, keeping heuristic analysis", type(paragraphs).__name__)
        return []
    return [p.strip() for p in paragraphs if isinstance(p, str) and p.strip()][:2]


def synthesize_story_detail(
    documents: list[Document],
    analysis: AnalysisGenerator | None = None,
    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> SynthesisResult:
    """
    Build ordered content blocks and quoted voices for a story.

    Factual blocks come first, then opinion blocks (only for real attributed
    quotes), then interpretation blocks. When an analysis generator is given
    and succeeds, its paragraphs replace the heuristic interpretation; any
    failure silently keeps the heuristic blocks.

    Args:
        documents: Story member documents.
        analysis: Optional external analysis generator.
        max_input_chars: Cap on the text sent to the generator.
        max_tokens: Token budget for the generator.

    Returns:
        SynthesisResult (empty for an empty story).
    """
    if not documents:
        return SynthesisResult()

    blocks = [ContentBlock(type="factual", text=s) for s in extract_factual_sentences(documents)]

    quotes = extract_quotes(" ".join(d.summary for d in documents), limit=MAX_QUOTES)
    blocks.extend(
        ContentBlock(type="opinion", text=q.quote, attribution=q.attribution)
        for q in quotes[:MAX_OPINION_BLOCKS]
    )

    voices: list[QuotedVoice] = []
    seen_names: set[str] = set()
    for quote in quotes:
        if quote.attribution in seen_names:
            continue
        seen_names.add(quote.attribution)
        voices.append(QuotedVoice(name=quote.attribution, role=infer_role(quote.attribution)))

    interpretation = []
    if analysis is not None:
        interpretation = _external_analysis(documents, analysis, max_input_chars, max_tokens)
    used_external = bool(interpretation)
    if not used_external:
        interpretation = heuristic_analysis(documents)
    blocks.extend(ContentBlock(type="interpretation", text=text) for text in interpretation)

    return SynthesisResult(full_content=blocks, quoted_voices=voices, used_external_analysis=used_external)


def synthesize_stories(
    stories: dict[str, list[Document]],
    analysis: AnalysisGenerator | None = None,
    max_workers: int = 4,
    max_input_chars: int = DEFAULT_MAX_INPUT_CHARS,
    max_tokens: int = DEFAULT_MAX_TOKENS,
) -> dict[str, SynthesisResult]:
    """Synthesize many stories in parallel, keyed by story ID.

    Each story is independent; a slow or failed external call affects only its own story.
    """
    if not stories:
        return {}

    results: dict[str, SynthesisResult] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = {
            executor.submit(
                synthesize_story_detail,
                documents,
                analysis,
                max_input_chars,
                max_tokens,
            ): story_id
            for story_id, documents in stories.items()
        }
        for future in as_completed(futures):
            results[futures[future]] = future.result()

    external = sum(1 for r in results.values() if r.used_external_analysis)
    logger.info("Synthesized %d stories (%d with external analysis)", len(results), external)
    return {story_id: results[story_id] for story_id in stories}
