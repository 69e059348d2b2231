"""Sentence, quote and role extraction from story text."""

from __future__ import annotations

import re

from load_documents.models import Document
from synthesize_stories.models import AttributedQuote

MAX_FACTUAL_BLOCKS = 6
MIN_SENTENCE_LENGTH = 30
MAX_SENTENCE_LENGTH = 400
MAX_FALLBACK_SENTENCE_LENGTH = 300
DEDUPE_PREFIX_LENGTH = 80
DEDUPE_WORD_OVERLAP = 0.8
MAX_QUOTES = 5

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_WHITESPACE = re.compile(r"\s+")
_HAS_DIGIT = re.compile(r"\d")
_HAS_DATE = re.compile(
    r"\b(?:19|20)\d{2}\b"
    r"|\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)\.?\s+\d{1,2}"
    r"|\b\d{1,2}\s+(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)",
    re.IGNORECASE,
)
_HAS_PROPER_PHRASE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)+\b")

_SPEECH_VERBS = r"(?:said|stated|argued|explained|told|added|noted)"
QUOTE_THEN_ATTRIBUTION = re.compile(
    rf'"([^"]{{20,}}?)"(?:,\s*)?\s+{_SPEECH_VERBS}\s+([^."]+)', re.IGNORECASE
)
ATTRIBUTION_THEN_QUOTE = re.compile(
    rf'([^."]{{3,60}}?)\s+{_SPEECH_VERBS}\s+"([^"]{{20,}})"', re.IGNORECASE
)
ACCORDING_TO_QUOTE = re.compile(r'according to\s+([^,."]+).*?"([^"]{20,})"', re.IGNORECASE)

ROLE_RULES = [
    (re.compile(r"\bpresident\b", re.IGNORECASE), "Policy Maker"),
    (
        re.compile(
            r"(?:\b(?:senator|representative|governor|congressman|congresswoman)\b|\brep\.)",
            re.IGNORECASE,
        ),
        "Elected Official",
    ),
    (re.compile(r"\b(?:analyst|researcher|economist|expert)\b", re.IGNORECASE), "Independent Analyst"),
    (
        re.compile(r"\b(?:official|spokesperson|spokesman|spokeswoman)\b", re.IGNORECASE),
        "Government Official",
    ),
    (
        re.compile(r"^(?:reuters|ap|bbc|cnn|npr|the guardian|politico|bloomberg)\b", re.IGNORECASE),
        "News Outlet",
    ),
]
DEFAULT_ROLE = "Source"


def split_sentences(text: str) -> list[str]:
    collapsed = _WHITESPACE.sub(" ", text).strip()
    if not collapsed:
        return []
    return [s.strip() for s in _SENTENCE_SPLIT.split(collapsed) if s.strip()]


def _normalize_sentence(text: str) -> str:
    return _WHITESPACE.sub(" ", text.lower())


def _is_near_duplicate(candidate: str, kept: list[str]) -> bool:
    prefix = _normalize_sentence(candidate)[:DEDUPE_PREFIX_LENGTH]
    candidate_words = candidate.lower().split()
    for existing in kept:
        if _normalize_sentence(existing)[:DEDUPE_PREFIX_LENGTH] == prefix:
            return True
        existing_words = existing.lower().split()
        candidate_set = set(candidate_words)
        shared = sum(1 for w in existing_words if w in candidate_set)
        if shared / max(len(existing_words), len(candidate_words)) >= DEDUPE_WORD_OVERLAP:
            return True
    return False


def _has_factual_cue(sentence: str) -> bool:
    return bool(
        _HAS_DIGIT.search(sentence)
        or _HAS_DATE.search(sentence)
        or _HAS_PROPER_PHRASE.search(sentence)
    )


def extract_factual_sentences(documents: list[Document]) -> list[str]:
    """Up to six distinct sentences carrying numbers, dates or proper names.

    Falls back to the first plain summary sentences of reasonable length when none qualify.
    """
    combined = " ".join(f"{d.title}. {d.summary}" for d in documents)
    sentences = split_sentences(combined)

    kept: list[str] = []
    for sentence in sentences:
        if not MIN_SENTENCE_LENGTH <= len(sentence) <= MAX_SENTENCE_LENGTH:
            continue
        if not _has_factual_cue(sentence) or _is_near_duplicate(sentence, kept):
            continue
        kept.append(sentence)
        if len(kept) >= MAX_FACTUAL_BLOCKS:
            break

    if kept:
        return kept
    # Titles are not reused as plain factual statements.
    summary_sentences = split_sentences(" ".join(d.summary for d in documents))
    return [
        s for s in summary_sentences if MIN_SENTENCE_LENGTH <= len(s) <= MAX_FALLBACK_SENTENCE_LENGTH
    ][:MAX_FACTUAL_BLOCKS]


def normalize_quotes(text: str) -> str:
    """Replace typographic double quotes with plain ones."""
    return text.replace("“", '"').replace("”", '"').replace("‟", '"')


def extract_quotes(text: str, limit: int = MAX_QUOTES) -> list[AttributedQuote]:
    """Quoted spans (20+ chars) with an attribution (3+ chars), deduplicated.

    Never produces a quote that is not literally present between double quotes.
    """
    text = normalize_quotes(text)
    results: list[AttributedQuote] = []
    seen: set[tuple[str, str]] = set()

    def add(quote: str, attribution: str) -> None:
        quote, attribution = quote.strip(), attribution.strip()
        if len(quote) < 20 or len(attribution) < 3:
            return
        key = (quote[:50], attribution)
        if key not in seen:
            seen.add(key)
            results.append(AttributedQuote(quote=quote, attribution=attribution))

    for match in QUOTE_THEN_ATTRIBUTION.finditer(text):
        add(match.group(1), match.group(2))
    for match in ATTRIBUTION_THEN_QUOTE.finditer(text):
        add(match.group(2), match.group(1))
    for match in ACCORDING_TO_QUOTE.finditer(text):
        add(match.group(2), match.group(1))

    return results[:limit]


def infer_role(attribution: str) -> str:
    for pattern, role in ROLE_RULES:
        if pattern.search(attribution):
            return role
    return DEFAULT_ROLE
