"""Lexical normalization of headlines into comparable token sets.

All functions are pure and case-insensitive; normalizing already-normalized
text returns the same tokens.
"""

from __future__ import annotations

import re

STOPWORDS = frozenset({
    "a", "an", "the", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "as", "is", "was", "are", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "must", "shall", "can", "need",
    "that", "which", "who", "whom", "this", "these", "those", "it", "its",
})

# Generic journalism words that say nothing about the event itself.
FLUFF = frozenset({
    "breaking", "live", "update", "updates", "latest", "exclusive", "analysis", "opinion",
    "explainer", "watch", "video", "podcast", "photos", "why", "how", "what", "says", "said",
    "report", "reports", "amid", "after", "before", "new", "today",
})

# Capitalized words too common in headlines to identify an entity.
GENERIC_ENTITIES = frozenset({
    "state", "states", "court", "courts", "congress", "house", "government", "city",
    "county", "department", "federal", "national", "president", "officials", "official",
    "people", "world", "news", "report", "year", "week", "day", "new", "first",
    "amid", "after", "over", "says", "said", "live", "breaking", "update",
})

# Well-known people, organizations, places and policies.
SEED_ENTITIES = frozenset({
    "trump", "biden", "harris", "vance", "obama", "shapiro", "fetterman", "mccormick",
    "casey", "pelosi", "schumer", "mcconnell", "johnson", "musk", "powell", "putin",
    "zelensky", "netanyahu", "xi", "nato", "opec", "fbi", "cia", "doj", "epa", "irs",
    "sec", "fed", "fema", "pentagon", "kremlin", "scotus", "un", "eu",
    "ukraine", "russia", "china", "israel", "gaza", "iran", "mexico", "canada",
    "pennsylvania", "harrisburg", "philadelphia", "pittsburgh", "washington",
    "medicaid", "medicare", "obamacare", "doge", "tariff", "tariffs",
})

# Outlet names that may trail a headline after a separator, compared lowercased.
KNOWN_OUTLETS = frozenset({
    "reuters", "ap", "ap news", "associated press", "afp", "bbc", "bbc news", "cnn",
    "npr", "politico", "bloomberg", "axios", "the hill", "fox news", "nbc news",
    "abc news", "cbs news", "the guardian", "the new york times", "the washington post",
    "the wall street journal", "wsj", "usa today", "al jazeera", "spotlight pa",
})

# Last words that mark a trailing segment as an outlet name ("Philadelphia Inquirer").
OUTLET_SUFFIXES = frozenset({
    "news", "times", "post", "journal", "tribune", "herald", "gazette", "inquirer",
    "chronicle", "wire", "radio", "tv",
})
MAX_OUTLET_WORDS = 4

_TAG_SEPARATOR = re.compile(r"\s+[|\-–—]\s+")
_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")
_CAPITALIZED_WORD = re.compile(r"\b[A-Z][a-z][\w'’]*")
_ACRONYM = re.compile(r"\b[A-Z]{2,5}\b")


def is_outlet_name(segment: str, publisher: str | None = None) -> bool:
    """Whether a trailing title segment names the publisher or a news outlet."""
    name = _WHITESPACE.sub(" ", segment).strip().lower()
    if not name:
        return False
    if publisher and name == _WHITESPACE.sub(" ", publisher).strip().lower():
        return True
    if name in KNOWN_OUTLETS:
        return True
    words = name.split(" ")
    return len(words) <= MAX_OUTLET_WORDS and words[-1] in OUTLET_SUFFIXES


def strip_publisher_tag(title: str, publisher: str | None = None) -> str:
    """Drop a trailing "| Outlet" or "- Outlet News" segment; other subtitles are kept."""
    title = (title or "").strip()
    separators = list(_TAG_SEPARATOR.finditer(title))
    if not separators:
        return title
    last = separators[-1]
    if is_outlet_name(title[last.end():], publisher):
        return title[:last.start()].strip()
    return title


def normalize_tokens(title: str, publisher: str | None = None) -> list[str]:
    """Lowercased content tokens of a title, in order."""
    text = strip_publisher_tag(title, publisher).lower()
    text = _WHITESPACE.sub(" ", _NON_WORD.sub(" ", text)).strip()
    return [w for w in text.split(" ") if len(w) > 1 and w not in STOPWORDS]


def normalize_title(title: str, publisher: str | None = None) -> str:
    return " ".join(normalize_tokens(title, publisher))


def tokenize(title: str, publisher: str | None = None) -> set[str]:
    return set(normalize_tokens(title, publisher))


def key_tokens(title: str, publisher: str | None = None) -> set[str]:
    """Longer, more distinctive tokens (length >= 5, excluding fluff)."""
    return {t for t in normalize_tokens(title, publisher) if len(t) >= 5 and t not in FLUFF}


def entity_tokens(title: str, publisher: str | None = None) -> set[str]:
    """Tokens that look like names: capitalized words, acronyms and seed entities."""
    stripped = strip_publisher_tag(title, publisher)
    tokens = set(normalize_tokens(stripped))

    candidates: set[str] = set()
    for pattern in (_CAPITALIZED_WORD, _ACRONYM):
        for match in pattern.finditer(stripped):
            candidates.update(normalize_tokens(match.group(0)))
    candidates -= FLUFF
    candidates.update(tokens & SEED_ENTITIES)
    return candidates - GENERIC_ENTITIES
