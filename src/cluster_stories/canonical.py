"""Story identity and display fields derived from cluster membership."""

from __future__ import annotations

from common.hashing import generate_story_id
from cluster_stories.models import StoryRecord
from cluster_stories.normalize import normalize_title, normalize_tokens
from load_documents.models import Document


def pick_canonical_title(documents: list[Document]) -> str:
    """Pick the title that recurs most across sources, then the most descriptive one.

    Each distinct normalized title scores count * 10 plus the token count of
    its first original title; the first highest score wins.
    """
    counts: dict[str, int] = {}
    originals: dict[str, Document] = {}
    for document in documents:
        normalized = normalize_title(document.title, document.publisher)
        if not normalized:
            continue
        counts[normalized] = counts.get(normalized, 0) + 1
        originals.setdefault(normalized, document)

    best = documents[0].title
    best_score = 0
    for normalized, count in counts.items():
        original = originals[normalized]
        score = count * 10 + len(normalize_tokens(original.title, original.publisher))
        if score > best_score:
            best_score = score
            best = original.title
    return best


def pick_representative(documents: list[Document]) -> Document:
    """The most recently published member; earliest in order on ties."""
    return max(documents, key=lambda d: d.published_at.isoformat())


def build_story(documents: list[Document]) -> StoryRecord:
    """Derive a StoryRecord from a non-empty cluster."""
    if not documents:
        raise ValueError("Cannot build a story from an empty cluster")

    member_ids = [document.id for document in documents]
    return StoryRecord(
        id=generate_story_id(member_ids),
        title=pick_canonical_title(documents),
        topic=documents[0].topic,
        region=documents[0].region,
        representative_id=pick_representative(documents).id,
        member_ids=member_ids,
    )
