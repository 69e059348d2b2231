"""Size-adaptive adjacency test between two documents.

Thresholds are tuned against downstream display logic; change with care.
"""

from __future__ import annotations

from cluster_stories.models import DocumentTokens

MAX_CLUSTER_SIZE = 25
LARGE_CLUSTER_SIZE = 12

JACCARD_THRESHOLD = 0.27
LARGE_JACCARD_THRESHOLD = 0.45
MIN_SHARED_KEYS = 2
LARGE_MIN_SHARED_KEYS = 3
MIN_SHARED_ENTITIES = 2


def jaccard_similarity(a: set[str] | frozenset[str], b: set[str] | frozenset[str]) -> float:
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    intersection = len(a & b)
    return intersection / (len(a) + len(b) - intersection)


def is_similar(a: DocumentTokens, b: DocumentTokens, cluster_size: int) -> bool:
    """Decide whether b may join a cluster of cluster_size that a belongs to."""
    if cluster_size >= MAX_CLUSTER_SIZE:
        return False

    jaccard = jaccard_similarity(a.tokens, b.tokens)
    shared_keys = len(a.keys & b.keys)
    shared_entities = len(a.entities & b.entities)

    if cluster_size >= LARGE_CLUSTER_SIZE:
        return jaccard >= LARGE_JACCARD_THRESHOLD or (
            shared_keys >= LARGE_MIN_SHARED_KEYS and shared_entities >= 1
        )

    return (
        jaccard >= JACCARD_THRESHOLD
        or shared_keys >= MIN_SHARED_KEYS
        or shared_entities >= MIN_SHARED_ENTITIES
        or (shared_entities >= 1 and shared_keys >= 1)
    )
