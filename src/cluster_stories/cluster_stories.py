"""Partition documents into stories by bounded breadth-first expansion."""

from __future__ import annotations

import logging
from collections import deque
from typing import Iterable

from cluster_stories.models import DocumentTokens
from cluster_stories.normalize import entity_tokens, key_tokens, tokenize
from cluster_stories.similarity import MAX_CLUSTER_SIZE, is_similar
from load_documents.models import Document

logger = logging.getLogger(__name__)

DEFAULT_POOL_SIZE = 200


class TokenCache:
    """Per-run memo of document token sets, keyed by document ID."""

    def __init__(self) -> None:
        self._tokens: dict[str, DocumentTokens] = {}

    def get(self, document: Document) -> DocumentTokens:
        cached = self._tokens.get(document.id)
        if cached is None:
            cached = DocumentTokens(
                tokens=frozenset(tokenize(document.title, document.publisher)),
                keys=frozenset(key_tokens(document.title, document.publisher)),
                entities=frozenset(entity_tokens(document.title, document.publisher)),
            )
            self._tokens[document.id] = cached
        return cached

    def __len__(self) -> int:
        return len(self._tokens)


def group_documents(documents: Iterable[Document]) -> dict[tuple[str, str], list[Document]]:
    """Group documents by (topic, region), most recent first within each group."""
    groups: dict[tuple[str, str], list[Document]] = {}
    for document in documents:
        groups.setdefault((document.topic, document.region), []).append(document)
    for group in groups.values():
        # Stable, so equal timestamps keep input order.
        group.sort(key=lambda d: d.published_at, reverse=True)
    return groups


def _expand(
    seed: Document,
    pool: list[Document],
    assigned: set[str],
    cache: TokenCache,
) -> list[Document]:
    cluster = [seed]
    assigned.add(seed.id)
    queue = deque([seed])

    while queue and len(cluster) < MAX_CLUSTER_SIZE:
        current = cache.get(queue.popleft())
        for other in pool:
            if other.id in assigned:
                continue
            other_tokens = cache.get(other)
            if not other_tokens.tokens:
                continue
            if is_similar(current, other_tokens, len(cluster)):
                cluster.append(other)
                assigned.add(other.id)
                queue.append(other)
                if len(cluster) >= MAX_CLUSTER_SIZE:
                    break
    return cluster


def cluster_group(
    group: list[Document],
    pool_size: int = DEFAULT_POOL_SIZE,
    cache: TokenCache | None = None,
) -> list[list[Document]]:
    """Cluster one (topic, region) group.

    Only the first pool_size documents are compared; the rest become singletons.
    Documents whose titles have no tokens are never compared and stay singletons.
    """
    cache = cache or TokenCache()
    pool = group[:pool_size]
    overflow = group[pool_size:]

    clusters: list[list[Document]] = []
    assigned: set[str] = set()
    for document in pool:
        if document.id in assigned:
            continue
        if not cache.get(document).tokens:
            assigned.add(document.id)
            clusters.append([document])
            continue
        clusters.append(_expand(document, pool, assigned, cache))

    clusters.extend([document] for document in overflow if document.id not in assigned)
    return clusters


def cluster_documents(
    documents: list[Document],
    pool_size: int = DEFAULT_POOL_SIZE,
) -> list[list[Document]]:
    """
    Partition documents into clusters describing the same event.

    Every document lands in exactly one cluster. Members of a cluster always
    share topic and region, and no cluster exceeds MAX_CLUSTER_SIZE.

    Args:
        documents: Candidate documents, already deduplicated by ID.
        pool_size: Maximum documents compared pairwise within one group.

    Returns:
        List of clusters, each a non-empty list of documents (founder first).
    """
    if not documents:
        logger.warning("No documents to cluster")
        return []

    unique: dict[str, Document] = {}
    for document in documents:
        unique.setdefault(document.id, document)

    groups = group_documents(unique.values())
    cache = TokenCache()
    clusters: list[list[Document]] = []
    for (topic, region), group in groups.items():
        group_clusters = cluster_group(group, pool_size=pool_size, cache=cache)
        logger.debug(
            "Group %s/%s: %d documents -> %d clusters", topic, region, len(group), len(group_clusters)
        )
        clusters.extend(group_clusters)

    multi = sum(1 for cluster in clusters if len(cluster) > 1)
    logger.info(
        "Built %d clusters from %d documents in %d groups (%d with multiple documents)",
        len(clusters),
        len(unique),
        len(groups),
        multi,
    )
    return clusters
