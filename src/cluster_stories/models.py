"""Data models for the cluster_stories stage."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class DocumentTokens:
    """Normalized token sets for one document title."""

    tokens: frozenset[str]
    keys: frozenset[str]
    entities: frozenset[str]


@dataclass
class StoryRecord:
    """A cluster of documents with its derived identity and display fields."""

    id: str
    title: str
    topic: str
    region: str
    representative_id: str
    member_ids: list[str] = field(default_factory=list)


@dataclass
class ClusteringResult:
    stories_created: int = 0
    documents_assigned: int = 0
    clusters_updated: int = 0
