"""
Shared data models used across the application.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class DatasetEntry:
    """Single profile record loaded from a dataset file."""

    id: int
    name: str
    title: str
    summary: str
    skills: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "summary": self.summary,
            "skills": list(self.skills),
        }


@dataclass(frozen=True)
class EmbeddedEntry:
    """Dataset entry together with the vector returned by the embedding service."""

    entry: DatasetEntry
    embedding: Tuple[float, ...]


@dataclass(frozen=True)
class MatchResult:
    """Best-scoring target entry for one source entry."""

    source: EmbeddedEntry
    match: EmbeddedEntry
    score: float


@dataclass(frozen=True)
class ComparisonResult:
    """Matched pair with its similarity score and generated diff summary."""

    entry_a: DatasetEntry
    match: DatasetEntry
    similarity_score: float
    diff_summary: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "entryA": self.entry_a.to_dict(),
            "match": self.match.to_dict(),
            "similarityScore": self.similarity_score,
            "diffSummary": self.diff_summary,
        }


@dataclass(frozen=True)
class ComparisonReport:
    """Final output of a comparison run."""

    comparison_date: str
    total_comparisons: int
    results: Tuple[ComparisonResult, ...]

    @property
    def average_similarity(self) -> float:
        if not self.results:
            return 0.0
        return sum(r.similarity_score for r in self.results) / len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "comparisonDate": self.comparison_date,
            "totalComparisons": self.total_comparisons,
            "results": [result.to_dict() for result in self.results],
        }
