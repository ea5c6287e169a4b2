"""
Core pipeline coordinating embedding, matching, and diff summarization.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Sequence

from batching import BatchConfig
from data_models import ComparisonReport, DatasetEntry, EmbeddedEntry, MatchResult
from diff_summary import summarize_matches
from embedding import embed_entries
from llm_handler import CompletionService, EmbeddingService
from reporting import build_report
from similarity import find_best_match

LOGGER = logging.getLogger(__name__)


def match_entries(
    sources: Sequence[EmbeddedEntry], targets: Sequence[EmbeddedEntry]
) -> List[MatchResult]:
    """
    Match every source entry to its most similar target entry.

    Args:
        sources: Embedded entries of the source dataset.
        targets: Embedded entries of the target dataset.

    Returns:
        One MatchResult per source entry, in source order.

    Raises:
        NoMatchError: If targets is empty and sources is not.
    """
    return [find_best_match(source, targets) for source in sources]


class DatasetComparator:
    """Runs the embed, match, and summarize stages over two datasets."""

    def __init__(
        self,
        embedder: EmbeddingService,
        completer: CompletionService,
        batch_config: BatchConfig,
        diff_max_tokens: int = 200,
        diff_temperature: float = 0.3,
        sleep=asyncio.sleep,
    ) -> None:
        """
        Initialize the comparator.

        Args:
            embedder: Embedding provider.
            completer: Completion provider for diff summaries.
            batch_config: Batch size and inter-batch delay for both remote stages.
            diff_max_tokens: Output token limit for each diff summary.
            diff_temperature: Sampling temperature for diff summaries.
            sleep: Pause implementation used between batches.
        """
        self.embedder = embedder
        self.completer = completer
        self.batch_config = batch_config
        self.diff_max_tokens = diff_max_tokens
        self.diff_temperature = diff_temperature
        self._sleep = sleep

    @classmethod
    def from_settings(cls, settings, client) -> "DatasetComparator":
        return cls(
            embedder=client,
            completer=client,
            batch_config=settings.batch_config,
            diff_max_tokens=settings.diff_max_tokens,
            diff_temperature=settings.diff_temperature,
        )

    async def run(
        self, dataset_a: Sequence[DatasetEntry], dataset_b: Sequence[DatasetEntry]
    ) -> ComparisonReport:
        """
        Execute the comparison pipeline.

        Args:
            dataset_a: Source entries; the report has one result per entry.
            dataset_b: Target entries searched for each source entry.

        Returns:
            The assembled ComparisonReport.
        """
        LOGGER.info("Generating embeddings for datasetA (%d entries)...", len(dataset_a))
        embedded_a = await embed_entries(dataset_a, self.embedder, self.batch_config, sleep=self._sleep)

        LOGGER.info("Generating embeddings for datasetB (%d entries)...", len(dataset_b))
        embedded_b = await embed_entries(dataset_b, self.embedder, self.batch_config, sleep=self._sleep)

        LOGGER.info("Finding best matches...")
        matches = match_entries(embedded_a, embedded_b)
        for match in matches:
            LOGGER.debug(
                "Entry %s matched %s (score %.4f)",
                match.source.entry.id,
                match.match.entry.id,
                match.score,
            )

        LOGGER.info("Generating diff summaries...")
        results = await summarize_matches(
            matches,
            self.completer,
            self.batch_config,
            max_tokens=self.diff_max_tokens,
            temperature=self.diff_temperature,
            sleep=self._sleep,
        )

        return build_report(results)
