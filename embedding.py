"""
Embedding stage: attach a vector to every dataset entry.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import List, Sequence

from batching import BatchConfig, run_in_batches
from data_models import DatasetEntry, EmbeddedEntry
from dataset_loader import entry_to_text
from llm_handler import EmbeddingService

LOGGER = logging.getLogger(__name__)


class EmbeddingError(RuntimeError):
    """Raised when the embedding service returns unusable vectors."""


async def embed_entries(
    entries: Sequence[DatasetEntry],
    service: EmbeddingService,
    config: BatchConfig,
    sleep=asyncio.sleep,
) -> List[EmbeddedEntry]:
    """
    Generate embeddings for dataset entries in rate-limited batches.

    Errors from the embedding service are not caught; a single failed
    request aborts the whole stage.

    Args:
        entries: Entries to embed, in dataset order.
        service: Embedding provider.
        config: Batch size and inter-batch delay.
        sleep: Pause implementation passed to the scheduler.

    Returns:
        Embedded entries in the same order as ``entries``.

    Raises:
        EmbeddingError: If a vector is empty, holds NaN or infinity, or
            dimensions differ.
    """

    async def _embed(entry: DatasetEntry) -> EmbeddedEntry:
        vector = await service.embed(entry_to_text(entry))
        return EmbeddedEntry(entry=entry, embedding=tuple(float(v) for v in vector))

    embedded = await run_in_batches(entries, _embed, config, label="Embedding", sleep=sleep)

    dimensions = {len(item.embedding) for item in embedded}
    if 0 in dimensions:
        raise EmbeddingError("Embedding service returned an empty vector")
    if len(dimensions) > 1:
        raise EmbeddingError(f"Inconsistent embedding dimensions: {sorted(dimensions)}")
    for item in embedded:
        if not all(math.isfinite(v) for v in item.embedding):
            raise EmbeddingError(f"Non-finite value in embedding for entry {item.entry.id}")

    LOGGER.debug("Embedded %d entries (dimensions: %s)", len(embedded), dimensions or "n/a")
    return embedded
