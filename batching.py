"""
Rate-limited batch execution of async work items.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Sequence, TypeVar

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class BatchConfig:
    """Batch size and pause between batches (seconds)."""

    batch_size: int = 10
    inter_batch_delay: float = 1.0

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        if self.inter_batch_delay < 0:
            raise ValueError("inter_batch_delay must be >= 0")


async def run_in_batches(
    items: Sequence[T],
    transform: Callable[[T], Awaitable[R]],
    config: BatchConfig,
    label: str = "Processing",
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> List[R]:
    """
    Apply an async transform to every item in fixed-size concurrent batches.

    All transforms within a batch run concurrently and the batch is awaited as
    a whole. Between consecutive batches the scheduler pauses for
    ``config.inter_batch_delay`` seconds. Exceptions raised by the transform
    propagate to the caller.

    Args:
        items: Work items.
        transform: Coroutine function applied to each item.
        config: Batch size and delay.
        label: Prefix for progress log messages.
        sleep: Pause implementation, replaceable in tests.

    Returns:
        Transform results in the same order as ``items``.
    """
    results: List[R] = []
    total = len(items)
    batch_count = (total + config.batch_size - 1) // config.batch_size

    for start in range(0, total, config.batch_size):
        batch = items[start:start + config.batch_size]
        LOGGER.info("%s batch %d/%d", label, start // config.batch_size + 1, batch_count)

        batch_results = await asyncio.gather(*(transform(item) for item in batch))
        results.extend(batch_results)

        if start + config.batch_size < total:
            await sleep(config.inter_batch_delay)

    return results
