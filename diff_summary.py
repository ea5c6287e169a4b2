"""
Diff summarization stage: describe how each matched pair differs.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence

from batching import BatchConfig, run_in_batches
from data_models import ComparisonResult, DatasetEntry, MatchResult
from llm_handler import CompletionService

LOGGER = logging.getLogger(__name__)

NO_DIFFERENCES = "No differences"
DIFF_ERROR_PLACEHOLDER = "Error generating diff summary"
IDENTITY_SCORE = 1.0


def _profile_block(label: str, entry: DatasetEntry) -> str:
    return (
        f"{label}:\n"
        f"Name: {entry.name}\n"
        f"Title: {entry.title}\n"
        f"Summary: {entry.summary}\n"
        f"Skills: {', '.join(entry.skills)}"
    )


def build_diff_prompt(entry_a: DatasetEntry, entry_b: DatasetEntry) -> str:
    """
    Build the comparison prompt for two matched entries.

    Args:
        entry_a: Entry from the source dataset.
        entry_b: Its best match from the target dataset.

    Returns:
        Prompt text for the completion model.
    """
    return (
        "Compare these two user profiles and provide a brief summary of the differences:\n\n"
        f"{_profile_block('Profile A', entry_a)}\n\n"
        f"{_profile_block('Profile B', entry_b)}\n\n"
        "Provide a concise summary of the key differences "
        "(e.g., \"Skills updated, title changed from 'Dev' to 'Sr. Dev'\"). "
        "Focus on meaningful changes."
    )


async def generate_diff_summary(
    entry_a: DatasetEntry,
    entry_b: DatasetEntry,
    service: CompletionService,
    max_tokens: int = 200,
    temperature: float = 0.3,
) -> Optional[str]:
    """
    Ask the completion service for a short description of the differences.

    Service errors are logged and replaced by DIFF_ERROR_PLACEHOLDER so one
    failed request does not abort the run.

    Returns:
        Summary text, None for an empty completion, or the placeholder.
    """
    prompt = build_diff_prompt(entry_a, entry_b)
    try:
        text = await service.complete(prompt, max_tokens=max_tokens, temperature=temperature)
    except Exception as exc:
        LOGGER.error("Error generating diff summary for %s -> %s: %s", entry_a.id, entry_b.id, exc)
        return DIFF_ERROR_PLACEHOLDER

    text = text.strip() if text else text
    if not text:
        LOGGER.warning("Empty diff summary for %s -> %s", entry_a.id, entry_b.id)
        return None
    return text


async def summarize_matches(
    matches: Sequence[MatchResult],
    service: CompletionService,
    config: BatchConfig,
    max_tokens: int = 200,
    temperature: float = 0.3,
    sleep=asyncio.sleep,
) -> List[ComparisonResult]:
    """
    Produce a ComparisonResult for every match, in rate-limited batches.

    Pairs whose score is exactly IDENTITY_SCORE are labelled NO_DIFFERENCES
    without contacting the completion service.

    Args:
        matches: Match results in source-dataset order.
        service: Completion provider.
        config: Batch size and inter-batch delay.
        max_tokens: Output token limit for each summary.
        temperature: Sampling temperature for each summary.
        sleep: Pause implementation passed to the scheduler.

    Returns:
        Comparison results in the same order as ``matches``.
    """

    async def _summarize(match: MatchResult) -> ComparisonResult:
        entry_a = match.source.entry
        entry_b = match.match.entry
        if match.score == IDENTITY_SCORE:
            summary: Optional[str] = NO_DIFFERENCES
        else:
            summary = await generate_diff_summary(
                entry_a, entry_b, service, max_tokens=max_tokens, temperature=temperature
            )
        return ComparisonResult(
            entry_a=entry_a,
            match=entry_b,
            similarity_score=match.score,
            diff_summary=summary,
        )

    return await run_in_batches(
        matches, _summarize, config, label="Generating diff summaries for", sleep=sleep
    )
