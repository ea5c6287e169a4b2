"""
Utilities for loading dataset files and formatting entries for the models.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from data_models import DatasetEntry

LOGGER = logging.getLogger(__name__)

_TEXT_FIELDS = ("name", "title", "summary")


class DatasetError(ValueError):
    """Raised when a dataset file cannot be parsed into entries."""


def _parse_entry(raw: Any, index: int, path: Path) -> DatasetEntry:
    if not isinstance(raw, dict):
        raise DatasetError(f"{path}: entry {index} is not an object")

    entry_id = raw.get("id")
    # bool is a subclass of int
    if isinstance(entry_id, bool) or not isinstance(entry_id, int):
        raise DatasetError(f"{path}: entry {index} has missing or non-integer 'id'")

    values: Dict[str, str] = {}
    for field in _TEXT_FIELDS:
        value = raw.get(field)
        if not isinstance(value, str):
            raise DatasetError(f"{path}: entry {index} has missing or non-string '{field}'")
        values[field] = value

    skills = raw.get("skills")
    if not isinstance(skills, list) or not all(isinstance(s, str) for s in skills):
        raise DatasetError(f"{path}: entry {index} has missing or invalid 'skills' list")

    return DatasetEntry(
        id=entry_id,
        name=values["name"],
        title=values["title"],
        summary=values["summary"],
        skills=tuple(skills),
    )


def load_dataset(path: Path) -> List[DatasetEntry]:
    """
    Load dataset entries from a JSON file.

    Args:
        path: Location of a JSON array of entry objects.

    Returns:
        Entries in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        DatasetError: If the content is not a valid dataset.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        raise FileNotFoundError(f"Dataset file missing: {path}") from None
    except json.JSONDecodeError as exc:
        raise DatasetError(f"Invalid JSON in dataset file: {path}") from exc

    if not isinstance(data, list):
        raise DatasetError(f"{path}: top-level value must be a JSON array")

    entries = [_parse_entry(raw, index, path) for index, raw in enumerate(data)]

    seen = set()
    for entry in entries:
        if entry.id in seen:
            raise DatasetError(f"{path}: duplicate entry id {entry.id}")
        seen.add(entry.id)

    LOGGER.info("Loaded %d entries from %s", len(entries), path)
    return entries


def entry_to_text(entry: DatasetEntry) -> str:
    """
    Build the canonical text sent to the embedding service.

    Args:
        entry: Dataset entry.

    Returns:
        Labelled multi-line representation of the entry.
    """
    return (
        f"Name: {entry.name}\n"
        f"Title: {entry.title}\n"
        f"Summary: {entry.summary}\n"
        f"Skills: {', '.join(entry.skills)}"
    )
