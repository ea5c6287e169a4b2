import json
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from data_models import DatasetEntry, EmbeddedEntry


class FakeEmbedder:
    """Returns a fixed vector per text, or a default vector for unknown text."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, default=None, fail=False):
        self.vectors = vectors or {}
        self.default = default or [1.0, 0.0, 0.0]
        self.fail = fail
        self.calls: List[str] = []

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.fail:
            raise RuntimeError("embedding service unavailable")
        return self.vectors.get(text, self.default)


class FakeCompleter:
    """Records prompts and returns a canned reply (or raises)."""

    def __init__(self, reply: Optional[str] = "Title changed", fail=False):
        self.reply = reply
        self.fail = fail
        self.calls: List[dict] = []

    async def complete(self, prompt: str, *, max_tokens: int, temperature: float) -> Optional[str]:
        self.calls.append({"prompt": prompt, "max_tokens": max_tokens, "temperature": temperature})
        if self.fail:
            raise RuntimeError("completion service unavailable")
        return self.reply


class SleepRecorder:
    """Stand-in for asyncio.sleep that records requested delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


def _make_entry(entry_id=1, name="Ada", title="Engineer", summary="builds things", skills=("Python",)):
    return DatasetEntry(id=entry_id, name=name, title=title, summary=summary, skills=tuple(skills))


@pytest.fixture
def make_entry():
    return _make_entry


@pytest.fixture
def make_embedded():
    def _make(vector, entry_id=1, **fields):
        return EmbeddedEntry(entry=_make_entry(entry_id, **fields), embedding=tuple(vector))
    return _make


@pytest.fixture
def fake_embedder():
    return FakeEmbedder


@pytest.fixture
def fake_completer():
    return FakeCompleter


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def write_json(tmp_path):
    """
    Fixture that returns a function: write_json("name.json", data) -> Path
    """
    def _write(name: str, data) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(data), encoding="utf-8")
        return path
    return _write
