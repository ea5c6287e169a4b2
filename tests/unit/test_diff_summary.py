"""
tests/unit/test_diff_summary.py

Diff summarization: identity short-circuit, prompt content, degrade on error.
"""
import asyncio

from batching import BatchConfig
from data_models import MatchResult
from diff_summary import (
    DIFF_ERROR_PLACEHOLDER,
    NO_DIFFERENCES,
    build_diff_prompt,
    summarize_matches,
)

NO_DELAY = BatchConfig(batch_size=10, inter_batch_delay=0)


def _match(make_embedded, score, a_id=1, b_id=2, b_title="Engineer"):
    source = make_embedded([1.0, 0.0], entry_id=a_id, name="Ada", title="Engineer")
    target = make_embedded([1.0, 0.0], entry_id=b_id, name="Ada L.", title=b_title)
    return MatchResult(source=source, match=target, score=score)


def test_prompt_contains_both_profiles(make_entry):
    a = make_entry(entry_id=1, name="Ada", title="Dev", summary="writes code", skills=("Go", "SQL"))
    b = make_entry(entry_id=2, name="Ada", title="Sr. Dev", summary="writes code", skills=("Go",))
    prompt = build_diff_prompt(a, b)

    assert prompt.startswith("Compare these two user profiles")
    assert "Profile A:\nName: Ada\nTitle: Dev\nSummary: writes code\nSkills: Go, SQL" in prompt
    assert "Profile B:\nName: Ada\nTitle: Sr. Dev\nSummary: writes code\nSkills: Go" in prompt
    assert prompt.index("Profile A:") < prompt.index("Profile B:")
    assert "Focus on meaningful changes." in prompt


def test_identity_score_skips_service(make_embedded, fake_completer):
    completer = fake_completer()
    results = asyncio.run(summarize_matches([_match(make_embedded, 1.0)], completer, NO_DELAY))

    assert results[0].diff_summary == NO_DIFFERENCES
    assert results[0].similarity_score == 1.0
    assert completer.calls == []


def test_near_identity_still_calls_service(make_embedded, fake_completer):
    completer = fake_completer(reply="  Title changed  ")
    results = asyncio.run(summarize_matches([_match(make_embedded, 0.9999999)], completer, NO_DELAY))

    assert results[0].diff_summary == "Title changed"
    assert len(completer.calls) == 1


def test_request_settings_forwarded(make_embedded, fake_completer):
    completer = fake_completer()
    asyncio.run(
        summarize_matches([_match(make_embedded, 0.5)], completer, NO_DELAY, max_tokens=50, temperature=0.0)
    )
    assert completer.calls[0]["max_tokens"] == 50
    assert completer.calls[0]["temperature"] == 0.0


def test_service_failure_substitutes_placeholder(make_embedded, fake_completer):
    completer = fake_completer(fail=True)
    matches = [
        _match(make_embedded, 0.8, a_id=1),
        _match(make_embedded, 1.0, a_id=2),
        _match(make_embedded, 0.3, a_id=3),
    ]
    results = asyncio.run(summarize_matches(matches, completer, NO_DELAY))

    assert [r.diff_summary for r in results] == [
        DIFF_ERROR_PLACEHOLDER,
        NO_DIFFERENCES,
        DIFF_ERROR_PLACEHOLDER,
    ]
    assert len(completer.calls) == 2


def test_empty_completion_becomes_none(make_embedded, fake_completer):
    for reply in (None, ""):
        completer = fake_completer(reply=reply)
        results = asyncio.run(summarize_matches([_match(make_embedded, 0.5)], completer, NO_DELAY))
        assert results[0].diff_summary is None


def test_results_follow_input_order_and_strip_embeddings(make_embedded, fake_completer, sleep_recorder):
    matches = [_match(make_embedded, 0.5, a_id=i, b_id=100 + i) for i in range(5)]
    results = asyncio.run(
        summarize_matches(matches, fake_completer(), BatchConfig(batch_size=2, inter_batch_delay=0.25), sleep=sleep_recorder)
    )

    assert [r.entry_a.id for r in results] == [0, 1, 2, 3, 4]
    assert [r.match.id for r in results] == [100, 101, 102, 103, 104]
    assert "embedding" not in results[0].to_dict()["entryA"]
    assert sleep_recorder.delays == [0.25, 0.25]
