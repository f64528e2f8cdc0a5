"""Shared test helpers."""

from __future__ import annotations

import json
from pathlib import Path

import humanize
import pytest

from stats import DailyActivity, DailyModelTokens, ModelUsage


def make_model_usage(**overrides: object) -> dict:
    """Build a camelCase modelUsage entry as found in stats-cache.json."""
    usage = {
        "inputTokens": 1000,
        "outputTokens": 2000,
        "cacheReadInputTokens": 500,
        "cacheCreationInputTokens": 300,
        "webSearchRequests": 0,
        "costUsd": 0.05,
    }
    usage.update(overrides)
    return usage


def make_stats_cache_dict(**overrides: object) -> dict:
    """Build a stats-cache.json payload with sensible defaults."""
    raw: dict = {
        "version": 1,
        "lastComputedDate": "2026-02-21",
        "dailyActivity": [
            {"date": "2026-02-20", "messageCount": 10, "sessionCount": 2, "toolCallCount": 5},
            {"date": "2026-02-21", "messageCount": 20, "sessionCount": 3, "toolCallCount": 15},
            {"date": "2026-01-15", "messageCount": 50, "sessionCount": 5, "toolCallCount": 30},
        ],
        "dailyModelTokens": [
            {"date": "2026-02-20",
             "tokensByModel": {"claude-opus-4-6": 5000, "claude-sonnet-4-5": 3000}},
            {"date": "2026-02-21", "tokensByModel": {"claude-opus-4-6": 2000}},
            {"date": "2026-01-15", "tokensByModel": {"claude-opus-4-6": 9000}},
        ],
        "modelUsage": {
            "claude-opus-4-6": make_model_usage(),
            "claude-sonnet-4-5": make_model_usage(
                inputTokens=3000, outputTokens=4000, cacheReadInputTokens=1000,
                cacheCreationInputTokens=200, webSearchRequests=2, costUsd=0.03,
            ),
        },
        "totalSessions": 10,
        "totalMessages": 80,
        "longestSession": {
            "sessionId": "sess-1",
            "duration": 5_400_000,
            "messageCount": 42,
            "timestamp": "2026-02-20T10:00:00Z",
        },
        "firstSessionDate": "2026-01-15T09:00:00Z",
        "hourCounts": {"9": 4, "14": 6},
    }
    raw.update(overrides)
    return raw


def write_stats_cache(path: Path, raw: dict) -> Path:
    path.write_text(json.dumps(raw))
    return path


@pytest.fixture
def multiple_models() -> dict[str, ModelUsage]:
    return {
        "claude-opus-4-6": ModelUsage(1000, 2000, 500, 300, 0, 0.05),
        "claude-sonnet-4-5": ModelUsage(3000, 4000, 1000, 200, 2, 0.03),
    }


@pytest.fixture
def daily_model_tokens() -> list[DailyModelTokens]:
    return [
        DailyModelTokens("2026-02-20", {"claude-opus-4-6": 5000, "claude-sonnet-4-5": 3000}),
        DailyModelTokens("2026-02-21", {"claude-opus-4-6": 2000}),
        DailyModelTokens("2026-01-15", {"claude-opus-4-6": 9000}),
    ]


@pytest.fixture
def daily_activity() -> list[DailyActivity]:
    return [
        DailyActivity("2026-02-20", message_count=10, session_count=2, tool_call_count=5),
        DailyActivity("2026-02-21", message_count=20, session_count=3, tool_call_count=15),
        DailyActivity("2026-01-15", message_count=50, session_count=5, tool_call_count=30),
    ]


@pytest.fixture(autouse=True)
def default_number_locale():
    """Settings loading may activate a humanize locale; reset it after each test."""
    yield
    humanize.i18n.deactivate()
