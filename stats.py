"""Claude Code stats cache — data model and month/model aggregations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable

import pandas as pd

# ── Data layer ───────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ModelUsage:
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_input_tokens: int = 0
    cache_creation_input_tokens: int = 0
    web_search_requests: int = 0
    cost_usd: float = 0.0

    @classmethod
    def from_dict(cls, raw: dict) -> ModelUsage:
        return cls(
            input_tokens=raw["inputTokens"],
            output_tokens=raw["outputTokens"],
            cache_read_input_tokens=raw["cacheReadInputTokens"],
            cache_creation_input_tokens=raw["cacheCreationInputTokens"],
            web_search_requests=raw["webSearchRequests"],
            cost_usd=raw.get("costUsd", 0.0),
        )


@dataclass(frozen=True)
class DailyModelTokens:
    date: str
    tokens_by_model: dict[str, int]

    @classmethod
    def from_dict(cls, raw: dict) -> DailyModelTokens:
        return cls(date=raw["date"], tokens_by_model=dict(raw["tokensByModel"]))


@dataclass(frozen=True)
class DailyActivity:
    date: str
    message_count: int = 0
    session_count: int = 0
    tool_call_count: int = 0

    @classmethod
    def from_dict(cls, raw: dict) -> DailyActivity:
        return cls(
            date=raw["date"],
            message_count=raw["messageCount"],
            session_count=raw["sessionCount"],
            tool_call_count=raw["toolCallCount"],
        )


@dataclass(frozen=True)
class LongestSession:
    session_id: str
    duration: int  # milliseconds
    message_count: int
    timestamp: str

    @classmethod
    def from_dict(cls, raw: dict) -> LongestSession:
        return cls(
            session_id=raw["sessionId"],
            duration=raw["duration"],
            message_count=raw["messageCount"],
            timestamp=raw["timestamp"],
        )


@dataclass(frozen=True)
class StatsCache:
    """Snapshot of ~/.claude/stats-cache.json."""

    version: int
    last_computed_date: str
    daily_activity: list[DailyActivity]
    daily_model_tokens: list[DailyModelTokens]
    model_usage: dict[str, ModelUsage]
    total_sessions: int
    total_messages: int
    longest_session: LongestSession | None = None
    first_session_date: str | None = None
    hour_counts: dict[str, int] | None = None

    @classmethod
    def from_dict(cls, raw: dict) -> StatsCache:
        """Map the camelCase cache JSON onto a StatsCache. Raises KeyError on missing keys."""
        longest = raw.get("longestSession")
        hours = raw.get("hourCounts")
        return cls(
            version=raw["version"],
            last_computed_date=raw["lastComputedDate"],
            daily_activity=[DailyActivity.from_dict(d) for d in raw["dailyActivity"]],
            daily_model_tokens=[
                DailyModelTokens.from_dict(d) for d in raw["dailyModelTokens"]
            ],
            model_usage={
                model: ModelUsage.from_dict(u) for model, u in raw["modelUsage"].items()
            },
            total_sessions=raw["totalSessions"],
            total_messages=raw["totalMessages"],
            longest_session=LongestSession.from_dict(longest) if longest else None,
            first_session_date=raw.get("firstSessionDate"),
            hour_counts=dict(hours) if hours is not None else None,
        )


# ── Derived types ────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ModelSummary:
    model: str
    input_tokens: int
    output_tokens: int
    cache_read_tokens: int
    cache_creation_tokens: int

    @property
    def total_tokens(self) -> int:
        return (
            self.input_tokens
            + self.output_tokens
            + self.cache_read_tokens
            + self.cache_creation_tokens
        )


@dataclass(frozen=True)
class DailyTokens:
    date: str
    tokens: int


@dataclass(frozen=True)
class DailyMessages:
    date: str
    messages: int
    tool_calls: int


# ── Month prefix ─────────────────────────────────────────────────────────────


def month_prefix(day: date) -> str:
    """Return the YYYY-MM key for a date."""
    return f"{day.year:04d}-{day.month:02d}"


def current_month_prefix(clock: Callable[[], date] | None = None) -> str:
    """Return the YYYY-MM key for today.

    clock returns a date or datetime; defaults to the local wall clock.
    """
    now = clock() if clock is not None else datetime.now()
    return month_prefix(now)


# ── Analytics layer ──────────────────────────────────────────────────────────


def _usage_total(u: ModelUsage) -> int:
    return (
        u.input_tokens
        + u.output_tokens
        + u.cache_read_input_tokens
        + u.cache_creation_input_tokens
    )


def total_tokens(usage: dict[str, ModelUsage]) -> int:
    """Sum all four token categories across models."""
    return sum(_usage_total(u) for u in usage.values())


def input_tokens(usage: dict[str, ModelUsage]) -> int:
    return sum(u.input_tokens for u in usage.values())


def output_tokens(usage: dict[str, ModelUsage]) -> int:
    return sum(u.output_tokens for u in usage.values())


def cache_tokens(usage: dict[str, ModelUsage]) -> int:
    """Sum cache-read and cache-creation tokens across models."""
    return sum(
        u.cache_read_input_tokens + u.cache_creation_input_tokens
        for u in usage.values()
    )


def total_cost_cents(usage: dict[str, ModelUsage]) -> int:
    """Total cost across models in whole cents, rounded half up."""
    dollars = Decimal(str(sum(u.cost_usd for u in usage.values())))
    return int((dollars * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def model_summaries(usage: dict[str, ModelUsage]) -> list[ModelSummary]:
    """One summary per model, sorted by total tokens desc.

    The sort is stable: models with equal totals keep the mapping's order.
    """
    results = [
        ModelSummary(
            model=model,
            input_tokens=u.input_tokens,
            output_tokens=u.output_tokens,
            cache_read_tokens=u.cache_read_input_tokens,
            cache_creation_tokens=u.cache_creation_input_tokens,
        )
        for model, u in usage.items()
    ]
    results.sort(key=lambda s: s.total_tokens, reverse=True)
    return results


def daily_tokens(
    entries: list[DailyModelTokens], prefix: str
) -> list[DailyTokens]:
    """Per-day token totals for the month, in input order. Same-date entries are not merged."""
    return [
        DailyTokens(date=d.date, tokens=sum(d.tokens_by_model.values()))
        for d in entries
        if d.date.startswith(prefix)
    ]


def month_tokens(entries: list[DailyModelTokens], prefix: str) -> int:
    """Total tokens across all models for the month."""
    return sum(d.tokens for d in daily_tokens(entries, prefix))


def filter_by_month(df: pd.DataFrame, prefix: str) -> pd.DataFrame:
    """Keep rows whose date column starts with the YYYY-MM prefix."""
    if df.empty or "date" not in df.columns:
        return df
    return df[df["date"].str.startswith(prefix)]


def activity_frame(entries: list[DailyActivity]) -> pd.DataFrame:
    """Build a DataFrame of daily activity, one row per entry in input order."""
    return pd.DataFrame(entries)


def _month_activity_sum(
    entries: list[DailyActivity], prefix: str, column: str
) -> int:
    df = filter_by_month(activity_frame(entries), prefix)
    if df.empty:
        return 0
    return int(df[column].sum())


def month_messages(entries: list[DailyActivity], prefix: str) -> int:
    return _month_activity_sum(entries, prefix, "message_count")


def month_sessions(entries: list[DailyActivity], prefix: str) -> int:
    return _month_activity_sum(entries, prefix, "session_count")


def month_tool_calls(entries: list[DailyActivity], prefix: str) -> int:
    return _month_activity_sum(entries, prefix, "tool_call_count")


def daily_messages(
    entries: list[DailyActivity], prefix: str
) -> list[DailyMessages]:
    """Messages and tool calls per day for the month, in input order."""
    df = filter_by_month(activity_frame(entries), prefix)
    if df.empty:
        return []
    return [
        DailyMessages(
            date=str(row.date),
            messages=int(row.message_count),
            tool_calls=int(row.tool_call_count),
        )
        for row in df.itertuples(index=False)
    ]


def hour_histogram(hour_counts: dict[str, int] | None) -> list[int]:
    """Spread the cache's hour-of-day counts into 24 buckets."""
    hist = [0] * 24
    if not hour_counts:
        return hist
    for key, count in hour_counts.items():
        try:
            hour = int(key)
        except ValueError:
            continue
        if 0 <= hour < 24:
            hist[hour] += count
    return hist
