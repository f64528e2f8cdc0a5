#!/usr/bin/env python3
"""Claude Code stats dashboard — monthly token, model and activity overview from stats-cache.json."""

from __future__ import annotations

import json
import os
import sys
import time
from dataclasses import dataclass, field
from datetime import date, datetime
from zoneinfo import ZoneInfo

import humanize

import stats
from formatting import (
    fmt_cost_cents,
    fmt_duration,
    fmt_model_name,
    fmt_number,
    fmt_tokens,
)
from stats import StatsCache

SCRIPT_DIR = os.path.dirname(os.path.realpath(__file__))
DATA_DIR = os.path.join(SCRIPT_DIR, "data")
SETTINGS_PATH = os.path.join(DATA_DIR, "settings.json")

POLL_INTERVAL = 2  # seconds between mtime checks in --watch
REFRESH_INTERVAL = 60  # re-render at least this often even without changes
MAX_BAR_WIDTH = 30


def stats_cache_path() -> str:
    """Default location of the Claude Code stats cache."""
    return os.path.join(os.path.expanduser("~"), ".claude", "stats-cache.json")


# ── Settings ─────────────────────────────────────────────────────────────────


@dataclass
class Settings:
    tz: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))
    locale: str | None = None
    stats_path: str = field(default_factory=stats_cache_path)

    def now(self) -> datetime:
        return datetime.now(self.tz)


def load_settings(path: str = SETTINGS_PATH) -> Settings:
    """Load settings from JSON file. Returns defaults on any error."""
    s = Settings()
    try:
        with open(path) as f:
            raw = json.load(f)
    except (OSError, json.JSONDecodeError):
        return s
    if not isinstance(raw, dict):
        return s

    tz_name = raw.get("timezone")
    if isinstance(tz_name, str):
        try:
            s.tz = ZoneInfo(tz_name)
        except (KeyError, ValueError):
            pass

    locale = raw.get("locale")
    if isinstance(locale, str) and (locale == "en" or locale.startswith("en_")):
        # humanize ships no English catalogue; English is its default
        humanize.i18n.deactivate()
        s.locale = locale
    elif isinstance(locale, str):
        try:
            humanize.i18n.activate(locale)
            s.locale = locale
        except FileNotFoundError:
            print(f"dashboard: warning: unsupported locale {locale!r}", file=sys.stderr)

    stats_path = raw.get("stats_path")
    if isinstance(stats_path, str) and stats_path:
        s.stats_path = os.path.expanduser(stats_path)

    return s


# ── Snapshot loading ─────────────────────────────────────────────────────────


def load_stats_cache(path: str) -> StatsCache | None:
    """Read and parse stats-cache.json. Returns None if missing or unreadable."""
    if not os.path.exists(path):
        return None
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        return StatsCache.from_dict(raw)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        print(f"dashboard: warning: could not read {path}: {e}", file=sys.stderr)
    except (KeyError, TypeError, AttributeError) as e:
        print(f"dashboard: warning: could not parse {path}: {e}", file=sys.stderr)
    return None


def cache_mtime(path: str) -> float | None:
    """Modification time of the cache file, or None if it does not exist."""
    try:
        return os.path.getmtime(path)
    except OSError:
        return None


# ── Rendering ────────────────────────────────────────────────────────────────


def tray_title(cache: StatsCache, prefix: str) -> str:
    """One-line status bar figure: tokens used this month."""
    return fmt_tokens(stats.month_tokens(cache.daily_model_tokens, prefix))


def month_label(prefix: str) -> str:
    """'2026-02' -> 'February 2026'."""
    return date.fromisoformat(f"{prefix}-01").strftime("%B %Y")


def _bar(value: int, max_value: int) -> str:
    if max_value <= 0:
        return ""
    return "█" * int(value / max_value * MAX_BAR_WIDTH)


def render_dashboard(cache: StatsCache, prefix: str, color: bool) -> None:
    """Print the full dashboard for one month."""
    from rich.console import Console
    from rich.table import Table

    console = Console(force_terminal=color, no_color=not color, width=120)
    usage = cache.model_usage

    console.print(f"[bold]Claude Code Stats[/]  [dim]{month_label(prefix)}[/]")
    console.print(f"[dim]Last computed: {cache.last_computed_date}[/]")
    console.print("═" * 56)

    console.print("[cyan]▸ This Month[/]")
    console.print(
        f"  Tokens: [yellow]{tray_title(cache, prefix)}[/]    "
        f"Messages: {fmt_number(stats.month_messages(cache.daily_activity, prefix))}    "
        f"Sessions: {fmt_number(stats.month_sessions(cache.daily_activity, prefix))}    "
        f"Tool calls: {fmt_number(stats.month_tool_calls(cache.daily_activity, prefix))}"
    )
    console.print("")

    console.print("[cyan]▸ All Time[/]")
    console.print(
        f"  Tokens: [yellow]{fmt_tokens(stats.total_tokens(usage))}[/]    "
        f"In: {fmt_tokens(stats.input_tokens(usage))}    "
        f"Out: {fmt_tokens(stats.output_tokens(usage))}    "
        f"Cache: {fmt_tokens(stats.cache_tokens(usage))}    "
        f"Cost: [yellow]{fmt_cost_cents(stats.total_cost_cents(usage))}[/]"
    )
    since = f" since {cache.first_session_date}" if cache.first_session_date else ""
    console.print(
        f"  Sessions: {fmt_number(cache.total_sessions)}    "
        f"Messages: {fmt_number(cache.total_messages)}[dim]{since}[/]"
    )
    if cache.longest_session:
        ls = cache.longest_session
        console.print(
            f"  [dim]Longest session: {fmt_duration(ls.duration)}, "
            f"{fmt_number(ls.message_count)} messages[/]"
        )
    console.print("")

    summaries = stats.model_summaries(usage)
    if summaries:
        table = Table(
            title="[bold]By Model[/]",
            title_justify="left",
            show_edge=False,
            pad_edge=False,
            box=None,
            padding=(0, 1),
        )
        table.add_column("Model", style="cyan", no_wrap=True)
        table.add_column("Input", justify="right", no_wrap=True)
        table.add_column("Output", justify="right", no_wrap=True)
        table.add_column("Cache Read", justify="right", no_wrap=True)
        table.add_column("Cache Write", justify="right", no_wrap=True)
        table.add_column("Total", style="yellow", justify="right", no_wrap=True)
        for s in summaries:
            table.add_row(
                fmt_model_name(s.model),
                fmt_tokens(s.input_tokens),
                fmt_tokens(s.output_tokens),
                fmt_tokens(s.cache_read_tokens),
                fmt_tokens(s.cache_creation_tokens),
                fmt_tokens(s.total_tokens),
            )
        console.print(table)
        console.print("")

    days = stats.daily_tokens(cache.daily_model_tokens, prefix)
    if days:
        console.print("[bold]Tokens by Day[/]")
        console.print("─" * 56)
        max_tokens = max(d.tokens for d in days)
        for d in days:
            console.print(f"  {d.date}  {_bar(d.tokens, max_tokens)} {fmt_tokens(d.tokens)}")
        console.print("")

    messages = stats.daily_messages(cache.daily_activity, prefix)
    if messages:
        console.print("[bold]Messages by Day[/]")
        console.print("─" * 56)
        max_messages = max(d.messages for d in messages)
        for d in messages:
            console.print(
                f"  {d.date}  {_bar(d.messages, max_messages)} "
                f"{fmt_number(d.messages)} [dim]({fmt_number(d.tool_calls)} tool calls)[/]"
            )
        console.print("")

    hours = stats.hour_histogram(cache.hour_counts)
    max_hour = max(hours)
    if max_hour > 0:
        console.print("[bold]Activity by Hour[/]")
        console.print("─" * 56)
        for hour, count in enumerate(hours):
            if count == 0:
                continue
            console.print(f"  {hour:02d}:00  {_bar(count, max_hour)} {fmt_number(count)}")
        console.print("")


def show(path: str, prefix: str | None, settings: Settings, title_only: bool) -> int:
    cache = load_stats_cache(path)
    if cache is None:
        print("---" if title_only else "No stats data found.")
        return 0

    month = prefix or stats.current_month_prefix(settings.now)
    if title_only:
        print(tray_title(cache, month))
    else:
        render_dashboard(cache, month, color=sys.stdout.isatty())
    return 0


def watch(path: str, prefix: str | None, settings: Settings, title_only: bool) -> int:
    """Re-render whenever the cache changes, and every REFRESH_INTERVAL regardless."""
    last_mtime: float | None = None
    last_render = 0.0
    try:
        while True:
            mtime = cache_mtime(path)
            if mtime != last_mtime or time.monotonic() - last_render >= REFRESH_INTERVAL:
                show(path, prefix, settings, title_only)
                last_mtime = mtime
                last_render = time.monotonic()
            time.sleep(POLL_INTERVAL)
    except KeyboardInterrupt:
        return 0


# ── CLI ──────────────────────────────────────────────────────────────────────


def _arg_value(flag: str) -> str | None:
    """Value following flag in sys.argv. Raises ValueError if the flag has no value."""
    if flag not in sys.argv:
        return None
    idx = sys.argv.index(flag)
    if idx + 1 >= len(sys.argv):
        raise ValueError(f"{flag} requires an argument")
    return sys.argv[idx + 1]


def _is_month_prefix(value: str) -> bool:
    if len(value) != 7:
        return False
    try:
        date.fromisoformat(f"{value}-01")
    except ValueError:
        return False
    return True


def main() -> int:
    try:
        settings_path = _arg_value("--settings") or SETTINGS_PATH
        path_arg = _arg_value("--path")
        month = _arg_value("--month")
    except ValueError as e:
        print(f"dashboard: {e}", file=sys.stderr)
        return 1

    if month is not None and not _is_month_prefix(month):
        print("dashboard: --month must be YYYY-MM", file=sys.stderr)
        return 1

    settings = load_settings(settings_path)
    path = path_arg or settings.stats_path
    title_only = "--title" in sys.argv

    if "--watch" in sys.argv:
        return watch(path, month, settings, title_only)
    return show(path, month, settings, title_only)


if __name__ == "__main__":
    sys.exit(main())
