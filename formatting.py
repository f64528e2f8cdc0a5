"""Display formatting for token counts, costs, numbers and model names."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

import humanize

MODEL_PREFIX = "claude-"
TOKEN_UNITS = [
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
]


def fmt_tokens(n: float) -> str:
    """Format token counts with K/M/B suffix.

    Values just under a threshold stay in the lower unit (999999 -> '1000.0K').
    Ties round half up: 1250 -> '1.3K'.
    """
    for unit, suffix in TOKEN_UNITS:
        if n >= unit:
            value = (Decimal(n) / unit).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            return f"{value}{suffix}"
    return str(int(n))


def fmt_cost_cents(cents: float) -> str:
    """Format integer cents as dollars, e.g. 12345 -> '$123.45', -500 -> '$-5.00'."""
    return f"${cents / 100:.2f}"


def fmt_number(n: int) -> str:
    """Format integer with the active locale's thousands separator."""
    return humanize.intcomma(int(n))


def fmt_duration(ms: float) -> str:
    """Format milliseconds as e.g. '45s', '12m 5s', '3h 20m'."""
    total_seconds = int(ms / 1000)
    if total_seconds < 60:
        return f"{total_seconds}s"
    minutes, seconds = divmod(total_seconds, 60)
    if minutes < 60:
        return f"{minutes}m {seconds}s" if seconds else f"{minutes}m"
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h {minutes}m" if minutes else f"{hours}h"


def fmt_model_name(model: str) -> str:
    """Make a model id readable: 'claude-opus-4-6' -> 'Opus 4 6'."""
    if model.startswith(MODEL_PREFIX):
        model = model[len(MODEL_PREFIX):]
    return " ".join(part[:1].upper() + part[1:] for part in model.split("-"))
