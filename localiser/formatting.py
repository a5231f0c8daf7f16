"""
Display formatting for slide text boxes (en-GB conventions).

Every formatter returns an em dash for a missing or NaN value so a gap in
the data shows as a gap on the slide rather than "nan".
"""

import math

MISSING = "—"


def _missing(n) -> bool:
    if n is None:
        return True
    try:
        return math.isnan(n)
    except TypeError:
        return True


def _round_half_up(n: float) -> int:
    # Python's round() is banker's rounding; the deck rounds .5 away from zero
    return int(math.floor(abs(n) + 0.5)) * (-1 if n < 0 else 1)


def _one_dp(n: float) -> str:
    return f"{_round_half_up(n * 10) / 10:,.1f}"


def format_count(n) -> str:
    """12345.6 -> '12,346'."""
    if _missing(n):
        return MISSING
    return f"{_round_half_up(n):,}"


def format_percent(p) -> str:
    """0.512 -> '51%'."""
    if _missing(p):
        return MISSING
    return f"{_round_half_up(p * 100)}%"


def format_currency_short(n) -> str:
    """Pounds with k/m/bn suffix: 2_450_000 -> '£2.5m'."""
    if _missing(n):
        return MISSING
    sign = "-" if n < 0 else ""
    size = abs(n)
    if size >= 1e9:
        return f"{sign}£{_one_dp(size / 1e9)}bn"
    if size >= 1e6:
        return f"{sign}£{_one_dp(size / 1e6)}m"
    if size >= 1e3:
        return f"{sign}£{_one_dp(size / 1e3)}k"
    return f"{sign}£{_round_half_up(size):,}"


def format_short_number(n) -> str:
    """Counts with k/m suffix: 48_200 -> '48.2k'."""
    if _missing(n):
        return MISSING
    sign = "-" if n < 0 else ""
    size = abs(n)
    if size >= 1e6:
        return f"{sign}{_one_dp(size / 1e6)}m"
    if size >= 1e3:
        return f"{sign}{_one_dp(size / 1e3)}k"
    return f"{sign}{_round_half_up(size):,}"


def format_days(n, decimals: int = 0) -> str:
    """Wait time in days: 42.4 -> '42 days'."""
    if _missing(n):
        return MISSING
    if decimals:
        return f"{n:.{decimals}f} days"
    return f"{_round_half_up(n)} days"
