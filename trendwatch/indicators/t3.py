"""Tillson T3 moving average and bar color classification."""

from typing import List, Sequence, Tuple

import pandas as pd

from ..models.trend import BarColor


def _ewm(series: pd.Series, length: int) -> pd.Series:
    # adjust=False: multiplier 2 / (length + 1), first output = first input
    return series.ewm(span=length, adjust=False).mean()


def ema(series: Sequence[float], length: int) -> List[float]:
    """Exponential moving average seeded with the first input value.

    There is no warm-up period, so early values of a short series are
    inaccurate.

    Args:
        series: Input values
        length: EMA window length

    Returns:
        One EMA value per input value
    """
    return _ewm(pd.Series(series, dtype=float), length).tolist()


def t3_coefficients(a: float) -> Tuple[float, float, float, float]:
    """Return the (c1, c2, c3, c4) weights for volume factor ``a``."""
    c1 = -(a**3)
    c2 = 3 * a**2 + 3 * a**3
    c3 = -6 * a**2 - 3 * a - 3 * a**3
    c4 = 1 + 3 * a + a**3 + 3 * a**2
    return c1, c2, c3, c4


def tillson_t3_series(
    high: Sequence[float],
    low: Sequence[float],
    close: Sequence[float],
    length: int,
    a: float,
) -> List[float]:
    """Compute the Tillson T3 series over weighted typical price.

    The source is ``(high + low + 2 * close) / 4``, smoothed by six chained
    EMAs whose 3rd to 6th passes are combined with the T3 coefficients.

    Args:
        high: High prices
        low: Low prices
        close: Close prices
        length: EMA window length
        a: Volume factor in (0, 1)

    Returns:
        T3 values index-aligned to the input

    Raises:
        ValueError: If the input sequences differ in length
    """
    if not len(high) == len(low) == len(close):
        raise ValueError(
            f"high/low/close must have equal length, got {len(high)}/{len(low)}/{len(close)}"
        )

    df = pd.DataFrame(
        {"high": list(high), "low": list(low), "close": list(close)}, dtype=float
    )
    src = (df["high"] + df["low"] + 2 * df["close"]) / 4
    e1 = _ewm(src, length)
    e2 = _ewm(e1, length)
    e3 = _ewm(e2, length)
    e4 = _ewm(e3, length)
    e5 = _ewm(e4, length)
    e6 = _ewm(e5, length)

    c1, c2, c3, c4 = t3_coefficients(a)
    return (c1 * e6 + c2 * e5 + c3 * e4 + c4 * e3).tolist()


def bar_colors(series: Sequence[float]) -> List[BarColor]:
    """Classify each value against its predecessor.

    The first value is always neutral. Equal consecutive values count as
    falling.
    """
    colors: List[BarColor] = []
    for i, value in enumerate(series):
        if i == 0:
            colors.append(BarColor.NEUTRAL)
        elif value > series[i - 1]:
            colors.append(BarColor.RISING)
        else:
            colors.append(BarColor.FALLING)
    return colors
