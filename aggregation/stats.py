import math
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Iterable, Sequence, Union

import numpy as np

Number = Union[int, float]


def _round(value: Decimal, places: int) -> float:
    if not value.is_finite():
        return float(value)
    with localcontext() as ctx:
        # quantize needs room for every integer digit plus `places` decimals
        ctx.prec = max(ctx.prec, value.adjusted() + places + 2)
        # ROUND_HALF_UP on Decimal rounds half away from zero
        return float(value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP))


def average(values: Iterable[Number], places: int = 2) -> Number:
    """Arithmetic mean rounded to `places` decimals; 0 for no values."""
    values = list(values)
    if not values:
        return 0
    if any(isinstance(v, float) and not math.isfinite(v) for v in values):
        return sum(values) / len(values)
    decimals = [Decimal(str(v)) for v in values]
    return _round(sum(decimals, Decimal(0)) / len(decimals), places)


def pearson_correlation(x: Sequence[Number], y: Sequence[Number], places: int = 3) -> float:
    """
    Pearson correlation of two price series.
    The longer series is truncated to the length of the shorter one.
    Returns 0 when there is nothing to correlate or either series is flat.
    """
    n = min(len(x), len(y))
    if n == 0:
        return 0
    xs = np.asarray(x[:n], dtype=float)
    ys = np.asarray(y[:n], dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()
    denominator = np.sqrt(np.sum(dx ** 2) * np.sum(dy ** 2))
    if denominator == 0:
        return 0
    return _round(Decimal(str(float(np.sum(dx * dy) / denominator))), places)
