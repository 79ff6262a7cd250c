"""
Numeric primitives for cheat assessment.

Population statistics, a normal-distribution CDF built on the
Abramowitz-Stegun error function approximation, and degenerate-safe
averages that return defined defaults for empty or single-element
samples instead of raising.
"""

import math
import statistics
from typing import Callable, Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")


# =============================================================================
# Error function constants (Abramowitz & Stegun formula 7.1.26)
# =============================================================================

ERF_A1 = 0.254829592
ERF_A2 = -0.284496736
ERF_A3 = 1.421413741
ERF_A4 = -1.453152027
ERF_A5 = 1.061405429
ERF_P = 0.3275911


# =============================================================================
# Population statistics
# =============================================================================

def mean(xs: Sequence[float]) -> float:
    """Arithmetic mean of a non-empty sequence."""
    if not xs:
        raise ValueError("mean requires at least one value")
    return statistics.fmean(xs)


def variance(xs: Sequence[float], avg: Optional[float] = None) -> float:
    """
    Population variance (divides by N, not N-1).

    Args:
        xs: Non-empty sequence of numbers.
        avg: Precomputed mean, if already known.

    Returns:
        Variance, always >= 0.
    """
    if not xs:
        raise ValueError("variance requires at least one value")
    return statistics.pvariance(xs, mu=avg)


def deviation(xs: Sequence[float], avg: Optional[float] = None) -> float:
    """Population standard deviation of a non-empty sequence."""
    return math.sqrt(variance(xs, avg))


def coefficient_of_variation(xs: Sequence[float]) -> float:
    """
    Standard deviation divided by mean.

    Returns nan when the mean is zero, so threshold comparisons on the
    result are false.
    """
    avg = mean(xs)
    if avg == 0:
        return math.nan
    return deviation(xs, avg) / avg


def safe_mean(xs: Sequence[float]) -> float:
    """Mean that returns 0 for an empty sequence and the value itself for one element."""
    if len(xs) == 0:
        return 0
    if len(xs) == 1:
        return xs[0]
    return mean(xs)


def safe_deviation(xs: Sequence[float]) -> float:
    """Deviation that returns 0 for sequences of zero or one element."""
    if len(xs) < 2:
        return 0
    return deviation(xs)


# =============================================================================
# Normal distribution
# =============================================================================

def erf(x: float) -> float:
    """
    Error function, accurate to about 1.5e-7.

    Odd-symmetric: erf(-x) == -erf(x).
    """
    sign = -1 if x < 0 else 1
    absx = abs(x)

    t = 1.0 / (1.0 + ERF_P * absx)
    y = 1.0 - (((((ERF_A5 * t + ERF_A4) * t) + ERF_A3) * t + ERF_A2) * t + ERF_A1) * t * math.exp(-absx * absx)
    return sign * y


def normal_cdf(x: float, avg: float, sd: float) -> float:
    """Cumulative probability of x under a normal distribution N(avg, sd)."""
    return 0.5 * (1 + erf((x - avg) / (sd * math.sqrt(2))))


def confidence_interval(x: float, avg: float, sd: float) -> float:
    """Probability of landing further than abs(x) from the origin on either side."""
    return 1 - normal_cdf(abs(x), avg, sd) + normal_cdf(-abs(x), avg, sd)


def interval_to_variance4(interval: float) -> float:
    """Rough conversion of an interval width into a fourth-power variance."""
    return (interval / 3) ** 8


# =============================================================================
# Sequence helpers
# =============================================================================

def skip_alternate(xs: Sequence[T], offset: int) -> list[T]:
    """
    Select every other element of an interleaved sequence.

    Keeps elements whose index i satisfies (i + offset) % 2 == 0, so
    offset 0 yields the first mover's entries and offset 1 the second's.
    """
    return [x for i, x in enumerate(xs) if (i + offset) % 2 == 0]


def count_matching(items: Iterable[T], predicate: Callable[[T], bool]) -> int:
    """Number of items satisfying the predicate."""
    return sum(1 for item in items if predicate(item))
