"""
Numeric helpers used throughout the estimation pipeline.

The deduplication domain of an ESA cluster spans every host, so the share of
cross-host redundancy it can actually find grows with cluster size and
saturates. ``domain_scaling_factor`` models that curve:

    cap * (1 - exp(-k * max(0, hosts - 2)))

Two hosts or fewer give no cross-host benefit. The curve approaches ``cap``
but stays below it for any finite host count (up to float rounding).
"""

import math

from .tables import DEFAULT_SCALING_MODE, DEFAULT_TABLES, DomainTables


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def safe_div(a: float, b: float) -> float:
    """Divide, returning 0 instead of raising when the divisor is zero."""
    return 0.0 if b == 0 else a / b


def domain_scaling_factor(
    hosts: int,
    mode: str = DEFAULT_SCALING_MODE,
    tables: DomainTables = DEFAULT_TABLES
) -> float:
    """
    Effectiveness of the cluster-wide deduplication domain.

    Args:
        hosts: Number of hosts in the cluster
        mode: Scaling tier name (aggressive, typical, conservative). Unknown
            names use the conservative tier.
        tables: Reference tables holding the tier parameters

    Returns:
        float: Factor in [0, cap) for the selected tier
    """
    tier = tables.scaling_tier(mode)
    x = max(0, hosts - 2)
    return tier.cap * (1 - math.exp(-tier.k * x))
