"""Dispersion statistics shared by the scored split and alignment analyses."""

from collections.abc import Sequence

import numpy as np


def calculate_variance(values: Sequence[float]) -> float:
    """Population variance; 0 for no values."""
    if len(values) == 0:
        return 0.0
    return float(np.var(values))


def calculate_std_dev(values: Sequence[float]) -> float:
    return float(np.sqrt(calculate_variance(values)))


def calculate_cv(values: Sequence[float]) -> float:
    """Coefficient of variation, std / |mean|.

    Returns 0 for no values or a zero mean.
    """
    if len(values) == 0:
        return 0.0
    mean = float(np.mean(values))
    if mean == 0:
        return 0.0
    return calculate_std_dev(values) / abs(mean)


__all__ = ["calculate_variance", "calculate_std_dev", "calculate_cv"]
