"""Memory estimation and checking for imputation runs.

The dominant allocations are the one-hot indicator copy of the genotype
matrix and the pair of N x N count matrices (mismatches and shared loci)
held for the whole run. Both are estimated up front so that oversized
inputs fail with a clear MemoryError instead of an OOM kill.
"""

from typing import NamedTuple

import psutil
from loguru import logger


class MemoryEstimate(NamedTuple):
    """Memory breakdown for an imputation run. All values in GB."""

    indicators_gb: float  # n * m * (c + 1) * 8 bytes (one-hot + observed, float64)
    distances_gb: float  # 2 * n^2 * 8 bytes (mismatch + shared counts)
    per_locus_gb: float  # 2 * n^2 * 8 bytes (leave-one-locus-out copies)
    total_gb: float  # Peak memory
    available_gb: float  # Current available system memory
    sufficient: bool  # Whether available >= total * 1.1


def estimate_imputation_memory(
    n_samples: int, n_loci: int, n_categories: int = 3
) -> MemoryEstimate:
    """Estimate peak memory for imputing an (n_samples, n_loci) matrix.

    Args:
        n_samples: Number of samples (rows).
        n_loci: Number of loci (columns).
        n_categories: Size of the genotype alphabet.

    Returns:
        MemoryEstimate with the per-component breakdown.

    Example:
        >>> est = estimate_imputation_memory(1_000, 10_000)
        >>> round(est.distances_gb, 3)
        0.016
    """
    indicators_gb = n_samples * n_loci * (n_categories + 1) * 8 / 1e9
    distances_gb = 2 * n_samples**2 * 8 / 1e9
    per_locus_gb = 2 * n_samples**2 * 8 / 1e9
    total_gb = indicators_gb + distances_gb + per_locus_gb

    available_gb = psutil.virtual_memory().available / 1e9

    return MemoryEstimate(
        indicators_gb=indicators_gb,
        distances_gb=distances_gb,
        per_locus_gb=per_locus_gb,
        total_gb=total_gb,
        available_gb=available_gb,
        sufficient=available_gb >= total_gb * 1.1,
    )


def check_memory_available(
    required_gb: float,
    safety_margin: float = 0.1,
    operation: str = "operation",
) -> bool:
    """Check if sufficient memory is available, raise if not.

    Args:
        required_gb: Memory required in GB.
        safety_margin: Additional margin (0.1 = 10%).
        operation: Description for error message.

    Returns:
        True if sufficient memory available.

    Raises:
        MemoryError: If insufficient memory with detailed message.
    """
    available_gb = psutil.virtual_memory().available / 1e9
    required_with_margin = required_gb * (1 + safety_margin)

    if required_with_margin > available_gb:
        raise MemoryError(
            f"Insufficient memory for {operation}. "
            f"Need {required_gb:.1f}GB (+{safety_margin*100:.0f}% margin = "
            f"{required_with_margin:.1f}GB), but only {available_gb:.1f}GB available. "
            f"Consider imputing a subset of samples or loci."
        )

    logger.debug(
        f"Memory check passed for {operation}: "
        f"{required_with_margin:.2f}GB of {available_gb:.1f}GB"
    )
    return True
