"""Worker and BLAS thread management for parallel imputation.

Per-locus imputation is independent across loci, so the driver can fan
loci out to a joblib worker pool. Each worker runs small numpy operations;
letting every worker also spawn a full BLAS thread pool oversubscribes the
machine, so the parallel section runs inside ``blas_threads(1)``.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import contextmanager

import psutil
from loguru import logger
from threadpoolctl import threadpool_limits


def get_worker_count() -> int:
    """Determine how many workers ``n_jobs=-1`` expands to.

    Priority:
    1. GENOIMPUTE_N_JOBS env var (explicit override)
    2. Physical core count via psutil (avoids hyperthreading oversubscription)

    Returns:
        Positive integer worker count, capped at os.cpu_count().
    """
    max_workers = os.cpu_count() or 1

    env_override = os.environ.get("GENOIMPUTE_N_JOBS")
    if env_override is not None:
        try:
            n = int(env_override)
        except ValueError:
            logger.warning(
                f"GENOIMPUTE_N_JOBS={env_override!r} is not a valid integer, "
                "falling back to physical core count"
            )
        else:
            n = max(1, min(n, max_workers))
            logger.debug(f"Workers from GENOIMPUTE_N_JOBS: {n}")
            return n

    n = psutil.cpu_count(logical=False) or max_workers
    n = max(1, min(n, max_workers))
    logger.debug(f"Workers from physical core count: {n}")
    return n


def resolve_n_jobs(n_jobs: int) -> int:
    """Translate a configured ``n_jobs`` (-1 or positive) into a worker count."""
    if n_jobs == -1:
        return get_worker_count()
    return max(1, n_jobs)


@contextmanager
def blas_threads(n_threads: int | None = None) -> Generator[None, None, None]:
    """Context manager for scoped BLAS thread control.

    Args:
        n_threads: Number of BLAS threads. None uses get_worker_count().

    Example:
        >>> with blas_threads(1):
        ...     columns = Parallel(n_jobs=4)(jobs)
    """
    if n_threads is None:
        n_threads = get_worker_count()

    with threadpool_limits(limits=n_threads, user_api="blas"):
        yield
