"""Hamming (mismatch-count) distances between samples.

The distance between samples i and j is the number of loci where both are
observed and their genotype codes differ. Loci where either sample is
missing contribute nothing, so the raw count is not normalized by the
number of comparable loci unless ``normalize=True`` is requested.

Counts are computed with one-hot indicator matrices, the same way a
genetic relatedness matrix is accumulated from genotype batches:

    shared     = O @ O.T          (jointly observed loci)
    matches    = I @ I.T          (jointly observed loci with equal codes)
    mismatches = shared - matches

where O is the (n_samples, n_loci) observed indicator and I the
(n_samples, n_loci * n_categories) one-hot category indicator.

Per-locus imputation needs the distance over every locus *except* the target.
Rather than recomputing O(n^2 m) work per locus, the full counts are
computed once and the target locus's contribution is subtracted:

    counts_without_j = counts_full - counts_j
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
import numpy as np
from jax import jit
from loguru import logger

from genoimpute.core.alphabet import (
    DEFAULT_ALPHABET,
    GenotypeAlphabet,
    as_genotype_matrix,
)
from genoimpute.core.jax_config import ensure_jax_configured
from genoimpute.core.progress import progress_iterator


@dataclass(frozen=True)
class PairwiseCounts:
    """Pairwise mismatch and shared-locus counts between samples.

    Attributes:
        mismatches: (n_samples, n_samples) int64, loci where both samples are
            observed and differ.
        shared: (n_samples, n_samples) int64, loci where both samples are
            observed.
    """

    mismatches: np.ndarray
    shared: np.ndarray

    @property
    def n_samples(self) -> int:
        return self.mismatches.shape[0]

    def __sub__(self, other: PairwiseCounts) -> PairwiseCounts:
        return PairwiseCounts(
            mismatches=self.mismatches - other.mismatches,
            shared=self.shared - other.shared,
        )

    def to_distances(self, normalize: bool = False) -> np.ndarray:
        """Convert counts to a distance matrix.

        Args:
            normalize: If False, return raw mismatch counts (int64). Pairs with
                no jointly observed loci get distance 0. If True, return
                mismatches / shared (float64); pairs with no jointly observed
                loci get the maximal distance 1.0.

        Returns:
            Symmetric (n_samples, n_samples) matrix with zero diagonal.
        """
        if not normalize:
            return self.mismatches.copy()

        with np.errstate(invalid="ignore", divide="ignore"):
            distances = self.mismatches / self.shared
        distances = np.where(self.shared > 0, distances, 1.0)
        np.fill_diagonal(distances, 0.0)
        return distances


@jit
def _accumulate_counts(
    shared: jnp.ndarray,
    matches: jnp.ndarray,
    observed: jnp.ndarray,
    indicators: jnp.ndarray,
) -> tuple[jnp.ndarray, jnp.ndarray]:
    """Add one locus batch's shared and matching counts.

    Args:
        shared: Current shared-locus accumulator (n_samples, n_samples).
        matches: Current matching-locus accumulator (n_samples, n_samples).
        observed: Observed indicator batch (n_samples, batch_loci).
        indicators: One-hot category batch (n_samples, batch_loci * n_categories).

    Returns:
        Updated (shared, matches) accumulators.
    """
    shared = shared + jnp.matmul(observed, observed.T)
    matches = matches + jnp.matmul(indicators, indicators.T)
    return shared, matches


def _batch_indicators(
    batch: np.ndarray, alphabet: GenotypeAlphabet
) -> tuple[np.ndarray, np.ndarray]:
    """Build observed and one-hot indicator matrices for a locus batch."""
    n_samples, n_loci = batch.shape
    category = alphabet.category_index(batch)
    observed = (category >= 0).astype(np.float64)
    one_hot = category[:, :, None] == np.arange(alphabet.n_categories)
    indicators = one_hot.reshape(n_samples, n_loci * alphabet.n_categories)
    return observed, indicators.astype(np.float64)


def pairwise_counts(
    genotypes: np.ndarray,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    batch_size: int = 10_000,
    show_progress: bool = False,
) -> PairwiseCounts:
    """Count mismatching and shared loci for every pair of samples.

    Args:
        genotypes: Validated int genotype matrix (n_samples, n_loci).
        alphabet: Category codes and missing sentinel.
        batch_size: Loci per JAX batch; bounds the one-hot indicator size.
        show_progress: Show a progress bar when more than one batch is needed.

    Returns:
        PairwiseCounts over all loci of ``genotypes``.
    """
    ensure_jax_configured()

    n_samples, n_loci = genotypes.shape
    shared = jnp.zeros((n_samples, n_samples), dtype=jnp.float64)
    matches = jnp.zeros((n_samples, n_samples), dtype=jnp.float64)

    batch_starts = list(range(0, n_loci, batch_size))
    n_batches = len(batch_starts)
    logger.debug(
        f"Pairwise counts: {n_samples:,} samples x {n_loci:,} loci, "
        f"{n_batches} batch(es) of {batch_size:,}"
    )

    for start in progress_iterator(
        batch_starts,
        total=n_batches,
        desc="Distances",
        enabled=show_progress and n_batches > 1,
    ):
        end = min(start + batch_size, n_loci)
        observed, indicators = _batch_indicators(genotypes[:, start:end], alphabet)
        shared, matches = _accumulate_counts(
            shared, matches, jnp.asarray(observed), jnp.asarray(indicators)
        )

    # np.asarray is the JAX sync point; counts are exact integers in float64
    shared_np = np.rint(np.asarray(shared)).astype(np.int64)
    matches_np = np.rint(np.asarray(matches)).astype(np.int64)
    return PairwiseCounts(mismatches=shared_np - matches_np, shared=shared_np)


def locus_counts(
    column: np.ndarray, alphabet: GenotypeAlphabet = DEFAULT_ALPHABET
) -> PairwiseCounts:
    """Pairwise counts contributed by a single locus.

    Args:
        column: Genotype codes for one locus, shape (n_samples,).
        alphabet: Category codes and missing sentinel.

    Returns:
        PairwiseCounts with entries 0 or 1.
    """
    observed = column != alphabet.missing
    both = np.outer(observed, observed)
    differ = column[:, None] != column[None, :]
    return PairwiseCounts(
        mismatches=(both & differ).astype(np.int64),
        shared=both.astype(np.int64),
    )


def hamming_distances(
    genotypes: np.ndarray | list,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    exclude_locus: int | None = None,
    normalize: bool = False,
) -> np.ndarray:
    """Compute the sample-by-sample Hamming distance matrix.

    Args:
        genotypes: Genotype matrix (n_samples, n_loci); validated on entry.
        alphabet: Category codes and missing sentinel.
        exclude_locus: Optional locus (column index) left out of the
            comparison, as done when that locus is the imputation target.
        normalize: Divide by the number of jointly observed loci.

    Returns:
        Symmetric (n_samples, n_samples) distance matrix with zero diagonal.
        int64 mismatch counts, or float64 when ``normalize`` is True.

    Raises:
        InvalidGenotypeMatrixError, InvalidCategoryError: On invalid input.
        IndexError: If ``exclude_locus`` is out of range.

    Example:
        >>> X = [[-1, 0, 1], [-1, 1, 1], [1, -9, 1]]
        >>> hamming_distances(X)
        array([[0, 1, 1],
               [1, 0, 1],
               [1, 1, 0]])
    """
    matrix = as_genotype_matrix(genotypes, alphabet)

    if exclude_locus is not None:
        n_loci = matrix.shape[1]
        if not -n_loci <= exclude_locus < n_loci:
            raise IndexError(
                f"exclude_locus {exclude_locus} out of range for {n_loci} loci"
            )
        matrix = np.delete(matrix, exclude_locus, axis=1)

    if matrix.shape[1] == 0:
        n_samples = matrix.shape[0]
        counts = PairwiseCounts(
            mismatches=np.zeros((n_samples, n_samples), dtype=np.int64),
            shared=np.zeros((n_samples, n_samples), dtype=np.int64),
        )
    else:
        counts = pairwise_counts(matrix, alphabet)

    return counts.to_distances(normalize=normalize)
