"""Imputation of a single locus (column).

For a target locus, samples observed there form the training set and
samples missing there form the test set. Each test sample is filled with
the majority genotype of its K nearest training samples, where distance is
the Hamming distance over every *other* locus.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from loguru import logger

from genoimpute.core.alphabet import (
    DEFAULT_ALPHABET,
    GenotypeAlphabet,
    as_genotype_matrix,
)
from genoimpute.core.config import ImputeConfig
from genoimpute.core.errors import AllMissingColumnError, InsufficientNeighborsError
from genoimpute.impute.distance import PairwiseCounts, locus_counts, pairwise_counts
from genoimpute.impute.vote import majority_vote, rank_neighbors


@dataclass(frozen=True)
class LocusImputation:
    """Result of imputing one locus.

    Attributes:
        locus: Column index.
        values: Completed column, shape (n_samples,).
        rows: Indices of the rows that were imputed.
        predictions: Imputed code for each entry of ``rows``.
        confidences: Vote confidence for each entry of ``rows``, in [0, 1].
        neighbors: Neighbor indices used for each imputed row, nearest first,
            shape (len(rows), n_neighbors).
        n_neighbors: Neighbors consulted per cell after clamping (0 when the
            locus had nothing to impute).
    """

    locus: int
    values: np.ndarray
    rows: np.ndarray
    predictions: np.ndarray
    confidences: np.ndarray
    neighbors: np.ndarray
    n_neighbors: int

    @property
    def n_imputed(self) -> int:
        return len(self.rows)


def _resolve_k(locus: int, n_train: int, config: ImputeConfig) -> int:
    """Apply the insufficient-neighbor policy to the configured k."""
    if n_train >= config.k:
        return config.k
    if config.on_insufficient == "raise":
        raise InsufficientNeighborsError(locus, config.k, n_train)
    logger.warning(
        f"Locus {locus}: only {n_train} observed samples, "
        f"clamping k={config.k} to {n_train}"
    )
    return n_train


def _impute_locus(
    matrix: np.ndarray,
    locus: int,
    counts: PairwiseCounts,
    config: ImputeConfig,
    alphabet: GenotypeAlphabet,
) -> LocusImputation:
    """Impute one locus of a validated matrix given full-matrix pair counts."""
    column = matrix[:, locus]
    observed = column != alphabet.missing
    train = np.flatnonzero(observed)
    test = np.flatnonzero(~observed)

    if test.size == 0:
        return LocusImputation(
            locus=locus,
            values=column.copy(),
            rows=test,
            predictions=np.empty(0, dtype=np.int64),
            confidences=np.empty(0, dtype=np.float64),
            neighbors=np.empty((0, 0), dtype=np.int64),
            n_neighbors=0,
        )

    if train.size == 0:
        raise AllMissingColumnError(locus)

    k = _resolve_k(locus, train.size, config)

    # Distances over every locus except the target
    distances = (counts - locus_counts(column, alphabet)).to_distances(
        normalize=config.normalize
    )

    predictions = np.empty(test.size, dtype=np.int64)
    confidences = np.empty(test.size, dtype=np.float64)
    neighbors = np.empty((test.size, k), dtype=np.int64)

    for i, row in enumerate(test):
        nearest = rank_neighbors(distances[row], train, row)[:k]
        vote = majority_vote(column[nearest], alphabet, config.tie_break)
        predictions[i] = vote.value
        confidences[i] = vote.confidence
        neighbors[i] = nearest

    values = column.copy()
    values[test] = predictions

    logger.debug(
        f"Locus {locus}: imputed {test.size} cells from {train.size} observed "
        f"samples (k={k}, mean confidence {confidences.mean():.2f})"
    )

    return LocusImputation(
        locus=locus,
        values=values,
        rows=test,
        predictions=predictions,
        confidences=confidences,
        neighbors=neighbors,
        n_neighbors=k,
    )


def impute_locus(
    genotypes: np.ndarray | list,
    locus: int,
    config: ImputeConfig | None = None,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    counts: PairwiseCounts | None = None,
) -> LocusImputation:
    """Impute the missing cells of one locus by K-nearest-neighbor vote.

    Args:
        genotypes: Genotype matrix (n_samples, n_loci); validated on entry.
        locus: Column index of the target locus.
        config: Imputation settings (k, tie-break, policies). Defaults to
            ``ImputeConfig()``.
        alphabet: Category codes and missing sentinel.
        counts: Precomputed pair counts over all loci of ``genotypes``.
            Computed here when omitted.

    Returns:
        LocusImputation with the completed column and per-cell confidences.
        The input matrix is not modified.

    Raises:
        AllMissingColumnError: If no sample is observed at the locus.
        InsufficientNeighborsError: If fewer than k samples are observed and
            ``config.on_insufficient == "raise"``.
        IndexError: If ``locus`` is out of range.

    Example:
        >>> X = [[-1, -1], [-1, -1], [1, 1], [1, -9]]
        >>> result = impute_locus(X, 1, ImputeConfig(k=1))
        >>> result.values.tolist()
        [-1, -1, 1, 1]
    """
    config = config or ImputeConfig()
    matrix = as_genotype_matrix(genotypes, alphabet)

    n_loci = matrix.shape[1]
    if not 0 <= locus < n_loci:
        raise IndexError(f"locus {locus} out of range for {n_loci} loci")

    if counts is None:
        counts = pairwise_counts(matrix, alphabet)

    return _impute_locus(matrix, locus, counts, config, alphabet)
