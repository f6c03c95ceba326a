"""Artificial missingness for evaluating imputation accuracy.

Observed cells are hidden under a seeded generator so that the imputed
values can be scored against the hidden truth. Cells that are already
missing are never selected.
"""

from __future__ import annotations

import numpy as np

from genoimpute.core.alphabet import (
    DEFAULT_ALPHABET,
    GenotypeAlphabet,
    as_genotype_matrix,
)


def _as_rng(seed: int | np.random.Generator | None) -> np.random.Generator:
    if isinstance(seed, np.random.Generator):
        return seed
    return np.random.default_rng(seed)


def mask_genotypes(
    genotypes: np.ndarray | list,
    n_missing: int,
    loci: list[int] | np.ndarray | None = None,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    seed: int | np.random.Generator | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Hide a fixed number of observed cells in each chosen locus.

    Args:
        genotypes: Genotype matrix (n_samples, n_loci).
        n_missing: Observed cells to hide per locus.
        loci: Column indices to mask. None masks every locus.
        alphabet: Category codes and missing sentinel.
        seed: Seed or Generator for reproducible selection.

    Returns:
        Tuple of (masked, mask):
        - masked: Copy of the matrix with hidden cells set to the sentinel
        - mask: Boolean matrix, True where a cell was hidden

    Raises:
        ValueError: If n_missing is negative or a locus has fewer observed
            cells than n_missing.

    Example:
        >>> X = np.array([[-1, 0], [0, 1], [1, 1], [1, -1]])
        >>> masked, mask = mask_genotypes(X, n_missing=2, loci=[0], seed=1)
        >>> int(mask[:, 0].sum()), int(mask[:, 1].sum())
        (2, 0)
    """
    if n_missing < 0:
        raise ValueError(f"n_missing must be non-negative, got {n_missing}")

    rng = _as_rng(seed)
    matrix = as_genotype_matrix(genotypes, alphabet)
    target_loci = range(matrix.shape[1]) if loci is None else loci

    mask = np.zeros(matrix.shape, dtype=bool)
    for locus in target_loci:
        observed_rows = np.flatnonzero(matrix[:, locus] != alphabet.missing)
        if observed_rows.size < n_missing:
            raise ValueError(
                f"Locus {locus} has {observed_rows.size} observed cells, "
                f"cannot hide {n_missing}"
            )
        hidden = rng.choice(observed_rows, size=n_missing, replace=False)
        mask[hidden, locus] = True

    masked = matrix.copy()
    masked[mask] = alphabet.missing
    return masked, mask


def mask_random(
    genotypes: np.ndarray | list,
    missing_rate: float,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    seed: int | np.random.Generator | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Hide observed cells completely at random (MCAR).

    Each observed cell is hidden independently with probability
    ``missing_rate``.

    Args:
        genotypes: Genotype matrix (n_samples, n_loci).
        missing_rate: Probability of hiding each observed cell, in [0, 1).
        alphabet: Category codes and missing sentinel.
        seed: Seed or Generator for reproducible selection.

    Returns:
        Tuple of (masked, mask) as in ``mask_genotypes``.

    Raises:
        ValueError: If missing_rate is outside [0, 1).
    """
    if not 0.0 <= missing_rate < 1.0:
        raise ValueError(f"missing_rate must be in [0, 1), got {missing_rate}")

    rng = _as_rng(seed)
    matrix = as_genotype_matrix(genotypes, alphabet)

    observed = matrix != alphabet.missing
    mask = (rng.random(matrix.shape) < missing_rate) & observed

    masked = matrix.copy()
    masked[mask] = alphabet.missing
    return masked, mask
