"""Genotype category alphabet and input validation.

Genotype calls are stored as small integer codes. The default alphabet uses
the -1/0/+1 encoding of a biallelic SNP (AA, AB, BB) with -9 as the missing
sentinel, matching the PLINK convention of a negative "no call" value.

Every matrix entering the imputer passes through ``as_genotype_matrix`` so
that shape problems and stray codes are rejected before any computation.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from genoimpute.core.errors import InvalidCategoryError, InvalidGenotypeMatrixError


@dataclass(frozen=True)
class GenotypeAlphabet:
    """Finite set of genotype codes plus a distinguished missing sentinel.

    Attributes:
        codes: Valid category codes, in ascending order of preference for the
            ``lowest`` tie-break rule.
        labels: Text label for each code, used by table I/O (same length as
            ``codes``).
        missing: Sentinel marking an absent observation. Must not be a code.
    """

    codes: tuple[int, ...] = (-1, 0, 1)
    labels: tuple[str, ...] = ("AA", "AB", "BB")
    missing: int = -9

    def __post_init__(self) -> None:
        if len(self.codes) == 0:
            raise ValueError("Alphabet must contain at least one category code")
        if len(set(self.codes)) != len(self.codes):
            raise ValueError(f"Alphabet codes must be unique, got {self.codes}")
        if len(self.labels) != len(self.codes):
            raise ValueError(
                f"Alphabet has {len(self.codes)} codes but {len(self.labels)} labels"
            )
        if self.missing in self.codes:
            raise ValueError(
                f"Missing sentinel {self.missing} collides with a category code"
            )

    @property
    def n_categories(self) -> int:
        """Number of valid categories (excluding the sentinel)."""
        return len(self.codes)

    def code_for_label(self, label: str) -> int:
        """Return the code for a text label such as ``"AB"``.

        Raises:
            KeyError: If the label is not part of the alphabet.
        """
        try:
            return self.codes[self.labels.index(label)]
        except ValueError:
            raise KeyError(f"Unknown genotype label: {label!r}") from None

    def label_for_code(self, code: int) -> str:
        """Return the text label for a category code."""
        return self.labels[self.codes.index(code)]

    def category_index(self, genotypes: np.ndarray) -> np.ndarray:
        """Map codes to category positions 0..n_categories-1.

        Missing cells map to -1. Input is assumed validated.
        """
        index = np.full(genotypes.shape, -1, dtype=np.int64)
        for position, code in enumerate(self.codes):
            index[genotypes == code] = position
        return index


DEFAULT_ALPHABET = GenotypeAlphabet()


def as_genotype_matrix(
    genotypes: np.ndarray | list,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
) -> np.ndarray:
    """Validate input and return it as an int64 genotype matrix.

    Float input is accepted: NaN cells become the missing sentinel, and
    integral values are cast to integer codes. The input is never modified.

    Args:
        genotypes: Matrix-like of shape (n_samples, n_loci).
        alphabet: Category codes and missing sentinel.

    Returns:
        New int64 array of shape (n_samples, n_loci).

    Raises:
        InvalidGenotypeMatrixError: If input is ragged, not 2-D, empty,
            has fewer than two samples, or has a non-numeric dtype.
        InvalidCategoryError: If any cell is neither a code nor the sentinel.

    Example:
        >>> X = as_genotype_matrix([[-1, 0], [1, float("nan")]])
        >>> X[1, 1]
        -9
    """
    try:
        arr = np.asarray(genotypes)
    except ValueError as e:
        raise InvalidGenotypeMatrixError(f"Genotype matrix is ragged: {e}") from e

    if arr.dtype == object or not (
        np.issubdtype(arr.dtype, np.integer) or np.issubdtype(arr.dtype, np.floating)
    ):
        raise InvalidGenotypeMatrixError(
            f"Genotype matrix must be numeric, got dtype {arr.dtype}"
        )
    if arr.ndim != 2:
        raise InvalidGenotypeMatrixError(
            f"Genotype matrix must be 2-D, got {arr.ndim}-D with shape {arr.shape}"
        )
    if arr.size == 0:
        raise InvalidGenotypeMatrixError(
            f"Genotype matrix is empty (shape {arr.shape})"
        )
    if arr.shape[0] < 2:
        raise InvalidGenotypeMatrixError(
            f"At least 2 samples are required for neighbor search, got {arr.shape[0]}"
        )

    if np.issubdtype(arr.dtype, np.floating):
        nan_mask = np.isnan(arr)
        infinite = arr[np.isinf(arr)]
        if infinite.size > 0:
            raise InvalidCategoryError(sorted(np.unique(infinite).tolist()))
        observed = arr[~nan_mask]
        fractional = observed[observed != np.round(observed)]
        if fractional.size > 0:
            raise InvalidCategoryError(sorted(np.unique(fractional).tolist()))
        matrix = np.where(nan_mask, alphabet.missing, arr).astype(np.int64)
    else:
        matrix = arr.astype(np.int64)

    valid = np.isin(matrix, alphabet.codes) | (matrix == alphabet.missing)
    if not valid.all():
        raise InvalidCategoryError(sorted(np.unique(matrix[~valid]).tolist()))

    return matrix


def missing_mask(
    genotypes: np.ndarray, alphabet: GenotypeAlphabet = DEFAULT_ALPHABET
) -> np.ndarray:
    """Boolean mask, True where the genotype equals the missing sentinel."""
    return np.asarray(genotypes) == alphabet.missing
