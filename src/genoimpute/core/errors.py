"""Exceptions raised by genoimpute.

All imputation errors derive from ``ImputationError``, itself a ``ValueError``,
so callers that already guard against bad input with ``except ValueError``
keep working. Each exception carries the locus (column index) or offending
values as attributes for programmatic handling.
"""

from __future__ import annotations


class ImputationError(ValueError):
    """Base class for genotype imputation failures."""


class InvalidGenotypeMatrixError(ImputationError):
    """Input is not a usable 2-D genotype matrix (empty, ragged, too small)."""


class InvalidCategoryError(ImputationError):
    """Input contains codes outside the alphabet that are not the sentinel.

    Attributes:
        values: Sorted unique offending values.
    """

    def __init__(self, values: list) -> None:
        self.values = values
        super().__init__(
            f"Genotype matrix contains {len(values)} value(s) outside the "
            f"alphabet: {values[:10]}"
        )


class AllMissingColumnError(ImputationError):
    """Every sample is missing at a locus, so no neighbor can vote.

    Attributes:
        locus: Column index of the unresolvable locus.
    """

    def __init__(self, locus: int) -> None:
        self.locus = locus
        super().__init__(f"Locus {locus} has no observed genotypes to impute from")


class InsufficientNeighborsError(ImputationError):
    """Fewer observed samples than K at a locus under the ``raise`` policy.

    Attributes:
        locus: Column index of the locus.
        k: Requested neighbor count.
        n_available: Number of samples observed at the locus.
    """

    def __init__(self, locus: int, k: int, n_available: int) -> None:
        self.locus = locus
        self.k = k
        self.n_available = n_available
        super().__init__(
            f"Locus {locus}: k={k} neighbors requested but only "
            f"{n_available} samples are observed"
        )
