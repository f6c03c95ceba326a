"""Categorical K-nearest-neighbor genotype imputation.

Key functions:
- hamming_distances: Mismatch-count distance matrix over jointly observed loci
- pairwise_counts / locus_counts: Pair counts used for leave-one-locus-out distances
- rank_neighbors / majority_vote: Neighbor ordering and the vote itself
- impute_locus: Impute one column
- impute_genotypes: Impute a full matrix
"""

from genoimpute.impute.distance import (
    PairwiseCounts,
    hamming_distances,
    locus_counts,
    pairwise_counts,
)
from genoimpute.impute.driver import ImputationResult, impute_genotypes
from genoimpute.impute.locus import LocusImputation, impute_locus
from genoimpute.impute.vote import Vote, majority_vote, rank_neighbors

__all__ = [
    "ImputationResult",
    "LocusImputation",
    "PairwiseCounts",
    "Vote",
    "hamming_distances",
    "impute_genotypes",
    "impute_locus",
    "locus_counts",
    "majority_vote",
    "pairwise_counts",
    "rank_neighbors",
]
