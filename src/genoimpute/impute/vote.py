"""Neighbor ranking and majority voting."""

from __future__ import annotations

from typing import NamedTuple

import numpy as np

from genoimpute.core.alphabet import DEFAULT_ALPHABET, GenotypeAlphabet


class Vote(NamedTuple):
    """Outcome of a majority vote among neighbors."""

    value: int  # Winning category code
    count: int  # Neighbors holding the winning code
    confidence: float  # count / number of voters


def rank_neighbors(
    distances: np.ndarray, candidates: np.ndarray, sample: int
) -> np.ndarray:
    """Order candidate samples by ascending distance to ``sample``.

    The sample itself is removed from the candidates. Equal distances keep
    the candidates' input order (stable sort), so with ascending candidate
    indices ties resolve to the lower sample index.

    Args:
        distances: Distance row of ``sample`` against all samples, shape (n,).
        candidates: Sample indices eligible as neighbors.
        sample: Index of the sample being imputed.

    Returns:
        Candidate indices, nearest first.
    """
    candidates = candidates[candidates != sample]
    order = np.argsort(distances[candidates], kind="stable")
    return candidates[order]


def majority_vote(
    neighbor_values: np.ndarray,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    tie_break: str = "lowest",
) -> Vote:
    """Pick the most frequent category among ranked neighbor values.

    Args:
        neighbor_values: Observed codes of the neighbors, nearest first.
        alphabet: Category codes.
        tie_break: ``"lowest"`` resolves equally frequent categories to the
            lowest code; ``"nearest"`` to the tied code held by the
            closest-ranked neighbor.

    Returns:
        Vote with the winning code, its count and its confidence.

    Raises:
        ValueError: If there are no neighbor values or the rule is unknown.

    Example:
        >>> majority_vote(np.array([1, -1, 1]))
        Vote(value=1, count=2, confidence=0.6666666666666666)
    """
    if len(neighbor_values) == 0:
        raise ValueError("Cannot vote without neighbors")

    codes = np.asarray(alphabet.codes)
    counts = np.array([(neighbor_values == code).sum() for code in codes])
    best = int(counts.max())
    tied = codes[counts == best]

    if tie_break == "lowest":
        winner = int(tied.min())
    elif tie_break == "nearest":
        winner = int(next(v for v in neighbor_values if v in tied))
    else:
        raise ValueError(f"Unknown tie_break rule: {tie_break!r}")

    return Vote(value=winner, count=best, confidence=best / len(neighbor_values))
