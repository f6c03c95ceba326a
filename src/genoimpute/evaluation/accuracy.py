"""Accuracy scoring and repeated-masking evaluation.

``imputation_accuracy`` scores one imputed matrix against the truth.
``evaluate_imputation`` repeats hide-impute-score over independent random
masks, and ``select_k`` runs that harness over a grid of neighbor counts.
All masks derive from one seed, and every K in a grid sees the same masks,
so K values are compared on identical trials.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np
from loguru import logger

from genoimpute.core.alphabet import (
    DEFAULT_ALPHABET,
    GenotypeAlphabet,
    as_genotype_matrix,
)
from genoimpute.core.config import ImputeConfig
from genoimpute.evaluation.masking import mask_genotypes
from genoimpute.impute.driver import impute_genotypes


def imputation_accuracy(
    truth: np.ndarray | list,
    masked: np.ndarray | list,
    imputed: np.ndarray | list,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
) -> float:
    """Fraction of artificially hidden cells imputed to their true value.

    A cell counts as hidden when it is missing in ``masked`` but observed in
    ``truth``. Cells still missing in ``imputed`` count as wrong.

    Args:
        truth: Ground-truth matrix.
        masked: Same matrix with cells hidden.
        imputed: Imputer output for ``masked``.
        alphabet: Category codes and missing sentinel.

    Returns:
        Accuracy in [0, 1].

    Raises:
        ValueError: If shapes differ or no cell was hidden.

    Example:
        >>> truth = np.array([[-1, 0], [1, 1]])
        >>> masked = np.array([[-9, 0], [1, -9]])
        >>> imputed = np.array([[-1, 0], [1, 0]])
        >>> imputation_accuracy(truth, masked, imputed)
        0.5
    """
    truth = np.asarray(truth)
    masked = np.asarray(masked)
    imputed = np.asarray(imputed)

    if not truth.shape == masked.shape == imputed.shape:
        raise ValueError(
            f"Shape mismatch: truth {truth.shape}, masked {masked.shape}, "
            f"imputed {imputed.shape}"
        )

    hidden = (masked == alphabet.missing) & (truth != alphabet.missing)
    n_hidden = int(hidden.sum())
    if n_hidden == 0:
        raise ValueError("No artificially hidden cells to score")

    return float((imputed[hidden] == truth[hidden]).sum() / n_hidden)


@dataclass
class EvaluationSummary:
    """Accuracy of repeated hide-impute-score trials.

    Attributes:
        k: Neighbor count evaluated.
        accuracies: Accuracy of each trial.
        baseline: Expected accuracy of a uniform random guess
            (1 / number of categories).
    """

    k: int
    accuracies: np.ndarray
    baseline: float

    @property
    def n_trials(self) -> int:
        return len(self.accuracies)

    @property
    def mean_accuracy(self) -> float:
        return float(np.mean(self.accuracies))

    @property
    def std_accuracy(self) -> float:
        return float(np.std(self.accuracies))

    @property
    def beats_baseline(self) -> bool:
        """True when mean accuracy exceeds the random-guess baseline."""
        return self.mean_accuracy > self.baseline


@dataclass
class KSelection:
    """Result of a grid search over neighbor counts.

    Attributes:
        summaries: EvaluationSummary per K, in grid order.
        best_k: K with the highest mean accuracy (smallest K on ties).
    """

    summaries: dict[int, EvaluationSummary] = field(default_factory=dict)
    best_k: int = 0

    @property
    def best(self) -> EvaluationSummary:
        return self.summaries[self.best_k]


def evaluate_imputation(
    genotypes: np.ndarray | list,
    config: ImputeConfig | None = None,
    n_trials: int = 20,
    n_missing: int = 2,
    loci: list[int] | None = None,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    seed: int | None = 0,
) -> EvaluationSummary:
    """Estimate imputation accuracy by repeated random masking.

    Each trial hides ``n_missing`` observed cells in each chosen locus,
    imputes the masked matrix and scores the hidden cells.

    Args:
        genotypes: Reference genotype matrix; its observed cells are the truth.
        config: Imputation settings. Defaults to ``ImputeConfig()``.
        n_trials: Number of independent masks.
        n_missing: Cells hidden per locus per trial.
        loci: Loci to mask. None masks every locus.
        alphabet: Category codes and missing sentinel.
        seed: Seed for the sequence of masks.

    Returns:
        EvaluationSummary with per-trial accuracies and the random baseline.

    Raises:
        ValueError: If n_trials < 1 or a locus has too few observed cells.
    """
    if n_trials < 1:
        raise ValueError(f"n_trials must be at least 1, got {n_trials}")

    config = config or ImputeConfig()
    truth = as_genotype_matrix(genotypes, alphabet)
    rng = np.random.default_rng(seed)

    accuracies = np.empty(n_trials, dtype=np.float64)
    for trial in range(n_trials):
        masked, _mask = mask_genotypes(
            truth, n_missing=n_missing, loci=loci, alphabet=alphabet, seed=rng
        )
        result = impute_genotypes(masked, config, alphabet)
        accuracies[trial] = imputation_accuracy(
            truth, masked, result.imputed, alphabet
        )

    summary = EvaluationSummary(
        k=config.k, accuracies=accuracies, baseline=1.0 / alphabet.n_categories
    )
    logger.info(
        f"k={config.k}: accuracy {summary.mean_accuracy:.3f} "
        f"+/- {summary.std_accuracy:.3f} over {n_trials} trials "
        f"(baseline {summary.baseline:.3f})"
    )
    return summary


def select_k(
    genotypes: np.ndarray | list,
    k_values: list[int],
    config: ImputeConfig | None = None,
    n_trials: int = 20,
    n_missing: int = 2,
    loci: list[int] | None = None,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    seed: int | None = 0,
) -> KSelection:
    """Pick the neighbor count with the best repeated-masking accuracy.

    Args:
        genotypes: Reference genotype matrix.
        k_values: Candidate neighbor counts.
        config: Base settings; ``k`` is replaced by each candidate.
        n_trials, n_missing, loci, alphabet, seed: As in
            ``evaluate_imputation``. The same seed is used for every K.

    Returns:
        KSelection with a summary per K and the best K.

    Raises:
        ValueError: If k_values is empty.
    """
    if not k_values:
        raise ValueError("k_values must contain at least one neighbor count")

    base = config or ImputeConfig()
    selection = KSelection()
    for k in k_values:
        config_k = replace(base, k=k)
        selection.summaries[config_k.k] = evaluate_imputation(
            genotypes,
            config_k,
            n_trials=n_trials,
            n_missing=n_missing,
            loci=loci,
            alphabet=alphabet,
            seed=seed,
        )

    # Highest mean accuracy, smallest k on ties
    selection.best_k = min(
        selection.summaries,
        key=lambda k: (-selection.summaries[k].mean_accuracy, k),
    )
    logger.info(
        f"Best k={selection.best_k} "
        f"(accuracy {selection.best.mean_accuracy:.3f})"
    )
    return selection
