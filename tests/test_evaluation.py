"""Tests for masking, accuracy scoring and K selection.

All tests are tier0 (small in-memory matrices).
"""

import numpy as np
import pytest

from genoimpute.core import ImputeConfig, configure_jax
from genoimpute.evaluation import (
    EvaluationSummary,
    evaluate_imputation,
    imputation_accuracy,
    mask_genotypes,
    mask_random,
    select_k,
)


@pytest.fixture(autouse=True)
def setup_jax():
    configure_jax(enable_x64=True)


@pytest.mark.tier0
class TestMaskGenotypes:
    """Tests for mask_genotypes."""

    def test_hides_n_per_locus(self, clustered_genotypes):
        masked, mask = mask_genotypes(clustered_genotypes, n_missing=2, seed=0)
        np.testing.assert_array_equal(mask.sum(axis=0), [2, 2, 2, 2, 2])
        assert (masked[mask] == -9).all()
        np.testing.assert_array_equal(masked[~mask], clustered_genotypes[~mask])

    def test_selected_loci_only(self, clustered_genotypes):
        _masked, mask = mask_genotypes(
            clustered_genotypes, n_missing=1, loci=[3], seed=0
        )
        assert mask[:, 3].sum() == 1
        assert mask.sum() == 1

    def test_never_masks_missing_cells(self, genotypes_with_missing):
        original_missing = genotypes_with_missing == -9
        _masked, mask = mask_genotypes(genotypes_with_missing, n_missing=3, seed=1)
        assert not (mask & original_missing).any()

    def test_reproducible(self, clustered_genotypes):
        first, _ = mask_genotypes(clustered_genotypes, n_missing=2, seed=42)
        second, _ = mask_genotypes(clustered_genotypes, n_missing=2, seed=42)
        np.testing.assert_array_equal(first, second)

    def test_input_not_modified(self, clustered_genotypes):
        before = clustered_genotypes.copy()
        mask_genotypes(clustered_genotypes, n_missing=2, seed=0)
        np.testing.assert_array_equal(clustered_genotypes, before)

    def test_too_many_requested(self, genotypes_with_missing):
        with pytest.raises(ValueError, match="cannot hide 6"):
            mask_genotypes(genotypes_with_missing, n_missing=6, seed=0)

    def test_negative_n_missing(self, clustered_genotypes):
        with pytest.raises(ValueError, match="non-negative"):
            mask_genotypes(clustered_genotypes, n_missing=-1)


@pytest.mark.tier0
class TestMaskRandom:
    """Tests for MCAR masking."""

    def test_rate_zero_masks_nothing(self, clustered_genotypes):
        masked, mask = mask_random(clustered_genotypes, 0.0, seed=0)
        assert not mask.any()
        np.testing.assert_array_equal(masked, clustered_genotypes)

    def test_approximate_rate(self):
        rng = np.random.default_rng(0)
        X = rng.choice([-1, 0, 1], size=(200, 100))
        _masked, mask = mask_random(X, 0.2, seed=0)
        assert 0.17 < mask.mean() < 0.23

    @pytest.mark.parametrize("rate", [-0.1, 1.0, 1.5])
    def test_invalid_rate(self, clustered_genotypes, rate):
        with pytest.raises(ValueError, match="missing_rate"):
            mask_random(clustered_genotypes, rate)


@pytest.mark.tier0
class TestImputationAccuracy:
    """Tests for imputation_accuracy."""

    def test_scores_hidden_cells_only(self):
        truth = np.array([[-1, 0], [1, 1], [0, 0]])
        masked = np.array([[-9, 0], [1, -9], [0, 0]])
        imputed = np.array([[-1, 1], [1, 0], [1, 1]])
        # Mistakes in cells that were never hidden don't count
        assert imputation_accuracy(truth, masked, imputed) == 0.5

    def test_originally_missing_cells_ignored(self):
        truth = np.array([[-9, 0], [1, 1]])
        masked = np.array([[-9, -9], [1, 1]])
        imputed = np.array([[1, 0], [1, 1]])
        assert imputation_accuracy(truth, masked, imputed) == 1.0

    def test_unresolved_cells_count_as_wrong(self):
        truth = np.array([[-1, 0], [1, 1]])
        masked = np.array([[-9, -9], [1, 1]])
        imputed = np.array([[-9, 0], [1, 1]])
        assert imputation_accuracy(truth, masked, imputed) == 0.5

    def test_shape_mismatch(self):
        with pytest.raises(ValueError, match="Shape mismatch"):
            imputation_accuracy(np.zeros((2, 2)), np.zeros((2, 3)), np.zeros((2, 2)))

    def test_nothing_hidden(self):
        X = np.array([[-1, 0], [1, 1]])
        with pytest.raises(ValueError, match="No artificially hidden"):
            imputation_accuracy(X, X, X)


@pytest.mark.tier0
class TestEvaluateImputation:
    """Tests for the repeated-masking harness."""

    def test_summary_fields(self, clustered_genotypes):
        summary = evaluate_imputation(
            clustered_genotypes, ImputeConfig(k=1), n_trials=5, n_missing=1
        )
        assert isinstance(summary, EvaluationSummary)
        assert summary.k == 1
        assert summary.n_trials == 5
        assert ((summary.accuracies >= 0) & (summary.accuracies <= 1)).all()
        assert summary.std_accuracy >= 0

    def test_perfect_recovery_with_one_hidden_cell(self, clustered_genotypes):
        # Two cluster mates always remain observed
        summary = evaluate_imputation(
            clustered_genotypes, ImputeConfig(k=1), n_trials=10, n_missing=1, loci=[0]
        )
        assert summary.mean_accuracy == 1.0
        assert summary.beats_baseline

    def test_reproducible(self, clustered_genotypes):
        first = evaluate_imputation(clustered_genotypes, n_trials=5, seed=3)
        second = evaluate_imputation(clustered_genotypes, n_trials=5, seed=3)
        np.testing.assert_array_equal(first.accuracies, second.accuracies)

    def test_invalid_trials(self, clustered_genotypes):
        with pytest.raises(ValueError, match="n_trials"):
            evaluate_imputation(clustered_genotypes, n_trials=0)


@pytest.mark.tier0
class TestSelectK:
    """Tests for select_k."""

    def test_picks_best_k(self, clustered_genotypes):
        # k=5 always outvotes the two remaining cluster mates
        selection = select_k(
            clustered_genotypes, [1, 5], n_trials=10, n_missing=1, loci=[0], seed=0
        )
        assert list(selection.summaries) == [1, 5]
        assert selection.best_k == 1
        assert selection.best.mean_accuracy == 1.0
        assert selection.summaries[5].mean_accuracy < 1.0

    def test_smallest_k_wins_ties(self, clustered_genotypes):
        selection = select_k(
            clustered_genotypes, [2, 1], n_trials=5, n_missing=1, loci=[0], seed=0
        )
        assert selection.summaries[1].mean_accuracy == 1.0
        assert selection.summaries[2].mean_accuracy == 1.0
        assert selection.best_k == 1

    def test_numpy_integer_grid(self, clustered_genotypes):
        selection = select_k(
            clustered_genotypes,
            list(np.arange(1, 4)),
            n_trials=3,
            n_missing=1,
            loci=[0],
            seed=0,
        )
        assert list(selection.summaries) == [1, 2, 3]
        assert selection.best_k == 1
        assert all(type(k) is int for k in selection.summaries)

    def test_empty_grid(self, clustered_genotypes):
        with pytest.raises(ValueError, match="k_values"):
            select_k(clustered_genotypes, [])
