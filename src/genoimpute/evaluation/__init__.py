"""Accuracy evaluation for genotype imputation.

Key functions:
- mask_genotypes / mask_random: Hide observed cells for scoring
- imputation_accuracy: Score imputed cells against the hidden truth
- evaluate_imputation: Repeated hide-impute-score trials
- select_k: Grid search over the neighbor count
"""

from genoimpute.evaluation.accuracy import (
    EvaluationSummary,
    KSelection,
    evaluate_imputation,
    imputation_accuracy,
    select_k,
)
from genoimpute.evaluation.masking import mask_genotypes, mask_random

__all__ = [
    "EvaluationSummary",
    "KSelection",
    "evaluate_imputation",
    "imputation_accuracy",
    "mask_genotypes",
    "mask_random",
    "select_k",
]
