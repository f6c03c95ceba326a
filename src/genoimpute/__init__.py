"""genoimpute: categorical K-nearest-neighbor genotype imputation.

genoimpute fills missing genotype calls with the majority genotype of the
K most similar samples, where similarity is the number of mismatching
genotypes over jointly observed loci (Hamming distance).

Key features:
- Deterministic imputation with an explicit tie-break rule
- Per-cell vote confidence
- Accuracy evaluation by repeated random masking and K selection
- Tab-delimited and PLINK inputs, Typer CLI

Example:
    >>> import numpy as np
    >>> from genoimpute import impute_genotypes, ImputeConfig
    >>> X = np.array([[-1, 0, 1], [-1, 0, 1], [1, 0, -9]])
    >>> result = impute_genotypes(X, ImputeConfig(k=2))
    >>> print(f"{result.n_imputed} cells imputed")
"""

import sys
from importlib.metadata import version

from loguru import logger

__version__ = version("genoimpute")

# Configure loguru with sensible defaults on import
# Users can override by calling logger.remove()/add()
logger.remove()
logger.add(
    sys.stdout,
    level="INFO",
    format="{time:HH:mm:ss} | <level>{level: <8}</level> | {message}",
    colorize=True,
)

from genoimpute.core import DEFAULT_ALPHABET, GenotypeAlphabet, ImputeConfig  # noqa: E402
from genoimpute.impute import ImputationResult, impute_genotypes  # noqa: E402
from genoimpute.pipeline import impute_file  # noqa: E402

__all__ = [
    "DEFAULT_ALPHABET",
    "GenotypeAlphabet",
    "ImputationResult",
    "ImputeConfig",
    "impute_file",
    "impute_genotypes",
    "__version__",
]
