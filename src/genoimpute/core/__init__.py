"""Core building blocks for genoimpute.

This package contains configuration, validation and runtime support:
- alphabet: Genotype codes, missing sentinel, input validation
- config: Configuration dataclasses
- errors: Exception hierarchy
- jax_config: JAX configuration
- memory: Pre-flight memory estimation
- progress / threading: Progress bars and worker control
"""

from genoimpute.core.alphabet import (
    DEFAULT_ALPHABET,
    GenotypeAlphabet,
    as_genotype_matrix,
    missing_mask,
)
from genoimpute.core.config import ImputeConfig, OutputConfig
from genoimpute.core.errors import (
    AllMissingColumnError,
    ImputationError,
    InsufficientNeighborsError,
    InvalidCategoryError,
    InvalidGenotypeMatrixError,
)
from genoimpute.core.jax_config import (
    configure_jax,
    ensure_jax_configured,
    get_jax_info,
)
from genoimpute.core.memory import (
    MemoryEstimate,
    check_memory_available,
    estimate_imputation_memory,
)

__all__ = [
    "DEFAULT_ALPHABET",
    "GenotypeAlphabet",
    "as_genotype_matrix",
    "missing_mask",
    "ImputeConfig",
    "OutputConfig",
    "AllMissingColumnError",
    "ImputationError",
    "InsufficientNeighborsError",
    "InvalidCategoryError",
    "InvalidGenotypeMatrixError",
    "configure_jax",
    "ensure_jax_configured",
    "get_jax_info",
    "MemoryEstimate",
    "check_memory_available",
    "estimate_imputation_memory",
]
