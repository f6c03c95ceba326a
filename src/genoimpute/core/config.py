"""Configuration dataclasses for genoimpute.

This module contains dataclasses that configure imputation runs and their
output files. Both the Python API and the CLI build these objects; all
parameter validation happens here so invalid settings fail before any data
is loaded.
"""

from dataclasses import dataclass, field
from numbers import Integral
from pathlib import Path

import numpy as np

TIE_BREAK_RULES = ("lowest", "nearest")
INSUFFICIENT_POLICIES = ("clamp", "raise")
ALL_MISSING_POLICIES = ("skip", "raise")


@dataclass(frozen=True)
class ImputeConfig:
    """Settings for a KNN imputation run.

    Attributes:
        k: Number of nearest observed samples that vote on each missing cell.
        tie_break: Rule for equally frequent categories among the neighbors.
            ``"lowest"`` picks the lowest category code; ``"nearest"`` picks
            the tied category held by the closest-ranked neighbor.
        normalize: If True, divide mismatch counts by the number of jointly
            observed loci. Default False keeps raw mismatch counts.
        on_insufficient: ``"clamp"`` uses all observed samples when fewer
            than ``k`` exist at a locus; ``"raise"`` fails with
            InsufficientNeighborsError.
        on_all_missing: ``"skip"`` leaves an all-missing locus unresolved and
            reports it; ``"raise"`` fails with AllMissingColumnError.
        n_jobs: Worker count for imputing loci in parallel. 1 runs
            sequentially, -1 uses all available workers.
        show_progress: Show a progress bar over loci.
    """

    k: int = 3
    tie_break: str = "lowest"
    normalize: bool = False
    on_insufficient: str = "clamp"
    on_all_missing: str = "skip"
    n_jobs: int = 1
    show_progress: bool = False

    def __post_init__(self) -> None:
        if (
            isinstance(self.k, (bool, np.bool_))
            or not isinstance(self.k, Integral)
            or self.k < 1
        ):
            raise ValueError(f"k must be a positive integer, got {self.k!r}")
        # numpy integers (e.g. from np.arange K grids) are stored as int
        object.__setattr__(self, "k", int(self.k))
        if self.tie_break not in TIE_BREAK_RULES:
            raise ValueError(
                f"tie_break must be one of {TIE_BREAK_RULES}, got {self.tie_break!r}"
            )
        if self.on_insufficient not in INSUFFICIENT_POLICIES:
            raise ValueError(
                f"on_insufficient must be one of {INSUFFICIENT_POLICIES}, "
                f"got {self.on_insufficient!r}"
            )
        if self.on_all_missing not in ALL_MISSING_POLICIES:
            raise ValueError(
                f"on_all_missing must be one of {ALL_MISSING_POLICIES}, "
                f"got {self.on_all_missing!r}"
            )
        if self.n_jobs == 0 or self.n_jobs < -1:
            raise ValueError(f"n_jobs must be -1 or a positive integer, got {self.n_jobs}")


@dataclass
class OutputConfig:
    """Configuration for output files and directories.

    Attributes:
        outdir: Output directory for result files. Created if it doesn't exist.
        prefix: Prefix for output filenames (e.g., "result" produces
            "result.imputed.txt").
        verbose: Enable verbose/debug output to console.
    """

    outdir: Path = field(default_factory=lambda: Path("output"))
    prefix: str = "result"
    verbose: bool = False

    @property
    def imputed_path(self) -> Path:
        """Path to the imputed genotype table: {outdir}/{prefix}.imputed.txt"""
        return self.outdir / f"{self.prefix}.imputed.txt"

    @property
    def confidence_path(self) -> Path:
        """Path to the per-cell confidence table: {outdir}/{prefix}.confidence.txt"""
        return self.outdir / f"{self.prefix}.confidence.txt"

    @property
    def log_path(self) -> Path:
        """Path to the run log file.

        Returns:
            Path to {outdir}/{prefix}.log.txt
        """
        return self.outdir / f"{self.prefix}.log.txt"

    def ensure_outdir(self) -> None:
        """Create output directory if it doesn't exist."""
        self.outdir.mkdir(parents=True, exist_ok=True)
