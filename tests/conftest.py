"""Pytest fixtures for the genoimpute test suite."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

# =============================================================================
# Test Tier System
# =============================================================================
#
# genoimpute uses a three-tier test system to balance CI speed with coverage:
#
# tier0 - Fast Unit Tests (<5s each)
#   - Pure computation tests on small in-memory matrices
#   - Mocked external dependencies (progress bars, psutil)
#   - Run: pytest -m tier0
#
# tier1 - End-to-End Tests (<60s each)
#   - File round trips, PipelineRunner and the Typer CLI
#   - Run: pytest -m tier1
#
# tier2 - Scale Tests (memory/time intensive)
#   - Large panels (thousands of samples), see test_scale.py
#   - Run: pytest -m tier2
#
# Quick reference:
#   pytest -m tier0             # Fast tests only
#   pytest -m "not tier2"       # Exclude scale tests
#   pytest                      # All tests
# =============================================================================


@pytest.fixture
def clustered_genotypes() -> np.ndarray:
    """Two clusters of three identical samples, 6 samples x 5 loci.

    Samples within a cluster agree everywhere; samples across clusters
    differ at every locus except the constant locus 2.
    """
    cluster_a = [-1, -1, 0, 1, 1]
    cluster_b = [1, 1, 0, -1, -1]
    return np.array([cluster_a] * 3 + [cluster_b] * 3, dtype=np.int64)


@pytest.fixture
def genotypes_with_missing() -> np.ndarray:
    """Small matrix with scattered missing cells (-9)."""
    return np.array(
        [
            [-1, 0, 1, 1, -9],
            [-1, 0, 1, 1, 0],
            [-1, -9, 1, 0, 0],
            [1, 1, -1, -9, -1],
            [1, 1, -9, -1, -1],
            [1, 0, -1, -1, -1],
        ],
        dtype=np.int64,
    )


@pytest.fixture
def genotype_file(tmp_path: Path) -> Path:
    """Write a labelled genotype table with missing cells and return its path."""
    path = tmp_path / "dogs.txt"
    path.write_text(
        "sample\tsnp1\tsnp2\tsnp3\tsnp4\n"
        "dog01\tAA\tAA\tAB\tBB\n"
        "dog02\tAA\tAA\tAB\tNA\n"
        "dog03\tAA\t.\tAB\tBB\n"
        "dog04\tBB\tBB\tAB\tAA\n"
        "dog05\tBB\tBB\tNA\tAA\n"
        "dog06\tBB\tBB\tAB\tAA\n"
    )
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create temporary output directory for test results.

    Args:
        tmp_path: pytest's temporary path fixture

    Returns:
        Path to output directory
    """
    out = tmp_path / "output"
    out.mkdir()
    return out
