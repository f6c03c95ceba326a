"""Tests for configuration dataclasses."""

from dataclasses import FrozenInstanceError, replace
from pathlib import Path

import numpy as np
import pytest

from genoimpute.core import ImputeConfig, OutputConfig


@pytest.mark.tier0
class TestImputeConfig:
    """Tests for ImputeConfig defaults and validation."""

    def test_defaults(self):
        config = ImputeConfig()
        assert config.k == 3
        assert config.tie_break == "lowest"
        assert config.normalize is False
        assert config.on_insufficient == "clamp"
        assert config.on_all_missing == "skip"
        assert config.n_jobs == 1
        assert config.show_progress is False

    def test_frozen(self):
        config = ImputeConfig()
        with pytest.raises(FrozenInstanceError):
            config.k = 5

    def test_replace_revalidates(self):
        with pytest.raises(ValueError, match="k must be"):
            replace(ImputeConfig(), k=0)

    @pytest.mark.parametrize("k", [0, -1, 2.5, True])
    def test_invalid_k(self, k):
        with pytest.raises(ValueError, match="k must be a positive integer"):
            ImputeConfig(k=k)

    def test_numpy_integer_k(self):
        config = ImputeConfig(k=np.int64(3))
        assert config.k == 3
        assert type(config.k) is int

    def test_numpy_bool_k_rejected(self):
        with pytest.raises(ValueError, match="k must be a positive integer"):
            ImputeConfig(k=np.bool_(True))

    def test_invalid_tie_break(self):
        with pytest.raises(ValueError, match="tie_break"):
            ImputeConfig(tie_break="random")

    def test_invalid_policies(self):
        with pytest.raises(ValueError, match="on_insufficient"):
            ImputeConfig(on_insufficient="ignore")
        with pytest.raises(ValueError, match="on_all_missing"):
            ImputeConfig(on_all_missing="fill")

    @pytest.mark.parametrize("n_jobs", [0, -2])
    def test_invalid_n_jobs(self, n_jobs):
        with pytest.raises(ValueError, match="n_jobs"):
            ImputeConfig(n_jobs=n_jobs)

    def test_all_workers(self):
        assert ImputeConfig(n_jobs=-1).n_jobs == -1


@pytest.mark.tier0
class TestOutputConfig:
    """Tests for OutputConfig paths."""

    def test_output_paths(self, tmp_path: Path):
        config = OutputConfig(outdir=tmp_path / "out", prefix="run1")
        assert config.imputed_path == tmp_path / "out" / "run1.imputed.txt"
        assert config.confidence_path == tmp_path / "out" / "run1.confidence.txt"
        assert config.log_path == tmp_path / "out" / "run1.log.txt"

    def test_ensure_outdir(self, tmp_path: Path):
        config = OutputConfig(outdir=tmp_path / "a" / "b")
        config.ensure_outdir()
        assert (tmp_path / "a" / "b").is_dir()
