"""Pipeline orchestration for genoimpute.

Provides a PipelineRunner service class that encapsulates a file-to-file
imputation run: validate inputs, load genotypes, check memory, impute,
write the imputed table, the confidence table and the run log. Both the
CLI (cli.py) and the one-call ``impute_file`` API delegate to this runner.

Example:
    >>> from genoimpute.pipeline import PipelineConfig, PipelineRunner
    >>> config = PipelineConfig(genotype_file=Path("data/dogs.txt"))
    >>> result = PipelineRunner(config).run()
    >>> print(f"Imputed {result.imputation.n_imputed} genotypes")
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path

from loguru import logger

from genoimpute.core.alphabet import DEFAULT_ALPHABET, GenotypeAlphabet
from genoimpute.core.config import ImputeConfig, OutputConfig
from genoimpute.impute import ImputationResult, impute_genotypes
from genoimpute.io import (
    GenotypeTable,
    load_plink_genotypes,
    read_genotype_table,
    write_confidence_table,
    write_genotype_table,
)
from genoimpute.utils.logging import write_run_log


@dataclass
class PipelineConfig:
    """Configuration for a file-to-file imputation run.

    Attributes:
        genotype_file: Tab-delimited genotype table. Mutually exclusive with
            ``bfile``.
        bfile: PLINK binary file prefix (without .bed/.bim/.fam).
        impute: Imputation settings.
        output_dir: Directory for output files.
        output_prefix: Prefix for output filenames.
        labels: Write AA/AB/BB labels instead of integer codes.
        check_memory: If True, check available memory before imputing.
    """

    genotype_file: Path | None = None
    bfile: Path | None = None
    impute: ImputeConfig = field(default_factory=ImputeConfig)
    output_dir: Path = field(default_factory=lambda: Path("output"))
    output_prefix: str = "result"
    labels: bool = False
    check_memory: bool = True

    @property
    def output(self) -> OutputConfig:
        return OutputConfig(outdir=Path(self.output_dir), prefix=self.output_prefix)


@dataclass
class PipelineResult:
    """Result of a pipeline run.

    Attributes:
        imputation: In-memory imputation result.
        table: Imputed genotype table with identifiers.
        imputed_path: Path to the written imputed table.
        confidence_path: Path to the written confidence table.
        log_path: Path to the run log.
        timing: Timing breakdown by pipeline phase.
    """

    imputation: ImputationResult
    table: GenotypeTable
    imputed_path: Path
    confidence_path: Path
    log_path: Path
    timing: dict[str, float] = field(default_factory=dict)


class PipelineRunner:
    """Orchestrates a complete imputation run.

    Raises exceptions (ValueError, FileNotFoundError, MemoryError) rather
    than exiting. The CLI wrapper catches these and converts them to
    user-facing error messages.

    Args:
        config: Pipeline configuration.
        alphabet: Category codes and missing sentinel.
    """

    def __init__(
        self, config: PipelineConfig, alphabet: GenotypeAlphabet = DEFAULT_ALPHABET
    ) -> None:
        self.config = config
        self.alphabet = alphabet

    def validate_inputs(self) -> None:
        """Validate that exactly one input is given and that it exists.

        Raises:
            ValueError: If neither or both of genotype_file and bfile are set.
            FileNotFoundError: If the input file(s) are missing.
        """
        genotype_file, bfile = self.config.genotype_file, self.config.bfile
        if (genotype_file is None) == (bfile is None):
            raise ValueError("Specify exactly one of a genotype table or a PLINK bfile")

        if genotype_file is not None:
            if not Path(genotype_file).exists():
                raise FileNotFoundError(f"Genotype table not found: {genotype_file}")
        else:
            for ext in (".bed", ".bim", ".fam"):
                p = Path(f"{bfile}{ext}")
                if not p.exists():
                    raise FileNotFoundError(f"PLINK {ext} file not found: {p}")

    def load(self) -> GenotypeTable:
        """Load the configured input as a GenotypeTable."""
        if self.config.genotype_file is not None:
            return read_genotype_table(Path(self.config.genotype_file), self.alphabet)
        return load_plink_genotypes(Path(self.config.bfile), self.alphabet)

    def run(self, command_line: str = "genoimpute.impute_file") -> PipelineResult:
        """Execute the pipeline.

        Args:
            command_line: Invocation recorded in the run log.

        Returns:
            PipelineResult with output paths and timing.
        """
        t_start = time.perf_counter()
        self.validate_inputs()

        output = self.config.output
        output.ensure_outdir()

        t_load = time.perf_counter()
        table = self.load()
        load_s = time.perf_counter() - t_load

        imputation = impute_genotypes(
            table.genotypes,
            self.config.impute,
            self.alphabet,
            check_memory=self.config.check_memory,
        )

        imputed_table = GenotypeTable(
            genotypes=imputation.imputed,
            sample_ids=table.sample_ids,
            locus_ids=table.locus_ids,
        )
        write_genotype_table(
            imputed_table, output.imputed_path, self.alphabet, labels=self.config.labels
        )
        write_confidence_table(
            imputation.confidence,
            table.sample_ids,
            table.locus_ids,
            output.confidence_path,
        )
        logger.info(f"Imputed table written to {output.imputed_path}")

        total_s = time.perf_counter() - t_start
        timing = {
            "load": load_s,
            "distances": imputation.timing["distances_s"],
            "impute": imputation.timing["impute_s"],
            "total": total_s,
        }
        impute_config = self.config.impute
        params = {
            "n_samples": imputation.n_samples,
            "n_loci": imputation.n_loci,
            "n_missing": int(imputation.missing_mask.sum()),
            "n_imputed": imputation.n_imputed,
            "unresolved_loci": len(imputation.unresolved_loci),
            "k": impute_config.k,
            "tie_break": impute_config.tie_break,
            "normalize": impute_config.normalize,
            "on_insufficient": impute_config.on_insufficient,
            "on_all_missing": impute_config.on_all_missing,
        }
        log_path = write_run_log(output, params, timing, command_line)

        return PipelineResult(
            imputation=imputation,
            table=imputed_table,
            imputed_path=output.imputed_path,
            confidence_path=output.confidence_path,
            log_path=log_path,
            timing={f"{key}_s": value for key, value in timing.items()},
        )


def impute_file(
    genotype_file: str | Path,
    *,
    k: int = 3,
    tie_break: str = "lowest",
    normalize: bool = False,
    on_insufficient: str = "clamp",
    on_all_missing: str = "skip",
    n_jobs: int = 1,
    output_dir: str | Path = "output",
    output_prefix: str = "result",
    labels: bool = False,
    check_memory: bool = True,
) -> PipelineResult:
    """Impute a tab-delimited genotype table in a single call.

    Equivalent to the CLI ``genoimpute impute -geno`` command.

    Args:
        genotype_file: Tab-delimited genotype table.
        k, tie_break, normalize, on_insufficient, on_all_missing, n_jobs:
            Imputation settings, see ``ImputeConfig``.
        output_dir: Directory for output files (created if needed).
        output_prefix: Prefix for output filenames.
        labels: Write AA/AB/BB labels instead of integer codes.
        check_memory: If True, check available memory before imputing.

    Returns:
        PipelineResult with the imputation result and output paths.

    Example:
        >>> from genoimpute import impute_file
        >>> result = impute_file("data/dogs.txt", k=5, output_dir="results")
        >>> result.imputation.is_complete
        True
    """
    config = PipelineConfig(
        genotype_file=Path(genotype_file),
        impute=ImputeConfig(
            k=k,
            tie_break=tie_break,
            normalize=normalize,
            on_insufficient=on_insufficient,
            on_all_missing=on_all_missing,
            n_jobs=n_jobs,
        ),
        output_dir=Path(output_dir),
        output_prefix=output_prefix,
        labels=labels,
        check_memory=check_memory,
    )
    return PipelineRunner(config).run()
