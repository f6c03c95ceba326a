"""Tab-delimited genotype table I/O.

Table format:
- First row is a header: a sample-ID column name followed by locus IDs
- One row per sample: sample ID followed by one genotype per locus
- Genotypes are integer codes (-1, 0, 1) or alphabet labels (AA, AB, BB)
- Missing genotypes are "NA", "." or an empty cell
- Tab separated; blank lines are skipped

Example:
    ```
    sample	snp1	snp2	snp3
    dog01	AA	AB	NA
    dog02	BB	AB	AA
    ```
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from loguru import logger

from genoimpute.core.alphabet import DEFAULT_ALPHABET, GenotypeAlphabet

MISSING_TOKENS = frozenset({"NA", ".", ""})


@dataclass
class GenotypeTable:
    """Genotype matrix with sample and locus identifiers.

    Attributes:
        genotypes: int64 matrix (n_samples, n_loci) of codes and the sentinel.
        sample_ids: Row identifiers.
        locus_ids: Column identifiers.
    """

    genotypes: np.ndarray
    sample_ids: list[str]
    locus_ids: list[str]

    @property
    def n_samples(self) -> int:
        """Number of samples in the table."""
        return self.genotypes.shape[0]

    @property
    def n_loci(self) -> int:
        """Number of loci in the table."""
        return self.genotypes.shape[1]


def _parse_cell(token: str, alphabet: GenotypeAlphabet, row: int, col: int) -> int:
    if token in MISSING_TOKENS:
        return alphabet.missing
    if token in alphabet.labels:
        return alphabet.code_for_label(token)
    try:
        return int(token)
    except ValueError as e:
        raise ValueError(
            f"Genotype table row {row}, column {col}: cannot parse {token!r} "
            f"(use a code, one of {list(alphabet.labels)}, or NA)"
        ) from e


def read_genotype_table(
    path: Path, alphabet: GenotypeAlphabet = DEFAULT_ALPHABET
) -> GenotypeTable:
    """Read a tab-delimited genotype table.

    Cells are parsed to integer codes; category validity is checked later
    by the imputer.

    Args:
        path: Path to the table.
        alphabet: Labels and sentinel used to decode cells.

    Returns:
        GenotypeTable with the parsed matrix and identifiers.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file has no header or data rows, rows have
            inconsistent column counts, or a cell cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Genotype table not found: {path}")

    header: list[str] | None = None
    sample_ids: list[str] = []
    rows: list[list[int]] = []

    with open(path) as f:
        for line_no, line in enumerate(f, start=1):
            stripped = line.rstrip("\r\n")
            if not stripped.strip():
                continue
            parts = stripped.split("\t")
            if header is None:
                header = parts
                continue
            if len(parts) != len(header):
                raise ValueError(
                    f"Genotype table line {line_no} has {len(parts)} columns "
                    f"but header has {len(header)}"
                )
            sample_ids.append(parts[0])
            rows.append(
                [
                    _parse_cell(token, alphabet, line_no, col)
                    for col, token in enumerate(parts[1:], start=2)
                ]
            )

    if header is None:
        raise ValueError(f"Genotype table is empty: {path}")
    if not rows:
        raise ValueError(f"Genotype table has a header but no samples: {path}")
    if len(header) < 2:
        raise ValueError(f"Genotype table has no locus columns: {path}")

    genotypes = np.array(rows, dtype=np.int64)
    logger.info(
        f"Read genotype table {path.name}: {genotypes.shape[0]} samples, "
        f"{genotypes.shape[1]} loci"
    )
    return GenotypeTable(
        genotypes=genotypes, sample_ids=sample_ids, locus_ids=header[1:]
    )


def write_genotype_table(
    table: GenotypeTable,
    path: Path,
    alphabet: GenotypeAlphabet = DEFAULT_ALPHABET,
    labels: bool = False,
) -> None:
    """Write a genotype table in the format read by ``read_genotype_table``.

    Args:
        table: Table to write.
        path: Output path; parent directories are created.
        alphabet: Labels and sentinel used to encode cells.
        labels: Write alphabet labels (AA/AB/BB) instead of integer codes.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    def encode(code: int) -> str:
        if code == alphabet.missing:
            return "NA"
        return alphabet.label_for_code(code) if labels else str(code)

    with open(path, "w") as f:
        f.write("\t".join(["sample", *table.locus_ids]) + "\n")
        for sample_id, row in zip(table.sample_ids, table.genotypes):
            f.write("\t".join([sample_id, *(encode(int(v)) for v in row)]) + "\n")


def write_confidence_table(
    confidence: np.ndarray,
    sample_ids: list[str],
    locus_ids: list[str],
    path: Path,
) -> None:
    """Write per-cell imputation confidences; non-imputed cells are NA.

    Args:
        confidence: Float matrix (n_samples, n_loci), NaN where not imputed.
        sample_ids: Row identifiers.
        locus_ids: Column identifiers.
        path: Output path; parent directories are created.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        f.write("\t".join(["sample", *locus_ids]) + "\n")
        for sample_id, row in zip(sample_ids, confidence):
            values = ["NA" if np.isnan(v) else f"{v:.4g}" for v in row]
            f.write("\t".join([sample_id, *values]) + "\n")
