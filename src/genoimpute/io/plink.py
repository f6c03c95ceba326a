"""PLINK binary genotype loading using bed-reader.

PLINK .bed files store allele dosages (0 = hom ref, 1 = het, 2 = hom alt,
missing = NaN). Dosages map onto the three categories of a biallelic
alphabet in order, so with the default alphabet 0/1/2 become -1/0/+1
(AA/AB/BB) and missing calls become the sentinel.
"""

from pathlib import Path

import numpy as np
from bed_reader import open_bed
from loguru import logger

from genoimpute.core.alphabet import DEFAULT_ALPHABET, GenotypeAlphabet
from genoimpute.io.table import GenotypeTable


def dosage_to_codes(
    dosages: np.ndarray, alphabet: GenotypeAlphabet = DEFAULT_ALPHABET
) -> np.ndarray:
    """Convert a 0/1/2/NaN dosage matrix to alphabet codes.

    Args:
        dosages: Float dosage matrix, NaN for missing.
        alphabet: Three-category alphabet receiving the dosages in order.

    Returns:
        int64 code matrix of the same shape.

    Raises:
        ValueError: If the alphabet does not have exactly three categories or
            a dosage is not 0, 1, 2 or NaN.
    """
    if alphabet.n_categories != 3:
        raise ValueError(
            f"PLINK dosages need a 3-category alphabet, got {alphabet.n_categories}"
        )

    missing = np.isnan(dosages)
    observed = dosages[~missing]
    if not np.isin(observed, (0.0, 1.0, 2.0)).all():
        raise ValueError("PLINK dosages must be 0, 1, 2 or missing")

    lookup = np.asarray(alphabet.codes, dtype=np.int64)
    codes = np.full(dosages.shape, alphabet.missing, dtype=np.int64)
    codes[~missing] = lookup[observed.astype(np.int64)]
    return codes


def load_plink_genotypes(
    bfile: Path, alphabet: GenotypeAlphabet = DEFAULT_ALPHABET
) -> GenotypeTable:
    """Load PLINK binary files (.bed/.bim/.fam) as a genotype table.

    Args:
        bfile: Path prefix for PLINK files (without .bed/.bim/.fam extension).
        alphabet: Three-category alphabet receiving the dosages.

    Returns:
        GenotypeTable with IID sample identifiers and SNP identifiers.

    Raises:
        FileNotFoundError: If the .bed file does not exist.

    Example:
        >>> table = load_plink_genotypes(Path("data/dogs"))
        >>> print(f"{table.n_samples} samples, {table.n_loci} SNPs")
    """
    bed_path = Path(f"{bfile}.bed")

    if not bed_path.exists():
        raise FileNotFoundError(f"PLINK .bed file not found: {bed_path}")

    with open_bed(bed_path) as bed:
        dosages = bed.read(dtype=np.float32)
        sample_ids = [str(iid) for iid in bed.iid]
        locus_ids = [str(sid) for sid in bed.sid]

    logger.info(
        f"Loaded PLINK {bed_path.name}: {dosages.shape[0]} samples, "
        f"{dosages.shape[1]} SNPs"
    )
    return GenotypeTable(
        genotypes=dosage_to_codes(dosages, alphabet),
        sample_ids=sample_ids,
        locus_ids=locus_ids,
    )
