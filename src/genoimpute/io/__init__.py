"""I/O modules for genoimpute.

This package contains readers and writers for genotype inputs and results:
- table: Tab-delimited genotype tables and confidence tables
- plink: PLINK binary format (.bed/.bim/.fam) input
"""

from genoimpute.io.plink import dosage_to_codes, load_plink_genotypes
from genoimpute.io.table import (
    GenotypeTable,
    read_genotype_table,
    write_confidence_table,
    write_genotype_table,
)

__all__ = [
    "GenotypeTable",
    "dosage_to_codes",
    "load_plink_genotypes",
    "read_genotype_table",
    "write_confidence_table",
    "write_genotype_table",
]
