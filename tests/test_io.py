"""Tests for genotype table and PLINK I/O."""

from pathlib import Path

import numpy as np
import pytest
from bed_reader import to_bed

from genoimpute.core import GenotypeAlphabet
from genoimpute.io import (
    GenotypeTable,
    dosage_to_codes,
    load_plink_genotypes,
    read_genotype_table,
    write_confidence_table,
    write_genotype_table,
)


@pytest.mark.tier0
class TestReadGenotypeTable:
    """Tests for read_genotype_table parsing."""

    def test_labels_and_missing_tokens(self, genotype_file: Path):
        table = read_genotype_table(genotype_file)
        assert table.sample_ids == ["dog01", "dog02", "dog03", "dog04", "dog05", "dog06"]
        assert table.locus_ids == ["snp1", "snp2", "snp3", "snp4"]
        assert table.n_samples == 6
        assert table.n_loci == 4
        np.testing.assert_array_equal(table.genotypes[0], [-1, -1, 0, 1])
        assert table.genotypes[1, 3] == -9  # NA
        assert table.genotypes[2, 1] == -9  # .

    def test_integer_codes_and_empty_cells(self, tmp_path: Path):
        path = tmp_path / "codes.txt"
        path.write_text("id\ta\tb\ns1\t-1\t\ns2\t1\t0\n\n")
        table = read_genotype_table(path)
        np.testing.assert_array_equal(table.genotypes, [[-1, -9], [1, 0]])

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match="not found"):
            read_genotype_table(tmp_path / "nope.txt")

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "empty.txt"
        path.write_text("")
        with pytest.raises(ValueError, match="empty"):
            read_genotype_table(path)

    def test_header_only(self, tmp_path: Path):
        path = tmp_path / "header.txt"
        path.write_text("sample\tsnp1\n")
        with pytest.raises(ValueError, match="no samples"):
            read_genotype_table(path)

    def test_no_locus_columns(self, tmp_path: Path):
        path = tmp_path / "ids.txt"
        path.write_text("sample\ndog01\n")
        with pytest.raises(ValueError, match="no locus columns"):
            read_genotype_table(path)

    def test_column_count_mismatch(self, tmp_path: Path):
        path = tmp_path / "ragged.txt"
        path.write_text("sample\tsnp1\tsnp2\ndog01\tAA\n")
        with pytest.raises(ValueError, match="line 2 has 2 columns"):
            read_genotype_table(path)

    def test_unparsable_cell(self, tmp_path: Path):
        path = tmp_path / "bad.txt"
        path.write_text("sample\tsnp1\ndog01\tXY\n")
        with pytest.raises(ValueError, match="cannot parse 'XY'"):
            read_genotype_table(path)

    def test_custom_alphabet_labels(self, tmp_path: Path):
        alphabet = GenotypeAlphabet(codes=(0, 1, 2, 3), labels=("A", "C", "G", "T"))
        path = tmp_path / "bases.txt"
        path.write_text("sample\tpos1\ns1\tG\ns2\tNA\n")
        table = read_genotype_table(path, alphabet)
        np.testing.assert_array_equal(table.genotypes, [[2], [-9]])


@pytest.mark.tier0
class TestWriteTables:
    """Tests for imputed and confidence table writers."""

    def test_round_trip_codes(self, genotype_file: Path, tmp_path: Path):
        table = read_genotype_table(genotype_file)
        out = tmp_path / "out" / "copy.txt"
        write_genotype_table(table, out)
        again = read_genotype_table(out)
        np.testing.assert_array_equal(again.genotypes, table.genotypes)
        assert again.sample_ids == table.sample_ids
        assert again.locus_ids == table.locus_ids
        assert out.read_text().splitlines()[2] == "dog02\t-1\t-1\t0\tNA"

    def test_labels(self, tmp_path: Path):
        table = GenotypeTable(
            genotypes=np.array([[-1, 0], [1, -9]]),
            sample_ids=["a", "b"],
            locus_ids=["x", "y"],
        )
        out = tmp_path / "labels.txt"
        write_genotype_table(table, out, labels=True)
        assert out.read_text() == "sample\tx\ty\na\tAA\tAB\nb\tBB\tNA\n"

    def test_confidence_table(self, tmp_path: Path):
        confidence = np.array([[np.nan, 2 / 3], [1.0, np.nan]])
        out = tmp_path / "conf.txt"
        write_confidence_table(confidence, ["a", "b"], ["x", "y"], out)
        assert out.read_text() == "sample\tx\ty\na\tNA\t0.6667\nb\t1\tNA\n"


@pytest.mark.tier0
class TestPlink:
    """Tests for PLINK dosage conversion and loading."""

    def test_dosage_to_codes(self):
        dosages = np.array([[0.0, 1.0], [2.0, np.nan]])
        np.testing.assert_array_equal(dosage_to_codes(dosages), [[-1, 0], [1, -9]])

    def test_invalid_dosage(self):
        with pytest.raises(ValueError, match="0, 1, 2"):
            dosage_to_codes(np.array([[0.5, 1.0]]))

    def test_requires_three_categories(self):
        alphabet = GenotypeAlphabet(codes=(0, 1), labels=("A", "B"))
        with pytest.raises(ValueError, match="3-category"):
            dosage_to_codes(np.array([[0.0, 1.0]]), alphabet)

    def test_load_plink(self, tmp_path: Path):
        dosages = np.array(
            [[0, 1, 2], [2, np.nan, 0], [1, 1, np.nan], [0, 2, 2]], dtype=np.float32
        )
        to_bed(
            tmp_path / "toy.bed",
            dosages,
            properties={
                "iid": ["s1", "s2", "s3", "s4"],
                "sid": ["rs1", "rs2", "rs3"],
            },
        )
        table = load_plink_genotypes(tmp_path / "toy")
        assert table.sample_ids == ["s1", "s2", "s3", "s4"]
        assert table.locus_ids == ["rs1", "rs2", "rs3"]
        np.testing.assert_array_equal(
            table.genotypes, [[-1, 0, 1], [1, -9, -1], [0, 0, -9], [-1, 1, 1]]
        )

    def test_missing_bed(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError, match=".bed"):
            load_plink_genotypes(tmp_path / "absent")
