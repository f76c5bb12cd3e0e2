#!/usr/bin/env python3

"""
Unit tests for identifier decomposition.

Covers the gene, transcript and child identifier forms, the noncoding
normalization and the pass-through of unstructured identifiers.
"""

import unittest
import sys
import os

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from gene_renaming_pipeline.core.data_structures import (
    ChildParts, GeneParts, TranscriptParts, Unstructured
)
from gene_renaming_pipeline.core.decomposer import (
    decompose, is_trna_identifier, normalize_identifier
)


GENE_ID = "augustus_masked-NbC23129049-abinit-gene-0.0"


class TestGeneForm(unittest.TestCase):
    """Test five-field gene identifiers."""

    def test_gene_components(self):
        parts = decompose(GENE_ID)

        self.assertIsInstance(parts, GeneParts)
        self.assertEqual(parts.program, "augustus_masked")
        self.assertEqual(parts.locus, "NbC23129049")
        self.assertEqual(parts.status, "abinit")
        self.assertEqual(parts.locus_code, 0)
        self.assertEqual(parts.gene_code, 0)
        self.assertFalse(parts.is_trna)

    def test_serial_is_one_based(self):
        """N2 is zero-based in generator IDs."""
        parts = decompose("snap_masked-Ctg7-processed-gene-45.12")
        self.assertEqual(parts.locus_code, 45)
        self.assertEqual(parts.gene_code, 12)
        self.assertEqual(parts.serial, 13)

    def test_provenance(self):
        self.assertEqual(decompose(GENE_ID).provenance, "augustus_masked-abinit")

    def test_noncoding_variant(self):
        """The six-field noncoding form collapses to five fields."""
        parts = decompose("trnascan-Ctg3-noncoding-Ala_AGC-gene-2.1")

        self.assertIsInstance(parts, GeneParts)
        self.assertEqual(parts.status, "noncoding_Ala_AGC")
        self.assertEqual(parts.locus, "Ctg3")
        self.assertEqual(parts.serial, 2)
        self.assertTrue(parts.is_trna)

    def test_normalize_identifier(self):
        self.assertEqual(normalize_identifier("x-noncoding-Ala"), "x-noncoding_Ala")
        self.assertEqual(normalize_identifier("x-abinit-gene"), "x-abinit-gene")


class TestTranscriptAndChildForms(unittest.TestCase):
    """Test seven-field transcript identifiers and child tags."""

    def test_transcript(self):
        parts = decompose("maker-Ctg1-exonerate_est2genome-gene-3.2-mRNA-4")

        self.assertIsInstance(parts, TranscriptParts)
        self.assertEqual(parts.kind, "mRNA")
        self.assertEqual(parts.ordinal, 4)
        self.assertEqual(parts.gene.locus_code, 3)
        self.assertEqual(parts.gene.serial, 3)

    def test_trna_transcript(self):
        parts = decompose("trnascan-Ctg3-noncoding-Ala_AGC-gene-2.1-tRNA-1")
        self.assertIsInstance(parts, TranscriptParts)
        self.assertEqual(parts.kind, "tRNA")
        self.assertTrue(parts.gene.is_trna)

    def test_child_with_explicit_ordinal(self):
        parts = decompose(f"{GENE_ID}-mRNA-1:exon:7")

        self.assertIsInstance(parts, ChildParts)
        self.assertEqual(parts.tag, "exon")
        self.assertEqual(parts.ordinal, 7)
        self.assertEqual(parts.transcript.ordinal, 1)
        self.assertEqual(parts.gene.locus, "NbC23129049")

    def test_child_without_ordinal(self):
        """All CDS segments of a transcript share one ID."""
        parts = decompose(f"{GENE_ID}-mRNA-2:cds")
        self.assertIsInstance(parts, ChildParts)
        self.assertEqual(parts.tag, "cds")
        self.assertIsNone(parts.ordinal)
        self.assertEqual(parts.transcript.ordinal, 2)

    def test_child_with_appended_ordinal(self):
        parts = decompose(f"{GENE_ID}-mRNA-1:exon12")
        self.assertEqual(parts.tag, "exon")
        self.assertEqual(parts.ordinal, 12)

    def test_utr_tag(self):
        parts = decompose(f"{GENE_ID}-mRNA-1:five_prime_utr")
        self.assertEqual(parts.tag, "five_prime_utr")
        self.assertIsNone(parts.ordinal)


class TestUnstructured(unittest.TestCase):
    """Identifiers that do not follow the generator layout pass through."""

    def test_no_delimiter(self):
        parts = decompose("scaffold_12")
        self.assertIsInstance(parts, Unstructured)
        self.assertEqual(parts.identifier, "scaffold_12")
        self.assertEqual(parts.provenance, "")

    def test_unrecognized_shapes(self):
        for identifier in [
            "a-b-c-d",
            "prog-loc-stat-gene-x.y",
            "prog-loc-stat-notgene-1.0",
            "prog-loc-stat-gene-1.0-ncRNA-1",
            "prog-loc-stat-gene-1.0-mRNA-x",
            "prog-loc-stat-extra-gene-1.0",
            "prog-loc-stat-gene-1.0-mRNA-1:exon:x",
        ]:
            with self.subTest(identifier=identifier):
                self.assertIsInstance(decompose(identifier), Unstructured)

    def test_unstructured_keeps_original_text(self):
        """Normalization never leaks into pass-through identifiers."""
        parts = decompose("x-noncoding-y")
        self.assertEqual(parts.identifier, "x-noncoding-y")


class TestTrnaDetection(unittest.TestCase):
    """tRNA detection reads the raw identifier, case-insensitively."""

    def test_is_trna_identifier(self):
        self.assertTrue(is_trna_identifier("tRNAscan-Ctg1-noncoding-x-gene-0.0"))
        self.assertTrue(is_trna_identifier("TRNASCAN-Ctg1"))
        self.assertFalse(is_trna_identifier("augustus_masked-Ctg1-abinit-gene-0.0"))

    def test_raw_identifier_decides(self):
        """A rule may remove the tRNA marker; the raw ID still counts."""
        parts = decompose("prog-Ctg1-noncoding_Ala-gene-1.0",
                          raw_identifier="trnascan-Ctg1-noncoding_Ala-gene-1.0")
        self.assertTrue(parts.is_trna)

        parts = decompose("trnascan-Ctg1-noncoding_Ala-gene-1.0",
                          raw_identifier="other-Ctg1-noncoding_Ala-gene-1.0")
        self.assertFalse(parts.is_trna)


if __name__ == '__main__':
    unittest.main()
