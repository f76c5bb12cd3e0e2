#!/usr/bin/env python3

"""
Unit tests for core data structures.
"""

import unittest
import sys
import os

# Add the parent directory to the path to import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from gene_renaming_pipeline.core.data_structures import (
    ChildLink, FastaEntry, FeatureRecord, SeqIdGroup, TranscriptCounts
)


class TestFeatureRecord(unittest.TestCase):
    """Test FeatureRecord data structure."""

    def test_valid_record(self):
        """Test creating valid feature record."""
        record = FeatureRecord(
            seq_id="Ctg1",
            source="maker",
            feature_type="gene",
            start=100,
            end=200,
            strand="+",
            attributes={"ID": "maker-Ctg1-abinit-gene-0.0", "Name": "x"}
        )

        self.assertEqual(record.id, "maker-Ctg1-abinit-gene-0.0")
        self.assertEqual(record.length, 101)

    def test_invalid_coordinates(self):
        """Test invalid coordinate validation."""
        with self.assertRaises(ValueError):
            FeatureRecord("Ctg1", "maker", "exon", 200, 100, strand="+")

    def test_invalid_strand(self):
        """Test invalid strand validation."""
        with self.assertRaises(ValueError):
            FeatureRecord("Ctg1", "maker", "exon", 100, 200, strand="x")

    def test_missing_id(self):
        record = FeatureRecord("Ctg1", "maker", "contig", 1, 10)
        self.assertIsNone(record.id)

    def test_gff_line_keeps_attribute_order(self):
        record = FeatureRecord("Ctg1", "maker", "CDS", 10, 20, score="0.5", strand="-", phase="2",
                               attributes={"ID": "a", "Parent": "b", "Note": "c"})
        self.assertEqual(record.to_gff_line(),
                         "Ctg1\tmaker\tCDS\t10\t20\t0.5\t-\t2\tID=a;Parent=b;Note=c")


class TestTranscriptCounts(unittest.TestCase):
    """Test strand-aware child ordinals."""

    def _counts(self, strand, exons):
        counts = TranscriptCounts("T.1", strand=strand)
        for _ in range(exons):
            counts.add_child("exon")
        return counts

    def test_add_child_returns_serial(self):
        counts = TranscriptCounts("T.1")
        self.assertEqual(counts.add_child("exon"), 1)
        self.assertEqual(counts.add_child("exon"), 2)
        self.assertEqual(counts.add_child("CDS"), 1)
        self.assertEqual(counts.totals["exon"], 2)

    def test_plus_strand_ordinals(self):
        counts = self._counts("+", 3)
        self.assertEqual([counts.next_ordinal("exon") for _ in range(3)], [1, 2, 3])

    def test_minus_strand_ordinals(self):
        counts = self._counts("-", 3)
        self.assertEqual([counts.next_ordinal("exon") for _ in range(3)], [3, 2, 1])

    def test_reset_running(self):
        counts = self._counts("-", 2)
        counts.next_ordinal("exon")
        counts.reset_running()
        self.assertEqual(counts.next_ordinal("exon"), 2)

    def test_types_counted_independently(self):
        counts = TranscriptCounts("T.1", strand="-")
        for feature_type in ["exon", "CDS", "exon", "CDS", "CDS"]:
            counts.add_child(feature_type)
        self.assertEqual(counts.next_ordinal("CDS"), 3)
        self.assertEqual(counts.next_ordinal("exon"), 2)


class TestSeqIdGroup(unittest.TestCase):
    """Test per-sequence grouping."""

    def test_add_and_region(self):
        group = SeqIdGroup("Ctg1")
        region = FeatureRecord("Ctg1", ".", "contig", 1, 5000)
        exon = FeatureRecord("Ctg1", "maker", "exon", 10, 20, strand="+")
        link = ChildLink("raw:exon:1", "T.1", "exon", "T.1:exon:001")

        group.add(region)
        self.assertTrue(group.is_featureless)
        group.add(exon, link)

        self.assertFalse(group.is_featureless)
        self.assertEqual(group.region(), (1, 5000))
        self.assertEqual(group.links, [None, link])

    def test_rejects_other_sequence(self):
        group = SeqIdGroup("Ctg1")
        with self.assertRaises(ValueError):
            group.add(FeatureRecord("Ctg2", ".", "contig", 1, 10))

    def test_empty_region(self):
        self.assertEqual(SeqIdGroup("Ctg1").region(), (0, 0))


class TestFastaEntry(unittest.TestCase):
    """Test FASTA entry helpers."""

    def test_header_and_sequence(self):
        entry = FastaEntry("NbC1g0001.1", "protein AED:0.12", ["MKT", "LLV"])
        self.assertEqual(entry.header, ">NbC1g0001.1 protein AED:0.12")
        self.assertEqual(entry.sequence, "MKTLLV")
        self.assertEqual(FastaEntry("x").header, ">x")


if __name__ == '__main__':
    unittest.main()
