#!/usr/bin/env python3

"""
Core data structures for the gene renaming pipeline.

Defines the annotation record, the tagged results of identifier
decomposition, the per-transcript child counters shared by both renumbering
passes, and the per-sequence record groups used for output.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union


GENE_TYPES = ('gene',)
TRANSCRIPT_TYPES = ('mRNA', 'tRNA')
CHILD_TYPES = ('exon', 'CDS', 'five_prime_UTR', 'three_prime_UTR')
VALID_STRANDS = ('+', '-', '.', '?')


@dataclass
class FeatureRecord:
    """One GFF3 feature line. Attribute order is preserved on output."""
    seq_id: str
    source: str
    feature_type: str
    start: int
    end: int
    score: str = "."
    strand: str = "."
    phase: str = "."
    attributes: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        """Validate record data after initialization."""
        if self.start > self.end:
            raise ValueError(f"Invalid feature coordinates: {self.start}-{self.end}")
        if self.strand not in VALID_STRANDS:
            raise ValueError(f"Invalid strand: {self.strand}")

    @property
    def id(self) -> Optional[str]:
        """Get the ID attribute, if any."""
        return self.attributes.get('ID')

    @property
    def length(self) -> int:
        """Get feature length."""
        return self.end - self.start + 1

    def format_attributes(self) -> str:
        """Render column 9 in insertion order."""
        return ";".join(f"{key}={value}" for key, value in self.attributes.items())

    def to_gff_line(self) -> str:
        """Render the record as a GFF3 line (without newline)."""
        return "\t".join([
            self.seq_id, self.source, self.feature_type,
            str(self.start), str(self.end), self.score,
            self.strand, self.phase, self.format_attributes(),
        ])


@dataclass(frozen=True)
class GeneParts:
    """Components of a gene identifier: program-locus-status-gene-N1.N2"""
    program: str
    locus: str
    status: str
    locus_code: int
    gene_code: int
    is_trna: bool = False

    @property
    def serial(self) -> int:
        """Generator gene numbers are zero-based."""
        return self.gene_code + 1

    @property
    def provenance(self) -> str:
        return f"{self.program}-{self.status}"


@dataclass(frozen=True)
class TranscriptParts:
    """Gene identifier followed by -mRNA-M or -tRNA-M."""
    gene: GeneParts
    kind: str
    ordinal: int


@dataclass(frozen=True)
class ChildParts:
    """Transcript identifier carrying a :type[:K] or :typeK child tag."""
    transcript: TranscriptParts
    tag: str
    ordinal: Optional[int] = None

    @property
    def gene(self) -> GeneParts:
        return self.transcript.gene


@dataclass(frozen=True)
class Unstructured:
    """Identifier without the generator's delimiter structure."""
    identifier: str
    provenance: str = ""


IdentifierParts = Union[GeneParts, TranscriptParts, ChildParts, Unstructured]


@dataclass
class TranscriptCounts:
    """
    Child counters for one transcript, keyed by the transcript's new ID.

    ``totals`` is filled while ingesting records in file order; ``running``
    is reset and advanced while emitting to compute final ordinals.
    """
    transcript_id: str
    strand: str = "."
    totals: Dict[str, int] = field(default_factory=lambda: {t: 0 for t in CHILD_TYPES})
    running: Dict[str, int] = field(default_factory=lambda: {t: 0 for t in CHILD_TYPES})

    def add_child(self, feature_type: str) -> int:
        """Count one more child of this type; returns its file-order serial."""
        self.totals[feature_type] = self.totals.get(feature_type, 0) + 1
        return self.totals[feature_type]

    def reset_running(self) -> None:
        for feature_type in self.running:
            self.running[feature_type] = 0

    def next_ordinal(self, feature_type: str) -> int:
        """Advance the emission counter and return the strand-aware ordinal."""
        self.running[feature_type] = self.running.get(feature_type, 0) + 1
        running = self.running[feature_type]
        if self.strand == '-':
            return self.totals.get(feature_type, 0) - running + 1
        return running


@dataclass(frozen=True)
class ChildLink:
    """What the second pass needs to finalize one child record."""
    raw_id: str
    transcript_id: str
    feature_type: str
    provisional_id: str
    owns_mapping: bool = True


@dataclass
class SeqIdGroup:
    """Records sharing one sequence identifier, in original file order."""
    seq_id: str
    records: List[FeatureRecord] = field(default_factory=list)
    links: List[Optional[ChildLink]] = field(default_factory=list)

    def add(self, record: FeatureRecord, link: Optional[ChildLink] = None) -> None:
        if record.seq_id != self.seq_id:
            raise ValueError(f"Record on {record.seq_id} added to group {self.seq_id}")
        self.records.append(record)
        self.links.append(link)

    @property
    def is_featureless(self) -> bool:
        """A group holding only the bare region declaration."""
        return len(self.records) == 1

    def region(self) -> Tuple[int, int]:
        """Region bounds taken from the first record."""
        if not self.records:
            return 0, 0
        first = self.records[0]
        return first.start, first.end


@dataclass
class FastaEntry:
    """A FASTA record; sequence lines are kept as read."""
    identifier: str
    description: str = ""
    sequence_lines: List[str] = field(default_factory=list)

    @property
    def header(self) -> str:
        if self.description:
            return f">{self.identifier} {self.description}"
        return f">{self.identifier}"

    @property
    def sequence(self) -> str:
        return "".join(self.sequence_lines)
