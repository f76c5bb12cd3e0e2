#!/usr/bin/env python3

"""
Zero-padding widths for the numeric parts of new identifiers.

The counter format vector has five slots::

    [gene, transcript, exon, cds, utr]

The gene slot is either one width for the concatenated ``N1`` and ``N2+1``
(``"6"``) or two independent widths (``"2+4"``). Gene and transcript widths
left out are inferred from a full scan of the input; child widths default
to 3.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from .data_structures import (
    ChildParts, FeatureRecord, GeneParts, TranscriptParts,
    GENE_TYPES, TRANSCRIPT_TYPES,
)
from .decomposer import decompose
from .exceptions import ConfigurationError
from .rules import RenameRule, apply_rules

COUNTER_SLOTS = 5
DEFAULT_CHILD_WIDTH = 3

CHILD_WIDTH_SLOTS = {
    'exon': 'exon',
    'CDS': 'cds',
    'five_prime_UTR': 'utr',
    'three_prime_UTR': 'utr',
}


@dataclass(frozen=True)
class GeneWidth:
    """Width of the gene code, single (``total``) or compound (``locus+serial``)."""
    total: Optional[int] = None
    locus_width: Optional[int] = None
    serial_width: Optional[int] = None

    def __post_init__(self):
        if self.total is None and (self.locus_width is None or self.serial_width is None):
            raise ValueError("GeneWidth needs a total width or both compound widths")

    @property
    def compound(self) -> bool:
        return self.total is None

    @classmethod
    def parse(cls, text: str) -> 'GeneWidth':
        """Parse ``"N"`` or ``"a+b"``."""
        if '+' in text:
            locus, _, serial = text.partition('+')
            return cls(locus_width=_parse_width(locus, 'gene'), serial_width=_parse_width(serial, 'gene'))
        return cls(total=_parse_width(text, 'gene'))

    def format(self, locus_code: int, serial: int) -> str:
        if self.compound:
            return f"{locus_code:0{self.locus_width}d}{serial:0{self.serial_width}d}"
        return f"{locus_code}{serial}".zfill(self.total)

    def __str__(self):
        if self.compound:
            return f"{self.locus_width}+{self.serial_width}"
        return str(self.total)


@dataclass(frozen=True)
class CounterFormatSpec:
    """Counter format as configured; ``None`` gene/transcript means infer."""
    gene: Optional[GeneWidth] = None
    transcript: Optional[int] = None
    exon: int = DEFAULT_CHILD_WIDTH
    cds: int = DEFAULT_CHILD_WIDTH
    utr: int = DEFAULT_CHILD_WIDTH


@dataclass(frozen=True)
class CounterFormat:
    """Fully resolved widths used by both renumbering passes."""
    gene: GeneWidth
    transcript: int
    exon: int = DEFAULT_CHILD_WIDTH
    cds: int = DEFAULT_CHILD_WIDTH
    utr: int = DEFAULT_CHILD_WIDTH

    def format_gene(self, parts: GeneParts) -> str:
        return self.gene.format(parts.locus_code, parts.serial)

    def format_transcript(self, ordinal: int) -> str:
        return f"{ordinal:0{self.transcript}d}"

    def child_width(self, feature_type: str) -> int:
        return getattr(self, CHILD_WIDTH_SLOTS[feature_type])

    def format_child(self, feature_type: str, ordinal: int) -> str:
        return f"{ordinal:0{self.child_width(feature_type)}d}"

    def child_id(self, transcript_id: str, feature_type: str, ordinal: int) -> str:
        """``<transcript>:<type>:<ordinal>``, e.g. ``NbC1g0001.1:exon:003``"""
        return f"{transcript_id}:{feature_type.lower()}:{self.format_child(feature_type, ordinal)}"

    def __str__(self):
        return f"{self.gene},{self.transcript},{self.exon},{self.cds},{self.utr}"


def _parse_width(value: Union[str, int], slot: str) -> int:
    try:
        width = int(str(value).strip())
    except ValueError:
        raise ConfigurationError(f"Invalid {slot} width in counter format: {value!r}")
    if width < 1:
        raise ConfigurationError(f"{slot} width must be >= 1, got {width}")
    return width


def parse_counter_format(values: Union[str, Sequence[Union[str, int]], None]) -> CounterFormatSpec:
    """
    Parse a counter format vector.

    Accepts a comma separated string or a list of up to five values. Missing
    or empty slots are right-filled with defaults.
    """
    if values is None:
        return CounterFormatSpec()
    if isinstance(values, str):
        values = values.split(',') if values.strip() else []

    slots = [str(v).strip() for v in values]
    if len(slots) > COUNTER_SLOTS:
        raise ConfigurationError(
            f"Counter format takes at most {COUNTER_SLOTS} values, got {len(slots)}")
    slots += [''] * (COUNTER_SLOTS - len(slots))

    gene_text, transcript_text, exon_text, cds_text, utr_text = slots
    return CounterFormatSpec(
        gene=GeneWidth.parse(gene_text) if gene_text else None,
        transcript=_parse_width(transcript_text, 'transcript') if transcript_text else None,
        exon=_parse_width(exon_text, 'exon') if exon_text else DEFAULT_CHILD_WIDTH,
        cds=_parse_width(cds_text, 'cds') if cds_text else DEFAULT_CHILD_WIDTH,
        utr=_parse_width(utr_text, 'utr') if utr_text else DEFAULT_CHILD_WIDTH,
    )


def infer_gene_width(records: Iterable[FeatureRecord], rules: Sequence[RenameRule] = ()) -> GeneWidth:
    """Compound width from the largest N1 and N2+1 over all gene records."""
    max_locus = 0
    max_serial = 0
    for record in records:
        if record.feature_type not in GENE_TYPES or not record.id:
            continue
        parts = decompose(apply_rules(record.id, rules), record.id)
        if isinstance(parts, (TranscriptParts, ChildParts)):
            parts = parts.gene
        if isinstance(parts, GeneParts):
            max_locus = max(max_locus, parts.locus_code)
            max_serial = max(max_serial, parts.serial)

    return GeneWidth(locus_width=len(str(max_locus)), serial_width=len(str(max_serial)))


def infer_transcript_width(records: Iterable[FeatureRecord], rules: Sequence[RenameRule] = ()) -> int:
    """Width of the largest transcript ordinal over all transcript records."""
    max_ordinal = 0
    for record in records:
        if record.feature_type not in TRANSCRIPT_TYPES or not record.id:
            continue
        parts = decompose(apply_rules(record.id, rules), record.id)
        if isinstance(parts, ChildParts):
            parts = parts.transcript
        if isinstance(parts, TranscriptParts):
            max_ordinal = max(max_ordinal, parts.ordinal)

    return len(str(max_ordinal))


def resolve_counter_format(spec: CounterFormatSpec, records: Sequence[FeatureRecord],
                           rules: Sequence[RenameRule] = ()) -> CounterFormat:
    """Fill unsupplied slots by scanning the records."""
    gene_width = spec.gene
    if gene_width is None:
        gene_width = infer_gene_width(records, rules)
        logging.info(f"Inferred gene code width: {gene_width}")

    transcript_width = spec.transcript
    if transcript_width is None:
        transcript_width = infer_transcript_width(records, rules)
        logging.info(f"Inferred transcript width: {transcript_width}")

    return CounterFormat(
        gene=gene_width,
        transcript=transcript_width,
        exon=spec.exon,
        cds=spec.cds,
        utr=spec.utr,
    )
