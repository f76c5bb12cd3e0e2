#!/usr/bin/env python3

"""
Two-pass renaming of genes, transcripts and their child features.

Pass 1 (``FeatureRenamer``) walks the records in file order, assigns new
gene and transcript IDs, gives child features a provisional serial and
counts children per transcript. Pass 2 (``ChildRenumberer``) needs those
totals: on the minus strand the file-order serial is reversed so numbering
follows the direction of transcription.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .data_structures import (
    ChildLink, ChildParts, FeatureRecord, GeneParts, SeqIdGroup,
    TranscriptCounts, TranscriptParts, Unstructured,
    CHILD_TYPES, GENE_TYPES, TRANSCRIPT_TYPES,
)
from .decomposer import decompose
from .equivalence import EquivalenceTable
from .rules import RenameRule, apply_rules
from .widths import CounterFormat

GENE_INFIX = 'g'
TRNA_GENE_INFIX = 't'


@dataclass(frozen=True)
class IngestResult:
    """Everything Pass 1 produces and Pass 2 consumes."""
    groups: Dict[str, SeqIdGroup]
    transcripts: Dict[str, TranscriptCounts]
    table: EquivalenceTable
    stats: Counter = field(default_factory=Counter)

    @property
    def record_count(self) -> int:
        return sum(len(group.records) for group in self.groups.values())


class FeatureRenamer:
    """Pass 1: rename genes and transcripts, count children per transcript."""

    def __init__(self, counter_format: CounterFormat, rules: Sequence[RenameRule] = (),
                 exclude_types: Iterable[str] = ()):
        self.counter_format = counter_format
        self.rules = list(rules)
        self.exclude_types = set(exclude_types)

    def gene_id(self, parts: GeneParts) -> str:
        infix = TRNA_GENE_INFIX if parts.is_trna else GENE_INFIX
        return f"{parts.locus}{infix}{self.counter_format.format_gene(parts)}"

    def transcript_id(self, parts: TranscriptParts) -> str:
        return f"{self.gene_id(parts.gene)}.{self.counter_format.format_transcript(parts.ordinal)}"

    def ingest(self, records: Iterable[FeatureRecord]) -> IngestResult:
        """Run Pass 1 over all records in file order."""
        result = IngestResult(groups={}, transcripts={}, table=EquivalenceTable())

        for record in records:
            if record.feature_type in self.exclude_types:
                result.stats['excluded'] += 1
                continue

            link = None
            if record.feature_type in GENE_TYPES:
                self._rename_gene(record, result)
            elif record.feature_type in TRANSCRIPT_TYPES:
                self._rename_transcript(record, result)
            elif record.feature_type in CHILD_TYPES:
                link = self._rename_child(record, result)
            else:
                result.stats['passed_through'] += 1

            group = result.groups.get(record.seq_id)
            if group is None:
                group = result.groups[record.seq_id] = SeqIdGroup(record.seq_id)
            group.add(record, link)

        logging.info(f"Pass 1: {result.stats['genes']} genes, {result.stats['transcripts']} transcripts, "
                     f"{result.stats['children']} child features renamed; "
                     f"{result.stats['excluded']} records excluded")
        return result

    def _raw_id(self, record: FeatureRecord, result: IngestResult) -> Optional[str]:
        """The record's ID; without one only its Parent is rewritten."""
        raw_id = record.id
        if not raw_id:
            logging.warning(f"{record.feature_type} record on {record.seq_id}:{record.start}-{record.end} "
                            f"has no ID attribute; only Parent rewritten")
            result.stats['missing_id'] += 1
            parents = self._mapped_parents(record)
            if parents:
                record.attributes['Parent'] = ",".join(parents)
        return raw_id

    def _set_identity(self, record: FeatureRecord, new_id: str) -> None:
        record.attributes['ID'] = new_id
        if 'Name' in record.attributes:
            record.attributes['Name'] = new_id

    def _rename_gene(self, record: FeatureRecord, result: IngestResult) -> None:
        raw_id = self._raw_id(record, result)
        if not raw_id:
            return

        identifier = apply_rules(raw_id, self.rules)
        parts = decompose(identifier, raw_id)
        if isinstance(parts, (TranscriptParts, ChildParts)):
            parts = parts.gene

        if isinstance(parts, GeneParts):
            new_id = self.gene_id(parts)
            note = parts.provenance
        else:
            new_id = identifier
            note = ""

        self._set_identity(record, new_id)
        if note:
            record.attributes['PredictionNote'] = note
        record.attributes['AltID'] = raw_id
        result.table.assign(raw_id, new_id)
        result.stats['genes'] += 1

    def _rename_transcript(self, record: FeatureRecord, result: IngestResult) -> None:
        raw_id = self._raw_id(record, result)
        if not raw_id:
            return

        identifier = apply_rules(raw_id, self.rules)
        parts = decompose(identifier, raw_id)
        if isinstance(parts, ChildParts):
            parts = parts.transcript

        if isinstance(parts, TranscriptParts):
            new_id = self.transcript_id(parts)
            parent_id = self.gene_id(parts.gene)
        else:
            new_id = identifier
            parent_id = ",".join(self._mapped_parents(record))

        self._set_identity(record, new_id)
        if parent_id:
            record.attributes['Parent'] = parent_id
        record.attributes['AltID'] = raw_id
        result.table.assign(raw_id, new_id)

        counts = result.transcripts.get(new_id)
        if counts is None:
            counts = result.transcripts[new_id] = TranscriptCounts(new_id)
        counts.strand = record.strand
        result.stats['transcripts'] += 1

    def _rename_child(self, record: FeatureRecord, result: IngestResult) -> Optional[ChildLink]:
        raw_id = self._raw_id(record, result)
        if not raw_id:
            return None

        parts = decompose(apply_rules(raw_id, self.rules), raw_id)
        if isinstance(parts, ChildParts):
            parts = parts.transcript

        # Shared exons list every isoform; the first parent owns the counter
        parents = self._mapped_parents(record)
        if isinstance(parts, TranscriptParts):
            transcript_id = self.transcript_id(parts)
        else:
            transcript_id = parents[0] if parents else None
        if not transcript_id:
            result.stats['passed_through'] += 1
            return None

        counts = result.transcripts.get(transcript_id)
        if counts is None:
            # Transcript not seen yet; its own record refreshes the strand
            counts = result.transcripts[transcript_id] = TranscriptCounts(transcript_id, strand=record.strand)

        serial = counts.add_child(record.feature_type)
        provisional_id = self.counter_format.child_id(transcript_id, record.feature_type, serial)

        self._set_identity(record, provisional_id)
        record.attributes['Parent'] = ",".join(parents) if parents else transcript_id
        record.attributes['AltID'] = raw_id
        owns_mapping = result.table.assign(raw_id, provisional_id)
        result.stats['children'] += 1

        return ChildLink(raw_id=raw_id, transcript_id=transcript_id,
                         feature_type=record.feature_type, provisional_id=provisional_id,
                         owns_mapping=owns_mapping)

    def parent_id(self, raw_parent: str) -> str:
        """
        New ID of a referenced gene or transcript, derived from its raw ID.

        Derivation does not depend on file order: structured IDs are
        rebuilt from their parts, anything else keeps the rule-transformed
        ID, which is what the referenced record itself is renamed to.
        """
        identifier = apply_rules(raw_parent, self.rules)
        parts = decompose(identifier, raw_parent)
        if isinstance(parts, ChildParts):
            parts = parts.transcript
        if isinstance(parts, TranscriptParts):
            return self.transcript_id(parts)
        if isinstance(parts, GeneParts):
            return self.gene_id(parts)
        return identifier

    def _mapped_parents(self, record: FeatureRecord) -> List[str]:
        parent = record.attributes.get('Parent')
        if not parent:
            return []
        return [self.parent_id(p) for p in parent.split(',') if p]


class ChildRenumberer:
    """Pass 2: strand-aware final ordinals for child features."""

    def __init__(self, counter_format: CounterFormat, exclude_empty_seqids: bool = False):
        self.counter_format = counter_format
        self.exclude_empty_seqids = exclude_empty_seqids

    def renumber(self, result: IngestResult) -> List[SeqIdGroup]:
        """
        Finalize child IDs and return the groups to emit, in seqID order.

        The equivalence table entry of each child is promoted from its
        provisional ID to the final one.
        """
        for counts in result.transcripts.values():
            counts.reset_running()

        emitted = []
        skipped = 0
        for seq_id in sorted(result.groups):
            group = result.groups[seq_id]
            for record, link in zip(group.records, group.links):
                if link is not None:
                    self._finalize_child(record, link, result)

            if group.is_featureless and self.exclude_empty_seqids:
                skipped += 1
                continue
            emitted.append(group)

        if skipped:
            logging.info(f"Pass 2: omitted {skipped} seqIDs without features")
        logging.info(f"Pass 2: {len(emitted)} seqID groups ready for output")
        return emitted

    def _finalize_child(self, record: FeatureRecord, link: ChildLink, result: IngestResult) -> None:
        counts = result.transcripts[link.transcript_id]
        ordinal = counts.next_ordinal(link.feature_type)
        final_id = self.counter_format.child_id(link.transcript_id, link.feature_type, ordinal)

        record.attributes['ID'] = final_id
        if 'Name' in record.attributes:
            record.attributes['Name'] = final_id
        # Shared raw IDs (all CDS of a transcript) map to the first record only
        if link.owns_mapping:
            result.table.promote(link.raw_id, link.provisional_id, final_id)
