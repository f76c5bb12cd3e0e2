#!/usr/bin/env python3

"""
File parsers for annotation records and sequences.

Handles GFF3 parsing (including a trailing ##FASTA section) and FASTA
reading for the sequence relabeling stage.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List
from .data_structures import FastaEntry, FeatureRecord
from .exceptions import ParseError

FASTA_SENTINEL = '##FASTA'


@dataclass
class AnnotationFile:
    """Parsed GFF3 content: feature records plus the raw sequence section."""
    path: str
    records: List[FeatureRecord] = field(default_factory=list)
    fasta_lines: List[str] = field(default_factory=list)
    skipped_lines: int = 0

    @property
    def seq_ids(self) -> List[str]:
        return sorted({record.seq_id for record in self.records})


class GeneAnnotationParser:
    """Parse GFF3 files in a single O(n) pass, keeping file order."""

    def __init__(self, file_path: str):
        self.file_path = file_path

    def parse(self) -> AnnotationFile:
        """Parse the GFF3 file."""
        logging.info(f"Parsing GFF3 file: {self.file_path}")
        annotation = AnnotationFile(path=self.file_path)
        in_fasta = False

        try:
            with open(self.file_path, 'r') as f:
                for line_num, line in enumerate(f, 1):
                    if in_fasta:
                        annotation.fasta_lines.append(line)
                        continue

                    line = line.rstrip('\n').rstrip('\r')
                    if line.startswith(FASTA_SENTINEL):
                        in_fasta = True
                        continue
                    if not line.strip() or line.startswith('#'):
                        continue

                    try:
                        annotation.records.append(self._parse_line(line))
                    except ValueError as e:
                        logging.warning(f"Skipping line {line_num} of {self.file_path}: {e}")
                        annotation.skipped_lines += 1

        except FileNotFoundError:
            raise ParseError(f"Annotation file not found: {self.file_path}")
        except OSError as e:
            raise ParseError(f"Failed to read GFF3 file: {e}", self.file_path)

        logging.info(f"Parsed {len(annotation.records)} feature records on "
                     f"{len(annotation.seq_ids)} sequences")
        if annotation.fasta_lines:
            logging.info(f"Found embedded FASTA section ({len(annotation.fasta_lines)} lines)")
        return annotation

    def _parse_line(self, line: str) -> FeatureRecord:
        parts = line.split('\t')
        if len(parts) != 9:
            raise ValueError(f"expected 9 tab-separated columns, found {len(parts)}")

        seq_id, source, feature, start, end, score, strand, phase, attributes = parts
        return FeatureRecord(
            seq_id=seq_id,
            source=source,
            feature_type=feature,
            start=int(start),
            end=int(end),
            score=score,
            strand=strand,
            phase=phase,
            attributes=parse_gff3_attributes(attributes),
        )


def parse_gff3_attributes(attr_string: str) -> Dict[str, str]:
    """Parse a GFF3 attribute column, preserving key order."""
    attributes = {}
    for attr in attr_string.strip().split(';'):
        if '=' in attr:
            key, value = attr.split('=', 1)
            attributes[key.strip()] = value
    return attributes


def parse_fasta(file_path: str) -> List[FastaEntry]:
    """Parse a FASTA file, keeping header descriptions and line layout."""
    entries: List[FastaEntry] = []
    current = None
    line_num = 0

    try:
        with open(file_path, 'r') as f:
            for line_num, line in enumerate(f, 1):
                line = line.rstrip('\n').rstrip('\r')

                if line.startswith('>'):
                    identifier, _, description = line[1:].partition(' ')
                    current = FastaEntry(identifier=identifier, description=description)
                    entries.append(current)

                elif line and current is not None:
                    current.sequence_lines.append(line)

                elif line:
                    raise ParseError("sequence data before the first header", file_path, line_num)

    except FileNotFoundError:
        raise ParseError(f"Sequence file not found: {file_path}")
    except OSError as e:
        raise ParseError(f"Failed to parse FASTA file: {e}", file_path, line_num)

    return entries
