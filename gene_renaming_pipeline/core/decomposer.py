#!/usr/bin/env python3

"""
Structural decomposition of generator feature identifiers.

Identifiers follow the annotation generator's dash-delimited layout::

    gene        program-locus-status-gene-N1.N2
    transcript  program-locus-status-gene-N1.N2-mRNA-M     (or -tRNA-M)
    child       program-locus-status-gene-N1.N2-mRNA-M:exon:K
                program-locus-status-gene-N1.N2-mRNA-M:cds

Anything else decomposes to ``Unstructured`` and is passed through.
"""

import re
from typing import Optional

from .data_structures import (
    ChildParts, GeneParts, IdentifierParts, TranscriptParts, Unstructured,
    TRANSCRIPT_TYPES,
)

FIELD_SEPARATOR = '-'
CHILD_SEPARATOR = ':'
GENE_MARKER = 'gene'

# "noncoding" is both a status value and followed by a dash-delimited
# tRNA descriptor, which would shift every field by one
NONCODING_DELIMITER = 'noncoding-'
NONCODING_TOKEN = 'noncoding_'

_LOCUS_CODE = re.compile(r'^(\d+)\.(\d+)$')
_CHILD_TAG = re.compile(r'^([A-Za-z_]+?)(\d*)$')


def normalize_identifier(identifier: str) -> str:
    return identifier.replace(NONCODING_DELIMITER, NONCODING_TOKEN)


def is_trna_identifier(raw_identifier: str) -> bool:
    """tRNA-ness is read from the raw identifier, not the record type."""
    return 'trna' in raw_identifier.lower()


def decompose(identifier: str, raw_identifier: Optional[str] = None) -> IdentifierParts:
    """
    Split a rule-transformed identifier into its typed components.

    Args:
        identifier: Identifier after rename rules were applied
        raw_identifier: Original identifier, used for tRNA detection
            (defaults to ``identifier``)

    Returns:
        GeneParts, TranscriptParts, ChildParts or Unstructured
    """
    trna = is_trna_identifier(raw_identifier if raw_identifier is not None else identifier)
    normalized = normalize_identifier(identifier)

    if FIELD_SEPARATOR not in normalized:
        return Unstructured(identifier)

    fields = normalized.split(FIELD_SEPARATOR)
    if len(fields) not in (5, 7) or fields[3] != GENE_MARKER:
        return Unstructured(identifier)

    program, locus, status, _, code = fields[:5]
    code_match = _LOCUS_CODE.match(code)
    if not code_match or not program or not locus:
        return Unstructured(identifier)

    gene = GeneParts(
        program=program,
        locus=locus,
        status=status,
        locus_code=int(code_match.group(1)),
        gene_code=int(code_match.group(2)),
        is_trna=trna,
    )
    if len(fields) == 5:
        return gene

    kind, tail = fields[5], fields[6]
    if kind not in TRANSCRIPT_TYPES:
        return Unstructured(identifier)

    ordinal_text, _, tag_text = tail.partition(CHILD_SEPARATOR)
    if not ordinal_text.isdigit():
        return Unstructured(identifier)

    transcript = TranscriptParts(gene=gene, kind=kind, ordinal=int(ordinal_text))
    if not tag_text:
        return transcript

    return _decompose_child(identifier, transcript, tag_text)


def _decompose_child(identifier: str, transcript: TranscriptParts, tag_text: str) -> IdentifierParts:
    """Parse ``type``, ``type:K`` or ``typeK`` after the transcript ordinal."""
    tag, _, explicit = tag_text.partition(CHILD_SEPARATOR)

    if explicit:
        if not explicit.isdigit() or not tag:
            return Unstructured(identifier)
        return ChildParts(transcript=transcript, tag=tag, ordinal=int(explicit))

    tag_match = _CHILD_TAG.match(tag)
    if not tag_match:
        return Unstructured(identifier)

    number = tag_match.group(2)
    return ChildParts(
        transcript=transcript,
        tag=tag_match.group(1),
        ordinal=int(number) if number else None,
    )
