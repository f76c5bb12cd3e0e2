#!/usr/bin/env python3

"""
Apply the identifier equivalence table to companion FASTA files.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Tuple, Union

from .data_structures import FastaEntry
from .equivalence import EquivalenceTable
from .exceptions import SequenceError
from .generators import derive_output_path, write_fasta
from .parsers import parse_fasta


@dataclass
class RelabelSummary:
    """Counts for one relabeled sequence file."""
    input_path: str
    output_path: str
    processed: int = 0
    changed: int = 0

    @property
    def unchanged(self) -> int:
        return self.processed - self.changed


class SequenceRelabeler:
    """Rewrite sequence identifiers found in the table. The table is only read."""

    def __init__(self, table: EquivalenceTable, output_dir: Union[str, Path],
                 suffix: str = "renamed"):
        self.table = table
        self.output_dir = Path(output_dir)
        self.suffix = suffix

    def relabel_entries(self, entries: Iterable[FastaEntry]) -> Tuple[List[FastaEntry], int]:
        """Return relabeled copies and the number of identifiers changed."""
        relabeled = []
        changed = 0
        for entry in entries:
            new_id = self.table.get(entry.identifier)
            if new_id is None:
                relabeled.append(entry)
                continue
            relabeled.append(FastaEntry(identifier=new_id, description=entry.description,
                                        sequence_lines=list(entry.sequence_lines)))
            changed += 1
        return relabeled, changed

    def relabel_file(self, input_path: Union[str, Path]) -> RelabelSummary:
        input_path = Path(input_path)
        output_path = derive_output_path(input_path, self.output_dir, self.suffix)
        if output_path.resolve() == input_path.resolve():
            raise SequenceError("output would overwrite the input file", str(input_path))

        entries = parse_fasta(str(input_path))
        relabeled, changed = self.relabel_entries(entries)
        write_fasta(relabeled, output_path)

        summary = RelabelSummary(input_path=str(input_path), output_path=str(output_path),
                                 processed=len(entries), changed=changed)
        logging.info(f"Relabeled {input_path.name}: {summary.processed} processed, "
                     f"{summary.changed} changed, {summary.unchanged} unchanged")
        return summary

    def relabel_files(self, paths: Iterable[Union[str, Path]]) -> List[RelabelSummary]:
        return [self.relabel_file(path) for path in paths]
