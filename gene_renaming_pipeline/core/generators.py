#!/usr/bin/env python3

"""
Output generation for renamed annotations, relabeled sequences and
identifier maps.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Iterable, Sequence, Union

from .data_structures import FastaEntry, SeqIdGroup
from .equivalence import EquivalenceTable
from .parsers import FASTA_SENTINEL


def derive_output_path(input_path: Union[str, Path], output_dir: Union[str, Path],
                       suffix: str = "renamed") -> Path:
    """``dir/maker.gff3`` -> ``output_dir/maker.renamed.gff3``"""
    input_path = Path(input_path)
    return Path(output_dir) / f"{input_path.stem}.{suffix}{input_path.suffix}"


def write_fasta(entries: Iterable[FastaEntry], output_path: Union[str, Path]) -> int:
    """Write FASTA entries; returns the number written."""
    count = 0
    with open(output_path, 'w') as f:
        for entry in entries:
            f.write(f"{entry.header}\n")
            for line in entry.sequence_lines:
                f.write(f"{line}\n")
            count += 1
    return count


class OutputGenerator:
    """Write the renamed GFF3 file and the identifier map."""

    def __init__(self, output_dir: Union[str, Path], suffix: str = "renamed",
                 include_fasta: bool = True):
        self.output_dir = Path(output_dir)
        self.suffix = suffix
        self.include_fasta = include_fasta

    def write_gff3(self, groups: Sequence[SeqIdGroup], input_path: Union[str, Path],
                   fasta_lines: Sequence[str] = ()) -> Path:
        """Write groups under one ##sequence-region header each."""
        output_path = derive_output_path(input_path, self.output_dir, self.suffix)
        created = datetime.now().strftime('%Y-%m-%d %H:%M:%S')

        record_count = 0
        with open(output_path, 'w') as f:
            f.write("##gff-version 3\n")
            f.write(f"# created {created}\n")

            for group in groups:
                start, end = group.region()
                f.write(f"##sequence-region {group.seq_id} {start} {end}\n")
                for record in group.records:
                    f.write(record.to_gff_line() + "\n")
                    record_count += 1

            if self.include_fasta and fasta_lines:
                f.write(f"{FASTA_SENTINEL}\n")
                f.writelines(fasta_lines)

        logging.info(f"Wrote {record_count} records in {len(groups)} seqID groups to {output_path}")
        return output_path

    def write_id_map(self, table: EquivalenceTable, input_path: Union[str, Path]) -> Path:
        """Write ``raw<TAB>new`` pairs next to the renamed GFF3."""
        stem = Path(input_path).stem
        output_path = self.output_dir / f"{stem}.{self.suffix}.id_map.tsv"
        table.write_tsv(output_path)
        return output_path
