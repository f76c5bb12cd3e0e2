#!/usr/bin/env python3

"""
Raw identifier to new identifier table.

Consulted when rewriting Parent references and later when relabeling
sequence files. Keys are write-once; the only overwrite allowed is
``promote``, which swaps a provisional child ID for its final value.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, Optional, Tuple, Union

from .exceptions import ParseError


class EquivalenceTable:
    """Mapping from every renamed raw identifier to its new identifier."""

    def __init__(self):
        self._mapping: Dict[str, str] = {}

    def assign(self, raw_id: str, new_id: str) -> bool:
        """Record a mapping unless the raw ID already has one."""
        if raw_id in self._mapping:
            return False
        self._mapping[raw_id] = new_id
        return True

    def promote(self, raw_id: str, provisional_id: str, final_id: str) -> bool:
        """Replace ``provisional_id`` with ``final_id`` if it is still the current value."""
        if self._mapping.get(raw_id) != provisional_id:
            return False
        self._mapping[raw_id] = final_id
        return True

    def get(self, raw_id: str, default: Optional[str] = None) -> Optional[str]:
        return self._mapping.get(raw_id, default)

    def __getitem__(self, raw_id: str) -> str:
        return self._mapping[raw_id]

    def __contains__(self, raw_id: object) -> bool:
        return raw_id in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)

    def __iter__(self) -> Iterator[str]:
        return iter(self._mapping)

    def items(self) -> Iterator[Tuple[str, str]]:
        return iter(self._mapping.items())

    def to_dict(self) -> Dict[str, str]:
        return dict(self._mapping)

    def write_tsv(self, path: Union[str, Path]) -> None:
        """Write ``raw<TAB>new`` lines in insertion order."""
        with open(path, 'w') as f:
            for raw_id, new_id in self._mapping.items():
                f.write(f"{raw_id}\t{new_id}\n")
        logging.info(f"Wrote {len(self._mapping)} identifier mappings to {path}")

    @classmethod
    def read_tsv(cls, path: Union[str, Path]) -> 'EquivalenceTable':
        """Load a table written by ``write_tsv``."""
        table = cls()
        try:
            with open(path, 'r') as f:
                for line_num, line in enumerate(f, 1):
                    line = line.rstrip('\n')
                    if not line or line.startswith('#'):
                        continue
                    parts = line.split('\t')
                    if len(parts) != 2:
                        raise ParseError("expected two tab-separated columns", str(path), line_num)
                    table.assign(parts[0], parts[1])
        except FileNotFoundError:
            raise ParseError(f"Identifier map not found: {path}")

        logging.info(f"Loaded {len(table)} identifier mappings from {path}")
        return table
