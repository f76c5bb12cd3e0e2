#!/usr/bin/env python3

"""
Gene Renaming Pipeline

Rewrites annotation-generator feature identifiers (for example
``augustus_masked-Ctg1-abinit-gene-0.0-mRNA-1:exon:2``) into a compact,
user-defined naming scheme with zero-padded, strand-aware numbering, and
carries the resulting identifier map over to companion FASTA files.

Modules:
- core: Data structures, rules, decomposition, renumbering passes,
  configuration and I/O
- utils: Performance monitoring
- tests: Unit test suite
"""

__version__ = "1.0.0"
__author__ = "Gene Renaming Pipeline Team"

# Import main components for easy access
from .core.data_structures import FeatureRecord, SeqIdGroup, TranscriptCounts, FastaEntry
from .core.exceptions import (
    PipelineError, ParseError, ConfigurationError, RuleError,
    SequenceError, MemoryError
)
from .core.config import RenamingConfig, load_config
from .core.equivalence import EquivalenceTable
from .core.pipeline import GeneRenamingPipeline

__all__ = [
    # Main pipeline
    'GeneRenamingPipeline',
    # Data structures
    'FeatureRecord', 'SeqIdGroup', 'TranscriptCounts', 'FastaEntry', 'EquivalenceTable',
    # Exceptions
    'PipelineError', 'ParseError', 'ConfigurationError', 'RuleError',
    'SequenceError', 'MemoryError',
    # Configuration
    'RenamingConfig', 'load_config'
]
