#!/usr/bin/env python3

"""
Core module for the gene renaming pipeline.

Contains the record data structures, identifier rules and decomposition,
the two renaming passes, and configuration management components.
"""

from .data_structures import (
    FeatureRecord, GeneParts, TranscriptParts, ChildParts, Unstructured,
    TranscriptCounts, SeqIdGroup, FastaEntry
)
from .exceptions import (
    PipelineError, ParseError, ConfigurationError, RuleError,
    SequenceError, MemoryError
)
from .config import RenamingConfig, load_config
from .equivalence import EquivalenceTable

__all__ = [
    'FeatureRecord', 'GeneParts', 'TranscriptParts', 'ChildParts', 'Unstructured',
    'TranscriptCounts', 'SeqIdGroup', 'FastaEntry',
    'PipelineError', 'ParseError', 'ConfigurationError', 'RuleError',
    'SequenceError', 'MemoryError',
    'RenamingConfig', 'load_config',
    'EquivalenceTable'
]
