#!/usr/bin/env python3

"""
Test suite for the gene renaming pipeline.

Unit tests covering:
- Rename rules and identifier decomposition
- Counter width parsing and inference
- Both renumbering passes, including minus-strand reversal
- Sequence relabeling and the end-to-end pipeline
- Configuration management and validation
"""
