#!/usr/bin/env python3

"""
Custom exceptions for the gene renaming pipeline.

Provides specific exception types for better error handling and debugging.
"""

class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""
    pass


class ParseError(PipelineError):
    """Error occurred during file parsing."""

    def __init__(self, message: str, filename: str = "", line_number: int = 0):
        super().__init__(message)
        self.filename = filename
        self.line_number = line_number

    def __str__(self):
        if self.filename and self.line_number:
            return f"Parse error in {self.filename} at line {self.line_number}: {super().__str__()}"
        elif self.filename:
            return f"Parse error in {self.filename}: {super().__str__()}"
        return super().__str__()


class ConfigurationError(PipelineError):
    """Error in pipeline configuration."""
    pass


class RuleError(PipelineError):
    """A rename rule string could not be parsed or compiled."""

    def __init__(self, message: str, rule: str = ""):
        super().__init__(message)
        self.rule = rule

    def __str__(self):
        if self.rule:
            return f"Invalid rename rule '{self.rule}': {super().__str__()}"
        return super().__str__()


class SequenceError(PipelineError):
    """Error occurred while relabeling sequence files."""

    def __init__(self, message: str, sequence_id: str = ""):
        super().__init__(message)
        self.sequence_id = sequence_id

    def __str__(self):
        if self.sequence_id:
            return f"Sequence error in {self.sequence_id}: {super().__str__()}"
        return super().__str__()


class MemoryError(PipelineError):
    """Memory usage exceeded limits."""

    def __init__(self, message: str, current_usage: float, limit: float):
        super().__init__(message)
        self.current_usage = current_usage
        self.limit = limit

    def __str__(self):
        return f"Memory error: {super().__str__()} (current: {self.current_usage:.1f}MB, limit: {self.limit:.1f}MB)"
