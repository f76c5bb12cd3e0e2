#!/usr/bin/env python3

"""
Utility helpers for the gene renaming pipeline.
"""

from .performance_monitor import PerformanceMonitor, PhaseMetrics

__all__ = ['PerformanceMonitor', 'PhaseMetrics']
