#!/usr/bin/env python3

"""
Performance monitoring for the gene renaming pipeline.

Tracks wall time, record throughput and resident memory per processing
phase (width inference, the two renaming passes, output, relabeling).
"""

import time
import logging
import psutil
from dataclasses import dataclass
from typing import Optional, Dict, Any
from contextlib import contextmanager

from ..core.exceptions import MemoryError as PipelineMemoryError


@dataclass
class PhaseMetrics:
    """Timing and memory figures for one phase."""
    phase_name: str
    start_time: float
    end_time: Optional[float] = None
    peak_memory_mb: float = 0.0
    records_processed: int = 0

    @property
    def elapsed_time(self) -> float:
        """Get elapsed time in seconds."""
        if self.end_time is None:
            return time.time() - self.start_time
        return self.end_time - self.start_time

    @property
    def records_per_second(self) -> float:
        elapsed = self.elapsed_time
        if elapsed > 0 and self.records_processed > 0:
            return self.records_processed / elapsed
        return 0.0


class PerformanceMonitor:
    """Phase timer with an optional resident memory ceiling."""

    def __init__(self, memory_limit_mb: int = 4096, enforce_limit: bool = True):
        self.memory_limit_mb = memory_limit_mb
        self.enforce_limit = enforce_limit
        self.start_time = time.time()
        self.phase_metrics: Dict[str, PhaseMetrics] = {}
        self.current_phase: Optional[str] = None
        self.process = psutil.Process()

    def get_memory_usage(self) -> float:
        """Get current memory usage in MB and update the phase peak."""
        try:
            memory_mb = self.process.memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            logging.warning(f"Error getting memory usage: {e}")
            return 0.0

        if self.current_phase in self.phase_metrics:
            metrics = self.phase_metrics[self.current_phase]
            metrics.peak_memory_mb = max(metrics.peak_memory_mb, memory_mb)
        return memory_mb

    def check_memory_limit(self) -> None:
        """Raise if memory usage exceeds the configured limit."""
        current_memory = self.get_memory_usage()
        if self.enforce_limit and current_memory > self.memory_limit_mb:
            logging.warning(f"Memory usage exceeded limit: {current_memory:.1f}MB > {self.memory_limit_mb}MB")
            raise PipelineMemoryError("Memory usage exceeded limit", current_memory, self.memory_limit_mb)

    @contextmanager
    def phase_context(self, phase_name: str):
        """Context manager for monitoring a phase."""
        self.current_phase = phase_name
        metrics = self.phase_metrics[phase_name] = PhaseMetrics(phase_name=phase_name, start_time=time.time())
        self.get_memory_usage()
        logging.info(f"Started phase: {phase_name}")
        try:
            yield metrics
            self.check_memory_limit()
        finally:
            metrics.end_time = time.time()
            self.get_memory_usage()
            self.current_phase = None
            logging.info(f"Completed phase {phase_name} in {metrics.elapsed_time:.2f}s "
                         f"(peak memory: {metrics.peak_memory_mb:.1f}MB)")

    def get_total_elapsed_time(self) -> float:
        return time.time() - self.start_time

    def get_peak_memory(self) -> float:
        """Get peak memory usage across all phases."""
        if not self.phase_metrics:
            return self.get_memory_usage()
        return max(metrics.peak_memory_mb for metrics in self.phase_metrics.values())

    def get_performance_summary(self) -> Dict[str, Any]:
        summary = {
            "total_elapsed_time": self.get_total_elapsed_time(),
            "peak_memory_mb": self.get_peak_memory(),
            "memory_limit_mb": self.memory_limit_mb,
            "phases": {},
        }
        for phase_name, metrics in self.phase_metrics.items():
            summary["phases"][phase_name] = {
                "elapsed_time": metrics.elapsed_time,
                "records_processed": metrics.records_processed,
                "records_per_second": metrics.records_per_second,
                "peak_memory_mb": metrics.peak_memory_mb,
            }
        return summary

    def log_performance_report(self) -> None:
        summary = self.get_performance_summary()

        logging.info("=" * 50)
        logging.info("PERFORMANCE REPORT")
        logging.info("=" * 50)
        logging.info(f"Total time: {summary['total_elapsed_time']:.2f} seconds")
        logging.info(f"Peak memory: {summary['peak_memory_mb']:.1f} MB (limit {summary['memory_limit_mb']} MB)")

        for phase_name, phase_data in summary['phases'].items():
            logging.info(f"  {phase_name}: {phase_data['elapsed_time']:.2f}s "
                         f"({phase_data['records_processed']} records, "
                         f"{phase_data['records_per_second']:.1f} records/s, "
                         f"{phase_data['peak_memory_mb']:.1f}MB)")
