# ========================
# src/utils/performance_monitor.py
# ========================

"""
Performance Monitoring Utilities

Tracks wall time, memory and per-stage checkpoints of a pipeline run.
"""

import logging
import os
import time
from contextlib import contextmanager
from typing import Dict, Any, Optional

import psutil

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """
    Performance monitoring utility for the pipeline.
    Tracks memory usage, processing time and stage checkpoints.
    """

    def __init__(self, name: str = "Pipeline"):
        """
        Initialize performance monitor.

        Args:
            name (str): Name for this monitoring session
        """
        self.name = name
        self.start_time = None
        self.end_time = None
        self.peak_memory_mb = 0.0
        self.records_processed = 0
        self.checkpoints = []
        self._process = psutil.Process(os.getpid())

        logger.debug(f"PerformanceMonitor initialized: {name}")

    def start_monitoring(self) -> None:
        """Start performance monitoring."""
        self.start_time = time.time()
        self.peak_memory_mb = self._get_memory_usage_mb()

        logger.info(f"{self.name} - Performance monitoring started")
        logger.info(f"Initial memory usage: {self.peak_memory_mb:.2f} MB")

    def update_progress(self, records: int) -> None:
        """
        Record rows handled and sample memory.

        Args:
            records (int): Number of rows handled since the last update
        """
        self.records_processed += records
        self.peak_memory_mb = max(self.peak_memory_mb, self._get_memory_usage_mb())

    def add_checkpoint(self, name: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """
        Mark the end of a pipeline stage.

        Args:
            name (str): Stage name
            metadata (dict): Optional stage details to store
        """
        now = time.time()
        previous = self.checkpoints[-1]['timestamp'] if self.checkpoints else self.start_time
        memory_mb = self._get_memory_usage_mb()
        self.peak_memory_mb = max(self.peak_memory_mb, memory_mb)

        checkpoint = {
            'name': name,
            'timestamp': now,
            'stage_seconds': now - previous if previous else 0.0,
            'memory_mb': memory_mb,
            'metadata': metadata or {}
        }
        self.checkpoints.append(checkpoint)
        logger.debug(f"Checkpoint '{name}': {checkpoint['stage_seconds']:.3f}s, {memory_mb:.2f} MB")

    def stop_monitoring(self) -> Dict[str, Any]:
        """
        Stop monitoring and return performance summary.

        Returns:
            dict: Performance statistics
        """
        self.end_time = time.time()
        total_time = self.end_time - self.start_time if self.start_time else 0
        throughput = self.records_processed / total_time if total_time > 0 else 0

        summary = {
            'name': self.name,
            'total_processing_time_seconds': total_time,
            'records_processed': self.records_processed,
            'average_throughput_records_per_second': throughput,
            'peak_memory_usage_mb': self.peak_memory_mb,
            'stage_seconds': {c['name']: c['stage_seconds'] for c in self.checkpoints},
            'checkpoints': self.checkpoints
        }

        self._print_summary(summary)
        return summary

    def _print_summary(self, summary: Dict[str, Any]) -> None:
        print("\n" + "="*60)
        print(f"PERFORMANCE SUMMARY - {summary['name']}")
        print("="*60)
        print(f"Total processing time: {summary['total_processing_time_seconds']:.2f} seconds")
        print(f"Records processed: {summary['records_processed']:,}")
        print(f"Average throughput: {summary['average_throughput_records_per_second']:.0f} records/second")
        print(f"Peak memory usage: {summary['peak_memory_usage_mb']:.2f} MB")

        for stage, seconds in summary['stage_seconds'].items():
            print(f"  {stage:<10} {seconds:.3f}s")

        print("="*60)

    def _get_memory_usage_mb(self) -> float:
        """Current resident memory of this process in MB."""
        return self._process.memory_info().rss / (1024 * 1024)


@contextmanager
def monitor_performance(name: str = "Pipeline"):
    """
    Context manager for easy performance monitoring.

    Args:
        name (str): Name for this monitoring session

    Yields:
        PerformanceMonitor: Monitor instance
    """
    monitor = PerformanceMonitor(name)
    monitor.start_monitoring()
    try:
        yield monitor
    finally:
        monitor.stop_monitoring()
