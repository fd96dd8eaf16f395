#!/usr/bin/env python3
"""
System Monitoring Module

Process-level memory and CPU metrics for long training runs. A chain's trie
lives entirely in memory, so the interesting number while training a large
corpus is how much resident memory the process gained.
"""

import os
import time
import threading
from datetime import datetime

import psutil


def _mb(num_bytes):
    return num_bytes / (1024 * 1024)


class ResourceMonitor:
    """
    Tracks resource usage around a named operation and logs it as metrics.
    """

    def __init__(self, logger, memory_limit_mb=None, memory_limit_percentage=85):
        """
        Initialize the resource monitor.

        Args:
            logger: Logger instance for recording resource metrics
            memory_limit_mb (int, optional): Explicit memory threshold in MB
            memory_limit_percentage (float): Percentage of system memory used when no threshold is given
        """
        self.logger = logger
        self.process = psutil.Process(os.getpid())
        self.total_system_memory_mb = _mb(psutil.virtual_memory().total)

        if memory_limit_mb:
            self.memory_limit_mb = memory_limit_mb
        else:
            self.memory_limit_mb = int(
                self.total_system_memory_mb * (memory_limit_percentage / 100))

        self.current_operation = None
        self.operation_start_time = None
        self.start_memory_mb = None
        self.progress_percent = 0

    def get_memory_usage(self):
        """
        Get current process memory usage.

        Returns:
            dict: Current usage in MB and as a share of the configured limit
        """
        current_mb = _mb(self.process.memory_info().rss)
        return {
            "current_mb": current_mb,
            "limit_mb": self.memory_limit_mb,
            "percent_of_limit": (current_mb / self.memory_limit_mb) * 100 if self.memory_limit_mb else 0.0,
            "system_percent_used": psutil.virtual_memory().percent,
        }

    def get_resource_usage(self):
        """
        Get a snapshot of memory, CPU and thread usage for this process.

        Returns:
            dict: Resource usage metrics
        """
        return {
            "timestamp": datetime.now().isoformat(),
            "memory": self.get_memory_usage(),
            "cpu": {
                "process_percent": self.process.cpu_percent(interval=None),
                "cores": psutil.cpu_count(),
            },
            "threads": threading.active_count(),
            "process_id": os.getpid(),
        }

    def start(self, operation_name=None):
        """
        Mark the start of an operation.

        Args:
            operation_name (str, optional): Name of the operation being monitored
        """
        self.current_operation = operation_name
        self.operation_start_time = time.time()
        self.start_memory_mb = self.get_memory_usage()["current_mb"]
        self.progress_percent = 0

        self.logger.info(f"Resource monitoring started for operation: {operation_name}", extra={
            "metrics": self.get_resource_usage()
        })

    def stop(self):
        """
        Mark the end of the current operation.

        Returns:
            dict or None: Duration and memory delta, or None if nothing was started
        """
        if self.operation_start_time is None:
            return None

        memory = self.get_memory_usage()
        summary = {
            "operation": self.current_operation,
            "duration": time.time() - self.operation_start_time,
            "memory_delta_mb": memory["current_mb"] - self.start_memory_mb,
            "memory": memory,
        }

        if memory["current_mb"] > 0.9 * self.memory_limit_mb:
            self.logger.warning("Memory usage close to limit", extra={"metrics": summary})
        self.logger.info("Resource monitoring stopped", extra={"metrics": summary})

        self.current_operation = None
        self.operation_start_time = None
        self.start_memory_mb = None
        self.progress_percent = 0
        return summary

    def log_progress(self, message, progress_percent=None, extra_metrics=None):
        """
        Log progress of the running operation with current resource metrics.

        Args:
            message (str): Progress message to log
            progress_percent (float, optional): Percentage of operation completed (0-100)
            extra_metrics (dict, optional): Additional metrics to include in the log
        """
        if progress_percent is not None:
            self.progress_percent = progress_percent

        metrics = {"system_resources": self.get_resource_usage()}
        if extra_metrics:
            metrics.update(extra_metrics)

        if self.operation_start_time:
            elapsed = time.time() - self.operation_start_time
            metrics["elapsed_time"] = elapsed
            if self.progress_percent > 0:
                estimated_total = elapsed / (self.progress_percent / 100)
                metrics["estimated_remaining_time"] = estimated_total - elapsed

        if self.progress_percent > 0:
            metrics["progress_percent"] = self.progress_percent

        self.logger.info(message, extra={"metrics": metrics})
