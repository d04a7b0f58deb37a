"""
Reporters
=========

MetricReporter
    Publishes the deleted count to CloudWatch (best effort).
CLIReporter
    Rich terminal output for CLI runs.
"""

from sg_sweeper.reporters.cli_reporter import CLIReporter
from sg_sweeper.reporters.metric_reporter import MetricPublishResult, MetricReporter

__all__ = [
    "CLIReporter",
    "MetricPublishResult",
    "MetricReporter",
]
