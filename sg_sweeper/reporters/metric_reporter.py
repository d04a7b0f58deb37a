"""
CloudWatch Metric Reporter
==========================

Publishes the number of deleted security groups as a custom CloudWatch
metric.

Publishing is a best-effort side effect: any failure is logged and
returned as a :class:`MetricPublishResult`, never raised.

Example
-------
>>> from sg_sweeper.reporters import MetricReporter
>>>
>>> reporter = MetricReporter(aws_client)
>>> outcome = reporter.publish_deleted_count(3, function_name="sg-cleanup")
>>> outcome.published
True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from sg_sweeper.core.config import UNKNOWN_FUNCTION_NAME

# Module logger
logger = logging.getLogger(__name__)

METRIC_NAMESPACE = "Custom/SecurityGroupCleanup"
METRIC_NAME = "DeletedSecurityGroups"
METRIC_UNIT = "Count"
FUNCTION_NAME_DIMENSION = "FunctionName"


@dataclass(frozen=True)
class MetricPublishResult:
    """
    Outcome of a metric publication.

    Attributes:
        published: Whether CloudWatch accepted the data point
        value: The value that was sent
        error: Error message when publishing failed
    """

    published: bool
    value: float
    error: Optional[str] = None


class MetricReporter:
    """
    Reporter that pushes cleanup counts to CloudWatch.

    Parameters
    ----------
    aws_client : AWSClient
        Instance of AWSClient for AWS API access.
    namespace : str, default="Custom/SecurityGroupCleanup"
        CloudWatch namespace for the metric.
    """

    def __init__(self, aws_client, namespace: str = METRIC_NAMESPACE) -> None:
        self.aws_client = aws_client
        self.namespace = namespace

    def build_metric_data(
        self, value: float, function_name: Optional[str]
    ) -> Dict[str, Any]:
        """Build the ``put_metric_data`` request."""
        return {
            "Namespace": self.namespace,
            "MetricData": [
                {
                    "MetricName": METRIC_NAME,
                    "Value": value,
                    "Unit": METRIC_UNIT,
                    "Dimensions": [
                        {
                            "Name": FUNCTION_NAME_DIMENSION,
                            "Value": function_name or UNKNOWN_FUNCTION_NAME,
                        }
                    ],
                }
            ],
        }

    def publish_deleted_count(
        self, count: int, function_name: Optional[str] = None
    ) -> MetricPublishResult:
        """
        Publish the number of deleted security groups.

        Parameters
        ----------
        count : int
            Number of groups deleted in this run.
        function_name : str, optional
            Dimension value; ``UnknownFunction`` when not provided.

        Returns
        -------
        MetricPublishResult
            Whether the data point was accepted. Never raises.
        """
        request = self.build_metric_data(count, function_name)
        try:
            self.aws_client.get_cloudwatch_client().put_metric_data(**request)
        except Exception as e:
            logger.error(f"Failed to push CloudWatch metric: {e}")
            return MetricPublishResult(published=False, value=count, error=str(e))

        logger.info(f"CloudWatch metric pushed: {METRIC_NAME} = {count}")
        return MetricPublishResult(published=True, value=count)
