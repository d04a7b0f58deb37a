"""
Cleanup Workflow
================

Runs one cleanup pass: scan, delete, publish metric.

Functions
---------
cleanup_unused_security_groups
    Top-level orchestration returning a :class:`CleanupResponse`.

Example
-------
>>> from sg_sweeper.core import AWSClient, CleanupSettings
>>> from sg_sweeper.workflow import cleanup_unused_security_groups
>>>
>>> response = cleanup_unused_security_groups(
...     AWSClient(region="us-east-1"), CleanupSettings(dry_run=True)
... )
>>> response.to_dict()["statusCode"]
200

Notes
-----
Per-group delete failures are part of a successful response. Only an
exception escaping the scan or the delete loop produces a 500 response,
and in that case no partial results are returned. Nothing is retried at
this level; throttling is handled per call by ``retry_operation``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from sg_sweeper.cleaners.security_group_cleaner import (
    DeleteResult,
    DeleteSummary,
    SecurityGroupCleaner,
)
from sg_sweeper.core.config import CleanupSettings
from sg_sweeper.core.exceptions import SweeperError
from sg_sweeper.reporters.metric_reporter import MetricPublishResult, MetricReporter
from sg_sweeper.scanners.security_group_scanner import SecurityGroupScanner

# Module logger
logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Unused security group cleanup complete"
FAILURE_MESSAGE = "Error cleaning up unused security groups"


@dataclass
class CleanupResponse:
    """
    Response of a cleanup run.

    Attributes:
        status_code: 200 on success, 500 on failure
        body: Response body (``message`` plus ``deleteResults`` or ``error``)
        summary: Delete summary, on success
        metric: Metric publication outcome, when one was attempted
    """

    status_code: int
    body: Dict[str, Any]
    summary: Optional[DeleteSummary] = field(default=None, repr=False)
    metric: Optional[MetricPublishResult] = field(default=None, repr=False)

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def to_dict(self) -> Dict[str, Any]:
        """Lambda response payload."""
        return {"statusCode": self.status_code, "body": self.body}

    @classmethod
    def success(
        cls,
        summary: DeleteSummary,
        dry_run: bool = False,
        metric: Optional[MetricPublishResult] = None,
    ) -> "CleanupResponse":
        body: Dict[str, Any] = {
            "message": SUCCESS_MESSAGE,
            "deleteResults": summary.to_list(),
        }
        if dry_run:
            body["dryRun"] = True
        return cls(200, body, summary=summary, metric=metric)

    @classmethod
    def failure(cls, error: BaseException) -> "CleanupResponse":
        message = error.message if isinstance(error, SweeperError) else str(error)
        return cls(500, {"message": FAILURE_MESSAGE, "error": message})


def cleanup_unused_security_groups(
    aws_client,
    settings: Optional[CleanupSettings] = None,
    sleep: Optional[Callable[[float], None]] = None,
    progress_callback: Optional[Callable[[DeleteResult], None]] = None,
) -> CleanupResponse:
    """
    Delete every unused security group in the client's region.

    Parameters
    ----------
    aws_client : AWSClient
        Client wrapper owning the EC2, Lambda and CloudWatch clients.
    settings : CleanupSettings, optional
        Run settings; defaults to ``CleanupSettings()``.
    sleep : callable, optional
        Wait function used between throttled attempts.
    progress_callback : callable, optional
        Called with each :class:`DeleteResult` as it is produced.

    Returns
    -------
    CleanupResponse
        200 with one entry per candidate group, or 500 with the error
        message. Never raises.
    """
    settings = settings or CleanupSettings()

    try:
        scanner = SecurityGroupScanner(
            aws_client,
            max_attempts=settings.max_attempts,
            retry_delay_ms=settings.retry_delay_ms,
            sleep=sleep,
        )
        scan_result = scanner.scan()

        cleaner = SecurityGroupCleaner(
            aws_client,
            max_attempts=settings.max_attempts,
            retry_delay_ms=settings.retry_delay_ms,
            sleep=sleep,
        )
        summary = cleaner.delete_batch(
            scan_result.unused_groups,
            dry_run=settings.dry_run,
            progress_callback=progress_callback,
        )

        metric = None
        if settings.dry_run:
            logger.info(
                f"Dry run: {summary.dry_run} security groups would be deleted; "
                "skipping CloudWatch metric"
            )
        else:
            metric = MetricReporter(aws_client).publish_deleted_count(
                summary.deleted, settings.function_name
            )

        return CleanupResponse.success(summary, dry_run=settings.dry_run, metric=metric)

    except Exception as e:
        logger.exception(f"{FAILURE_MESSAGE}: {e}")
        return CleanupResponse.failure(e)
