"""
AWS Lambda entry point.

Configure the function handler as ``sg_sweeper.handler.lambda_handler``
and trigger it on a schedule. The event payload is ignored.
"""

from __future__ import annotations

import logging
from typing import Any, Dict

from sg_sweeper.core.aws_client import AWSClient
from sg_sweeper.core.config import CleanupSettings
from sg_sweeper.core.logging import configure_lambda_logging
from sg_sweeper.workflow import cleanup_unused_security_groups

# Module logger
logger = logging.getLogger(__name__)

_logging_configured = False


def _configure_logging(level: str) -> None:
    global _logging_configured
    if not _logging_configured:
        configure_lambda_logging(level)
        _logging_configured = True


def lambda_handler(event: Dict[str, Any], context) -> Dict[str, Any]:
    """
    AWS Lambda handler for deleting unused security groups.

    Args:
        event: Lambda event object (unused)
        context: Lambda context object; its ``function_name`` tags the metric

    Returns:
        ``{"statusCode": 200, "body": {"message", "deleteResults"}}`` or
        ``{"statusCode": 500, "body": {"message", "error"}}``
    """
    settings = CleanupSettings.from_env()
    function_name = getattr(context, "function_name", None)
    if function_name:
        settings = settings.with_overrides(function_name=function_name)

    _configure_logging(settings.log_level)
    logger.info(
        f"Starting security group cleanup in {settings.region} "
        f"(dry_run={settings.dry_run})"
    )

    with AWSClient(region=settings.region) as aws_client:
        response = cleanup_unused_security_groups(aws_client, settings)

    return response.to_dict()
