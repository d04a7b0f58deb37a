"""
Core Infrastructure Components
==============================

- :class:`AWSClient` - Owns the boto3 session and service clients
- :class:`CleanupSettings` - Run settings read from the environment
- :func:`retry_operation` - Fixed-delay retry on throttling
- :func:`list_all_pages` - Token-driven pagination through the retry wrapper
- Exception hierarchy and :class:`ErrorKind` classification

Example
-------
>>> from sg_sweeper.core import AWSClient, retry_operation
>>>
>>> client = AWSClient(region="us-east-1")
>>> ec2 = client.get_ec2_client()
>>> retry_operation(lambda: ec2.delete_security_group(GroupId="sg-123"))
"""

from sg_sweeper.core.aws_client import AWSClient
from sg_sweeper.core.config import CleanupSettings
from sg_sweeper.core.exceptions import (
    AWSClientError,
    CleanerError,
    CredentialsError,
    DeleteError,
    ErrorKind,
    RegionError,
    ResourceFetchError,
    RetryExhaustedError,
    ScannerError,
    ServiceError,
    SweeperError,
    classify_error,
)
from sg_sweeper.core.pagination import list_all_pages
from sg_sweeper.core.retry import retry_operation

__all__ = [
    # Classes
    "AWSClient",
    "CleanupSettings",
    # Helpers
    "classify_error",
    "list_all_pages",
    "retry_operation",
    # Exceptions
    "SweeperError",
    "AWSClientError",
    "CredentialsError",
    "RegionError",
    "ServiceError",
    "ScannerError",
    "ResourceFetchError",
    "CleanerError",
    "DeleteError",
    "RetryExhaustedError",
    "ErrorKind",
]
