"""
Custom Exceptions for SG Sweeper
================================

This module defines the exception hierarchy used throughout the
application, together with the error classification that drives the
retry policy.

Exception Hierarchy
-------------------
::

    SweeperError (base)
    ├── AWSClientError
    │   ├── CredentialsError
    │   ├── RegionError
    │   └── ServiceError
    ├── ScannerError
    │   └── ResourceFetchError
    ├── CleanerError
    │   └── DeleteError
    └── RetryExhaustedError

Example
-------
>>> from sg_sweeper.core.exceptions import ErrorKind, classify_error
>>>
>>> try:
...     ec2.delete_security_group(GroupId="sg-123")
... except ClientError as e:
...     if classify_error(e) is ErrorKind.THROTTLING:
...         print("Rate limited, try again later")
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError


class ErrorKind(Enum):
    """Classification of a failed AWS API call."""

    THROTTLING = "throttling"
    ACCESS_DENIED = "access_denied"
    NOT_FOUND = "not_found"
    DEPENDENCY = "dependency"
    INVALID_REQUEST = "invalid_request"
    SERVICE_ERROR = "service_error"
    UNKNOWN = "unknown"


# Error codes AWS services use for rate limiting. EC2 reports
# RequestLimitExceeded, Lambda TooManyRequestsException.
THROTTLING_ERROR_CODES = frozenset(
    {
        "ThrottlingException",
        "Throttling",
        "ThrottledException",
        "RequestLimitExceeded",
        "TooManyRequestsException",
        "RequestThrottled",
        "RequestThrottledException",
        "SlowDown",
    }
)


def get_error_code(error: BaseException) -> str:
    """
    Extract the AWS error code from an exception.

    Returns
    -------
    str
        The ``Error.Code`` of a ``ClientError``, or the exception class
        name for anything else.
    """
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "Unknown")
    return error.__class__.__name__


def classify_error(error: BaseException) -> ErrorKind:
    """
    Classify an exception raised by a remote call.

    Parameters
    ----------
    error : BaseException
        The exception raised by a boto3 call.

    Returns
    -------
    ErrorKind
        The error classification. Anything that is not a botocore
        ``ClientError`` is ``ErrorKind.UNKNOWN``.

    Example
    -------
    >>> err = ClientError({"Error": {"Code": "ThrottlingException"}}, "ListFunctions")
    >>> classify_error(err)
    <ErrorKind.THROTTLING: 'throttling'>
    """
    if not isinstance(error, ClientError):
        return ErrorKind.UNKNOWN

    code = get_error_code(error)
    if code in THROTTLING_ERROR_CODES:
        return ErrorKind.THROTTLING

    lowered = code.lower()
    if any(x in lowered for x in ("accessdenied", "unauthorized", "forbidden")):
        return ErrorKind.ACCESS_DENIED
    if any(x in lowered for x in ("notfound", "nosuch")):
        return ErrorKind.NOT_FOUND
    if any(x in lowered for x in ("dependencyviolation", "inuse")):
        return ErrorKind.DEPENDENCY
    if any(x in lowered for x in ("invalid", "validation", "malformed")):
        return ErrorKind.INVALID_REQUEST
    if any(x in lowered for x in ("internal", "serviceunavailable", "unavailable")):
        return ErrorKind.SERVICE_ERROR
    return ErrorKind.UNKNOWN


class SweeperError(Exception):
    """
    Base exception for all SG Sweeper errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Additional context about the error.

    Example
    -------
    >>> raise SweeperError("Something went wrong", details={"code": 500})
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns
        -------
        dict
            Dictionary representation of the error.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# AWS Client Exceptions
# =============================================================================


class AWSClientError(SweeperError):
    """
    Base exception for AWS client-related errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    service : str, optional
        The AWS service that caused the error.
    region : str, optional
        The AWS region where the error occurred.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service = service
        self.region = region
        full_details = details or {}
        if service:
            full_details["service"] = service
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class CredentialsError(AWSClientError):
    """Raised when AWS credentials are invalid, missing, or expired."""

    pass


class RegionError(AWSClientError):
    """Raised when the configured AWS region is invalid or missing."""

    pass


class ServiceError(AWSClientError):
    """Raised when a service client cannot be created."""

    pass


# =============================================================================
# Scanner Exceptions
# =============================================================================


class ScannerError(SweeperError):
    """
    Base exception for inventory collection errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    operation : str, optional
        The AWS API operation that was being called.
    region : str, optional
        The AWS region being scanned.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.operation = operation
        self.region = region
        full_details = details or {}
        if operation:
            full_details["operation"] = operation
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class ResourceFetchError(ScannerError):
    """
    Raised when a describe/list call fails with a non-retryable error.

    Example
    -------
    >>> raise ResourceFetchError(
    ...     "You are not authorized to perform this operation.",
    ...     operation="describe_security_groups",
    ...     region="us-east-1",
    ...     details={"error_code": "UnauthorizedOperation"},
    ... )
    """

    pass


# =============================================================================
# Cleaner Exceptions
# =============================================================================


class CleanerError(SweeperError):
    """
    Base exception for cleanup errors.

    Parameters
    ----------
    message : str
        Human-readable error message.
    group_id : str, optional
        The security group being deleted.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        group_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.group_id = group_id
        full_details = details or {}
        if group_id:
            full_details["group_id"] = group_id
        super().__init__(message, full_details)


class DeleteError(CleanerError):
    """Raised when a security group deletion is refused."""

    pass


# =============================================================================
# Retry Exceptions
# =============================================================================


class RetryExhaustedError(SweeperError):
    """
    Raised when the retry wrapper ran out of attempts without the
    operation ever raising, e.g. ``max_attempts=0``.
    """

    def __init__(self, max_attempts: int) -> None:
        self.max_attempts = max_attempts
        super().__init__(
            f"Operation failed after {max_attempts} attempts.",
            details={"max_attempts": max_attempts},
        )
