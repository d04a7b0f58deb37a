"""
AWS Client Module
=================

Provides a wrapper around boto3 that owns the session and the service
clients used by one cleanup invocation.

Classes
-------
AWSClient
    Session and client factory for EC2, Lambda, CloudWatch and STS.

Example
-------
>>> from sg_sweeper.core.aws_client import AWSClient
>>>
>>> client = AWSClient(region="us-east-1")
>>> client.validate_credentials()
>>> ec2 = client.get_ec2_client()

Notes
-----
SDK-level retries are disabled (``total_max_attempts=1``). Throttling is
handled by :func:`sg_sweeper.core.retry.retry_operation` so that every call
follows the same fixed-delay policy.

Clients are created on first access and cached for the lifetime of the
wrapper, which in Lambda is one invocation.

See Also
--------
boto3 : AWS SDK for Python
botocore : Low-level AWS client library
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import (
    ClientError,
    NoCredentialsError,
    NoRegionError,
    ProfileNotFound,
)

from sg_sweeper.core.exceptions import (
    AWSClientError,
    CredentialsError,
    RegionError,
    ServiceError,
)

# Module logger
logger = logging.getLogger(__name__)


class AWSClient:
    """
    boto3 session and client factory for one cleanup run.

    Parameters
    ----------
    region : str, default="us-east-1"
        AWS region to connect to.
    profile : str, optional
        AWS profile name from ~/.aws/credentials.
    timeout : int, default=30
        Connect and read timeout in seconds.
    sdk_max_attempts : int, default=1
        Total attempts botocore makes per call. Kept at 1 so that only
        :func:`retry_operation` retries.

    Examples
    --------
    >>> client = AWSClient(region="eu-west-1", profile="production")
    >>> lambda_client = client.get_lambda_client()

    Raises
    ------
    CredentialsError
        If AWS credentials are not found or invalid.
    RegionError
        If the specified region is invalid.
    ServiceError
        If unable to create a service client.
    """

    # Services used by a cleanup run
    SUPPORTED_SERVICES = {
        "ec2": "Amazon EC2",
        "lambda": "AWS Lambda",
        "cloudwatch": "Amazon CloudWatch",
        "sts": "AWS Security Token Service",
    }

    def __init__(
        self,
        region: str = "us-east-1",
        profile: Optional[str] = None,
        timeout: int = 30,
        sdk_max_attempts: int = 1,
    ) -> None:
        """Initialize AWS client with the specified configuration."""
        self.region = region
        self.profile = profile
        self.timeout = timeout
        self.sdk_max_attempts = sdk_max_attempts

        # Lazy-loaded components
        self._session: Optional[boto3.Session] = None
        self._clients: dict[str, Any] = {}

        self._config = self._create_config()

        logger.debug(
            "Initialized AWSClient",
            extra={"region": region, "profile": profile},
        )

    def _create_config(self) -> Config:
        """
        Create botocore configuration with SDK retries switched off.

        Returns
        -------
        Config
            Botocore configuration object.
        """
        return Config(
            retries={
                "total_max_attempts": self.sdk_max_attempts,
                "mode": "standard",
            },
            connect_timeout=self.timeout,
            read_timeout=self.timeout,
        )

    @property
    def session(self) -> boto3.Session:
        """Get or create the boto3 session (lazy initialization)."""
        if self._session is None:
            self._session = self._create_session()
        return self._session

    def _create_session(self) -> boto3.Session:
        """
        Create a new boto3 session with the configured profile and region.

        Raises
        ------
        CredentialsError
            If the specified profile is not found.
        RegionError
            If the region is invalid or missing.
        AWSClientError
            For other session creation failures.
        """
        try:
            session_kwargs = {"region_name": self.region}
            if self.profile:
                session_kwargs["profile_name"] = self.profile

            session = boto3.Session(**session_kwargs)
            logger.debug(f"Created boto3 session for region {self.region}")
            return session

        except ProfileNotFound:
            raise CredentialsError(
                f"AWS profile '{self.profile}' not found",
                details={
                    "profile": self.profile,
                    "hint": "Check ~/.aws/credentials for available profiles",
                },
            )
        except NoRegionError:
            raise RegionError(
                f"Invalid or missing region: {self.region}",
                region=self.region,
                details={"hint": "Specify a valid AWS region like 'us-east-1'"},
            )
        except Exception as e:
            logger.exception("Failed to create AWS session")
            raise AWSClientError(
                f"Failed to create AWS session: {e}",
                region=self.region,
            )

    def _get_client(self, service_name: str) -> Any:
        """
        Get or create a boto3 client for the specified service.

        Parameters
        ----------
        service_name : str
            One of :attr:`SUPPORTED_SERVICES`.

        Raises
        ------
        ServiceError
            If the service is not supported or the client cannot be created.
        CredentialsError
            If credentials are not found.
        """
        if service_name in self._clients:
            return self._clients[service_name]

        if service_name not in self.SUPPORTED_SERVICES:
            raise ServiceError(
                f"Unsupported service: {service_name}",
                service=service_name,
                region=self.region,
            )

        try:
            client = self.session.client(service_name, config=self._config)
            self._clients[service_name] = client
            logger.debug(f"Created {service_name} client for {self.region}")
            return client

        except NoCredentialsError:
            raise CredentialsError(
                "AWS credentials not found",
                details={
                    "hint": (
                        "Configure credentials using 'aws configure' or set "
                        "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY environment variables"
                    ),
                },
            )
        except AWSClientError:
            raise
        except Exception as e:
            logger.exception(f"Failed to create {service_name} client")
            raise ServiceError(
                f"Failed to create {service_name} client: {e}",
                service=service_name,
                region=self.region,
            )

    # =========================================================================
    # Service Client Accessors
    # =========================================================================

    def get_ec2_client(self) -> Any:
        """
        Get the EC2 client.

        Example
        -------
        >>> ec2 = client.get_ec2_client()
        >>> response = ec2.describe_security_groups()
        """
        return self._get_client("ec2")

    def get_lambda_client(self) -> Any:
        """
        Get the Lambda client.

        Example
        -------
        >>> lambda_client = client.get_lambda_client()
        >>> response = lambda_client.list_functions()
        """
        return self._get_client("lambda")

    def get_cloudwatch_client(self) -> Any:
        """
        Get the CloudWatch client.

        Example
        -------
        >>> cloudwatch = client.get_cloudwatch_client()
        >>> cloudwatch.put_metric_data(Namespace="Custom/Test", MetricData=[...])
        """
        return self._get_client("cloudwatch")

    # =========================================================================
    # Credential and Account Operations
    # =========================================================================

    def validate_credentials(self) -> bool:
        """
        Validate AWS credentials by calling STS GetCallerIdentity.

        Returns
        -------
        bool
            True if credentials are valid.

        Raises
        ------
        CredentialsError
            If credentials are invalid, expired, or missing.
        """
        try:
            sts = self._get_client("sts")
            identity = sts.get_caller_identity()
            logger.info(
                "Credentials validated",
                extra={
                    "account": identity["Account"],
                    "arn": identity["Arn"],
                },
            )
            return True

        except CredentialsError:
            raise
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("InvalidClientTokenId", "SignatureDoesNotMatch"):
                raise CredentialsError(
                    "Invalid AWS credentials",
                    details={
                        "error_code": error_code,
                        "hint": "Check your access key and secret key",
                    },
                )
            raise CredentialsError(f"Failed to validate credentials: {e}")

        except Exception as e:
            logger.exception("Credential validation failed")
            raise CredentialsError(f"Failed to validate credentials: {e}")

    def get_account_id(self) -> str:
        """
        Get the AWS account ID for the current credentials.

        Raises
        ------
        AWSClientError
            If unable to retrieve the account ID.
        """
        try:
            sts = self._get_client("sts")
            return sts.get_caller_identity()["Account"]
        except Exception as e:
            logger.exception("Failed to get account ID")
            raise AWSClientError(f"Failed to get account ID: {e}")

    # =========================================================================
    # Context Manager Support
    # =========================================================================

    def __enter__(self) -> AWSClient:
        """Enter context manager."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Drop cached clients and the session."""
        self._clients.clear()
        self._session = None

    def __repr__(self) -> str:
        """Return string representation of the client."""
        return (
            f"AWSClient(region='{self.region}', "
            f"profile={self.profile!r}, "
            f"timeout={self.timeout})"
        )


__all__ = ["AWSClient", "AWSClientError"]
