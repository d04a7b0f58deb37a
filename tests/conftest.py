"""
Pytest configuration and shared fixtures for testing.
"""

import logging
from unittest.mock import MagicMock

import boto3
import pytest
from _pytest.logging import LogCaptureHandler
from botocore.exceptions import ClientError
from moto import mock_aws

from sg_sweeper.core.aws_client import AWSClient


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mock AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_REGION", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    monkeypatch.delenv("AWS_LAMBDA_FUNCTION_NAME", raising=False)
    monkeypatch.delenv("DRY_RUN", raising=False)


@pytest.fixture
def mock_aws_environment(aws_credentials):
    """Create a mocked AWS environment."""
    with mock_aws():
        yield


@pytest.fixture
def aws_client(mock_aws_environment):
    """Create an AWSClient instance for testing."""
    return AWSClient(region="us-east-1")


@pytest.fixture
def ec2_client(mock_aws_environment):
    """Create a boto3 EC2 client for setting up test resources."""
    return boto3.client("ec2", region_name="us-east-1")


@pytest.fixture
def cloudwatch_client(mock_aws_environment):
    """Create a boto3 CloudWatch client for inspecting published metrics."""
    return boto3.client("cloudwatch", region_name="us-east-1")


@pytest.fixture
def vpc(ec2_client):
    """Create a VPC for testing."""
    response = ec2_client.create_vpc(CidrBlock="10.0.0.0/16")
    return response["Vpc"]["VpcId"]


@pytest.fixture
def subnet(ec2_client, vpc):
    """Create a subnet for testing."""
    response = ec2_client.create_subnet(
        VpcId=vpc,
        CidrBlock="10.0.1.0/24",
        AvailabilityZone="us-east-1a",
    )
    return response["Subnet"]["SubnetId"]


@pytest.fixture
def unused_security_group(ec2_client, vpc):
    """Create an unused security group for testing."""
    response = ec2_client.create_security_group(
        GroupName="unused-sg",
        Description="Unused security group for testing",
        VpcId=vpc,
    )
    return response["GroupId"]


@pytest.fixture
def eni_security_group(ec2_client, vpc, subnet):
    """Create a security group attached to a network interface."""
    response = ec2_client.create_security_group(
        GroupName="eni-attached-sg",
        Description="SG attached to ENI",
        VpcId=vpc,
    )
    ec2_client.create_network_interface(SubnetId=subnet, Groups=[response["GroupId"]])
    return response["GroupId"]


# =============================================================================
# Stand-in clients for failure paths moto cannot produce
# =============================================================================


def _client_error(code, operation="DescribeSecurityGroups", message=None):
    return ClientError(
        {"Error": {"Code": code, "Message": message or f"{code} raised"}},
        operation,
    )


@pytest.fixture
def make_client_error():
    """Factory for botocore ClientError instances."""
    return _client_error


class FakeAWSClient:
    """AWSClient stand-in whose service clients are MagicMocks."""

    def __init__(self, region="us-east-1"):
        self.region = region

        self.ec2 = MagicMock(name="ec2")
        self.ec2.describe_security_groups.return_value = {"SecurityGroups": []}
        self.ec2.describe_network_interfaces.return_value = {"NetworkInterfaces": []}
        self.ec2.describe_instances.return_value = {"Reservations": []}
        self.ec2.delete_security_group.return_value = {}

        self.lambda_ = MagicMock(name="lambda")
        self.lambda_.list_functions.return_value = {"Functions": []}

        self.cloudwatch = MagicMock(name="cloudwatch")
        self.cloudwatch.put_metric_data.return_value = {}

    def get_ec2_client(self):
        return self.ec2

    def get_lambda_client(self):
        return self.lambda_

    def get_cloudwatch_client(self):
        return self.cloudwatch

    def set_security_groups(self, *groups):
        self.ec2.describe_security_groups.return_value = {
            "SecurityGroups": [
                {"GroupId": group_id, "GroupName": name} for group_id, name in groups
            ]
        }


@pytest.fixture
def fake_aws_client():
    """Create a FakeAWSClient with an empty inventory."""
    return FakeAWSClient()


@pytest.fixture
def sleeps():
    """A sleep replacement that records requested delays."""
    recorded = []

    def _sleep(seconds):
        recorded.append(seconds)

    _sleep.calls = recorded
    return _sleep


@pytest.fixture
def bare_root_logger():
    """Root logger with no handlers, restored after the test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    root.handlers.clear()
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.hookimpl(hookwrapper=True, trylast=True)
def pytest_runtest_call(item):
    """Keep pytest's log capture handlers off the root for bare_root_logger tests."""
    if "bare_root_logger" in getattr(item, "fixturenames", ()):
        root = logging.getLogger()
        for h in [h for h in root.handlers if isinstance(h, LogCaptureHandler)]:
            root.removeHandler(h)
    yield
