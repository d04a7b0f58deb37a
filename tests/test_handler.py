"""
Tests for the Lambda entry point.
"""

import io
import logging
from types import SimpleNamespace

import pytest

from sg_sweeper import handler


@pytest.fixture(autouse=True)
def reset_logging_flag(monkeypatch):
    """Skip root logger reconfiguration between tests."""
    monkeypatch.setattr(handler, "_logging_configured", True)


def test_lambda_handler_deletes_unused_group(
    mock_aws_environment, ec2_client, cloudwatch_client, unused_security_group
):
    """Test a scheduled invocation end to end."""
    context = SimpleNamespace(function_name="sg-cleanup-prod")

    response = handler.lambda_handler({"source": "aws.events"}, context)

    assert response["statusCode"] == 200
    assert response["body"]["message"] == "Unused security group cleanup complete"
    assert {"GroupId": unused_security_group, "GroupName": "unused-sg", "Status": "Deleted"} in (
        response["body"]["deleteResults"]
    )

    metrics = cloudwatch_client.list_metrics(Namespace="Custom/SecurityGroupCleanup")["Metrics"]
    assert metrics[0]["Dimensions"] == [{"Name": "FunctionName", "Value": "sg-cleanup-prod"}]


def test_lambda_handler_falls_back_to_environment_name(
    mock_aws_environment, monkeypatch, cloudwatch_client
):
    """Test the metric dimension when the context has no function name."""
    monkeypatch.setenv("AWS_LAMBDA_FUNCTION_NAME", "from-env")

    response = handler.lambda_handler({}, None)

    assert response["statusCode"] == 200
    metrics = cloudwatch_client.list_metrics(Namespace="Custom/SecurityGroupCleanup")["Metrics"]
    assert metrics[0]["Dimensions"][0]["Value"] == "from-env"


def test_lambda_handler_dry_run_from_environment(
    mock_aws_environment, monkeypatch, ec2_client, unused_security_group
):
    """Test that DRY_RUN keeps every group in place."""
    monkeypatch.setenv("DRY_RUN", "true")

    response = handler.lambda_handler({}, None)

    assert response["body"]["dryRun"] is True
    statuses = {r["GroupId"]: r["Status"] for r in response["body"]["deleteResults"]}
    assert statuses[unused_security_group] == "DryRun"
    ec2_client.describe_security_groups(GroupIds=[unused_security_group])


def test_lambda_handler_reports_failure(monkeypatch):
    """Test that a fatal error becomes a 500 response."""

    class BrokenClient:
        def __init__(self, region, **kwargs):
            self.region = region

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return None

        def get_ec2_client(self):
            raise RuntimeError("no ec2 for you")

    monkeypatch.setattr(handler, "AWSClient", BrokenClient)

    response = handler.lambda_handler({}, None)

    assert response == {
        "statusCode": 500,
        "body": {
            "message": "Error cleaning up unused security groups",
            "error": "no ec2 for you",
        },
    }


def test_lambda_handler_keeps_runtime_log_handler(
    mock_aws_environment, monkeypatch, bare_root_logger, ec2_client
):
    """Test that each log record stays on one line in Lambda."""
    monkeypatch.setattr(handler, "_logging_configured", False)
    stream = io.StringIO()
    runtime_handler = logging.StreamHandler(stream)
    bare_root_logger.addHandler(runtime_handler)
    long_name = "x" * 200
    ec2_client.create_security_group(GroupName=long_name, Description="long name")

    handler.lambda_handler({}, None)

    assert bare_root_logger.handlers == [runtime_handler]
    lines = [line for line in stream.getvalue().splitlines() if long_name in line]
    assert lines
    assert all(line.startswith(("Attempting", "Successfully")) for line in lines)
