"""
SG Sweeper: Scheduled Cleanup of Unused EC2 Security Groups
===========================================================

Finds security groups that no network interface, EC2 instance or Lambda
function references, deletes them, and publishes the number deleted as a
CloudWatch metric.

Modules
-------
core
    AWS client, settings, retry and pagination helpers, exceptions, logging
scanners
    Inventory collection and unused-group detection
cleaners
    Security group deletion
reporters
    CloudWatch metric and terminal output
workflow
    The cleanup orchestration shared by the Lambda handler and the CLI
handler
    AWS Lambda entry point

Example
-------
>>> from sg_sweeper import AWSClient, CleanupSettings, cleanup_unused_security_groups
>>>
>>> response = cleanup_unused_security_groups(
...     AWSClient(region="us-east-1"), CleanupSettings(dry_run=True)
... )
>>> print(response.to_dict())

Notes
-----
Requires AWS credentials configured via:
- Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)
- AWS credentials file (~/.aws/credentials)
- IAM role (when running in Lambda)
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Public API
from sg_sweeper.core.aws_client import AWSClient, AWSClientError
from sg_sweeper.core.config import CleanupSettings
from sg_sweeper.workflow import CleanupResponse, cleanup_unused_security_groups

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Core classes
    "AWSClient",
    "AWSClientError",
    "CleanupSettings",
    "CleanupResponse",
    "cleanup_unused_security_groups",
]
