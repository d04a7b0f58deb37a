"""
Cleaner for deleting unused AWS Security Groups.

Deletes candidates one at a time through the retry wrapper. A failed
deletion is recorded and the loop moves on to the next group.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import ClientError

from ..core.aws_client import AWSClient
from ..core.exceptions import DeleteError, get_error_code
from ..core.retry import DEFAULT_DELAY_MS, DEFAULT_MAX_ATTEMPTS, retry_operation

# Module logger
logger = logging.getLogger(__name__)


class DeleteStatus(Enum):
    """Status of a delete operation."""

    DELETED = "Deleted"
    FAILED = "Failed"
    DRY_RUN = "DryRun"


@dataclass
class DeleteResult:
    """
    Result of a single security group deletion attempt.

    Attributes:
        group_id: Security group ID
        group_name: Security group name
        status: Result status
        error_message: Error message if failed
    """

    group_id: str
    group_name: str
    status: DeleteStatus
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response shape used in ``deleteResults``."""
        data = {
            "GroupId": self.group_id,
            "GroupName": self.group_name,
            "Status": self.status.value,
        }
        if self.error_message is not None:
            data["Error"] = self.error_message
        return data


@dataclass
class DeleteSummary:
    """
    Summary of a batch delete operation.

    Attributes:
        total: Total number of security groups processed
        deleted: Number successfully deleted
        failed: Number that failed to delete
        dry_run: Number processed in dry-run mode
        results: Individual results, in processing order
    """

    total: int = 0
    deleted: int = 0
    failed: int = 0
    dry_run: int = 0
    results: List[DeleteResult] = field(default_factory=list)

    def add_result(self, result: DeleteResult) -> None:
        """Add a result and update counts."""
        self.results.append(result)
        self.total += 1

        if result.status == DeleteStatus.DELETED:
            self.deleted += 1
        elif result.status == DeleteStatus.FAILED:
            self.failed += 1
        elif result.status == DeleteStatus.DRY_RUN:
            self.dry_run += 1

    def to_list(self) -> List[Dict[str, Any]]:
        """Serialized results, in processing order."""
        return [r.to_dict() for r in self.results]


class SecurityGroupCleaner:
    """
    Cleaner for deleting unused security groups.

    Every delete call goes through :func:`retry_operation`, so throttled
    deletions are retried with a fixed delay before being recorded as
    failed.
    """

    # Hints logged next to AWS's own message for common error codes
    ERROR_MESSAGES = {
        "DependencyViolation": "Security group is still in use by another resource",
        "InvalidGroup.NotFound": "Security group no longer exists",
        "InvalidGroup.InUse": "Security group is referenced by another security group",
        "UnauthorizedOperation": "Insufficient permissions to delete security group",
        "CannotDelete": "Security group cannot be deleted",
    }

    def __init__(
        self,
        aws_client: AWSClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay_ms: int = DEFAULT_DELAY_MS,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        """
        Initialize the cleaner.

        Args:
            aws_client: Instance of AWSClient
            max_attempts: Attempts per delete call when throttled
            retry_delay_ms: Fixed delay between throttled attempts
            sleep: Wait function used between attempts
        """
        self.aws_client = aws_client
        self.region = aws_client.region
        self.max_attempts = max_attempts
        self.retry_delay_ms = retry_delay_ms
        self.sleep = sleep
        self._ec2_client = None

    @property
    def ec2_client(self):
        """Lazy load EC2 client."""
        if self._ec2_client is None:
            self._ec2_client = self.aws_client.get_ec2_client()
        return self._ec2_client

    def _delete(self, group_id: str) -> None:
        retry_kwargs: Dict[str, Any] = {
            "max_attempts": self.max_attempts,
            "delay_ms": self.retry_delay_ms,
        }
        if self.sleep is not None:
            retry_kwargs["sleep"] = self.sleep

        try:
            retry_operation(
                lambda: self.ec2_client.delete_security_group(GroupId=group_id),
                **retry_kwargs,
            )
        except ClientError as e:
            error_code = get_error_code(e)
            details = {"error_code": error_code}
            if error_code in self.ERROR_MESSAGES:
                details["hint"] = self.ERROR_MESSAGES[error_code]
            raise DeleteError(
                e.response.get("Error", {}).get("Message") or str(e),
                group_id=group_id,
                details=details,
            ) from e

    def delete_security_group(
        self,
        group_id: str,
        group_name: str,
        dry_run: bool = False,
    ) -> DeleteResult:
        """
        Delete a single security group.

        Args:
            group_id: Security group ID
            group_name: Security group name (for logging)
            dry_run: If True, only simulate deletion

        Returns:
            DeleteResult with operation status
        """
        if dry_run:
            logger.info(f"[dry-run] Would delete security group: {group_name} ({group_id})")
            return DeleteResult(group_id, group_name, DeleteStatus.DRY_RUN)

        logger.info(f"Attempting to delete security group: {group_name} ({group_id})")
        try:
            self._delete(group_id)
        except DeleteError as e:
            hint = e.details.get("hint")
            logger.error(
                f"Failed to delete security group: {group_name} ({group_id}): "
                f"{e.message} [{e.details.get('error_code')}]"
                + (f" ({hint})" if hint else "")
            )
            return DeleteResult(
                group_id, group_name, DeleteStatus.FAILED, error_message=e.message
            )
        except Exception as e:
            logger.exception(f"Failed to delete security group: {group_name} ({group_id})")
            return DeleteResult(
                group_id, group_name, DeleteStatus.FAILED, error_message=str(e)
            )

        logger.info(f"Successfully deleted security group: {group_name} ({group_id})")
        return DeleteResult(group_id, group_name, DeleteStatus.DELETED)

    def delete_batch(
        self,
        security_groups: List[Dict[str, Any]],
        dry_run: bool = False,
        progress_callback: Optional[Callable[[DeleteResult], None]] = None,
    ) -> DeleteSummary:
        """
        Delete multiple security groups sequentially.

        Args:
            security_groups: List of security group dicts with 'id' and 'name' keys
            dry_run: If True, only simulate deletion
            progress_callback: Optional callback called after each deletion

        Returns:
            DeleteSummary with one result per group, in input order
        """
        summary = DeleteSummary()

        for sg in security_groups:
            result = self.delete_security_group(
                sg.get("id", ""), sg.get("name", "Unknown"), dry_run=dry_run
            )
            summary.add_result(result)

            if progress_callback:
                progress_callback(result)

        return summary
