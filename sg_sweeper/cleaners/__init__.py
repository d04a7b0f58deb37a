"""
Resource Cleaners
=================

SecurityGroupCleaner
    Deletes unused EC2 security groups one at a time.

Data Classes
------------
DeleteStatus
    Enum representing the status of a delete operation.
DeleteResult
    Result of a single deletion attempt.
DeleteSummary
    Ordered results of a batch with running counts.

Example
-------
>>> from sg_sweeper.cleaners import SecurityGroupCleaner, DeleteStatus
>>>
>>> cleaner = SecurityGroupCleaner(client)
>>> result = cleaner.delete_security_group("sg-123", "test-sg")
>>> if result.status == DeleteStatus.DELETED:
...     print(f"Deleted: {result.group_id}")
"""

from sg_sweeper.cleaners.security_group_cleaner import (
    DeleteResult,
    DeleteStatus,
    DeleteSummary,
    SecurityGroupCleaner,
)

__all__ = [
    "DeleteResult",
    "DeleteStatus",
    "DeleteSummary",
    "SecurityGroupCleaner",
]
