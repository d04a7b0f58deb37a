"""
Resource Scanners
=================

SecurityGroupScanner
    Collects security groups, network interfaces, instances and Lambda
    functions, and computes which groups are unused.

Example
-------
>>> from sg_sweeper.scanners import SecurityGroupScanner
>>> from sg_sweeper.core import AWSClient
>>>
>>> scanner = SecurityGroupScanner(AWSClient(region="us-east-1"))
>>> result = scanner.scan()
>>> print(f"Found {result.unused_count} unused security groups")
"""

from sg_sweeper.scanners.security_group_scanner import (
    InventorySnapshot,
    ScanResult,
    SecurityGroupScanner,
    build_reference_set,
    find_unused_groups,
)

__all__ = [
    "InventorySnapshot",
    "ScanResult",
    "SecurityGroupScanner",
    "build_reference_set",
    "find_unused_groups",
]
