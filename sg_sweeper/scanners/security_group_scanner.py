"""
Security Group Scanner Module
=============================

Collects the inventory needed to decide which EC2 security groups are
unused, and computes the unused set.

Classes
-------
InventorySnapshot
    The four collections fetched for one run.
ScanResult
    Counts and the unused groups found by a scan.
SecurityGroupScanner
    Fetches the inventory through the retry wrapper.

Functions
---------
build_reference_set
    Union of group ids referenced by ENIs, instances and Lambda functions.
find_unused_groups
    Groups absent from the reference set, excluding ``default``.

Example
-------
>>> from sg_sweeper.core import AWSClient
>>> from sg_sweeper.scanners import SecurityGroupScanner
>>>
>>> scanner = SecurityGroupScanner(AWSClient(region="us-east-1"))
>>> result = scanner.scan()
>>> for sg in result.unused_groups:
...     print(f"{sg['id']}: {sg['name']}")

Detection Logic
---------------
A security group is considered "in use" if its id appears on any of:

1. **Network Interfaces (ENIs)** - ``Groups[].GroupId``
2. **EC2 Instances** - ``SecurityGroups[].GroupId`` of every instance in
   every reservation
3. **Lambda Functions** - ``VpcConfig.SecurityGroupIds``

Groups named ``default`` are never reported, since AWS does not allow
deleting them.

Notes
-----
Inventory calls are issued one at a time in a fixed order: security
groups, network interfaces, instances, functions. Any failure is fatal to
the scan and raised as :class:`ResourceFetchError`; a partial inventory
could mark a group as unused when it is not.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set

from botocore.exceptions import ClientError

from sg_sweeper.core.exceptions import ResourceFetchError, get_error_code
from sg_sweeper.core.pagination import list_all_pages
from sg_sweeper.core.retry import DEFAULT_DELAY_MS, DEFAULT_MAX_ATTEMPTS

# Module logger
logger = logging.getLogger(__name__)

DEFAULT_GROUP_NAME = "default"


# =============================================================================
# Pure Aggregation
# =============================================================================


def build_reference_set(
    interfaces: Iterable[Dict[str, Any]],
    reservations: Iterable[Dict[str, Any]],
    functions: Iterable[Dict[str, Any]],
) -> Set[str]:
    """
    Collect every security group id referenced by a live resource.

    Parameters
    ----------
    interfaces : iterable of dict
        ``NetworkInterfaces`` items from ``describe_network_interfaces``.
    reservations : iterable of dict
        ``Reservations`` items from ``describe_instances``.
    functions : iterable of dict
        ``Functions`` items from ``list_functions``.

    Returns
    -------
    set of str
        Referenced security group ids.

    Notes
    -----
    Missing ``Groups``, ``Instances``, ``SecurityGroups``, ``VpcConfig`` or
    ``SecurityGroupIds`` keys are treated as empty.

    Example
    -------
    >>> build_reference_set(
    ...     [{"Groups": [{"GroupId": "sg-1"}]}],
    ...     [{"Instances": [{"SecurityGroups": [{"GroupId": "sg-2"}]}]}],
    ...     [{"VpcConfig": {"SecurityGroupIds": ["sg-3"]}}, {}],
    ... ) == {"sg-1", "sg-2", "sg-3"}
    True
    """
    referenced: Set[str] = set()

    for eni in interfaces:
        for group in eni.get("Groups") or []:
            referenced.add(group["GroupId"])

    for reservation in reservations:
        for instance in reservation.get("Instances") or []:
            for group in instance.get("SecurityGroups") or []:
                referenced.add(group["GroupId"])

    for function in functions:
        vpc_config = function.get("VpcConfig") or {}
        for group_id in vpc_config.get("SecurityGroupIds") or []:
            referenced.add(group_id)

    return referenced


def find_unused_groups(
    groups: Iterable[Dict[str, Any]],
    referenced: Set[str],
) -> List[Dict[str, Any]]:
    """
    Select groups that are not referenced and not named ``default``.

    Parameters
    ----------
    groups : iterable of dict
        Normalized security groups (``id`` and ``name`` keys).
    referenced : set of str
        Output of :func:`build_reference_set`.

    Returns
    -------
    list of dict
        Unused groups, in inventory order.
    """
    return [
        sg
        for sg in groups
        if sg["id"] not in referenced and sg["name"] != DEFAULT_GROUP_NAME
    ]


def _normalize_security_group(sg: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": sg["GroupId"],
        "name": sg.get("GroupName", ""),
    }


# =============================================================================
# Result Types
# =============================================================================


@dataclass
class InventorySnapshot:
    """
    Everything fetched from AWS for one run.

    Attributes:
        security_groups: Normalized security groups
        network_interfaces: Raw ENI descriptions
        reservations: Raw instance reservations
        functions: Raw Lambda function configurations
    """

    security_groups: List[Dict[str, Any]] = field(default_factory=list)
    network_interfaces: List[Dict[str, Any]] = field(default_factory=list)
    reservations: List[Dict[str, Any]] = field(default_factory=list)
    functions: List[Dict[str, Any]] = field(default_factory=list)

    def reference_set(self) -> Set[str]:
        """Group ids referenced by any ENI, instance or function."""
        return build_reference_set(
            self.network_interfaces, self.reservations, self.functions
        )


@dataclass
class ScanResult:
    """
    Result of a security group scan.

    Attributes:
        region: AWS region scanned
        total_count: Number of security groups in the region
        referenced_count: Number of distinct referenced group ids
        unused_groups: Groups eligible for deletion, in inventory order
    """

    region: str
    total_count: int
    referenced_count: int
    unused_groups: List[Dict[str, Any]]

    @property
    def unused_count(self) -> int:
        return len(self.unused_groups)


# =============================================================================
# Scanner
# =============================================================================


class SecurityGroupScanner:
    """
    Scanner for identifying unused EC2 security groups.

    Parameters
    ----------
    aws_client : AWSClient
        Instance of AWSClient for AWS API access.
    max_attempts : int, default=5
        Attempts per page when throttled.
    retry_delay_ms : int, default=2000
        Fixed delay between throttled attempts.
    sleep : callable, optional
        Wait function used between attempts.

    Examples
    --------
    >>> scanner = SecurityGroupScanner(client)
    >>> inventory = scanner.collect_inventory()
    >>> unused = find_unused_groups(
    ...     inventory.security_groups, inventory.reference_set()
    ... )
    """

    def __init__(
        self,
        aws_client,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        retry_delay_ms: int = DEFAULT_DELAY_MS,
        sleep: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.aws_client = aws_client
        self.region = aws_client.region
        self.max_attempts = max_attempts
        self.retry_delay_ms = retry_delay_ms
        self.sleep = sleep

        # Lazy-loaded service clients
        self._ec2_client = None
        self._lambda_client = None

        logger.debug(f"Initialized SecurityGroupScanner for {self.region}")

    @property
    def ec2_client(self):
        """Lazy load EC2 client."""
        if self._ec2_client is None:
            self._ec2_client = self.aws_client.get_ec2_client()
        return self._ec2_client

    @property
    def lambda_client(self):
        """Lazy load Lambda client."""
        if self._lambda_client is None:
            self._lambda_client = self.aws_client.get_lambda_client()
        return self._lambda_client

    def _fetch_all(
        self,
        operation: str,
        fetch_page: Callable[..., Dict[str, Any]],
        items_key: str,
        token_param: str = "NextToken",
        next_token_key: str = "NextToken",
    ) -> List[Dict[str, Any]]:
        """
        Fetch all pages of ``operation``.

        Raises
        ------
        ResourceFetchError
            If the call fails, after throttling retries are exhausted.
        """
        try:
            return list_all_pages(
                fetch_page,
                items_key,
                token_param=token_param,
                next_token_key=next_token_key,
                max_attempts=self.max_attempts,
                delay_ms=self.retry_delay_ms,
                sleep=self.sleep,
            )
        except ClientError as e:
            raise ResourceFetchError(
                e.response.get("Error", {}).get("Message") or str(e),
                operation=operation,
                region=self.region,
                details={"error_code": get_error_code(e)},
            ) from e
        except Exception as e:
            raise ResourceFetchError(
                str(e), operation=operation, region=self.region
            ) from e

    # =========================================================================
    # Inventory Calls
    # =========================================================================

    def get_security_groups(self) -> List[Dict[str, Any]]:
        """
        Fetch all security groups in the region.

        Returns
        -------
        list of dict
            Security groups with keys ``id`` and ``name``.
        """
        groups = self._fetch_all(
            "describe_security_groups",
            self.ec2_client.describe_security_groups,
            "SecurityGroups",
        )
        return [_normalize_security_group(sg) for sg in groups]

    def get_network_interfaces(self) -> List[Dict[str, Any]]:
        """Fetch all network interfaces in the region."""
        return self._fetch_all(
            "describe_network_interfaces",
            self.ec2_client.describe_network_interfaces,
            "NetworkInterfaces",
        )

    def get_reservations(self) -> List[Dict[str, Any]]:
        """Fetch all instance reservations in the region."""
        return self._fetch_all(
            "describe_instances",
            self.ec2_client.describe_instances,
            "Reservations",
        )

    def get_functions(self) -> List[Dict[str, Any]]:
        """
        Fetch all Lambda function configurations, following ``NextMarker``
        until the last page.
        """
        return self._fetch_all(
            "list_functions",
            self.lambda_client.list_functions,
            "Functions",
            token_param="Marker",
            next_token_key="NextMarker",
        )

    def collect_inventory(self) -> InventorySnapshot:
        """
        Fetch the full inventory in order: security groups, network
        interfaces, instances, functions.
        """
        logger.debug(f"Collecting security group inventory in {self.region}")

        snapshot = InventorySnapshot(
            security_groups=self.get_security_groups(),
            network_interfaces=self.get_network_interfaces(),
            reservations=self.get_reservations(),
            functions=self.get_functions(),
        )

        logger.debug(
            f"Inventory for {self.region}: "
            f"{len(snapshot.security_groups)} SGs, "
            f"{len(snapshot.network_interfaces)} ENIs, "
            f"{len(snapshot.reservations)} reservations, "
            f"{len(snapshot.functions)} functions"
        )
        return snapshot

    def scan(self) -> ScanResult:
        """
        Collect the inventory and compute the unused groups.

        Returns
        -------
        ScanResult
            Counts and the unused groups.

        Raises
        ------
        ResourceFetchError
            If any inventory call fails.
        """
        logger.info(f"Starting security group scan in {self.region}")

        inventory = self.collect_inventory()
        referenced = inventory.reference_set()
        unused = find_unused_groups(inventory.security_groups, referenced)

        result = ScanResult(
            region=self.region,
            total_count=len(inventory.security_groups),
            referenced_count=len(referenced),
            unused_groups=unused,
        )

        logger.debug(
            f"{result.total_count} security groups, "
            f"{result.referenced_count} referenced"
        )
        logger.info(f"Found {result.unused_count} unused security groups.")
        return result

    def __repr__(self) -> str:
        return f"SecurityGroupScanner(region='{self.region}')"
