"""
Tests for the Security Group Scanner.
"""

import itertools
from unittest.mock import call

import pytest

from sg_sweeper.core.exceptions import ResourceFetchError
from sg_sweeper.scanners.security_group_scanner import (
    InventorySnapshot,
    SecurityGroupScanner,
    build_reference_set,
    find_unused_groups,
)

EXAMPLE_AMI_ID = "ami-12c6146b"


def _groups(*pairs):
    return [{"id": group_id, "name": name} for group_id, name in pairs]


class TestBuildReferenceSet:
    """Tests for build_reference_set."""

    def test_unions_all_sources(self):
        """Test that ENI, instance and function references are combined."""
        interfaces = [{"Groups": [{"GroupId": "sg-eni"}, {"GroupId": "sg-shared"}]}]
        reservations = [
            {
                "Instances": [
                    {"SecurityGroups": [{"GroupId": "sg-ec2"}]},
                    {"SecurityGroups": [{"GroupId": "sg-shared"}]},
                ]
            }
        ]
        functions = [{"VpcConfig": {"SecurityGroupIds": ["sg-lambda"]}}]

        assert build_reference_set(interfaces, reservations, functions) == {
            "sg-eni",
            "sg-ec2",
            "sg-lambda",
            "sg-shared",
        }

    def test_tolerates_missing_attributes(self):
        """Test that resources without group attributes count as empty."""
        interfaces = [{}, {"Groups": []}, {"Groups": None}]
        reservations = [{}, {"Instances": [{}, {"SecurityGroups": None}]}]
        functions = [
            {},
            {"VpcConfig": None},
            {"VpcConfig": {}},
            {"VpcConfig": {"SecurityGroupIds": [], "SubnetIds": []}},
        ]

        assert build_reference_set(interfaces, reservations, functions) == set()

    def test_empty_inputs(self):
        """Test that no resources means no references."""
        assert build_reference_set([], [], []) == set()


class TestFindUnusedGroups:
    """Tests for find_unused_groups."""

    def test_excludes_referenced_and_default(self):
        """Test the filter against referenced ids and the default name."""
        groups = _groups(("sg-1", "default"), ("sg-2", "web"), ("sg-3", "db"))

        unused = find_unused_groups(groups, {"sg-2"})

        assert [g["id"] for g in unused] == ["sg-3"]

    def test_preserves_inventory_order(self):
        """Test that results follow inventory order."""
        groups = _groups(("sg-c", "c"), ("sg-a", "a"), ("sg-b", "b"))

        unused = find_unused_groups(groups, set())

        assert [g["id"] for g in unused] == ["sg-c", "sg-a", "sg-b"]

    def test_idempotent(self):
        """Test that the filter is a pure function of its inputs."""
        groups = _groups(("sg-1", "a"), ("sg-2", "default"), ("sg-3", "c"))
        referenced = {"sg-3"}

        assert find_unused_groups(groups, referenced) == find_unused_groups(
            groups, referenced
        )

    def test_membership_rule_for_all_reference_combinations(self):
        """Test that a group is unused iff unreferenced and not named default."""
        groups = _groups(("sg-1", "default"), ("sg-2", "app"), ("sg-3", "db"), ("sg-4", "cache"))
        ids = [g["id"] for g in groups]

        for size in range(len(ids) + 1):
            for referenced in itertools.combinations(ids, size):
                referenced = set(referenced)
                unused_ids = {g["id"] for g in find_unused_groups(groups, referenced)}
                expected = {
                    g["id"]
                    for g in groups
                    if g["id"] not in referenced and g["name"] != "default"
                }
                assert unused_ids == expected


class TestSecurityGroupScannerWithFakeClient:
    """Tests for SecurityGroupScanner using stand-in clients."""

    def test_lambda_vpc_reference_marks_group_used(self, fake_aws_client):
        """Test that a group used only by a Lambda function is not unused."""
        fake_aws_client.set_security_groups(("sg-fn", "fn-sg"), ("sg-free", "free-sg"))
        fake_aws_client.lambda_.list_functions.return_value = {
            "Functions": [{"FunctionName": "f", "VpcConfig": {"SecurityGroupIds": ["sg-fn"]}}]
        }

        result = SecurityGroupScanner(fake_aws_client).scan()

        assert [g["id"] for g in result.unused_groups] == ["sg-free"]
        assert result.total_count == 2
        assert result.referenced_count == 1

    def test_functions_paginated_with_marker(self, fake_aws_client):
        """Test that every Lambda page is read."""
        fake_aws_client.set_security_groups(("sg-1", "one"), ("sg-2", "two"))
        fake_aws_client.lambda_.list_functions.side_effect = [
            {"Functions": [{"VpcConfig": {"SecurityGroupIds": ["sg-1"]}}], "NextMarker": "m1"},
            {"Functions": [{"VpcConfig": {"SecurityGroupIds": ["sg-2"]}}]},
        ]

        result = SecurityGroupScanner(fake_aws_client).scan()

        assert result.unused_groups == []
        assert fake_aws_client.lambda_.list_functions.call_args_list == [
            call(),
            call(Marker="m1"),
        ]

    def test_describe_failure_raises_fetch_error(self, fake_aws_client, make_client_error):
        """Test that a failing describe call is fatal to the scan."""
        fake_aws_client.ec2.describe_security_groups.side_effect = make_client_error(
            "UnauthorizedOperation", message="not allowed"
        )

        with pytest.raises(ResourceFetchError) as exc_info:
            SecurityGroupScanner(fake_aws_client).scan()

        assert exc_info.value.operation == "describe_security_groups"
        assert exc_info.value.message == "not allowed"
        assert exc_info.value.details["error_code"] == "UnauthorizedOperation"
        fake_aws_client.ec2.describe_network_interfaces.assert_not_called()

    def test_throttled_describe_is_retried(self, fake_aws_client, make_client_error, sleeps):
        """Test that inventory calls go through the retry wrapper."""
        fake_aws_client.ec2.describe_network_interfaces.side_effect = [
            make_client_error("RequestLimitExceeded", "DescribeNetworkInterfaces"),
            {"NetworkInterfaces": []},
        ]

        SecurityGroupScanner(fake_aws_client, retry_delay_ms=5, sleep=sleeps).scan()

        assert fake_aws_client.ec2.describe_network_interfaces.call_count == 2
        assert sleeps.calls == [0.005]

    def test_collect_inventory_returns_snapshot(self, fake_aws_client):
        """Test the snapshot contents and its reference set."""
        fake_aws_client.set_security_groups(("sg-1", "one"))
        fake_aws_client.ec2.describe_instances.return_value = {
            "Reservations": [{"Instances": [{"SecurityGroups": [{"GroupId": "sg-1"}]}]}]
        }

        snapshot = SecurityGroupScanner(fake_aws_client).collect_inventory()

        assert isinstance(snapshot, InventorySnapshot)
        assert snapshot.security_groups[0]["id"] == "sg-1"
        assert snapshot.security_groups[0] == {"id": "sg-1", "name": "one"}
        assert snapshot.reference_set() == {"sg-1"}


class TestSecurityGroupScannerWithMoto:
    """Tests for SecurityGroupScanner against moto."""

    def test_get_security_groups(self, aws_client, unused_security_group):
        """Test fetching and normalizing all security groups."""
        sgs = SecurityGroupScanner(aws_client).get_security_groups()

        # At least the default SGs plus the one created
        assert len(sgs) >= 2
        for sg in sgs:
            assert set(sg) == {"id", "name"}

    def test_find_unused_security_group(self, aws_client, unused_security_group):
        """Test that an unattached security group is reported."""
        result = SecurityGroupScanner(aws_client).scan()

        assert unused_security_group in [sg["id"] for sg in result.unused_groups]

    def test_eni_attached_not_unused(self, aws_client, eni_security_group):
        """Test that a group attached to an ENI is not reported."""
        result = SecurityGroupScanner(aws_client).scan()

        assert eni_security_group not in [sg["id"] for sg in result.unused_groups]

    def test_instance_attached_not_unused(self, aws_client, ec2_client, vpc, subnet):
        """Test that a group attached to an EC2 instance is not reported."""
        sg_id = ec2_client.create_security_group(
            GroupName="ec2-attached-sg",
            Description="SG attached to EC2",
            VpcId=vpc,
        )["GroupId"]
        ec2_client.run_instances(
            ImageId=EXAMPLE_AMI_ID,
            MinCount=1,
            MaxCount=1,
            InstanceType="t2.micro",
            SubnetId=subnet,
            SecurityGroupIds=[sg_id],
        )

        result = SecurityGroupScanner(aws_client).scan()

        assert sg_id not in [sg["id"] for sg in result.unused_groups]

    def test_default_security_groups_never_reported(self, aws_client, vpc):
        """Test that groups named default are excluded."""
        scanner = SecurityGroupScanner(aws_client)
        result = scanner.scan()

        assert any(sg["name"] == "default" for sg in scanner.get_security_groups())
        for sg in result.unused_groups:
            assert sg["name"] != "default"
