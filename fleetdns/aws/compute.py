"""AWS EC2 implementation of the instance directory."""

from __future__ import annotations

from typing import Any, NoReturn

from botocore.exceptions import ClientError

from fleetdns.aws.factory import aws_client
from fleetdns.base.compute import InstanceDirectory
from fleetdns.base.config import AWSConfig
from fleetdns.base.exceptions import ComputeError, InstanceNotFoundError
from fleetdns.base.logger import log
from fleetdns.models import Instance

_ERROR_MAP: dict[str, type[ComputeError]] = {
    "InvalidInstanceID.NotFound": InstanceNotFoundError,
    "InvalidInstanceID.Malformed": InstanceNotFoundError,
}


def _handle(e: ClientError, msg: str) -> NoReturn:
    exc = _ERROR_MAP.get(e.response["Error"]["Code"])
    raise (exc or ComputeError)(msg) from e


def _to_instance(inst: dict[str, Any]) -> Instance:
    return Instance(
        instance_id=inst["InstanceId"],
        state=inst.get("State", {}).get("Name", ""),
        private_ip=inst.get("PrivateIpAddress"),
        placement_id=inst.get("Placement", {}).get("AvailabilityZone"),
        network_id=inst.get("VpcId"),
        tags={t["Key"]: t["Value"] for t in inst.get("Tags", [])},
    )


class EC2InstanceDirectory(InstanceDirectory):
    """Instance lookups backed by EC2 ``DescribeInstances``.

    Attributes:
        client: boto3 EC2 client.
    """

    def __init__(self, config: AWSConfig | None = None, client: Any = None) -> None:
        """Initialize the EC2 client.

        Args:
            config: AWS configuration; ignored when ``client`` is given.
            client: Pre-built boto3 EC2 client.
        """
        self.client = client or aws_client("ec2", config or AWSConfig())

    def _describe(self, **params: Any) -> list[Instance]:
        resp = self.client.describe_instances(**params)
        return [
            _to_instance(inst)
            for reservation in resp.get("Reservations", [])
            for inst in reservation.get("Instances", [])
        ]

    def list_instances(self, filters: list[dict[str, Any]] | None = None) -> list[Instance]:
        """List EC2 instances.

        Raises:
            ComputeError: On EC2 API failure.
        """
        try:
            return self._describe(**({"Filters": filters} if filters else {}))
        except ClientError as e:
            _handle(e, "Failed to list instances")

    def get_instance(self, instance_id: str) -> Instance:
        """Get a single EC2 instance.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
        """
        log.debug(f"Calling DescribeInstances for Instance {instance_id}", instance_id=instance_id)
        try:
            instances = self._describe(InstanceIds=[instance_id])
        except ClientError as e:
            _handle(e, f"Failed to get instance '{instance_id}'")
        if not instances:
            raise InstanceNotFoundError(f"Instance '{instance_id}' not found")
        return instances[0]

    def get_instance_by_address(self, address: str) -> Instance | None:
        """Return the instance whose private IP is ``address``, if any.

        Raises:
            ComputeError: On EC2 API failure.
        """
        log.debug(f"Calling DescribeInstances with filter for Private IP {address}")
        try:
            instances = self._describe(
                Filters=[{"Name": "private-ip-address", "Values": [address]}]
            )
        except ClientError as e:
            _handle(e, f"Failed to look up instance for address '{address}'")
        live = [i for i in instances if i.is_live]
        return (live or instances)[0] if instances else None
