"""AWS Route 53 implementation of the DNS store."""

from __future__ import annotations

from typing import Any, NoReturn

from botocore.exceptions import ClientError

from fleetdns.aws.factory import aws_client
from fleetdns.base.async_support import run_concurrently
from fleetdns.base.config import AWSConfig
from fleetdns.base.dns import DNSStore
from fleetdns.base.exceptions import ChangeRejectedError, DNSError, ZoneNotFoundError
from fleetdns.base.logger import log
from fleetdns.models import AddressRecord, Change

_ERROR_MAP: dict[str, type[DNSError]] = {
    "NoSuchHostedZone": ZoneNotFoundError,
    "InvalidChangeBatch": ChangeRejectedError,
    "InvalidInput": ChangeRejectedError,
}


def _handle(e: ClientError, msg: str) -> NoReturn:
    exc = _ERROR_MAP.get(e.response["Error"]["Code"])
    raise (exc or DNSError)(msg) from e


def _strip(identifier: str, prefix: str) -> str:
    return identifier.replace(prefix, "")


def _to_record(r: dict[str, Any], zone_id: str) -> AddressRecord:
    return AddressRecord(
        name=r["Name"],
        values=tuple(rr["Value"] for rr in r.get("ResourceRecords", [])),
        ttl=r.get("TTL", 0),
        record_type=r["Type"],
        zone_id=zone_id,
    )


def _to_change(change: Change) -> dict[str, Any]:
    r = change.record
    return {
        "Action": change.action.value,
        "ResourceRecordSet": {
            "Name": r.name,
            "Type": r.record_type,
            "TTL": r.ttl,
            "ResourceRecords": [{"Value": v} for v in r.values],
        },
    }


class Route53Store(DNSStore):
    """Route 53 private hosted zones.

    Attributes:
        client: boto3 Route 53 client.
    """

    def __init__(self, config: AWSConfig | None = None, client: Any = None) -> None:
        """Initialize the Route 53 client.

        Args:
            config: AWS configuration; ignored when ``client`` is given.
            client: Pre-built boto3 Route 53 client.
        """
        self.client = client or aws_client("route53", config or AWSConfig())

    # --- Zones ---

    def list_private_zones(self) -> list[dict[str, str]]:
        """List private hosted zones as dicts with ``zone_id`` and ``name``.

        Raises:
            DNSError: On Route 53 API failure.
        """
        try:
            paginator = self.client.get_paginator("list_hosted_zones")
            return [
                {"zone_id": _strip(z["Id"], "/hostedzone/"), "name": z["Name"]}
                for page in paginator.paginate()
                for z in page.get("HostedZones", [])
                if z.get("Config", {}).get("PrivateZone", False)
            ]
        except ClientError as e:
            _handle(e, "Failed to list zones")

    def get_zone_networks(self, zone_id: str) -> list[str]:
        """Return the VPC IDs a hosted zone is associated with.

        Raises:
            ZoneNotFoundError: If the zone does not exist.
        """
        try:
            resp = self.client.get_hosted_zone(Id=zone_id)
            return [v["VPCId"] for v in resp.get("VPCs", [])]
        except ClientError as e:
            _handle(e, f"Failed to get zone '{zone_id}'")

    def find_private_zone_for_network(self, network_id: str) -> str | None:
        """Find the private hosted zone associated with a VPC.

        Route 53 has no reverse lookup from VPC to zone, so every private
        zone is fetched (concurrently) and its associations checked.
        """
        zones = self.list_private_zones()
        log.debug(f"Found {len(zones)} Private HostedZones", operation="find_zone")
        if not zones:
            return None
        zone_ids = [z["zone_id"] for z in zones]
        networks = run_concurrently(self.get_zone_networks, zone_ids)
        for zone_id, vpc_ids in zip(zone_ids, networks):
            if network_id in vpc_ids:
                return zone_id
        return None

    # --- Records ---

    def list_records(self, zone_id: str) -> list[AddressRecord]:
        """List all record sets in a hosted zone.

        Raises:
            ZoneNotFoundError: If the zone does not exist.
        """
        log.debug(f"Calling ListResourceRecordSets for Hosted Zone {zone_id}", zone_id=zone_id)
        try:
            paginator = self.client.get_paginator("list_resource_record_sets")
            return [
                _to_record(r, zone_id)
                for page in paginator.paginate(HostedZoneId=zone_id)
                for r in page.get("ResourceRecordSets", [])
            ]
        except ClientError as e:
            _handle(e, f"Failed to list records in zone '{zone_id}'")

    # --- Changes ---

    def submit_change_batch(self, zone_id: str, changes: list[Change]) -> str:
        """Apply a Route 53 change batch.

        Returns:
            Change ID (without ``/change/`` prefix).

        Raises:
            ChangeRejectedError: If Route 53 rejects the batch.
            ZoneNotFoundError: If the zone does not exist.
        """
        try:
            resp = self.client.change_resource_record_sets(
                HostedZoneId=zone_id,
                ChangeBatch={"Changes": [_to_change(c) for c in changes]},
            )
            return _strip(resp["ChangeInfo"]["Id"], "/change/")
        except ClientError as e:
            _handle(e, f"Failed to change {len(changes)} record(s) in zone '{zone_id}'")

    def get_change_status(self, change_id: str) -> bool:
        """Return ``True`` when the change status is ``INSYNC``.

        Raises:
            DNSError: On Route 53 API failure.
        """
        try:
            resp = self.client.get_change(Id=change_id)
            status = resp["ChangeInfo"]["Status"]
        except ClientError as e:
            _handle(e, f"Failed to get change '{change_id}'")
        log.debug(f"Change {change_id} status: {status}", operation="poll")
        return status == "INSYNC"
