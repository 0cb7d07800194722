"""Garbage collection of records whose instance no longer exists."""

from __future__ import annotations

from fleetdns.base.async_support import run_concurrently
from fleetdns.base.compute import InstanceDirectory
from fleetdns.base.dns import DNSStore
from fleetdns.base.logger import log
from fleetdns.models import AddressRecord, Change, Instance
from fleetdns.naming import NamingConvention
from fleetdns.records import RecordIndex


class Pruner:
    """Deletes a hostname family's records that no live instance backs.

    The sweep is cross-zone: records of the family are considered whatever
    their zone suffix, since an instance's replacements may have landed in
    other zones over time.
    """

    def __init__(
        self,
        store: DNSStore,
        directory: InstanceDirectory,
        convention: NamingConvention,
    ) -> None:
        self.store = store
        self.directory = directory
        self.convention = convention

    def orphans(self, index: RecordIndex, hostname: str, placement_id: str) -> list[AddressRecord]:
        """Return the family records whose address has no live instance."""
        pattern = self.convention.family_pattern(hostname, placement_id, cross_zone=True)
        candidates = [r for r in index.matching_pattern(pattern) if r.address]
        if not candidates:
            return []

        log.debug(
            f"Calling DescribeInstances for {len(candidates)} HostName RecordSets",
            hostname=hostname,
            operation="prune",
        )
        holders: list[Instance | None] = run_concurrently(
            self._holder, [r.address for r in candidates]
        )
        return [
            record
            for record, holder in zip(candidates, holders)
            if holder is None or not holder.is_live
        ]

    def _holder(self, address: str) -> Instance | None:
        return self.directory.get_instance_by_address(address)

    def plan(self, zone_id: str, hostname: str, placement_id: str) -> list[Change]:
        """List the zone fresh and return a deletion for every orphan."""
        index = RecordIndex.from_records(self.store.list_records(zone_id))
        return [Change.delete(r) for r in self.orphans(index, hostname, placement_id)]
