"""Point-in-time index over a zone's address records."""

from __future__ import annotations

import re
from typing import Iterable

from fleetdns.base.exceptions import MultipleMatchesError, UnexpectedMultiValueError
from fleetdns.models import AddressRecord


class RecordIndex:
    """Snapshot of a zone's records with hostname and address lookups.

    Built fresh for every reconciliation; nothing is cached between events.
    Only ``A`` records take part in hostname and pattern lookups.

    Args:
        records: Records listed from the zone.
        domain_name: Zone domain without trailing dot (e.g. ``corp.example``).
            Host labels are the record names with ``.<domain>.`` removed.
    """

    def __init__(self, records: Iterable[AddressRecord], domain_name: str | None = None) -> None:
        self.records = list(records)
        self.domain_name = domain_name

    @classmethod
    def from_records(cls, records: Iterable[AddressRecord]) -> RecordIndex:
        """Build an index, reading the domain name from the zone's SOA record."""
        records = list(records)
        soa = next((r for r in records if r.record_type == "SOA"), None)
        domain_name = soa.name.rstrip(".") if soa else None
        return cls(records, domain_name)

    @property
    def address_records(self) -> list[AddressRecord]:
        return [r for r in self.records if r.record_type == "A"]

    def __len__(self) -> int:
        return len(self.address_records)

    def __iter__(self):
        return iter(self.address_records)

    def host_label(self, record: AddressRecord) -> str:
        return record.host_label(self.domain_name)

    def fqdn(self, hostname: str) -> str:
        return f"{hostname}.{self.domain_name}." if self.domain_name else f"{hostname}."

    def by_hostname(self, hostname: str) -> AddressRecord | None:
        """Return the record whose host label is exactly ``hostname``.

        Raises:
            MultipleMatchesError: If more than one record has that label.
        """
        matches = [r for r in self.address_records if self.host_label(r) == hostname]
        if len(matches) > 1:
            raise MultipleMatchesError(
                f"More than one RecordSet with HostName {hostname} found (this should not be possible!)"
            )
        return matches[0] if matches else None

    def by_address(self, address: str) -> AddressRecord | None:
        """Return the single-valued record carrying ``address``.

        Raises:
            MultipleMatchesError: If more than one record carries the address.
            UnexpectedMultiValueError: If the matching record has other values.
        """
        matches = [r for r in self.address_records if address in r.values]
        if len(matches) > 1:
            raise MultipleMatchesError(
                f"More than one RecordSet with IP Address {address} found"
            )
        if not matches:
            return None
        record = matches[0]
        if len(record.values) > 1:
            others = ", ".join(v for v in record.values if v != address)
            raise UnexpectedMultiValueError(
                f"RecordSet {record.name} with IP Address {address} contains additional Values {others}"
            )
        return record

    def matching_pattern(self, pattern: re.Pattern[str] | str) -> list[AddressRecord]:
        """Return every address record whose host label matches ``pattern``."""
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        return [r for r in self.address_records if regex.match(self.host_label(r))]

    def subset(self, pattern: re.Pattern[str] | str) -> RecordIndex:
        """Index restricted to the records matching ``pattern``."""
        return RecordIndex(self.matching_pattern(pattern), self.domain_name)
