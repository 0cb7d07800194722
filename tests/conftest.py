"""Shared fixtures: in-memory DNS store and instance directory."""

from __future__ import annotations

import itertools

import pytest

from fleetdns.base.client_cache import ClientCache
from fleetdns.base.compute import InstanceDirectory
from fleetdns.base.config import EngineConfig, NamingConfig, PollPolicy
from fleetdns.base.dns import DNSStore
from fleetdns.base.exceptions import ChangeRejectedError, InstanceNotFoundError
from fleetdns.models import AddressRecord, Change, ChangeAction, Instance

DOMAIN = "corp.example"
ZONE_ID = "Z1"
VPC_ID = "vpc-1"
PLACEMENT = "us-east-1a"


def a_record(label: str, *values: str, domain: str = DOMAIN, ttl: int = 300) -> AddressRecord:
    return AddressRecord(name=f"{label}.{domain}.", values=tuple(values), ttl=ttl, zone_id=ZONE_ID)


class FakeDNSStore(DNSStore):
    """Single private zone held in memory; batches apply atomically."""

    def __init__(self, domain: str = DOMAIN, zone_id: str = ZONE_ID, networks=(VPC_ID,)) -> None:
        self.domain = domain
        self.zone_id = zone_id
        self.networks = list(networks)
        self.records: dict[str, AddressRecord] = {}
        self.batches: list[list[Change]] = []
        self.synced = True
        self._ids = itertools.count(1)

    def add(self, label: str, *values: str) -> AddressRecord:
        record = a_record(label, *values, domain=self.domain)
        self.records[record.name] = record
        return record

    def labels(self) -> list[str]:
        return sorted(name[: -len(self.domain) - 2] for name in self.records)

    def find_private_zone_for_network(self, network_id):
        return self.zone_id if network_id in self.networks else None

    def list_records(self, zone_id):
        soa = AddressRecord(
            name=f"{self.domain}.",
            values=(f"ns-1.awsdns.com. hostmaster.{self.domain}. 1 7200 900 1209600 86400",),
            ttl=900,
            record_type="SOA",
            zone_id=zone_id,
        )
        return [soa, *self.records.values()]

    def submit_change_batch(self, zone_id, changes):
        staged = dict(self.records)
        for change in changes:
            name = change.record.name
            if change.action is ChangeAction.CREATE:
                if name in staged:
                    raise ChangeRejectedError(f"{name} already exists")
                staged[name] = change.record
            elif change.action is ChangeAction.UPSERT:
                staged[name] = change.record
            else:
                if staged.get(name) != change.record:
                    raise ChangeRejectedError(f"{name} not found")
                del staged[name]
        self.records = staged
        self.batches.append(list(changes))
        return f"C{next(self._ids)}"

    def get_change_status(self, change_id):
        return self.synced


class FakeDirectory(InstanceDirectory):
    """Instances held in memory, looked up by ID or private address."""

    def __init__(self) -> None:
        self.instances: dict[str, Instance] = {}

    def add(
        self,
        instance_id: str,
        ip: str | None,
        hostname: str | None = None,
        state: str = "running",
        placement: str = PLACEMENT,
        vpc: str = VPC_ID,
    ) -> Instance:
        tags = {"HostName": hostname} if hostname else {}
        inst = Instance(instance_id, state, ip, placement, vpc, tags)
        self.instances[instance_id] = inst
        return inst

    def set_state(self, instance_id: str, state: str) -> None:
        old = self.instances[instance_id]
        self.instances[instance_id] = Instance(
            old.instance_id, state, old.private_ip, old.placement_id, old.network_id, old.tags
        )

    def list_instances(self, filters=None):
        return list(self.instances.values())

    def get_instance(self, instance_id):
        try:
            return self.instances[instance_id]
        except KeyError:
            raise InstanceNotFoundError(instance_id) from None

    def get_instance_by_address(self, address):
        return next((i for i in self.instances.values() if i.private_ip == address), None)


@pytest.fixture(autouse=True)
def _clear_client_cache():
    ClientCache().clear()
    yield
    ClientCache().clear()


@pytest.fixture
def store():
    return FakeDNSStore()


@pytest.fixture
def directory():
    return FakeDirectory()


@pytest.fixture
def no_wait():
    return PollPolicy(interval=10, attempts=3, sleep=lambda _: None)


@pytest.fixture
def engine_config(no_wait):
    return EngineConfig(poll=no_wait)


@pytest.fixture
def open_naming():
    """Naming with four-letter company codes and an optional application segment (``cmlzue1d``)."""
    return NamingConfig(company_code_pattern="[a-z]{3,4}", application_code_pattern="[a-z]{0,5}")
