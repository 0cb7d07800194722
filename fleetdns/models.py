"""Data models shared by the naming, index, reconciler and applier layers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class LifecycleState(str, Enum):
    """Instance states the engine reacts to, valued by their EC2 names."""

    STARTING = "running"
    STOPPED = "stopped"
    TERMINATING = "shutting-down"

    @classmethod
    def names(cls) -> list[str]:
        return [s.value for s in cls]


class ChangeAction(str, Enum):
    CREATE = "CREATE"
    UPSERT = "UPSERT"
    DELETE = "DELETE"


@dataclass(frozen=True)
class Instance:
    """A compute instance as returned by an :class:`InstanceDirectory`."""

    instance_id: str
    state: str
    private_ip: str | None = None
    placement_id: str | None = None
    network_id: str | None = None
    tags: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    def tag(self, key: str) -> str | None:
        return self.tags.get(key)

    @property
    def is_live(self) -> bool:
        return self.state != "terminated"


@dataclass(frozen=True)
class AddressRecord:
    """One DNS address record set.

    ``name`` is fully qualified with its trailing dot, as DNS stores return
    it. Records created by the engine always carry exactly one value.
    """

    name: str
    values: tuple[str, ...]
    ttl: int = 300
    record_type: str = "A"
    zone_id: str | None = None

    @property
    def address(self) -> str | None:
        return self.values[0] if self.values else None

    def host_label(self, domain_name: str | None) -> str:
        """Return the name with ``.<domain>.`` stripped."""
        if domain_name:
            suffix = f".{domain_name}."
            if self.name.endswith(suffix):
                return self.name[: -len(suffix)]
            return self.name
        return self.name.split(".")[0]


@dataclass(frozen=True)
class Change:
    """One entry of an atomic change batch.

    ``record`` is the record set as it should be submitted; for upserts
    ``previous`` keeps the record being re-pointed.
    """

    action: ChangeAction
    record: AddressRecord
    previous: AddressRecord | None = None

    @classmethod
    def create(cls, name: str, address: str, ttl: int = 300) -> Change:
        return cls(ChangeAction.CREATE, AddressRecord(name=name, values=(address,), ttl=ttl))

    @classmethod
    def upsert(cls, existing: AddressRecord, address: str) -> Change:
        return cls(ChangeAction.UPSERT, replace(existing, values=(address,)), previous=existing)

    @classmethod
    def delete(cls, existing: AddressRecord) -> Change:
        return cls(ChangeAction.DELETE, existing)

    def describe(self) -> str:
        r = self.record
        return (
            f"{self.action.value} [ Name: {r.name}, Type: {r.record_type}, "
            f"TTL: {r.ttl}, Value: {', '.join(r.values)} ]"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action.value,
            "name": self.record.name,
            "type": self.record.record_type,
            "ttl": self.record.ttl,
            "values": list(self.record.values),
        }


@dataclass(frozen=True)
class LifecycleEvent:
    """Caller-facing payload: which instance changed state, and to what."""

    instance_id: str
    state: LifecycleState


@dataclass(frozen=True)
class ReconciliationEvent:
    """Everything the reconciler needs to know about one state change."""

    instance_id: str
    hostname: str | None
    address: str | None
    placement_id: str
    state: LifecycleState
    network_id: str | None = None


@dataclass
class Outcome:
    """Result of one reconcile or prune invocation."""

    status: str
    changes: list[Change] = field(default_factory=list)
    reason: str | None = None
    warning: str | None = None
    zone_id: str | None = None
    hostname: str | None = None

    APPLIED = "applied"
    NO_ACTION = "no_action"

    @classmethod
    def applied(cls, changes: list[Change], **kwargs: Any) -> Outcome:
        return cls(cls.APPLIED, changes=list(changes), **kwargs)

    @classmethod
    def no_action(cls, reason: str, **kwargs: Any) -> Outcome:
        return cls(cls.NO_ACTION, reason=reason, **kwargs)

    @property
    def is_applied(self) -> bool:
        return self.status == self.APPLIED

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status,
            "changes": [c.to_dict() for c in self.changes],
            "reason": self.reason,
            "warning": self.warning,
            "zone_id": self.zone_id,
            "hostname": self.hostname,
        }
