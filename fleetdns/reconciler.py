"""Reconciliation decision table.

The reconciler looks at three facts for an event, all taken from the
family of records sharing the event's hostname pattern:

* the record whose host label is the declared (full) hostname,
* the record carrying the instance's current address,
* whether those two are the same record,

and maps them, per lifecycle state, to a list of changes. Deciding is
pure: the only outside fact it needs (who currently holds the address of
a record it would re-point) is looked up by the caller beforehand, as
announced by :meth:`Reconciler.address_to_verify`.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from fleetdns.base.exceptions import AddressInUseError
from fleetdns.base.logger import log
from fleetdns.models import AddressRecord, Change, Instance, LifecycleState, ReconciliationEvent
from fleetdns.naming import HostnameKind, NamingConvention
from fleetdns.records import RecordIndex


@dataclass(frozen=True)
class RecordFacts:
    """What the zone snapshot says about one event's hostname and address."""

    kind: HostnameKind
    family: RecordIndex
    name_record: AddressRecord | None = None
    address_record: AddressRecord | None = None

    @property
    def same_record(self) -> bool:
        return self.name_record is not None and self.name_record == self.address_record


@dataclass
class Decision:
    changes: list[Change] = field(default_factory=list)
    reason: str = ""

    def __bool__(self) -> bool:
        return bool(self.changes)


class Reconciler:
    """Decides which DNS changes a lifecycle event calls for.

    Args:
        convention: Naming convention used to classify and allocate names.
        test_mode: Treat ``stopped`` like ``terminating``.
        record_ttl: TTL of records created for new instances.
    """

    def __init__(
        self,
        convention: NamingConvention,
        test_mode: bool = False,
        record_ttl: int = 300,
    ) -> None:
        self.convention = convention
        self.test_mode = test_mode
        self.record_ttl = record_ttl

    def effective_state(self, state: LifecycleState) -> LifecycleState:
        if state is LifecycleState.STOPPED and self.test_mode:
            return LifecycleState.TERMINATING
        return state

    def facts(self, event: ReconciliationEvent, index: RecordIndex) -> RecordFacts:
        """Collect the name and address matches for ``event``.

        Raises:
            UnknownRegionError, InvalidHostnameError: From classification.
            MultipleMatchesError, UnexpectedMultiValueError: From the index.
        """
        hostname = event.hostname or ""
        kind = self.convention.classify(hostname, event.placement_id)
        family = index.subset(self.convention.family_pattern(hostname, event.placement_id))
        name_record = None
        address_record = None
        if len(family) > 0:
            log.debug(
                f"{len(family)} HostName RecordSet(s) found",
                instance_id=event.instance_id,
                hostname=hostname,
                operation="facts",
            )
            if kind is HostnameKind.FULL:
                name_record = family.by_hostname(hostname)
            if event.address:
                address_record = family.by_address(event.address)
        return RecordFacts(kind, family, name_record, address_record)

    def address_to_verify(self, event: ReconciliationEvent, facts: RecordFacts) -> str | None:
        """Address whose current holder must be known before deciding.

        Only a start that would re-point an existing name record needs it:
        the record may still belong to another running instance.
        """
        if self.effective_state(event.state) is not LifecycleState.STARTING:
            return None
        if facts.name_record is None or facts.same_record:
            return None
        return facts.name_record.address

    def decide(
        self,
        event: ReconciliationEvent,
        facts: RecordFacts,
        holder: Instance | None = None,
    ) -> Decision:
        """Map an event and its record facts to the changes to apply.

        Args:
            event: The lifecycle event.
            facts: Result of :meth:`facts` for the same event.
            holder: Instance currently holding the address returned by
                :meth:`address_to_verify`, if any.

        Raises:
            AddressInUseError: If the name record's address belongs to a
                different live instance.
        """
        state = self.effective_state(event.state)
        if state is LifecycleState.STARTING:
            return self._decide_start(event, facts, holder)
        if state is LifecycleState.TERMINATING:
            return self._decide_terminate(event, facts)
        return Decision(reason=f"state {event.state.value} ignored, except in test mode")

    def _decide_start(
        self, event: ReconciliationEvent, facts: RecordFacts, holder: Instance | None
    ) -> Decision:
        hostname = event.hostname or ""
        name_record, address_record = facts.name_record, facts.address_record

        if facts.same_record:
            return Decision(
                reason=f"RecordSet found: HostName {hostname}, IP {event.address} - NO ACTION (restart after stop)"
            )

        if name_record is not None:
            if holder is not None and holder.instance_id != event.instance_id and holder.is_live:
                raise AddressInUseError(
                    f"RecordSet found: HostName {hostname}, IP {name_record.address} - "
                    f"IP in use by Instance {holder.instance_id}, unable to update existing RecordSet"
                )
            return Decision(
                [Change.upsert(name_record, event.address)],
                reason=f"RecordSet found: HostName {hostname}, IP {name_record.address} - UPSERT (replacement Instance with modified IP)",
            )

        if address_record is not None:
            return Decision(
                reason=(
                    f"RecordSet found: HostName {facts.family.host_label(address_record)}, "
                    f"IP {event.address} - NO ACTION (restart after stop, with HostName tag pattern)"
                )
            )

        if len(facts.family) > 0:
            labels = [facts.family.host_label(r) for r in facts.family]
            new_hostname = self.convention.next_number(labels)
            reason = "RecordSet(s) found which match HostName tag pattern, but none which match current Instance IP - CREATE (new Instance)"
        elif facts.kind is HostnameKind.FULL:
            new_hostname = hostname
            reason = "RecordSet(s) not found - CREATE (new Instance)"
        else:
            new_hostname = self.convention.first_number(hostname, event.placement_id)
            reason = "RecordSet(s) not found - CREATE (new Instance)"

        return Decision(
            [Change.create(facts.family.fqdn(new_hostname), event.address, self.record_ttl)],
            reason=reason,
        )

    def _decide_terminate(self, event: ReconciliationEvent, facts: RecordFacts) -> Decision:
        hostname = event.hostname or ""
        if facts.same_record:
            return Decision(
                [Change.delete(facts.name_record)],
                reason=f"RecordSet found: HostName {hostname}, IP {event.address} - DELETE",
            )
        if facts.name_record is None and facts.address_record is not None:
            label = facts.family.host_label(facts.address_record)
            return Decision(
                [Change.delete(facts.address_record)],
                reason=f"RecordSet found: HostName {label}, IP {event.address} - DELETE",
            )
        return Decision(reason=f"No RecordSet for HostName {hostname}, IP {event.address} - NO ACTION")
