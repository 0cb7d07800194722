"""Reconciliation engine: one lifecycle event in, DNS changes out.

The engine owns all I/O around the pure :class:`Reconciler`. For every
event it re-reads the instance and the zone, so the DNS store is the only
place state lives between invocations.
"""

from __future__ import annotations

import re

from fleetdns.applier import ChangeApplier
from fleetdns.base.async_support import AsyncMixin
from fleetdns.base.compute import InstanceDirectory
from fleetdns.base.config import EngineConfig
from fleetdns.base.dns import DNSStore
from fleetdns.base.exceptions import SyncTimeoutError
from fleetdns.base.logger import log
from fleetdns.models import (
    Change,
    Instance,
    LifecycleEvent,
    LifecycleState,
    Outcome,
    ReconciliationEvent,
)
from fleetdns.naming import NamingConvention
from fleetdns.pruner import Pruner
from fleetdns.reconciler import Reconciler
from fleetdns.records import RecordIndex

_COMPANY_CODE = re.compile(r"^...")
TEST_COMPANY_CODE = "tst"


class Engine(AsyncMixin):
    """Keeps a private zone's address records in line with the fleet.

    Args:
        store: DNS store holding the private zones.
        directory: Instance lookups.
        config: Engine switches; defaults to :class:`EngineConfig`.
        convention: Naming convention; defaults to one built from
            ``config.naming``.
    """

    def __init__(
        self,
        store: DNSStore,
        directory: InstanceDirectory,
        config: EngineConfig | None = None,
        convention: NamingConvention | None = None,
    ) -> None:
        self.store = store
        self.directory = directory
        self.config = config or EngineConfig()
        self.convention = convention or NamingConvention(self.config.naming)
        self.reconciler = Reconciler(
            self.convention,
            test_mode=self.config.test_mode,
            record_ttl=self.config.record_ttl,
        )
        self.applier = ChangeApplier(store, self.config.poll)
        self.pruner = Pruner(store, directory, self.convention)

    # --- Entry points ---

    def reconcile(self, event: LifecycleEvent) -> Outcome:
        """Reconcile DNS for one instance state change.

        Returns:
            ``applied`` with the submitted changes, or ``no_action``.

        Raises:
            FleetDNSError: Any validation, conflict, index or store failure.
        """
        instance = self.directory.get_instance(event.instance_id)
        return self.reconcile_event(self.to_reconciliation_event(instance, event.state))

    def prune(self, zone_id: str, hostname: str, placement_id: str) -> Outcome:
        """Delete records of ``hostname``'s family that no live instance backs."""
        self.convention.classify(hostname, placement_id)
        changes = self.pruner.plan(zone_id, hostname, placement_id)
        if not changes:
            return Outcome.no_action("No orphaned RecordSets", zone_id=zone_id, hostname=hostname)
        warning = self._apply(zone_id, changes, tolerate_timeout=True)
        return Outcome.applied(changes, warning=warning, zone_id=zone_id, hostname=hostname)

    # --- Steps ---

    def to_reconciliation_event(
        self, instance: Instance, state: LifecycleState
    ) -> ReconciliationEvent:
        hostname = instance.tag(self.config.hostname_tag)
        if hostname and self.config.test_mode:
            hostname = _COMPANY_CODE.sub(TEST_COMPANY_CODE, hostname)
        return ReconciliationEvent(
            instance_id=instance.instance_id,
            hostname=hostname,
            address=instance.private_ip,
            placement_id=instance.placement_id or "",
            state=state,
            network_id=instance.network_id,
        )

    def reconcile_event(self, event: ReconciliationEvent) -> Outcome:
        ctx = {"instance_id": event.instance_id, "hostname": event.hostname}
        if not event.hostname:
            log.info("HostName tag not found", **ctx)
            return Outcome.no_action("HostName tag not found")

        kind = self.convention.classify(event.hostname, event.placement_id)
        log.info(
            f"HostName {event.hostname} is a {kind.value} hostname valid for placement {event.placement_id}",
            **ctx,
        )

        zone_id = self.store.find_private_zone_for_network(event.network_id) if event.network_id else None
        if zone_id is None:
            log.info(f"Private HostedZone not associated with network {event.network_id}", **ctx)
            return Outcome.no_action("Private HostedZone not associated with network", hostname=event.hostname)

        state = self.reconciler.effective_state(event.state)
        if state is LifecycleState.STARTING and not event.address:
            return Outcome.no_action("Instance has no private address", zone_id=zone_id, hostname=event.hostname)

        log.info(
            f"Instance {event.instance_id} {event.state.value}, HostName {event.hostname}, IP {event.address}",
            zone_id=zone_id,
            **ctx,
        )
        index = RecordIndex.from_records(self.store.list_records(zone_id))
        facts = self.reconciler.facts(event, index)

        holder = None
        address = self.reconciler.address_to_verify(event, facts)
        if address:
            holder = self.directory.get_instance_by_address(address)

        decision = self.reconciler.decide(event, facts, holder)
        log.info(decision.reason, zone_id=zone_id, operation="decide", **ctx)

        changes: list[Change] = list(decision.changes)
        warnings: list[str] = []
        if changes:
            warning = self._apply(
                zone_id, changes, tolerate_timeout=state is LifecycleState.TERMINATING
            )
            if warning:
                warnings.append(warning)

        if event.state is LifecycleState.TERMINATING and self.config.prune:
            log.info(f"Pruning HostName Resource Records for Private HostedZone {zone_id}", zone_id=zone_id, **ctx)
            pruned = self.pruner.plan(zone_id, event.hostname, event.placement_id)
            if pruned:
                warning = self._apply(zone_id, pruned, tolerate_timeout=True)
                if warning:
                    warnings.append(warning)
                changes.extend(pruned)

        if not changes:
            return Outcome.no_action(decision.reason, zone_id=zone_id, hostname=event.hostname)
        return Outcome.applied(
            changes,
            reason=decision.reason,
            warning="; ".join(warnings) or None,
            zone_id=zone_id,
            hostname=event.hostname,
        )

    def _apply(self, zone_id: str, changes: list[Change], tolerate_timeout: bool) -> str | None:
        """Apply a batch; a sync timeout on a deletion batch becomes a warning."""
        try:
            self.applier.apply(zone_id, changes)
        except SyncTimeoutError as e:
            if not tolerate_timeout:
                raise
            log.warning(
                f"{e} - deletion accepted and expected to converge",
                zone_id=zone_id,
                operation="apply",
            )
            return str(e)
        return None
