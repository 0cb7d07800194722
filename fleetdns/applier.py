"""Submits change batches and waits for them to synchronize."""

from __future__ import annotations

from fleetdns.base.config import PollPolicy
from fleetdns.base.dns import DNSStore
from fleetdns.base.exceptions import SyncTimeoutError
from fleetdns.base.logger import log
from fleetdns.base.retry import poll_until
from fleetdns.models import Change


class ChangeApplier:
    """Applies a change batch atomically and polls until it is in sync.

    Args:
        store: DNS store to submit to.
        policy: Poll interval and attempt budget (default 10s x 9).
    """

    def __init__(self, store: DNSStore, policy: PollPolicy | None = None) -> None:
        self.store = store
        self.policy = policy or PollPolicy()

    def apply(self, zone_id: str, changes: list[Change]) -> str | None:
        """Submit ``changes`` as one batch and wait for synchronization.

        Returns:
            The change ID, or ``None`` when ``changes`` is empty.

        Raises:
            ChangeRejectedError: If the store refuses the batch.
            SyncTimeoutError: If the change is not synchronized within the
                poll budget. The batch was accepted and will most likely
                converge.
        """
        if not changes:
            return None

        for change in changes:
            log.info(f"Submitting {change.describe()}", zone_id=zone_id, operation="apply")
        change_id = self.store.submit_change_batch(zone_id, changes)
        log.info(
            f"Waiting for Change with ID {change_id} to synchronize",
            zone_id=zone_id,
            operation="apply",
        )

        synced = poll_until(
            lambda: self.store.get_change_status(change_id),
            self.policy,
            description=f"change {change_id}",
        )
        if not synced:
            raise SyncTimeoutError(
                f"Change status was not 'INSYNC' within {self.policy.budget:.0f} seconds",
                change_id=change_id,
            )
        return change_id
