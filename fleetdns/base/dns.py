"""DNS store blueprint."""

from abc import ABC, abstractmethod

from fleetdns.models import AddressRecord, Change


class DNSStore(ABC):
    """Abstract interface to the private DNS zones the engine maintains.

    Maps to AWS Route 53 private hosted zones.
    """

    # --- Zones ---

    @abstractmethod
    def find_private_zone_for_network(self, network_id: str) -> str | None:
        """Return the ID of the private zone associated with a network.

        Args:
            network_id: Virtual network identifier (VPC ID on AWS).

        Returns:
            Zone identifier, or ``None`` when no private zone is bound to
            the network.
        """

    # --- Records ---

    @abstractmethod
    def list_records(self, zone_id: str) -> list[AddressRecord]:
        """List every record set in a zone, including its ``SOA`` record."""

    # --- Changes ---

    @abstractmethod
    def submit_change_batch(self, zone_id: str, changes: list[Change]) -> str:
        """Submit ``changes`` as one all-or-nothing batch.

        Returns:
            Change-tracking token.

        Raises:
            ChangeRejectedError: If the store refuses the batch.
        """

    @abstractmethod
    def get_change_status(self, change_id: str) -> bool:
        """Return ``True`` once the change is synchronized, ``False`` while pending."""
