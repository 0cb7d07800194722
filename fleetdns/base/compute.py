"""Instance directory blueprint."""

from abc import ABC, abstractmethod
from typing import Any

from fleetdns.models import Instance


class InstanceDirectory(ABC):
    """Abstract read-only view of the compute fleet.

    Maps to AWS EC2 ``DescribeInstances``.
    """

    @abstractmethod
    def list_instances(self, filters: list[dict[str, Any]] | None = None) -> list[Instance]:
        """List instances.

        Args:
            filters: Provider filter dicts, e.g.
                ``[{"Name": "instance-state-name", "Values": ["running"]}]``.
        """

    @abstractmethod
    def get_instance(self, instance_id: str) -> Instance:
        """Return a single instance.

        Raises:
            InstanceNotFoundError: If the instance does not exist.
        """

    @abstractmethod
    def get_instance_by_address(self, address: str) -> Instance | None:
        """Return the instance holding a private address, if any."""
