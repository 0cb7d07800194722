"""
fleetdns exception hierarchy.

Every failure the engine can surface inherits from :class:`FleetDNSError`.
Callers that need to tell failure kinds apart catch the sub-exceptions;
``SyncTimeoutError`` is the only one the engine itself may downgrade.
"""


# ── Base ──────────────────────────────────────────────────────────────
class FleetDNSError(Exception):
    """Root exception for all fleetdns errors."""


# ── Naming convention ─────────────────────────────────────────────────
class HostnameError(FleetDNSError):
    """Base exception for naming convention failures."""


class UnknownRegionError(HostnameError):
    """Placement region is not present in the location code table."""


class InvalidHostnameError(HostnameError):
    """Hostname matches neither the full nor the partial template."""


class NumberSpaceExhaustedError(HostnameError):
    """Every two-digit instance number of a hostname family is taken."""


# ── Reconciliation ────────────────────────────────────────────────────
class AddressInUseError(FleetDNSError):
    """Record address is still held by a different live instance."""


class RecordIndexViolation(FleetDNSError):
    """Zone records break the one-name / one-address invariants."""


class MultipleMatchesError(RecordIndexViolation):
    """More than one record matches a hostname or an address."""


class UnexpectedMultiValueError(RecordIndexViolation):
    """Address record carries values besides the one being looked up."""


# ── DNS ───────────────────────────────────────────────────────────────
class DNSError(FleetDNSError):
    """Base exception for DNS store operations."""


class ZoneNotFoundError(DNSError):
    """Hosted zone not found."""


class ChangeRejectedError(DNSError):
    """The DNS store refused a change batch outright."""


class SyncTimeoutError(DNSError):
    """A submitted change did not report synchronized within the poll budget."""

    def __init__(self, message: str, change_id: str | None = None) -> None:
        super().__init__(message)
        self.change_id = change_id


# ── Compute ───────────────────────────────────────────────────────────
class ComputeError(FleetDNSError):
    """Base exception for instance lookups."""


class InstanceNotFoundError(ComputeError):
    """VM instance not found."""


# ── Events ────────────────────────────────────────────────────────────
class EventValidationError(FleetDNSError):
    """Inbound lifecycle event is not the expected category or shape."""
