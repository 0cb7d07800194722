"""Fleet hostname naming convention.

Hostnames are built from fixed segments::

    <company><location><environment><application><number><zone>
     cml      ue1       d            web          01       a

A *full* hostname carries all segments; a *partial* hostname stops after
the application code and is completed by allocating the lowest free
instance number. The location code comes from the placement's region and
the zone suffix is the placement's last character, so the template is a
pure function of the placement identifier.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from fleetdns.base.config import NamingConfig
from fleetdns.base.exceptions import (
    HostnameError,
    InvalidHostnameError,
    NumberSpaceExhaustedError,
    UnknownRegionError,
)

_NUMBERED = re.compile(r"^(?P<prefix>.+?)(?P<number>[0-9]{2})(?P<zone>[a-z])$")
_MAX_NUMBER = 99


class HostnameKind(str, Enum):
    FULL = "full"
    PARTIAL = "partial"


@dataclass(frozen=True)
class HostnameTemplate:
    """Compiled full and partial patterns for one placement."""

    placement_id: str
    location_code: str
    zone_suffix: str
    full: re.Pattern[str]
    partial: re.Pattern[str]

    def classify(self, hostname: str) -> HostnameKind:
        if self.full.fullmatch(hostname):
            return HostnameKind.FULL
        if self.partial.fullmatch(hostname):
            return HostnameKind.PARTIAL
        raise InvalidHostnameError(
            f"HostName {hostname} is invalid: it does not conform to the naming convention, "
            f"or is invalid for placement {self.placement_id}"
        )


class NamingConvention:
    """Parses, validates and allocates hostnames for a fleet.

    Args:
        config: Lookup tables and segment patterns. Defaults to the
            built-in region and environment vocabulary.
    """

    def __init__(self, config: NamingConfig | None = None) -> None:
        self.config = config or NamingConfig()

    # --- Placement ---

    @staticmethod
    def region(placement_id: str) -> str:
        return placement_id[:-1]

    @staticmethod
    def zone_suffix(placement_id: str) -> str:
        return placement_id[-1:]

    def location_code(self, placement_id: str) -> str:
        """Map a placement's region to its 3-character location code.

        Raises:
            UnknownRegionError: If the region is not in the lookup table.
        """
        region = self.region(placement_id)
        code = self.config.region_codes.get(region)
        if code is None:
            raise UnknownRegionError(f"Region {region} is unknown")
        return code

    # --- Templates ---

    def _prefix(self, placement_id: str) -> str:
        cfg = self.config
        return (
            f"{cfg.company_code_pattern}"
            f"{re.escape(self.location_code(placement_id))}"
            f"{cfg.environment_code_class}"
            f"{cfg.application_code_pattern}"
        )

    def full_pattern(self, placement_id: str) -> re.Pattern[str]:
        zone = re.escape(self.zone_suffix(placement_id))
        return re.compile(
            f"^{self._prefix(placement_id)}{self.config.instance_number_pattern}{zone}\\Z"
        )

    def partial_pattern(self, placement_id: str) -> re.Pattern[str]:
        return re.compile(f"^{self._prefix(placement_id)}\\Z")

    def template(self, placement_id: str) -> HostnameTemplate:
        return HostnameTemplate(
            placement_id=placement_id,
            location_code=self.location_code(placement_id),
            zone_suffix=self.zone_suffix(placement_id),
            full=self.full_pattern(placement_id),
            partial=self.partial_pattern(placement_id),
        )

    def classify(self, hostname: str, placement_id: str) -> HostnameKind:
        """Classify a hostname as full or partial for a placement.

        Raises:
            UnknownRegionError: If the placement's region is unknown.
            InvalidHostnameError: If the hostname matches neither template.
        """
        return self.template(placement_id).classify(hostname)

    def family_pattern(
        self, hostname: str, placement_id: str, cross_zone: bool = False
    ) -> re.Pattern[str]:
        """Pattern matching every numbered sibling of ``hostname``.

        With ``cross_zone`` the zone suffix is wildcarded too, so records
        created for the same family in other zones are included.
        """
        if self.classify(hostname, placement_id) is HostnameKind.FULL:
            prefix, zone = hostname[:-3], hostname[-1]
        else:
            prefix, zone = hostname, self.zone_suffix(placement_id)
        zone_pattern = "[a-z]" if cross_zone else re.escape(zone)
        return re.compile(f"^{re.escape(prefix)}[0-9]{{2}}{zone_pattern}\\Z")

    # --- Allocation ---

    @staticmethod
    def next_number(hostnames: Iterable[str]) -> str:
        """Allocate the lowest free instance number of a hostname family.

        Walks the sorted names, advancing the expected number each time a
        name carries it; the first gap (or the end) is the result. The new
        name reuses the prefix and zone suffix of the lowest name.

        Raises:
            HostnameError: If ``hostnames`` is empty.
            InvalidHostnameError: If a name carries no instance number.
            NumberSpaceExhaustedError: If 01 through 99 are all taken.
        """
        names = sorted(hostnames)
        if not names:
            raise HostnameError("No existing hostnames to allocate from")

        parsed = []
        for name in names:
            m = _NUMBERED.match(name)
            if m is None:
                raise InvalidHostnameError(f"HostName {name} has no instance number")
            parsed.append(m)

        expected = 1
        for m in parsed:
            number = int(m.group("number"))
            if number == expected:
                expected += 1
            elif number > expected:
                break

        if expected > _MAX_NUMBER:
            raise NumberSpaceExhaustedError(
                f"All instance numbers are in use for {parsed[0].group('prefix')}"
            )
        lowest = parsed[0]
        return f"{lowest.group('prefix')}{expected:02d}{lowest.group('zone')}"

    def first_number(self, hostname: str, placement_id: str) -> str:
        """Return the first full hostname (number 01) for a partial hostname."""
        return f"{hostname}01{self.zone_suffix(placement_id)}"
