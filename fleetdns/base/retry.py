"""
Bounded polling with a fixed interval.

DNS changes converge in a well-known, roughly constant time, so status
checks are spaced evenly instead of backing off. The interval, attempt
budget and sleep function come from a :class:`PollPolicy`.
"""

from __future__ import annotations

import logging
from typing import Callable

from fleetdns.base.config import PollPolicy

logger = logging.getLogger("fleetdns")


def poll_until(
    check: Callable[[], bool],
    policy: PollPolicy | None = None,
    description: str = "condition",
) -> bool:
    """Call ``check`` until it returns ``True`` or the attempt budget runs out.

    Each unsuccessful check is followed by ``policy.sleep(policy.interval)``.
    Exceptions raised by ``check`` propagate immediately.

    Args:
        check: Zero-argument callable returning ``True`` once done.
        policy: Interval / attempts / sleep strategy. Defaults to 10s x 9.
        description: Used in log messages.

    Returns:
        ``True`` if ``check`` succeeded, ``False`` if the budget was exhausted.
    """
    policy = policy or PollPolicy()
    for attempt in range(1, policy.attempts + 1):
        if check():
            return True
        logger.debug(
            "Check %d/%d for %s not satisfied, waiting %.1fs",
            attempt,
            policy.attempts,
            description,
            policy.interval,
        )
        policy.sleep(policy.interval)
    logger.warning(
        "%s not satisfied after %d checks (%.0fs)",
        description,
        policy.attempts,
        policy.budget,
    )
    return False
