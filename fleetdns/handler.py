"""AWS Lambda entry point.

Subscribed to EventBridge EC2 Instance State-change Notifications for the
``running``, ``stopped`` and ``shutting-down`` states.
"""

from __future__ import annotations

import json
from typing import Any

from fleetdns.base.logger import log
from fleetdns.engine import Engine
from fleetdns.events import parse_event
from fleetdns.factory import build_engine

_engine: Engine | None = None


def get_engine() -> Engine:
    """Return the engine for this container, building it on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine()
    return _engine


def handler(event: dict[str, Any], context: Any) -> str:
    """Validate the notification, reconcile, and return the log stream name.

    Failures propagate so the invocation is reported as failed.
    """
    log.info(f"Event: {json.dumps(event, default=str)}", operation="handler")
    engine = get_engine()
    if engine.config.test_mode:
        log.info(
            "Test Mode: replace company code at start of HostName tags with 'tst' to avoid changing actual RecordSets",
            operation="handler",
        )

    lifecycle_event = parse_event(event)
    outcome = engine.reconcile(lifecycle_event)
    log.info(
        f"Outcome: {json.dumps(outcome.to_dict())}",
        instance_id=lifecycle_event.instance_id,
        zone_id=outcome.zone_id,
        hostname=outcome.hostname,
        operation="handler",
    )
    return getattr(context, "log_stream_name", "")
