"""Validation of inbound EC2 instance state-change notifications."""

from __future__ import annotations

from typing import Any

from fleetdns.base.exceptions import EventValidationError
from fleetdns.models import LifecycleEvent, LifecycleState

EVENT_SOURCE = "aws.ec2"
EVENT_DETAIL_TYPE = "EC2 Instance State-change Notification"


def validate_event(
    event: Any,
    source: str = EVENT_SOURCE,
    detail_type: str = EVENT_DETAIL_TYPE,
    states: list[str] | None = None,
) -> None:
    """Check that ``event`` is the expected category of notification.

    Raises:
        EventValidationError: On a missing event, wrong source or
            detail-type, or a state outside ``states``.
    """
    states = states if states is not None else LifecycleState.names()
    if not event or not isinstance(event, dict):
        raise EventValidationError("event invalid")
    if event.get("source") != source:
        raise EventValidationError(f"event.source {event.get('source')} invalid, expecting {source}")
    if event.get("detail-type") != detail_type:
        raise EventValidationError(
            f"event.detail-type {event.get('detail-type')} invalid, expecting {detail_type}"
        )
    detail = event.get("detail")
    if not isinstance(detail, dict) or detail.get("state") not in states:
        state = detail.get("state") if isinstance(detail, dict) else None
        raise EventValidationError(
            f"event.detail.state: {state} invalid, expecting one of {', '.join(states)}"
        )
    if not detail.get("instance-id"):
        raise EventValidationError("event.detail.instance-id missing")


def parse_event(event: Any) -> LifecycleEvent:
    """Validate a state-change notification and extract the lifecycle event."""
    validate_event(event)
    detail = event["detail"]
    return LifecycleEvent(
        instance_id=detail["instance-id"],
        state=LifecycleState(detail["state"]),
    )
