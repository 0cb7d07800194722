"""fleetdns: hostname-based private DNS reconciliation for VM fleets.

Entry point for the library. Build an engine with :func:`build_engine`
and feed it lifecycle events::

    from fleetdns import build_engine, parse_event

    engine = build_engine({"region_name": "us-east-1"})
    outcome = engine.reconcile(parse_event(notification))
"""

from .base import DNSStore, InstanceDirectory
from .engine import Engine
from .events import parse_event
from .factory import build_engine, create_service
from .models import Change, LifecycleEvent, LifecycleState, Outcome
from .naming import HostnameKind, NamingConvention

__all__ = [
    "DNSStore",
    "InstanceDirectory",
    "Engine",
    "parse_event",
    "build_engine",
    "create_service",
    "Change",
    "LifecycleEvent",
    "LifecycleState",
    "Outcome",
    "HostnameKind",
    "NamingConvention",
]
