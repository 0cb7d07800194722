"""fleetdns CLI: run a reconciliation or a prune by hand.

Usage examples::

    fleetdns reconcile i-0abc123 running
    fleetdns --config '{"region_name":"us-east-1"}' prune Z123 cmlue1dweb us-east-1a
    fleetdns classify cmlue1dweb01a us-east-1a
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any

from fleetdns.base.config import EngineConfig
from fleetdns.base.exceptions import FleetDNSError
from fleetdns.factory import build_engine
from fleetdns.models import LifecycleEvent, LifecycleState
from fleetdns.naming import NamingConvention


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the ``fleetdns`` CLI.

    Returns:
        Configured :class:`~argparse.ArgumentParser`.
    """
    parser = argparse.ArgumentParser(
        prog="fleetdns",
        description="Hostname-based private DNS reconciliation",
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="{}",
        help='JSON AWS config string (e.g. \'{"region_name":"us-east-1"}\')',
    )
    parser.add_argument(
        "--engine", "-e",
        type=str,
        default=None,
        help='JSON engine config (e.g. \'{"prune": true}\'); defaults to PRUNE/TEST env vars',
    )
    sub = parser.add_subparsers(dest="command", required=True)

    rec = sub.add_parser("reconcile", help="Reconcile DNS for an instance state change")
    rec.add_argument("instance_id", help="Instance ID (e.g. i-0abc123)")
    rec.add_argument("state", choices=LifecycleState.names(), help="New instance state")

    prune = sub.add_parser("prune", help="Delete orphaned records of a hostname family")
    prune.add_argument("zone_id", help="Private hosted zone ID")
    prune.add_argument("hostname", help="Full or partial hostname")
    prune.add_argument("placement_id", help="Placement (e.g. us-east-1a)")

    classify = sub.add_parser("classify", help="Classify a hostname as full or partial")
    classify.add_argument("hostname", help="Hostname to check")
    classify.add_argument("placement_id", help="Placement (e.g. us-east-1a)")
    return parser


def _load_json(raw: str, flag: str) -> dict[str, Any]:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        print(f"Invalid {flag} JSON: {e}", file=sys.stderr)
        sys.exit(1)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point.

    Parses arguments, builds an engine via :func:`build_engine` when AWS
    access is needed, runs the command and prints the result as JSON.

    Args:
        argv: Optional argument list (defaults to ``sys.argv``).
    """
    parser = _build_parser()
    ns = parser.parse_args(argv)
    config = _load_json(ns.config, "--config")

    try:
        engine_config = (
            EngineConfig(**_load_json(ns.engine, "--engine")) if ns.engine else EngineConfig.from_env()
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if ns.command == "classify":
        convention = NamingConvention(engine_config.naming)
        try:
            kind = convention.classify(ns.hostname, ns.placement_id)
        except FleetDNSError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(json.dumps({"hostname": ns.hostname, "kind": kind.value}, indent=2))
        return

    try:
        engine = build_engine(config, engine_config)
        if ns.command == "reconcile":
            outcome = engine.reconcile(LifecycleEvent(ns.instance_id, LifecycleState(ns.state)))
        else:
            outcome = engine.prune(ns.zone_id, ns.hostname, ns.placement_id)
    except (FleetDNSError, ValueError) as e:
        print(f"Operation failed: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(outcome.to_dict(), indent=2, default=str))


if __name__ == "__main__":
    main()
