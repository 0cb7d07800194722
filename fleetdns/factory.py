"""Engine factory.

Provides :func:`build_engine`, the single entry-point for wiring an
:class:`Engine` to its AWS collaborators, and :func:`create_service` for
creating one collaborator by name.
"""

from typing import Any, Literal, overload

from fleetdns.aws.compute import EC2InstanceDirectory
from fleetdns.aws.dns import Route53Store
from fleetdns.base.compute import InstanceDirectory
from fleetdns.base.config import AWSConfig, EngineConfig
from fleetdns.base.dns import DNSStore
from fleetdns.engine import Engine

existing_services = Literal["compute", "dns"]

# Service registry for AWS
SERVICE_REGISTRY: dict[str, type] = {
    "compute": EC2InstanceDirectory,
    "dns": Route53Store,
}


@overload
def create_service(service_name: Literal["compute"], config: dict | AWSConfig | None = None) -> InstanceDirectory: ...


@overload
def create_service(service_name: Literal["dns"], config: dict | AWSConfig | None = None) -> DNSStore: ...


def create_service(service_name: existing_services, config: dict | AWSConfig | None = None) -> Any:
    """
    Create a collaborator service by name.
    Args:
        service_name: The name of the service ('compute' or 'dns').
        config: AWS configuration dict or model; environment fallbacks apply.
    Returns:
        An instance of the requested service class.
    Raises:
        ValueError: If the service is not supported.
    """
    if service_name not in SERVICE_REGISTRY:
        raise ValueError(f"Unsupported service '{service_name}'")
    aws_config = config if isinstance(config, AWSConfig) else AWSConfig(**(config or {}))
    return SERVICE_REGISTRY[service_name](aws_config)


def build_engine(
    aws_config: dict | AWSConfig | None = None,
    engine_config: EngineConfig | None = None,
) -> Engine:
    """Build an engine backed by EC2 and Route 53.

    Args:
        aws_config: AWS credentials / region.
        engine_config: Engine switches; read from the environment
            (``PRUNE``, ``TEST``) when omitted.
    """
    return Engine(
        store=create_service("dns", aws_config),
        directory=create_service("compute", aws_config),
        config=engine_config or EngineConfig.from_env(),
    )
