"""AWS client factory.

Creates boto3 clients from an :class:`AWSConfig`, reusing them across
invocations through the process-wide :class:`ClientCache`.
"""

from __future__ import annotations

from typing import Any

import boto3

from fleetdns.base.client_cache import ClientCache
from fleetdns.base.config import AWSConfig


def _new_client(service_name: str, kwargs: dict) -> Any:
    return boto3.client(service_name, **kwargs)


def aws_client(service_name: str, config: AWSConfig) -> Any:
    """Return a (cached) boto3 client for ``service_name``.

    Args:
        service_name: boto3 service name (``ec2``, ``route53``).
        config: AWS credentials and region.
    """
    kwargs = {
        "aws_access_key_id": config.aws_access_key_id,
        "aws_secret_access_key": config.aws_secret_access_key,
        "region_name": config.region_name,
    }
    return ClientCache().get_or_create(service_name, kwargs, _new_client)
