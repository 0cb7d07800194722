"""AWS (EC2 + Route 53) collaborators."""

from .compute import EC2InstanceDirectory
from .dns import Route53Store

__all__ = ["EC2InstanceDirectory", "Route53Store"]
