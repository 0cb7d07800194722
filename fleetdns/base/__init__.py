"""Collaborator blueprints and core utilities.

The engine talks to the outside world only through the blueprints defined
here. Implement them to run the engine against another provider or an
in-memory fake.
"""

from .compute import InstanceDirectory
from .dns import DNSStore
from .config import AWSConfig, EngineConfig, NamingConfig, PollPolicy


__all__ = [
    "InstanceDirectory",
    "DNSStore",
    "AWSConfig",
    "EngineConfig",
    "NamingConfig",
    "PollPolicy",
]
