"""
Pydantic configuration models.

Validates the engine and provider configuration at construction time
instead of silently passing bad values to the AWS SDK or the naming
convention.
"""

from __future__ import annotations

import os
import re
import time
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, model_validator

_TRUTHY = re.compile(r"^(t(rue)?|1|on|y(es)?)$", re.IGNORECASE)

# Region -> location code. ap-south-1 maps to ``id1`` rather than ``as1``.
DEFAULT_REGION_CODES: dict[str, str] = {
    "us-east-1": "ue1",
    "us-east-2": "ue2",
    "us-west-1": "uw1",
    "us-west-2": "uw2",
    "ap-east-1": "ae1",
    "ap-south-1": "id1",
    "ap-northeast-2": "an2",
    "ap-southeast-1": "as1",
    "ap-southeast-2": "as2",
    "ap-northeast-1": "an1",
    "ca-central-1": "cc1",
    "eu-central-1": "ec1",
    "eu-west-1": "ew1",
    "eu-west-2": "ew2",
    "eu-west-3": "ew3",
    "eu-north-1": "en1",
    "me-south-1": "ms1",
    "sa-east-1": "se1",
}

# One letter per environment, kept in alphabetical order to better see conflicts
DEFAULT_ENVIRONMENT_CODES = "abcdijlmopqrstu"


def parse_boolean(value: Any) -> bool:
    """Interpret environment-style flags (``true``, ``1``, ``on``, ``yes`` …)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return bool(_TRUTHY.match(str(value).strip()))


class AWSConfig(BaseModel):
    """Configuration for AWS services.

    Credentials are resolved in order:
    1. Explicit values passed in the config dict.
    2. Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY, AWS_DEFAULT_REGION).
    3. If neither is set, fields are left as None so boto3 can fall back to its
       own credential chain (Lambda execution role, ~/.aws/credentials, etc.).
    """

    model_config = ConfigDict(extra="forbid")

    aws_access_key_id: str | None = Field(default=None, description="AWS access key ID")
    aws_secret_access_key: str | None = Field(default=None, description="AWS secret access key")
    region_name: str | None = Field(default=None, description="AWS region (e.g. 'us-east-1')")

    @model_validator(mode="before")
    @classmethod
    def resolve_from_env(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Fall back to environment variables for missing credentials."""
        env_map = {
            "aws_access_key_id": "AWS_ACCESS_KEY_ID",
            "aws_secret_access_key": "AWS_SECRET_ACCESS_KEY",
            "region_name": "AWS_DEFAULT_REGION",
        }
        for field, env_var in env_map.items():
            if not values.get(field):
                values[field] = os.environ.get(env_var)
        return values


class NamingConfig(BaseModel):
    """Vocabulary of the fleet hostname convention.

    Extending the fleet to a new region or environment is a change to
    these tables, not to :mod:`fleetdns.naming`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    region_codes: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_REGION_CODES))
    environment_codes: str = DEFAULT_ENVIRONMENT_CODES
    company_code_pattern: str = "[a-z]{3}"
    application_code_pattern: str = "[a-z]{2,5}"
    instance_number_pattern: str = "[0-9]{2}"

    @model_validator(mode="after")
    def validate_codes(self) -> NamingConfig:
        """Location codes are three characters, environment codes one letter."""
        for region, code in self.region_codes.items():
            if not re.fullmatch(r"[a-z0-9]{3}", code):
                raise ValueError(f"Location code '{code}' for region '{region}' must be 3 characters")
        if not re.fullmatch(r"[a-z]+", self.environment_codes):
            raise ValueError("Environment codes must be single lowercase letters")
        return self

    @property
    def environment_code_class(self) -> str:
        """Regex character class of every configured environment code."""
        return "[" + "".join(sorted(set(self.environment_codes))) + "]"


class PollPolicy(BaseModel):
    """Fixed-interval, bounded polling for change synchronization.

    ``sleep`` is swappable so tests can poll without waiting.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    interval: float = Field(default=10.0, ge=0, description="Seconds between status checks")
    attempts: int = Field(default=9, ge=1, description="Number of status checks")
    sleep: Callable[[float], None] = Field(default=time.sleep, exclude=True)

    @property
    def budget(self) -> float:
        """Total seconds the poll loop may wait."""
        return self.interval * self.attempts


class EngineConfig(BaseModel):
    """Behaviour switches for the reconciliation engine."""

    model_config = ConfigDict(extra="forbid")

    prune: bool = Field(default=False, description="Sweep orphaned records after termination")
    test_mode: bool = Field(
        default=False,
        description="Rewrite company codes to 'tst' and treat 'stopped' as terminating",
    )
    hostname_tag: str = "HostName"
    record_ttl: int = Field(default=300, ge=0)
    naming: NamingConfig = Field(default_factory=NamingConfig)
    poll: PollPolicy = Field(default_factory=PollPolicy)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None, **overrides: Any) -> EngineConfig:
        """Build a config from ``PRUNE`` / ``TEST`` style environment flags."""
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "prune": parse_boolean(env.get("PRUNE")),
            "test_mode": parse_boolean(env.get("TEST")),
        }
        if env.get("HOSTNAME_TAG"):
            values["hostname_tag"] = env["HOSTNAME_TAG"]
        values.update(overrides)
        return cls(**values)


# Map config names to their models for dynamic validation
CONFIG_REGISTRY: dict[str, type[BaseModel]] = {
    "aws": AWSConfig,
    "engine": EngineConfig,
    "naming": NamingConfig,
}


def validate_config(name: str, config: dict) -> BaseModel:
    """Validate and return a typed config model.

    Args:
        name: Registered config name (e.g. 'aws', 'engine').
        config: Raw configuration dictionary.

    Returns:
        A validated Pydantic config model.

    Raises:
        ValueError: If the name is unknown.
        pydantic.ValidationError: If the config is invalid.
    """
    model = CONFIG_REGISTRY.get(name)
    if model is None:
        raise ValueError(f"No config model registered for: {name}")
    return model(**config)


__all__ = [
    "AWSConfig",
    "NamingConfig",
    "PollPolicy",
    "EngineConfig",
    "CONFIG_REGISTRY",
    "DEFAULT_REGION_CODES",
    "DEFAULT_ENVIRONMENT_CODES",
    "parse_boolean",
    "validate_config",
]
