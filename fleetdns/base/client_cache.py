"""
SDK client cache (pooling).

A Lambda container serves many invocations; creating the EC2 and Route 53
clients once per container instead of once per event keeps cold paths off
the warm ones. Clients are keyed by service name + config.
"""

from __future__ import annotations

import hashlib
import json
import threading
from typing import Any, Callable


class ClientCache:
    """Thread-safe, in-process cache of SDK clients keyed by service + config hash."""

    _instance: ClientCache | None = None
    _cache: dict[str, Any]
    _lock: threading.Lock

    def __new__(cls) -> ClientCache:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._cache = {}
            cls._instance._lock = threading.Lock()
        return cls._instance

    @staticmethod
    def _make_key(service_name: str, config: dict) -> str:
        """Produce a deterministic cache key from service and config."""
        # Sort keys so dict ordering doesn't affect the hash.
        serialised = json.dumps(
            {"service": service_name, "config": config},
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(serialised.encode()).hexdigest()

    def get_or_create(
        self,
        service_name: str,
        config: dict,
        factory: Callable[[str, dict], Any],
    ) -> Any:
        """Return a cached client or create one via *factory*.

        Args:
            service_name: SDK service name (e.g. 'route53').
            config: Client keyword arguments.
            factory: Callable(service_name, config) that creates a new client.

        Returns:
            The cached (or newly-created) client.
        """
        key = self._make_key(service_name, config)
        with self._lock:
            if key not in self._cache:
                self._cache[key] = factory(service_name, config)
            return self._cache[key]

    def clear(self) -> None:
        """Flush all cached clients."""
        with self._lock:
            self._cache.clear()
