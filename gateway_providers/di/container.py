"""Composition root for the translation layer.

Builds the one :class:`ProviderRegistry` a process needs, lazily and exactly
once, and hands out adapters seeded with the global generation settings and
the per-provider configuration (credential, model, endpoint, region).
Adapters are not cached: they are cheap, and each caller should own one.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Mapping, Optional

from ..base.dto.provider_config import WireFormat
from ..base.interfaces import Provider
from ..base.logging import get_logger, log_event
from ..base.registry import ProviderRegistry
from ..config import get_provider_config, load_generation_settings, load_provider_configs
from ..config.settings import GenerationSettings

_logger = get_logger("gateway_providers.di")


class ProvidersContainer:
    """Dependency injection container for the registry and adapters.

    Args:
        config: Optional per-provider overrides, keyed by provider name, merged
            last over :func:`gateway_providers.config.get_provider_config`.
        settings: Generation defaults; read from ``LLM_*`` env vars when omitted.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Dict[str, Any]]] = None,
        settings: Optional[GenerationSettings] = None,
    ) -> None:
        self._config = config or {}
        self._settings = settings
        self._registry: Optional[ProviderRegistry] = None
        self._lock = threading.Lock()

    # ---- Shared singletons ----
    def registry(self) -> ProviderRegistry:
        """Return the shared registry, building it on first use.

        Providers declared in the external config file's ``providers`` list
        are registered as configuration-driven adapters.
        """
        if self._registry is not None:
            return self._registry
        with self._lock:
            if self._registry is None:
                registry = ProviderRegistry()
                for cfg in load_provider_configs():
                    if cfg.wire_format is WireFormat.CUSTOM:
                        registry.register_provider_config(cfg.name, cfg)
                    else:
                        registry.register_generic_provider(cfg.name, cfg)
                log_event(_logger, "registry.ready", providers=registry.provider_names())
                self._registry = registry
        return self._registry

    def settings(self) -> GenerationSettings:
        if self._settings is None:
            self._settings = load_generation_settings()
        return self._settings

    # ---- Providers ----
    def provider(
        self,
        name: str,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> Provider:
        """Construct an adapter for ``name`` with defaults applied.

        Raises:
            ProviderNotFoundError: ``name`` is not registered.
        """
        key = name.lower()
        cfg = get_provider_config(key, self._config.get(key))
        registry = self.registry()
        adapter = registry.get(
            key,
            api_key if api_key is not None else cfg.get("api_key", ""),
            model or cfg.get("model") or "",
            extra_headers,
        )
        adapter.set_default_options(self.settings())
        registered = registry.find_provider_config(key)
        endpoint = cfg.get("endpoint")
        if endpoint and hasattr(adapter, "set_endpoint") and (registered is None or endpoint != registered.endpoint):
            adapter.set_endpoint(endpoint)
        if cfg.get("region") and key == "bedrock":
            adapter.set_option("region", cfg["region"])
        return adapter

    def clear(self) -> None:  # testing convenience
        with self._lock:
            self._registry = None
        self._settings = None


def build_container(
    config: Optional[Dict[str, Dict[str, Any]]] = None,
    settings: Optional[GenerationSettings] = None,
) -> ProvidersContainer:
    return ProvidersContainer(config=config, settings=settings)


__all__ = ["ProvidersContainer", "build_container"]
