"""Provider registry: name -> adapter constructor and name -> config.

Purpose
-------
Resolve a provider name to a fresh adapter instance. Two tables are kept:
constructors (``(api_key, model, extra_headers) -> Provider``) and
:class:`ProviderConfig` values consumed by the configuration-driven adapter.
Built-in constructors are imported lazily with ``importlib`` so importing
the registry does not pull in every adapter module.

Concurrency
-----------
Both tables are guarded by one :class:`ReadWriteLock`: lookups share the
read side, registrations take the write side. There is no module-level
registry; construct one at start-up (``ProvidersContainer`` does this once)
and pass it to whatever needs lookups.
"""

from __future__ import annotations

import logging
from importlib import import_module
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .dto.provider_config import ProviderConfig
from .errors import ConfigNotFoundError, ProviderNotFoundError
from .interfaces import Provider, ProviderConstructor
from .logging import get_logger, log_event
from .rw_lock import ReadWriteLock

_STANDARD_CONFIGS: Tuple[str, str] = ("gateway_providers.generic.standard_configs", "standard_configs")

# name -> (module, factory). Each factory is called as factory(name, registry)
# and returns the constructor stored in the table.
_BUILTIN_CONSTRUCTORS: Dict[str, Tuple[str, str]] = {
    "openai": ("gateway_providers.generic.client", "generic_constructor"),
    "azure-openai": ("gateway_providers.generic.client", "generic_constructor"),
    "anthropic": ("gateway_providers.generic.client", "generic_constructor"),
    "groq": ("gateway_providers.generic.client", "generic_constructor"),
    "deepseek": ("gateway_providers.generic.client", "generic_constructor"),
    "mistral": ("gateway_providers.generic.client", "generic_constructor"),
    "openrouter": ("gateway_providers.generic.client", "generic_constructor"),
    "bedrock": ("gateway_providers.bedrock.client", "bedrock_constructor"),
}

_logger = get_logger("gateway_providers.registry")


def builtin_provider_names() -> List[str]:
    """Names for which a built-in constructor exists."""
    return sorted(_BUILTIN_CONSTRUCTORS)


class ProviderRegistry:
    """Thread-safe provider lookup.

    Parameters
    ----------
    *provider_names:
        Restrict the built-in constructors registered. Unknown names are
        ignored. With no names every built-in constructor is registered.
        Standard configs are always loaded either way.
    """

    def __init__(self, *provider_names: str) -> None:
        self._lock = ReadWriteLock()
        self._constructors: Dict[str, ProviderConstructor] = {}
        module_path, attr = _STANDARD_CONFIGS
        self._configs: Dict[str, ProviderConfig] = dict(getattr(import_module(module_path), attr)())

        wanted: Iterable[str] = provider_names or _BUILTIN_CONSTRUCTORS.keys()
        for name in wanted:
            spec = _BUILTIN_CONSTRUCTORS.get(name)
            if spec is None:
                continue
            factory = getattr(import_module(spec[0]), spec[1])
            self._constructors[name] = factory(name, self)

    # ------------------------------------------------------------- registration
    def register(self, name: str, constructor: ProviderConstructor) -> None:
        """Add or replace a constructor; safe while other threads look up."""
        with self._lock.write():
            self._constructors[name] = constructor
        log_event(_logger, "registry.register", level=logging.DEBUG, name=name, kind="constructor")

    def register_provider_config(self, name: str, config: ProviderConfig) -> None:
        """Add or replace the config stored under ``name``."""
        with self._lock.write():
            self._configs[name] = config
        log_event(_logger, "registry.register", level=logging.DEBUG, name=name, kind="config")

    def register_generic_provider(self, name: str, config: ProviderConfig) -> None:
        """Register ``config`` and a configuration-driven constructor for it in one step."""
        from ..generic.client import generic_constructor

        with self._lock.write():
            self._configs[name] = config
            self._constructors[name] = generic_constructor(name, self)
        log_event(_logger, "registry.register", level=logging.DEBUG, name=name, kind="generic")

    # ------------------------------------------------------------------ lookup
    def get(
        self,
        name: str,
        api_key: str,
        model: str,
        extra_headers: Optional[Mapping[str, str]] = None,
    ) -> Provider:
        """Construct a new adapter for ``name``.

        Raises:
            ProviderNotFoundError: no constructor is registered under ``name``.
            ConfigNotFoundError: a configuration-driven constructor found no config.
        """
        with self._lock.read():
            constructor = self._constructors.get(name)
        if constructor is None:
            raise ProviderNotFoundError(f"unknown provider: {name}", provider=name, model=model)
        # constructors may read configs, so call outside the read section
        return constructor(api_key, model, extra_headers)

    def find_provider_config(self, name: str) -> Optional[ProviderConfig]:
        with self._lock.read():
            return self._configs.get(name)

    def get_provider_config(self, name: str) -> ProviderConfig:
        """Return the config for ``name`` or raise :class:`ConfigNotFoundError`."""
        config = self.find_provider_config(name)
        if config is None:
            raise ConfigNotFoundError(f"no provider config registered for {name}", provider=name)
        return config

    def is_known_provider(self, name: str) -> bool:
        """True when a config exists; a constructor is not guaranteed."""
        return self.find_provider_config(name) is not None

    def has_constructor(self, name: str) -> bool:
        with self._lock.read():
            return name in self._constructors

    def provider_names(self) -> List[str]:
        with self._lock.read():
            return sorted(self._constructors)

    def config_names(self) -> List[str]:
        with self._lock.read():
            return sorted(self._configs)


__all__ = ["ProviderRegistry", "builtin_provider_names"]
