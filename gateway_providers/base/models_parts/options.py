"""
Ordered option bag with a fixed merge precedence.

Adapters keep one ``OptionBag`` of defaults for their lifetime and merge
the per-call bag over it for every request: on a key collision the
per-call value wins, otherwise the default is used. Well-known keys have
typed accessors; anything else passes through as a vendor-specific extra.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional

from ..constants import (
    KEY_MAX_TOKENS,
    KEY_SEED,
    KEY_STREAM,
    KEY_TEMPERATURE,
    KEY_TOP_P,
    RESERVED_OPTION_KEYS,
)

_WELL_KNOWN = frozenset({KEY_TEMPERATURE, KEY_MAX_TOKENS, KEY_SEED, KEY_TOP_P, KEY_STREAM})


class OptionBag(MutableMapping[str, Any]):
    """Insertion-ordered ``str -> Any`` mapping of request options."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = dict(initial or {})

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"OptionBag({self._data!r})"

    @property
    def temperature(self) -> Optional[float]:
        value = self._data.get(KEY_TEMPERATURE)
        return None if value is None else float(value)

    @property
    def max_tokens(self) -> Optional[int]:
        value = self._data.get(KEY_MAX_TOKENS)
        return None if value is None else int(value)

    @property
    def seed(self) -> Optional[int]:
        value = self._data.get(KEY_SEED)
        return None if value is None else int(value)

    @property
    def top_p(self) -> Optional[float]:
        value = self._data.get(KEY_TOP_P)
        return None if value is None else float(value)

    @property
    def stream(self) -> bool:
        return bool(self._data.get(KEY_STREAM, False))

    def copy(self) -> "OptionBag":
        return OptionBag(self._data)

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "OptionBag":
        """Return a new bag of ``self`` overlaid with ``overrides``.

        ``self`` is left untouched; keys keep their first-seen position.
        """
        result = self.copy()
        if overrides:
            result.update(overrides)
        return result

    def body_options(self) -> Dict[str, Any]:
        """Options that belong verbatim in a request body.

        Keys carrying request parts (system prompt, tools, schema, messages)
        are excluded since every adapter renders those explicitly.
        """
        return {k: v for k, v in self._data.items() if k not in RESERVED_OPTION_KEYS}

    def extras(self) -> Dict[str, Any]:
        """Vendor-specific keys: neither well-known nor reserved."""
        return {
            k: v
            for k, v in self._data.items()
            if k not in RESERVED_OPTION_KEYS and k not in _WELL_KNOWN
        }


__all__ = ["OptionBag"]
