"""Model-family classification for the Bedrock gateway.

One gateway name fronts several model families whose payloads are
incompatible. The family is read from the model id prefix
(``anthropic.claude-3-haiku...`` -> ``ANTHROPIC``); anything unrecognised
falls back to ``UNKNOWN``, which shares the generic ``inputText`` shape
with ``AMAZON`` and ``AI21``.
"""

from __future__ import annotations

from enum import Enum


class ModelFamily(str, Enum):
    """Closed set of payload families served by the gateway adapter."""

    ANTHROPIC = "anthropic"
    META = "meta"
    MISTRAL = "mistral"
    COHERE = "cohere"
    AMAZON = "amazon"
    AI21 = "ai21"
    UNKNOWN = "unknown"

    @property
    def uses_messages(self) -> bool:
        """True when the family accepts a native message list."""
        return self is ModelFamily.ANTHROPIC


_PREFIXES = (
    ("anthropic.", ModelFamily.ANTHROPIC),
    ("meta.", ModelFamily.META),
    ("mistral.", ModelFamily.MISTRAL),
    ("amazon.", ModelFamily.AMAZON),
    ("cohere.", ModelFamily.COHERE),
    ("ai21.", ModelFamily.AI21),
)

_GEO_PREFIXES = ("us.", "eu.", "apac.", "us-gov.", "global.")


def classify_model_family(model: str) -> ModelFamily:
    """Return the family for ``model``.

    Cross-region inference profile ids (``us.anthropic.claude...``) carry a
    geography prefix, which is ignored.
    """
    model_id = model or ""
    for geo in _GEO_PREFIXES:
        if model_id.startswith(geo):
            model_id = model_id[len(geo):]
            break
    for prefix, family in _PREFIXES:
        if model_id.startswith(prefix):
            return family
    return ModelFamily.UNKNOWN


__all__ = ["ModelFamily", "classify_model_family"]
