"""Signed multi-family gateway adapter (AWS Bedrock runtime)."""

from .auth import SigV4Auth
from .client import BedrockProvider, bedrock_constructor
from .families import ModelFamily, classify_model_family
from .signing import SigV4Signer

__all__ = [
    "BedrockProvider",
    "bedrock_constructor",
    "ModelFamily",
    "classify_model_family",
    "SigV4Signer",
    "SigV4Auth",
]
