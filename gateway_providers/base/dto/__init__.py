"""DTO validation package for the translation layer."""

from .function_call import FunctionCallDTO
from .provider_config import ProviderConfig, WireFormat

__all__ = ["FunctionCallDTO", "ProviderConfig", "WireFormat"]
