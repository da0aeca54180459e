# Package initialization
from .bridge_config import BridgeConfig, BridgeInputConfig, CustomFieldMapping

__all__ = [
    "BridgeConfig",
    "BridgeInputConfig",
    "CustomFieldMapping",
]
