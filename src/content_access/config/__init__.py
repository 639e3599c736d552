"""
Access Engine Configuration Module

Provides centralized configuration management for the access engine.
"""

from .schema import EngineConfig, PermissionNames, TreeConfig
from .loader import load_config, load_config_from_file, interpolate_env_vars, write_default_config

__all__ = [
    "EngineConfig",
    "PermissionNames",
    "TreeConfig",
    "load_config",
    "load_config_from_file",
    "interpolate_env_vars",
    "write_default_config",
]
