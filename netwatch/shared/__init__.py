"""Shared utilities for netwatch services."""

from .config import load_yaml_config, get_config_path
from .mqtt import MQTTConfig, create_status_payload
from .logging import setup_logging

__all__ = [
    "load_yaml_config",
    "get_config_path",
    "MQTTConfig",
    "create_status_payload",
    "setup_logging",
]
