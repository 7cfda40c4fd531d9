"""
Configuration module for the raw data stream relay.

This module provides:
- Pydantic configuration models and the parameter store
- Mode-specific parameter resolution
- YAML configuration loading
- Configuration validation
"""

from raw_stream.config.models import (
    AppConfig,
    ChannelConfig,
    NodeConfig,
    ParameterStore,
    RawDataStreamParams,
    StreamConfig,
    resolve_stream_config,
)
from raw_stream.config.loader import load_config
from raw_stream.config.validation import validate_config

__all__ = [
    "AppConfig",
    "ChannelConfig",
    "NodeConfig",
    "ParameterStore",
    "RawDataStreamParams",
    "StreamConfig",
    "resolve_stream_config",
    "load_config",
    "validate_config",
]
