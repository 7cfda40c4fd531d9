"""
Configuration validation for the raw data stream relay.

Provides checks beyond Pydantic model validation. Sessions themselves never
fail on a bad log directory; these checks exist for the CLI so operators see
problems before starting a stream.
"""

from pathlib import Path

import structlog

from raw_stream.config.models import AppConfig, resolve_stream_config
from raw_stream.domain.enums import StreamMode
from raw_stream.errors import ConfigurationError

logger = structlog.get_logger()

KNOWN_BACKENDS = ("memory", "log", "noop")


def validate_config(config: AppConfig) -> list[str]:
    """
    Validate relay configuration.

    Args:
        config: AppConfig to validate

    Returns:
        List of warning messages (non-fatal issues)

    Raises:
        ConfigurationError: If configuration has fatal issues
    """
    warnings: list[str] = []
    errors: list[str] = []

    stream = resolve_stream_config(config.parameters, config.mode)

    if config.mode == StreamMode.RELAY:
        if config.parameters.raw_data_stream.publish:
            warnings.append(
                "raw_data_stream.publish is ignored in relay mode; "
                "relayed data is never re-published."
            )
        if config.parameters.raw_data_stream.dir:
            warnings.append(
                "raw_data_stream.dir is ignored in relay mode; use 'dir' instead."
            )
    elif config.parameters.dir:
        warnings.append(
            "'dir' is ignored in producer mode; use raw_data_stream.dir instead."
        )

    if not stream.publish and not stream.log_dir:
        warnings.append(
            f"Nothing is enabled for {config.mode.value} mode: "
            "incoming raw data will be discarded."
        )

    if stream.log_dir:
        log_path = Path(stream.log_dir)
        if not log_path.exists():
            warnings.append(
                f"Log directory does not exist: {log_path}. "
                "File logging will be disabled."
            )
        elif not log_path.is_dir():
            errors.append(f"Log directory path is not a directory: {log_path}")

    if config.channel.backend.lower() not in KNOWN_BACKENDS:
        warnings.append(
            f"Unknown channel backend '{config.channel.backend}'; "
            "falling back to noop."
        )

    for warning in warnings:
        logger.warning("config_validation_warning", message=warning)

    if errors:
        for error in errors:
            logger.error("config_validation_error", message=error)
        raise ConfigurationError(
            f"Configuration validation failed with {len(errors)} error(s):\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    return warnings
