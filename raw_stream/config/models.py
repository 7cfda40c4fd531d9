"""
Pydantic configuration models for the raw data stream relay.

These models define the structure and validation for relay configuration.
"""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from raw_stream.domain.enums import StreamMode


class RawDataStreamParams(BaseModel):
    """Parameters under the ``raw_data_stream`` namespace (producer mode)."""

    dir: str = Field(
        default="",
        description="Directory for the raw log file in producer mode (empty disables)",
    )
    publish: bool = Field(
        default=False,
        description="Publish raw chunks on the channel in producer mode",
    )


class ParameterStore(BaseModel):
    """
    Declared node parameters with their defaults.

    Parameter names are dotted paths, e.g. ``raw_data_stream.dir``.
    """

    dir: str = Field(
        default="",
        description="Directory for the raw log file in relay mode (empty disables)",
    )
    raw_data_stream: RawDataStreamParams = Field(default_factory=RawDataStreamParams)

    def get_parameter(self, name: str) -> Any:
        """
        Look up a parameter by dotted name.

        Args:
            name: Parameter name (e.g. "dir", "raw_data_stream.publish")

        Returns:
            The parameter value

        Raises:
            KeyError: If no parameter with that name is declared
        """
        value: Any = self
        for part in name.split("."):
            if not isinstance(value, BaseModel) or part not in type(value).model_fields:
                raise KeyError(f"Parameter not declared: {name}")
            value = getattr(value, part)
        return value


class NodeConfig(BaseModel):
    """Identity of the node hosting the session; scopes private topic names."""

    name: str = Field(default="raw_data_pa", description="Node name")
    namespace: str = Field(default="/", description="Node namespace")
    remappings: dict[str, str] = Field(
        default_factory=dict,
        description="Resolved-topic remappings, e.g. {'/raw_data_pa/raw_data_stream': '/raw_data_stream'}",
    )

    @field_validator("namespace")
    @classmethod
    def namespace_is_absolute(cls, v: str) -> str:
        """Namespaces are absolute."""
        if not v.startswith("/"):
            return "/" + v
        return v


class ChannelConfig(BaseModel):
    """Publish/subscribe channel backend settings."""

    backend: str = Field(
        default="memory",
        description="Channel backend: memory | log | noop",
    )
    queue_depth: int = Field(
        default=100,
        ge=1,
        le=100000,
        description="Per-topic queue depth for publishers and subscriptions",
    )
    log_level: str = Field(
        default="debug",
        description="Log level for log backend",
    )


class AppConfig(BaseSettings):
    """
    Root relay configuration.

    Values can be loaded from YAML files and overridden via environment variables.
    """

    mode: StreamMode = Field(
        default=StreamMode.PRODUCER,
        description="Operating mode: producer | relay",
    )
    node: NodeConfig = Field(default_factory=NodeConfig)
    channel: ChannelConfig = Field(default_factory=ChannelConfig)
    parameters: ParameterStore = Field(default_factory=ParameterStore)

    model_config = {
        "env_prefix": "RAW_STREAM_",
        "env_nested_delimiter": "__",
    }


@dataclass(frozen=True)
class StreamConfig:
    """
    Configuration resolved once before session initialization.

    ``log_dir`` empty means file logging is disabled. ``publish`` is only
    meaningful in producer mode.
    """

    log_dir: str = ""
    publish: bool = False


def resolve_stream_config(params: ParameterStore, mode: StreamMode) -> StreamConfig:
    """
    Read the mode-specific parameters from the parameter store.

    Relay mode reads ``dir`` and never publishes. Producer mode reads
    ``raw_data_stream.dir`` and ``raw_data_stream.publish``.
    """
    if mode == StreamMode.RELAY:
        return StreamConfig(log_dir=params.get_parameter("dir"), publish=False)

    return StreamConfig(
        log_dir=params.get_parameter("raw_data_stream.dir"),
        publish=params.get_parameter("raw_data_stream.publish"),
    )
