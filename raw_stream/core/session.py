"""
RawDataStreamSession: relays raw device bytes to a channel and a log file.

A session runs in one of two modes, fixed at construction:

- PRODUCER: bytes arrive through ``on_device_data``; they are optionally
  published on ``~/raw_data_stream`` and appended to the log file.
- RELAY: bytes arrive through a subscription on ``/raw_data_stream``; they
  are only appended to the log file.

Nothing on the data path is fatal. A missing or unusable log directory, a
failed open or a failed write degrades the session (no file) and is reported
through the diagnostics sink.
"""

import os
import threading
from contextlib import ExitStack
from datetime import datetime
from typing import BinaryIO, Callable

import structlog

from raw_stream.config.models import (
    AppConfig,
    NodeConfig,
    StreamConfig,
    resolve_stream_config,
)
from raw_stream.domain.chunk import RawChunk
from raw_stream.domain.enums import SessionState, StreamMode
from raw_stream.errors import StreamModeError
from raw_stream.streaming.channel import (
    DEFAULT_QUEUE_DEPTH,
    Channel,
    Publisher,
    Subscription,
)
from raw_stream.streaming.message import (
    RawDataMessage,
    encode_chunk,
    message_to_chunk,
)
from raw_stream.streaming.topic_resolver import TopicResolver
from raw_stream.utils.logging import DiagnosticsSink, StructlogDiagnostics
from raw_stream.utils.time_format import local_now, log_filename

logger = structlog.get_logger()

PUBLISH_TOPIC = "~/raw_data_stream"
SUBSCRIBE_TOPIC = "/raw_data_stream"


class RawDataStreamSession:
    """
    One relay component instance and the resources it owns.

    The session exclusively owns the log file handle and the channel
    publisher/subscription. They are acquired by ``initialize`` and released
    by ``close`` (or by leaving a ``with`` block).

    Dispatch state, stats and the write path are serialized with a lock, so
    callbacks may be delivered from several threads, even while closing.
    """

    def __init__(
        self,
        mode: StreamMode,
        channel: Channel,
        config: StreamConfig,
        topic_resolver: TopicResolver | None = None,
        diagnostics: DiagnosticsSink | None = None,
        clock: Callable[[], datetime] = local_now,
        queue_depth: int = DEFAULT_QUEUE_DEPTH,
    ) -> None:
        self._mode = StreamMode(mode)
        self._channel = channel
        self._config = config
        self._topic_resolver = topic_resolver or TopicResolver(NodeConfig())
        self._diagnostics = diagnostics or StructlogDiagnostics(mode=self._mode.value)
        self._clock = clock
        self._queue_depth = queue_depth

        self._state = SessionState.UNINITIALIZED
        self._resources = ExitStack()
        self._lock = threading.Lock()

        self._file: BinaryIO | None = None
        self._file_name: str | None = None
        self._publisher: Publisher | None = None
        self._subscription: Subscription | None = None

        self._stats = {
            "chunks_received": 0,
            "messages_published": 0,
            "bytes_written": 0,
            "write_errors": 0,
            "chunks_dropped_after_close": 0,
        }

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        channel: Channel,
        diagnostics: DiagnosticsSink | None = None,
        clock: Callable[[], datetime] = local_now,
    ) -> "RawDataStreamSession":
        """Build a session from the root configuration, resolving its parameters."""
        stream_config = resolve_stream_config(config.parameters, config.mode)
        return cls(
            mode=config.mode,
            channel=channel,
            config=stream_config,
            topic_resolver=TopicResolver(config.node),
            diagnostics=diagnostics
            or StructlogDiagnostics(node=config.node.name, mode=config.mode.value),
            clock=clock,
            queue_depth=config.channel.queue_depth,
        )

    # ---- Properties ----

    @property
    def mode(self) -> StreamMode:
        return self._mode

    @property
    def config(self) -> StreamConfig:
        return self._config

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def file_name(self) -> str | None:
        """Path of the log file chosen at initialization, or None if none was opened."""
        return self._file_name

    @property
    def is_logging_to_file(self) -> bool:
        return self._file is not None

    @property
    def is_publishing(self) -> bool:
        return self._publisher is not None

    @property
    def subscription(self) -> Subscription | None:
        return self._subscription

    @property
    def stats(self) -> dict[str, int]:
        return dict(self._stats)

    def is_enabled(self) -> bool:
        """
        Whether this session will do any work on incoming chunks.

        Relay mode depends only on the log directory; producer mode on the
        publish flag or the log directory.
        """
        if self._mode == StreamMode.RELAY:
            return bool(self._config.log_dir)
        return self._config.publish or bool(self._config.log_dir)

    # ---- Initialization ----

    def initialize(self) -> None:
        """Wire the channel side and the file side. Runs once per session."""
        if self._state != SessionState.UNINITIALIZED:
            logger.debug("session_already_initialized", state=self._state.value)
            return

        if self._mode == StreamMode.RELAY:
            self._diagnostics.info("Subscribing to raw data stream.")
            self._subscription = self._channel.subscribe(
                self._topic_resolver.resolve(SUBSCRIBE_TOPIC),
                self.on_channel_message,
                self._queue_depth,
            )
            self._resources.callback(self._subscription.cancel)
        elif self._config.publish:
            self._diagnostics.info("Publishing raw data stream.")
            self._publisher = self._channel.create_publisher(
                self._topic_resolver.resolve(PUBLISH_TOPIC),
                self._queue_depth,
            )
            self._publish(RawChunk(data=b""))

        if self._config.log_dir:
            self._open_log_file(self._config.log_dir)

        self._state = SessionState.WIRED

    def _open_log_file(self, directory: str) -> None:
        if not os.path.exists(directory):
            self._diagnostics.error(
                f'Can\'t log raw data to file. Directory "{directory}" does not exist.'
            )
            return
        if not os.path.isdir(directory):
            self._diagnostics.error(
                f'Can\'t log raw data to file. "{directory}" exists, but is not a directory.'
            )
            return

        if not directory.endswith(os.sep):
            directory += os.sep
        file_name = directory + log_filename(self._clock())

        try:
            handle = open(file_name, "wb")  # noqa: SIM115
        except OSError as e:
            self._diagnostics.error(
                f'Can\'t log raw data to file. Can\'t create file "{file_name}".',
                error=str(e),
            )
            return

        self._file = self._resources.enter_context(handle)
        self._file_name = file_name
        self._diagnostics.info(f'Logging raw data to file "{file_name}"')

    # ---- Dispatch ----

    def on_device_data(self, data: bytes | bytearray | memoryview, size: int | None = None) -> None:
        """
        Local capture entry: raw bytes from the device collaborator.

        Args:
            data: Buffer filled by the device
            size: Number of valid bytes in ``data`` (default: all of it)

        Raises:
            StreamModeError: If the session is in relay mode
            ValueError: If ``size`` does not fit the buffer
        """
        if self._mode != StreamMode.PRODUCER:
            raise StreamModeError("Device data can only be captured in producer mode")

        chunk = RawChunk.from_buffer(data, size)
        if not self._accept(chunk):
            return

        if self._config.publish:
            self._publish(chunk)

        self.save_to_file(chunk)

    def on_channel_message(self, message: RawDataMessage) -> None:
        """
        Channel receive entry: a chunk delivered by the subscription.

        Raises:
            StreamModeError: If the session is in producer mode
        """
        if self._mode != StreamMode.RELAY:
            raise StreamModeError("Channel messages can only be received in relay mode")

        chunk = message_to_chunk(message)
        if not self._accept(chunk):
            return

        self.save_to_file(chunk)

    def _accept(self, chunk: RawChunk) -> bool:
        with self._lock:
            if self._state == SessionState.CLOSED:
                self._stats["chunks_dropped_after_close"] += 1
                return False
            if self._state == SessionState.WIRED:
                self._state = SessionState.ACTIVE
            self._stats["chunks_received"] += 1
            return True

    def _publish(self, chunk: RawChunk) -> None:
        with self._lock:
            publisher = self._publisher
        if publisher is None:
            return
        publisher.publish(encode_chunk(chunk))
        with self._lock:
            self._stats["messages_published"] += 1

    def save_to_file(self, chunk: RawChunk | bytes) -> None:
        """
        Append raw bytes to the log file, without framing.

        A no-op when no file is open. Write failures are reported and the
        handle is kept for the next chunk.
        """
        data = bytes(chunk)
        with self._lock:
            if self._file is None:
                return
            try:
                self._file.write(data)
                self._file.flush()
            except OSError as e:
                self._stats["write_errors"] += 1
                self._diagnostics.warning(
                    f'Error writing to file "{self._file_name}"',
                    error=str(e),
                )
                return
            self._stats["bytes_written"] += len(data)

    # ---- Teardown ----

    def close(self) -> None:
        """Release the log file and channel handles. Safe to call twice."""
        with self._lock:
            if self._state == SessionState.CLOSED:
                return
            try:
                self._resources.close()
            except OSError as e:
                self._diagnostics.warning(
                    f'Error closing file "{self._file_name}"',
                    error=str(e),
                )
            self._file = None
            self._publisher = None
            self._subscription = None
            self._state = SessionState.CLOSED

        logger.debug("session_closed", **self._stats)

    def __enter__(self) -> "RawDataStreamSession":
        self.initialize()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
