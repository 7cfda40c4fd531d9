"""
Shared test fixtures for the raw data stream relay tests.
"""

from datetime import datetime
from typing import Any

import pytest

from raw_stream.config.models import StreamConfig
from raw_stream.core.session import RawDataStreamSession
from raw_stream.domain.enums import StreamMode
from raw_stream.streaming.implementations.memory import InMemoryChannel


class RecordingDiagnostics:
    """Diagnostics sink that keeps every message for assertions."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def info(self, message: str, **kwargs: Any) -> None:
        self.records.append(("info", message, kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self.records.append(("warning", message, kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        self.records.append(("error", message, kwargs))

    def messages(self, level: str) -> list[str]:
        return [m for lvl, m, _ in self.records if lvl == level]


# =============================================================================
# Time Fixtures
# =============================================================================


@pytest.fixture
def fixed_time() -> datetime:
    """Session start time used for file naming."""
    return datetime(2024, 3, 7, 9, 5, 42)


@pytest.fixture
def fixed_clock(fixed_time: datetime):
    """Clock that always returns fixed_time."""
    return lambda: fixed_time


# =============================================================================
# Collaborator Fixtures
# =============================================================================


@pytest.fixture
def channel() -> InMemoryChannel:
    """In-process channel."""
    return InMemoryChannel(capture=True)


@pytest.fixture
def diagnostics() -> RecordingDiagnostics:
    """Diagnostics sink capturing messages."""
    return RecordingDiagnostics()


@pytest.fixture
def make_session(channel: InMemoryChannel, diagnostics: RecordingDiagnostics, fixed_clock):
    """Factory for sessions wired to the shared channel and diagnostics."""
    created: list[RawDataStreamSession] = []

    def _make(mode: StreamMode, log_dir: str = "", publish: bool = False) -> RawDataStreamSession:
        session = RawDataStreamSession(
            mode=mode,
            channel=channel,
            config=StreamConfig(log_dir=log_dir, publish=publish),
            diagnostics=diagnostics,
            clock=fixed_clock,
        )
        created.append(session)
        return session

    yield _make

    for session in created:
        session.close()
