"""
End-to-end scenarios: producer and relay sessions wired through one channel,
and the command-line front end.
"""

import io
from datetime import datetime
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from raw_stream.cli import main
from raw_stream.config.models import AppConfig
from raw_stream.core.replay import feed_device, iter_chunks, replay_over_channel
from raw_stream.core.session import RawDataStreamSession
from raw_stream.domain.enums import StreamMode
from raw_stream.streaming.implementations.memory import InMemoryChannel
from raw_stream.streaming.message import decode_message, encode_chunk


class TestProducerToRelay:
    def test_relay_records_what_producer_publishes(self, tmp_path, fixed_clock, diagnostics):
        producer_dir = tmp_path / "producer"
        relay_dir = tmp_path / "relay"
        producer_dir.mkdir()
        relay_dir.mkdir()
        channel = InMemoryChannel()

        producer = RawDataStreamSession.from_config(
            AppConfig(
                mode="producer",
                node={"remappings": {"/raw_data_pa/raw_data_stream": "/raw_data_stream"}},
                parameters={"raw_data_stream": {"dir": str(producer_dir), "publish": True}},
            ),
            channel,
            diagnostics=diagnostics,
            clock=fixed_clock,
        )
        relay = RawDataStreamSession.from_config(
            AppConfig(mode="relay", parameters={"dir": str(relay_dir)}),
            channel,
            diagnostics=diagnostics,
            clock=fixed_clock,
        )

        with relay, producer:
            for payload in (b"\xb5\x62\x01\x07", b"", b"\x5c\x00"):
                producer.on_device_data(payload)
            channel.spin()

        expected = b"\xb5\x62\x01\x07\x5c\x00"
        assert (producer_dir / "2024_03_07_0905.log").read_bytes() == expected
        assert (relay_dir / "2024_03_07_0905.log").read_bytes() == expected
        # readiness message plus three chunks
        assert relay.stats["chunks_received"] == 4

    def test_invalid_relay_dir_does_not_poison_later_sessions(self, tmp_path, fixed_clock, diagnostics):
        channel = InMemoryChannel()
        bad = RawDataStreamSession.from_config(
            AppConfig(mode="relay", parameters={"dir": str(tmp_path / "missing")}),
            channel,
            diagnostics=diagnostics,
            clock=fixed_clock,
        )
        with bad:
            channel.create_publisher("/raw_data_stream").publish(
                encode_chunk(b"\x01\x02\x03\x04\x05")
            )
            assert channel.spin() == 1
            assert bad.stats["chunks_received"] == 1
        assert not (tmp_path / "missing").exists()
        assert len(diagnostics.messages("error")) == 1

        good = RawDataStreamSession.from_config(
            AppConfig(mode="relay", parameters={"dir": str(tmp_path)}),
            channel,
            diagnostics=diagnostics,
            clock=lambda: datetime(2024, 3, 7, 9, 6),
        )
        with good:
            channel.create_publisher("/raw_data_stream").publish(encode_chunk(b"\x06"))
            channel.spin()

        assert (tmp_path / "2024_03_07_0906.log").read_bytes() == b"\x06"
        assert len(diagnostics.messages("error")) == 1


class TestReplayHelpers:
    def test_iter_chunks(self):
        assert list(iter_chunks(io.BytesIO(b"abcdefg"), 3)) == [b"abc", b"def", b"g"]

    def test_feed_device(self, make_session, channel, tmp_path):
        session = make_session(StreamMode.PRODUCER, log_dir=str(tmp_path), publish=True)
        session.initialize()

        total = feed_device(session, io.BytesIO(bytes(range(10))), chunk_size=4)

        assert total == 10
        published = [decode_message(m) for _, m in channel.published]
        assert published == [b"", b"\x00\x01\x02\x03", b"\x04\x05\x06\x07", b"\x08\x09"]
        with open(session.file_name, "rb") as f:
            assert f.read() == bytes(range(10))

    def test_replay_over_channel(self, make_session, channel, tmp_path):
        session = make_session(StreamMode.RELAY, log_dir=str(tmp_path))
        session.initialize()

        payload = bytes(range(256)) * 2
        assert replay_over_channel(session, channel, io.BytesIO(payload), chunk_size=100) == 512

        with open(session.file_name, "rb") as f:
            assert f.read() == payload

    def test_replay_does_not_retain_messages(self, tmp_path, fixed_clock, diagnostics):
        channel = InMemoryChannel()
        session = RawDataStreamSession.from_config(
            AppConfig(mode="relay", parameters={"dir": str(tmp_path)}),
            channel,
            diagnostics=diagnostics,
            clock=fixed_clock,
        )
        payload = bytes(range(256)) * 4096

        with session:
            replay_over_channel(session, channel, io.BytesIO(payload), chunk_size=4096)

        assert channel.published == []
        assert channel.stats["published"] == 256
        assert (tmp_path / "2024_03_07_0905.log").read_bytes() == payload


class TestCli:
    def test_produce_writes_log(self, tmp_path):
        source = tmp_path / "capture.ubx"
        source.write_bytes(b"\x01\x02\x03" * 10)
        log_dir = tmp_path / "logs"
        log_dir.mkdir()

        result = CliRunner().invoke(
            main,
            ["produce", str(source), "--dir", str(log_dir), "--chunk-size", "7"],
        )

        assert result.exit_code == 0, result.output
        logs = list(log_dir.glob("*.log"))
        assert len(logs) == 1
        assert logs[0].read_bytes() == b"\x01\x02\x03" * 10

    def test_replay_from_stdin(self, tmp_path):
        result = CliRunner().invoke(
            main,
            ["replay", "-", "--dir", str(tmp_path)],
            input=b"relayed bytes",
        )

        assert result.exit_code == 0, result.output
        logs = list(tmp_path.glob("*.log"))
        assert len(logs) == 1
        assert logs[0].read_bytes() == b"relayed bytes"

    def test_produce_closes_channel_on_error(self, tmp_path):
        source = tmp_path / "capture.ubx"
        source.write_bytes(b"\x01")
        channel = MagicMock()

        with patch("raw_stream.streaming.factory.create_channel", return_value=channel), \
                patch("raw_stream.core.replay.feed_device", side_effect=OSError("device gone")):
            result = CliRunner().invoke(main, ["produce", str(source)])

        assert result.exit_code == 1
        channel.close.assert_called_once()

    def test_validate_config_reports_error(self, tmp_path):
        not_a_dir = tmp_path / "file"
        not_a_dir.write_text("")
        config = tmp_path / "raw_stream.yaml"
        config.write_text(f"parameters:\n  raw_data_stream:\n    dir: {not_a_dir}\n")

        result = CliRunner().invoke(main, ["-c", str(config), "validate-config"])

        assert result.exit_code == 1

    def test_validate_config_ok(self, tmp_path):
        config = tmp_path / "raw_stream.yaml"
        config.write_text(f"mode: relay\nparameters:\n  dir: {tmp_path}\n")

        result = CliRunner().invoke(main, ["-c", str(config), "validate-config"])

        assert result.exit_code == 0
        assert "Configuration is valid." in result.output

    def test_filename(self):
        result = CliRunner().invoke(main, ["filename"])

        assert result.exit_code == 0
        assert result.output.strip().endswith(".log")
        assert len(result.output.strip()) == len("2024_03_07_0905.log")
