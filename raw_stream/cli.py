"""
Command-line interface for the raw data stream relay.

Provides commands for recording a raw stream, replaying a capture through a
relay session and checking configuration.
"""

import sys
from contextlib import closing

import click
import structlog

from raw_stream.config import load_config, validate_config
from raw_stream.domain.enums import StreamMode
from raw_stream.errors import ConfigurationError
from raw_stream.utils.logging import configure_logging
from raw_stream.utils.time_format import local_now, log_filename


logger = structlog.get_logger()


@click.group()
@click.option(
    "--config", "-c",
    type=click.Path(exists=True),
    help="Path to configuration file",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Output logs as JSON",
)
@click.pass_context
def main(ctx, config, verbose, json_logs):
    """Raw data stream relay."""
    ctx.ensure_object(dict)

    log_level = "DEBUG" if verbose else "INFO"
    configure_logging(level=log_level, json_output=json_logs)

    ctx.obj["config_path"] = config
    ctx.obj["log_level"] = log_level


@main.command()
@click.argument("source", type=click.File("rb"))
@click.option(
    "--dir", "-d", "log_dir",
    type=str,
    default=None,
    help="Log directory (default: raw_data_stream.dir from config)",
)
@click.option(
    "--publish/--no-publish",
    default=None,
    help="Publish chunks on the channel (default: raw_data_stream.publish from config)",
)
@click.option(
    "--chunk-size",
    type=click.IntRange(min=1),
    default=4096,
    show_default=True,
    help="Bytes delivered per device callback",
)
@click.pass_context
def produce(ctx, source, log_dir, publish, chunk_size):
    """Run a producer session fed from SOURCE ('-' for stdin).

    Examples:

    \b
    # Record a capture into /var/log/gnss
    raw-stream produce capture.ubx --dir /var/log/gnss
    """
    from raw_stream.core.replay import feed_device
    from raw_stream.core.session import RawDataStreamSession
    from raw_stream.streaming.factory import create_channel

    overrides: dict = {"mode": StreamMode.PRODUCER.value}
    params: dict = {}
    if log_dir is not None:
        params["dir"] = log_dir
    if publish is not None:
        params["publish"] = publish
    if params:
        overrides["parameters"] = {"raw_data_stream": params}

    try:
        config = load_config(ctx.obj.get("config_path"), override_values=overrides)
        with closing(create_channel(config.channel)) as channel, \
                RawDataStreamSession.from_config(config, channel) as session:
            if not session.is_enabled():
                click.echo("Warning: neither publishing nor file logging is enabled.", err=True)
            total = feed_device(session, source, chunk_size)
            stats = session.stats

        _print_summary(total, stats, session.file_name)

    except Exception as e:
        logger.exception("produce_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command()
@click.argument("source", type=click.File("rb"))
@click.option(
    "--dir", "-d", "log_dir",
    type=str,
    default=None,
    help="Log directory (default: dir from config)",
)
@click.option(
    "--chunk-size",
    type=click.IntRange(min=1),
    default=4096,
    show_default=True,
    help="Bytes per channel message",
)
@click.pass_context
def replay(ctx, source, log_dir, chunk_size):
    """Replay SOURCE over an in-memory channel into a relay session."""
    from raw_stream.core.replay import replay_over_channel
    from raw_stream.core.session import SUBSCRIBE_TOPIC, RawDataStreamSession
    from raw_stream.streaming.implementations.memory import InMemoryChannel

    overrides: dict = {"mode": StreamMode.RELAY.value}
    if log_dir is not None:
        overrides["parameters"] = {"dir": log_dir}

    try:
        config = load_config(ctx.obj.get("config_path"), override_values=overrides)
        with closing(InMemoryChannel()) as channel, \
                RawDataStreamSession.from_config(config, channel) as session:
            if not session.is_enabled():
                click.echo("Warning: file logging is not enabled.", err=True)
            topic = session.subscription.topic if session.subscription else SUBSCRIBE_TOPIC
            total = replay_over_channel(session, channel, source, chunk_size, topic=topic)
            stats = session.stats

        _print_summary(total, stats, session.file_name)

    except Exception as e:
        logger.exception("replay_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("validate-config")
@click.pass_context
def validate_config_cmd(ctx):
    """Validate configuration file."""
    try:
        config = load_config(ctx.obj.get("config_path"))
        warnings = validate_config(config)

        click.echo("Configuration is valid.")

        if warnings:
            click.echo("\nWarnings:")
            for warning in warnings:
                click.echo(f"  - {warning}")

    except ConfigurationError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except Exception as e:
        logger.exception("validate_config_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@main.command("filename")
def filename_cmd():
    """Print the log file name a session started now would use."""
    click.echo(log_filename(local_now()))


def _print_summary(total: int, stats: dict[str, int], file_name: str | None) -> None:
    click.echo("\n=== Stream Complete ===", err=True)
    click.echo(f"Bytes read: {total:,}", err=True)
    click.echo(f"Chunks: {stats['chunks_received']:,}", err=True)
    click.echo(f"Messages published: {stats['messages_published']:,}", err=True)
    click.echo(f"Bytes written: {stats['bytes_written']:,}", err=True)
    if stats["write_errors"]:
        click.echo(f"Write errors: {stats['write_errors']:,}", err=True)
    if file_name:
        click.echo(f"Log file: {file_name}", err=True)


if __name__ == "__main__":
    main()
