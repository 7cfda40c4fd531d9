"""
Channel message types and the raw chunk codec.

A raw chunk travels on the channel as a one-dimensional unsigned byte array:
a layout with a single labelled dimension plus the bytes in original order.
"""

from dataclasses import dataclass, field

from raw_stream.domain.chunk import RawChunk

STREAM_LABEL = "raw_data_stream"


@dataclass(frozen=True)
class ArrayDimension:
    """One dimension of an array layout. Informational only for raw chunks."""

    label: str = ""
    size: int = 0
    stride: int = 0


@dataclass(frozen=True)
class ArrayLayout:
    """Layout descriptor: dimensions plus the offset of the first element."""

    dim: tuple[ArrayDimension, ...] = ()
    data_offset: int = 0


@dataclass(frozen=True)
class RawDataMessage:
    """
    A raw byte array as it travels on the publish channel.

    Subscribers take ``data`` verbatim; ``layout`` describes it but is never
    used to reinterpret it.
    """

    layout: ArrayLayout = field(default_factory=ArrayLayout)
    data: bytes = b""

    def __len__(self) -> int:
        return len(self.data)


def encode_chunk(chunk: RawChunk | bytes) -> RawDataMessage:
    """
    Wrap a byte sequence in a channel message.

    Args:
        chunk: Raw chunk or plain bytes (possibly empty)

    Returns:
        Message with a single ``raw_data_stream`` dimension of stride 1
    """
    data = bytes(chunk)
    layout = ArrayLayout(
        dim=(ArrayDimension(label=STREAM_LABEL, size=len(data), stride=1),),
        data_offset=0,
    )
    return RawDataMessage(layout=layout, data=data)


def decode_message(message: RawDataMessage) -> bytes:
    """Recover the flat byte sequence carried by a message, in delivery order."""
    return bytes(message.data)


def message_to_chunk(message: RawDataMessage) -> RawChunk:
    """Build a RawChunk from a delivered message."""
    return RawChunk(data=decode_message(message))
