"""
RawChunk: one opaque delivery unit of raw bytes.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RawChunk:
    """
    An immutable, variable-length byte sequence.

    No internal structure is imposed; the length may be zero.
    """

    data: bytes

    def __len__(self) -> int:
        return len(self.data)

    def __bytes__(self) -> bytes:
        return self.data

    @classmethod
    def from_buffer(cls, buffer: bytes | bytearray | memoryview, size: int | None = None) -> "RawChunk":
        """
        Copy exactly ``size`` bytes out of ``buffer``.

        Args:
            buffer: Source buffer from the device collaborator
            size: Number of bytes to copy (default: the whole buffer)

        Raises:
            ValueError: If size is negative or exceeds the buffer length
        """
        view = memoryview(buffer)
        if size is None:
            size = view.nbytes
        if size < 0 or size > view.nbytes:
            raise ValueError(
                f"Chunk size {size} out of range for a buffer of {view.nbytes} bytes"
            )
        return cls(data=view.cast("B")[:size].tobytes())
