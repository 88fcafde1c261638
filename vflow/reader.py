"""Sequential big-endian reader over a byte buffer."""

from __future__ import annotations

import struct

_U16 = struct.Struct(">H")
_U32 = struct.Struct(">I")
_U64 = struct.Struct(">Q")


class ReaderError(ValueError):
    """Raised when the buffer holds fewer bytes than requested."""

    def __init__(self, message: str = "can not read the data") -> None:
        super().__init__(message)


class Reader:
    """Consumes big-endian integers and byte runs from a buffer."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._data = bytes(data)
        self._pos = 0

    def _take(self, n: int) -> bytes:
        chunk = self.peek(n)
        self._pos += n
        return chunk

    def uint8(self) -> int:
        """Read one byte."""
        return self._take(1)[0]

    def uint16(self) -> int:
        """Read two bytes as a big-endian unsigned integer."""
        return _U16.unpack(self._take(2))[0]

    def uint32(self) -> int:
        """Read four bytes as a big-endian unsigned integer."""
        return _U32.unpack(self._take(4))[0]

    def uint64(self) -> int:
        """Read eight bytes as a big-endian unsigned integer."""
        return _U64.unpack(self._take(8))[0]

    def read(self, n: int) -> bytes:
        """Read and return the next ``n`` bytes."""
        return self._take(n)

    def peek(self, n: int) -> bytes:
        """Return the next ``n`` bytes without consuming them."""
        if n < 0 or len(self) < n:
            raise ReaderError()
        return self._data[self._pos:self._pos + n]

    def peek_uint16(self) -> int:
        """Return the next two bytes as a big-endian integer without consuming them."""
        return _U16.unpack(self.peek(2))[0]

    def __len__(self) -> int:
        return len(self._data) - self._pos

    def read_count(self) -> int:
        """Total number of bytes consumed so far."""
        return self._pos