"""
Little-endian primitive reader/writer for OpenRGB SDK frames.

Both classes work on in-memory buffers only; the session reads a whole
frame body off the stream first and then hands it to a ``BinaryReader``.

Text fields are a u16 byte count followed by that many UTF-8 bytes, with
no terminator.
"""

import struct

from .errors import EncodeError, LengthMismatch, MalformedText, UnexpectedEndOfData

U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF

_U8 = struct.Struct('<B')
_U16 = struct.Struct('<H')
_U32 = struct.Struct('<I')
_I32 = struct.Struct('<i')


class BinaryReader:
    """Sequential little-endian reader over a frame body."""

    __slots__ = ('data', 'pos')

    def __init__(self, data: bytes, pos: int = 0):
        self.data = data
        self.pos = pos

    def _unpack(self, fmt: struct.Struct) -> int:
        if self.pos + fmt.size > len(self.data):
            raise UnexpectedEndOfData(
                f"need {fmt.size} bytes at offset {self.pos}, "
                f"{self.remaining()} left"
            )
        val = fmt.unpack_from(self.data, self.pos)[0]
        self.pos += fmt.size
        return val

    def read_u8(self) -> int:
        return self._unpack(_U8)

    def read_u16(self) -> int:
        return self._unpack(_U16)

    def read_u32(self) -> int:
        return self._unpack(_U32)

    def read_i32(self) -> int:
        return self._unpack(_I32)

    def read_bytes(self, n: int) -> bytes:
        """Read exactly n bytes and advance position."""
        if self.pos + n > len(self.data):
            raise UnexpectedEndOfData(
                f"need {n} bytes at offset {self.pos}, {self.remaining()} left"
            )
        chunk = bytes(self.data[self.pos:self.pos + n])
        self.pos += n
        return chunk

    def read_string(self) -> str:
        length = self.read_u16()
        raw = self.read_bytes(length)
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as e:
            raise MalformedText(f"invalid UTF-8 in {length}-byte string: {e}") from e

    def remaining(self) -> int:
        """Bytes remaining from current position."""
        return len(self.data) - self.pos

    def has_bytes(self, n: int) -> bool:
        """Check if at least n bytes remain."""
        return self.pos + n <= len(self.data)

    def expect_end(self) -> None:
        """Raise if anything is left unread."""
        if self.remaining():
            raise LengthMismatch(f"{self.remaining()} trailing bytes after payload")


class BinaryWriter:
    """Growable little-endian buffer, the write-side twin of BinaryReader."""

    __slots__ = ('_buf',)

    def __init__(self):
        self._buf = bytearray()

    def _pack(self, fmt: struct.Struct, value: int, name: str) -> None:
        try:
            self._buf += fmt.pack(value)
        except struct.error as e:
            raise EncodeError(f"{name} value {value!r} out of range") from e

    def write_u8(self, value: int) -> None:
        self._pack(_U8, value, 'u8')

    def write_u16(self, value: int) -> None:
        self._pack(_U16, value, 'u16')

    def write_u32(self, value: int) -> None:
        self._pack(_U32, value, 'u32')

    def write_i32(self, value: int) -> None:
        self._pack(_I32, value, 'i32')

    def write_count(self, count: int) -> None:
        """u16 element count preceding a collection."""
        if count > U16_MAX:
            raise EncodeError(f"collection of {count} elements exceeds {U16_MAX}")
        self.write_u16(count)

    def write_bytes(self, data: bytes) -> None:
        self._buf += data

    def write_string(self, value: str) -> None:
        try:
            raw = value.encode('utf-8')
        except UnicodeEncodeError as e:
            raise EncodeError(f"string is not encodable as UTF-8: {e}") from e
        if len(raw) > U16_MAX:
            raise EncodeError(f"string of {len(raw)} bytes exceeds {U16_MAX}")
        self.write_u16(len(raw))
        self._buf += raw

    def getvalue(self) -> bytes:
        return bytes(self._buf)

    def __len__(self) -> int:
        return len(self._buf)
