"""Big-endian byte cursors used by the codec."""

import io
import struct

from .errors import MalformedStream, TruncatedStream, ValueOutOfRange
from .tags import TagType

_UBYTE = struct.Struct('>B')
_BYTE = struct.Struct('>b')
_USHORT = struct.Struct('>H')
_SHORT = struct.Struct('>h')
_INT = struct.Struct('>i')
_LONG = struct.Struct('>q')
_FLOAT = struct.Struct('>f')
_DOUBLE = struct.Struct('>d')

MAX_TEXT_BYTES = 0xFFFF


class ByteReader:
    """Read NBT binary data sequentially.

    Every read checks the remaining length first and raises
    ``TruncatedStream`` instead of returning a short slice.
    """

    def __init__(self, data: bytes, pos: int = 0):
        self.data = memoryview(data)
        self.pos = pos

    @property
    def remaining(self) -> int:
        return len(self.data) - self.pos

    def _need(self, n: int) -> None:
        if n > self.remaining:
            raise TruncatedStream(self.pos, n, self.remaining)

    def read(self, n: int) -> bytes:
        self._need(n)
        r = bytes(self.data[self.pos:self.pos + n])
        self.pos += n
        return r

    def _unpack(self, fmt: struct.Struct):
        self._need(fmt.size)
        value = fmt.unpack_from(self.data, self.pos)[0]
        self.pos += fmt.size
        return value

    def peek_ubyte(self) -> int:
        self._need(1)
        return self.data[self.pos]

    def read_ubyte(self) -> int:
        return self._unpack(_UBYTE)

    def read_byte(self) -> int:
        return self._unpack(_BYTE)

    def read_ushort(self) -> int:
        return self._unpack(_USHORT)

    def read_short(self) -> int:
        return self._unpack(_SHORT)

    def read_int(self) -> int:
        return self._unpack(_INT)

    def read_long(self) -> int:
        return self._unpack(_LONG)

    def read_float(self) -> float:
        return self._unpack(_FLOAT)

    def read_double(self) -> float:
        return self._unpack(_DOUBLE)

    def read_string(self) -> str:
        """Read a uint16 byte length followed by that many UTF-8 bytes."""
        offset = self.pos
        raw = self.read(self.read_ushort())
        try:
            return raw.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise MalformedStream(f'invalid UTF-8 text: {exc.reason}', offset) from exc

    def read_array(self, code: str, count: int) -> list:
        """Read ``count`` big-endian elements of struct format ``code``."""
        fmt = struct.Struct(f'>{count}{code}')
        self._need(fmt.size)
        values = list(fmt.unpack_from(self.data, self.pos))
        self.pos += fmt.size
        return values


class ByteWriter:
    """Accumulate NBT binary data in memory; ``get_bytes`` returns the result."""

    def __init__(self):
        self.buf = io.BytesIO()

    def write(self, data: bytes) -> None:
        self.buf.write(data)

    def _pack(self, fmt: struct.Struct, value) -> None:
        self.buf.write(fmt.pack(value))

    def write_ubyte(self, v: int) -> None:
        self._pack(_UBYTE, v)

    def write_byte(self, v: int) -> None:
        self._pack(_BYTE, v)

    def write_ushort(self, v: int) -> None:
        self._pack(_USHORT, v)

    def write_short(self, v: int) -> None:
        self._pack(_SHORT, v)

    def write_int(self, v: int) -> None:
        self._pack(_INT, v)

    def write_long(self, v: int) -> None:
        self._pack(_LONG, v)

    def write_float(self, v: float) -> None:
        self._pack(_FLOAT, v)

    def write_double(self, v: float) -> None:
        self._pack(_DOUBLE, v)

    def write_string(self, s: str) -> None:
        """Write a uint16 byte length and the UTF-8 bytes of ``s``."""
        encoded = s.encode('utf-8')
        if len(encoded) > MAX_TEXT_BYTES:
            raise ValueOutOfRange(TagType.STRING, encoded)
        self._pack(_USHORT, len(encoded))
        self.buf.write(encoded)

    def write_array(self, code: str, values: list) -> None:
        self.buf.write(struct.pack(f'>{len(values)}{code}', *values))

    def get_bytes(self) -> bytes:
        return self.buf.getvalue()
