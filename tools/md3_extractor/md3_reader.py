"""Fixed-layout record reader for MD3 byte buffers."""
import struct
from typing import List, Type, TypeVar

R = TypeVar("R")


class Md3ReadError(ValueError):
    """Raised when an MD3 buffer cannot be decoded."""


class TruncatedData(Md3ReadError):
    """Raised when a record extends past the end of the buffer."""


class UnterminatedString(Md3ReadError):
    """Raised in strict mode when a text field has no NUL terminator."""


def cstr(data: bytes, strict: bool = False) -> str:
    """Extract a NUL-terminated string from a fixed-width field.

    Args:
        data: Raw field bytes
        strict: Raise instead of using the full width when no NUL is found

    Returns:
        Text before the first NUL byte

    Raises:
        UnterminatedString: If strict and the field has no NUL byte
    """
    nul = data.find(b"\x00")
    if nul < 0:
        if strict:
            raise UnterminatedString(
                f"Unterminated string in {len(data)}-byte field: {data!r}"
            )
        nul = len(data)
    return data[:nul].decode("ascii", errors="replace")


def magic_string(value: int) -> str:
    """Convert an int32 magic to its 4 little-endian characters."""
    return struct.pack("<i", value).decode("latin-1")


def magic_value(text: str) -> int:
    """Convert a 4 character tag back to its int32 magic."""
    return struct.unpack("<i", text.encode("latin-1"))[0]


class Md3Reader:
    """Reads record types from md3_types out of an in-memory buffer.

    Offsets are resolved against an explicit base: 0 for the file-relative
    offsets of the header, the absolute surface position for offsets stored
    in a surface record.
    """

    def __init__(self, data: bytes):
        self.data = bytes(data)

    def _check_bounds(self, record_type: type, start: int, count: int):
        if count < 0:
            raise Md3ReadError(
                f"Negative {record_type.__name__} count {count} at {start:#x}"
            )
        end = start + count * record_type.SIZE
        if start < 0 or end > len(self.data):
            raise TruncatedData(
                f"{record_type.__name__} x{count} at {start:#x} needs "
                f"{end - start} bytes, buffer is {len(self.data)} bytes"
            )

    def read(self, record_type: Type[R], offset: int, base: int = 0) -> R:
        """Read a single record.

        Args:
            record_type: Record class with FORMAT, SIZE and from_values
            offset: Offset of the record relative to base
            base: Absolute position the offset is relative to

        Returns:
            Decoded record

        Raises:
            TruncatedData: If the record does not fit in the buffer
        """
        start = base + offset
        self._check_bounds(record_type, start, 1)
        values = struct.unpack_from(record_type.FORMAT, self.data, start)
        return record_type.from_values(values)

    def read_array(
        self,
        record_type: Type[R],
        offset: int,
        count: int,
        base: int = 0,
        limit: int = None,
    ) -> List[R]:
        """Read count contiguous records.

        Args:
            record_type: Record class with FORMAT, SIZE and from_values
            offset: Offset of the first record relative to base
            count: Number of records
            base: Absolute position the offset is relative to
            limit: If given, the array must lie within [base, base + limit)

        Raises:
            TruncatedData: If the array does not fit in the buffer or limit
            Md3ReadError: If count is negative
        """
        start = base + offset
        self._check_bounds(record_type, start, count)
        if limit is not None and (
            offset < 0 or offset + count * record_type.SIZE > limit
        ):
            raise TruncatedData(
                f"{record_type.__name__} x{count} at {offset:#x} lies outside "
                f"the {limit:#x} bytes at {base:#x}"
            )
        return [
            record_type.from_values(values)
            for values in struct.iter_unpack(
                record_type.FORMAT,
                self.data[start : start + count * record_type.SIZE],
            )
        ]
