"""Tests for the MD3 binary reader."""
import struct
import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from md3_reader import (
    Md3ReadError,
    Md3Reader,
    TruncatedData,
    UnterminatedString,
    cstr,
    magic_string,
    magic_value,
)
from md3_types import MD3_IDENT, Md3Frame, Md3Header, Md3Surface, Md3Vertex
from md3_fixtures import build_md3


def test_record_sizes():
    """Record sizes should match the packed on-disk layout."""
    assert Md3Header.SIZE == 108
    assert Md3Frame.SIZE == 56
    assert Md3Surface.SIZE == 108
    assert Md3Vertex.SIZE == 8


def test_cstr_stops_at_nul():
    assert cstr(bytes([0x41, 0x42, 0, 0, 0])) == "AB"


def test_cstr_empty():
    assert cstr(b"\x00" * 16) == ""


def test_cstr_unterminated_uses_full_width():
    """Without a NUL the whole field is the string."""
    assert cstr(b"A" * 16) == "A" * 16


def test_cstr_unterminated_strict():
    with pytest.raises(UnterminatedString):
        cstr(b"A" * 16, strict=True)


def test_magic_string():
    assert magic_string(MD3_IDENT) == "IDP3"


def test_magic_round_trip():
    """Any int32 magic should decode to 4 characters and encode back."""
    for value in (MD3_IDENT, 0, -1, 0x7FFFFFFF, -0x80000000, 0x01020304):
        text = magic_string(value)
        assert len(text) == 4
        assert magic_value(text) == value


def test_read_header():
    data = build_md3([((64, 0, 0), 0)])
    header = Md3Reader(data).read(Md3Header, 0)

    assert header.magic == MD3_IDENT
    assert header.version == 15
    assert cstr(header.name) == "models/box.md3"
    assert header.num_frames == 1
    assert header.num_surfaces == 1
    assert header.ofs_frames == 108
    assert header.ofs_eof == len(data)


def test_read_header_truncated():
    with pytest.raises(TruncatedData):
        Md3Reader(b"IDP3" + b"\x00" * 50).read(Md3Header, 0)


def test_read_array():
    data = struct.pack("<3hh", 1, 2, 3, 4) + struct.pack("<3hh", -1, -2, -3, -4)
    vertices = Md3Reader(data).read_array(Md3Vertex, 0, 2)

    assert vertices[0] == Md3Vertex(xyz=(1, 2, 3), normal=4)
    assert vertices[1] == Md3Vertex(xyz=(-1, -2, -3), normal=-4)


def test_read_array_empty():
    assert Md3Reader(b"").read_array(Md3Vertex, 0, 0) == []


def test_read_array_truncated():
    data = struct.pack("<3hh", 1, 2, 3, 4)
    with pytest.raises(TruncatedData):
        Md3Reader(data).read_array(Md3Vertex, 0, 2)


def test_read_negative_offset():
    with pytest.raises(TruncatedData):
        Md3Reader(b"\x00" * 64).read(Md3Vertex, -8)


def test_read_negative_count():
    with pytest.raises(Md3ReadError, match="Negative"):
        Md3Reader(b"\x00" * 64).read_array(Md3Vertex, 0, -1)


def test_read_with_base_offset():
    """Offsets should be resolved against the given base."""
    data = b"\x00" * 16 + struct.pack("<3hh", 7, 8, 9, 10)
    reader = Md3Reader(data)

    assert reader.read(Md3Vertex, 8, base=8).xyz == (7, 8, 9)
    with pytest.raises(TruncatedData):
        reader.read(Md3Vertex, 16, base=8)


def test_reader_copies_buffer():
    data = bytearray(struct.pack("<3hh", 1, 2, 3, 4))
    reader = Md3Reader(data)
    data[0] = 0xFF

    assert reader.read(Md3Vertex, 0).xyz == (1, 2, 3)
