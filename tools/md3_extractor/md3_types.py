"""Type definitions for the Quake 3 MD3 model format.

Every record is packed little-endian with no alignment padding. Offsets in
Md3Header are relative to the start of the file; offsets in Md3Surface are
relative to the start of that surface record.
"""
import struct
from dataclasses import dataclass
from typing import Tuple

MAX_QPATH = 64
MD3_VERSION = 15
MD3_XYZ_SCALE = 1 / 64.0

# "IDP3" as a little-endian int32
MD3_IDENT = struct.unpack("<i", b"IDP3")[0]

Vec3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Md3Header:
    """MD3 file header."""

    FORMAT = f"<ii{MAX_QPATH}s9i"
    SIZE = struct.calcsize(FORMAT)

    magic: int
    version: int
    name: bytes
    flags: int
    num_frames: int
    num_tags: int
    num_surfaces: int
    num_skins: int
    ofs_frames: int
    ofs_tags: int
    ofs_surfaces: int
    ofs_eof: int

    @classmethod
    def from_values(cls, values: tuple) -> "Md3Header":
        return cls(*values)


@dataclass(frozen=True)
class Md3Frame:
    """Bounding box, origin and radius of one keyframe."""

    FORMAT = "<3f3f3ff16s"
    SIZE = struct.calcsize(FORMAT)

    min_bounds: Vec3
    max_bounds: Vec3
    local_origin: Vec3
    radius: float
    name: bytes

    @classmethod
    def from_values(cls, values: tuple) -> "Md3Frame":
        return cls(
            min_bounds=tuple(values[0:3]),
            max_bounds=tuple(values[3:6]),
            local_origin=tuple(values[6:9]),
            radius=values[9],
            name=values[10],
        )


@dataclass(frozen=True)
class Md3Tag:
    """Attachment point: origin plus a row-major 3x3 axis."""

    FORMAT = f"<{MAX_QPATH}s3f9f"
    SIZE = struct.calcsize(FORMAT)

    name: bytes
    origin: Vec3
    axis: Tuple[Vec3, Vec3, Vec3]

    @classmethod
    def from_values(cls, values: tuple) -> "Md3Tag":
        return cls(
            name=values[0],
            origin=tuple(values[1:4]),
            axis=(tuple(values[4:7]), tuple(values[7:10]), tuple(values[10:13])),
        )


@dataclass(frozen=True)
class Md3Surface:
    """Surface header. All ofs_* fields are relative to the surface start."""

    FORMAT = f"<i{MAX_QPATH}s10i"
    SIZE = struct.calcsize(FORMAT)

    magic: int
    name: bytes
    flags: int
    num_frames: int
    num_shaders: int
    num_verts: int
    num_triangles: int
    ofs_triangles: int
    ofs_shaders: int
    ofs_st: int
    ofs_xyz_normal: int
    ofs_end: int

    @classmethod
    def from_values(cls, values: tuple) -> "Md3Surface":
        return cls(*values)


@dataclass(frozen=True)
class Md3Shader:
    """Shader reference of a surface."""

    FORMAT = f"<{MAX_QPATH}si"
    SIZE = struct.calcsize(FORMAT)

    name: bytes
    index: int

    @classmethod
    def from_values(cls, values: tuple) -> "Md3Shader":
        return cls(*values)


@dataclass(frozen=True)
class Md3Triangle:
    """Three vertex indices into the owning surface."""

    FORMAT = "<3i"
    SIZE = struct.calcsize(FORMAT)

    indices: Tuple[int, int, int]

    @classmethod
    def from_values(cls, values: tuple) -> "Md3Triangle":
        return cls(indices=tuple(values))


@dataclass(frozen=True)
class Md3TexCoord:
    """Texture coordinate of one vertex."""

    FORMAT = "<2f"
    SIZE = struct.calcsize(FORMAT)

    st: Tuple[float, float]

    @classmethod
    def from_values(cls, values: tuple) -> "Md3TexCoord":
        return cls(st=tuple(values))


@dataclass(frozen=True)
class Md3Vertex:
    """Compressed vertex: 1/64 fixed-point position plus lat/lng normal."""

    FORMAT = "<3hh"
    SIZE = struct.calcsize(FORMAT)

    xyz: Tuple[int, int, int]
    normal: int

    @classmethod
    def from_values(cls, values: tuple) -> "Md3Vertex":
        return cls(xyz=tuple(values[0:3]), normal=values[3])

