"""Decoders for MD3 compressed vertex positions and normals."""
import math
import struct
from typing import Sequence

from md3_types import MD3_XYZ_SCALE, Vec3

# Latitude/longitude bytes cover a full turn in 255 steps
LATLNG_STEPS = 0xFF


def to_float32(value: float) -> float:
    """Round a Python float to the nearest IEEE 754 single."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def decode_vertex(xyz: Sequence[int]) -> Vec3:
    """Scale a fixed-point int16 position to world units.

    Args:
        xyz: Three int16 components in 1/64 units

    Returns:
        (x, y, z) as float32 values
    """
    return tuple(to_float32(c * MD3_XYZ_SCALE) for c in xyz)


def decode_normal(normal: int) -> Vec3:
    """Decode a lat/lng packed normal.

    The high byte is the latitude index and the low byte the longitude
    index; both are taken from the raw 16-bit pattern, so negative int16
    values decode the same as their unsigned counterparts.

    Args:
        normal: Packed int16 normal

    Returns:
        Unit (x, y, z) as float32 values
    """
    lat = ((normal >> 8) & 0xFF) * (2 * math.pi) / LATLNG_STEPS
    lng = (normal & 0xFF) * (2 * math.pi) / LATLNG_STEPS
    return (
        to_float32(math.cos(lat) * math.sin(lng)),
        to_float32(math.sin(lat) * math.sin(lng)),
        to_float32(math.cos(lng)),
    )
