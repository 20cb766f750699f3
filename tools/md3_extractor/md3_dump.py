"""Human readable dump of MD3 model files.

Output is one field per line, grouped under "Frame N" and "Surface N"
headings:

    Magic = 'IDP3'
    Version = 15
    ...
    Frame 0
     MinBounds = [-1 -1 -1]
     ...
    Surface 0
     Magic = 'IDP3'
     ...
     Vertex = [1 0 0]
     Normal = [0 0 1]

All Vertex lines of a surface come before all of its Normal lines. Floats are
printed with the fewest digits that round-trip their float32 value, switching
to exponent notation below 1e-4 and from 1e+06 upward; offsets are printed in
hex.
"""
import math
import sys
from typing import Sequence, TextIO

from md3_geometry import decode_normal, decode_vertex, to_float32
from md3_parser import Md3Parser
from md3_reader import cstr, magic_string
from md3_types import Md3Frame, Md3Header, Md3Shader, Md3Surface, Md3Tag

# Decimal exponents at or above this use exponent notation
EXPONENT_THRESHOLD = 6


def _shortest_digits(value: float):
    """Return (digits, exponent) of the shortest decimal that round-trips."""
    for precision in range(1, 10):
        text = "%.*e" % (precision - 1, value)
        try:
            if to_float32(float(text)) == value:
                break
        except OverflowError:
            # Rounded past the largest float32
            continue
    mantissa, exponent = text.split("e")
    digits = mantissa.lstrip("-").replace(".", "").rstrip("0") or "0"
    return digits, int(exponent)


def format_float(value: float) -> str:
    """Format a float32 value as shortest round-trip decimal text."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"

    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return sign + "0"

    digits, exponent = _shortest_digits(abs(value))

    if exponent < -4 or exponent >= EXPONENT_THRESHOLD:
        mantissa = digits[0]
        if len(digits) > 1:
            mantissa += "." + digits[1:]
        return "%s%se%s%02d" % (
            sign,
            mantissa,
            "-" if exponent < 0 else "+",
            abs(exponent),
        )

    if exponent < 0:
        return sign + "0." + "0" * (-exponent - 1) + digits

    whole = digits[: exponent + 1].ljust(exponent + 1, "0")
    fraction = digits[exponent + 1 :]
    return sign + whole + ("." + fraction if fraction else "")


def format_vector(values: Sequence) -> str:
    """Format a vector (or nested vectors) as "[x y z]"."""
    return "[" + " ".join(
        format_vector(v) if isinstance(v, (tuple, list)) else format_float(v)
        for v in values
    ) + "]"


class Md3Dumper:
    """Writes the contents of an MD3 file as text."""

    def __init__(
        self,
        data: bytes,
        out: TextIO = None,
        show_tags: bool = False,
        show_shaders: bool = False,
        strict: bool = False,
    ):
        """Initialize dumper.

        Args:
            data: Complete MD3 file contents
            out: Text stream to write to (default: stdout)
            show_tags: Also dump the tag records
            show_shaders: Also dump each surface's shader records
            strict: Fail on text fields without a NUL terminator
        """
        self.parser = Md3Parser(data)
        self.out = out if out is not None else sys.stdout
        self.show_tags = show_tags
        self.show_shaders = show_shaders
        self.strict = strict

    def _print(self, *parts):
        print(*parts, file=self.out)

    def _text(self, data: bytes) -> str:
        return cstr(data, strict=self.strict)

    def dump_header(self, header: Md3Header):
        self._print(f"Magic = '{magic_string(header.magic)}'")
        self._print("Version =", header.version)
        self._print(f"Name = '{self._text(header.name)}'")
        self._print("Flags =", header.flags)
        self._print("NumFrames =", header.num_frames)
        self._print("NumTags =", header.num_tags)
        self._print("NumSurfs =", header.num_surfaces)
        self._print("NumSkins =", header.num_skins)
        self._print(f"OfsFrames = {header.ofs_frames:#x}")
        self._print(f"OfsTags = {header.ofs_tags:#x}")
        self._print(f"OfsSurfs = {header.ofs_surfaces:#x}")
        self._print(f"OfsEOF = {header.ofs_eof:#x}")

    def dump_frame(self, index: int, frame: Md3Frame):
        self._print("Frame", index)
        self._print(" MinBounds =", format_vector(frame.min_bounds))
        self._print(" MaxBounds =", format_vector(frame.max_bounds))
        self._print(" LocalOrigin =", format_vector(frame.local_origin))
        self._print(" Radius =", format_float(frame.radius))
        self._print(" Name =", self._text(frame.name))

    def dump_tag(self, index: int, tag: Md3Tag):
        self._print("Tag", index)
        self._print(f" Name = '{self._text(tag.name)}'")
        self._print(" Origin =", format_vector(tag.origin))
        self._print(" Axis =", format_vector(tag.axis))

    def dump_surface(self, index: int, surface: Md3Surface):
        self._print("Surface", index)
        self._print(f" Magic = '{magic_string(surface.magic)}'")
        self._print(f" Name = '{self._text(surface.name)}'")
        self._print(" Flags =", surface.flags)
        self._print(" NumFrames =", surface.num_frames)
        self._print(" NumShaders =", surface.num_shaders)
        self._print(" NumVerts =", surface.num_verts)
        self._print(" NumTris =", surface.num_triangles)
        self._print(f" OfsTris = {surface.ofs_triangles:#x}")
        self._print(f" OfsShaders = {surface.ofs_shaders:#x}")
        self._print(f" OfsST = {surface.ofs_st:#x}")
        self._print(f" OfsXYZNormal = {surface.ofs_xyz_normal:#x}")
        self._print(f" OfsEnd = {surface.ofs_end:#x}")

    def dump_shader(self, index: int, shader: Md3Shader):
        self._print(" Shader", index)
        self._print(f"  Name = '{self._text(shader.name)}'")
        self._print("  Index =", shader.index)

    def dump(self):
        """Dump the whole file.

        Lines are written as each record is decoded, so output produced
        before a failure stays in the stream.

        Raises:
            TruncatedData: If a record lies outside the buffer
            UnterminatedString: In strict mode, for a text field without NUL
        """
        parser = self.parser

        header = parser.parse_header()
        self.dump_header(header)

        for i, frame in enumerate(parser.parse_frames(header)):
            self.dump_frame(i, frame)

        if self.show_tags:
            for i, tag in enumerate(parser.parse_tags(header)):
                self.dump_tag(i, tag)

        surfaces = parser.parse_surfaces(header)
        for i, surface in enumerate(surfaces):
            offset = parser.surface_offset(header, i)
            self.dump_surface(i, surface)

            if self.show_shaders:
                for j, shader in enumerate(parser.parse_shaders(offset, surface)):
                    self.dump_shader(j, shader)

            vertices = parser.parse_vertices(offset, surface)
            for vertex in vertices:
                self._print(" Vertex =", format_vector(decode_vertex(vertex.xyz)))
            for vertex in vertices:
                self._print(" Normal =", format_vector(decode_normal(vertex.normal)))
