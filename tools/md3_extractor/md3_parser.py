"""Parser for Quake 3 MD3 model files."""
from dataclasses import dataclass, field
from typing import List

from md3_reader import Md3Reader
from md3_types import (
    Md3Frame,
    Md3Header,
    Md3Shader,
    Md3Surface,
    Md3Tag,
    Md3TexCoord,
    Md3Triangle,
    Md3Vertex,
)


@dataclass
class Md3SurfaceData:
    """A surface header together with its decoded sub-records."""

    offset: int
    surface: Md3Surface
    shaders: List[Md3Shader] = field(default_factory=list)
    triangles: List[Md3Triangle] = field(default_factory=list)
    tex_coords: List[Md3TexCoord] = field(default_factory=list)
    vertices: List[Md3Vertex] = field(default_factory=list)


@dataclass
class Md3Model:
    """Everything decoded from one MD3 file."""

    header: Md3Header
    frames: List[Md3Frame] = field(default_factory=list)
    tags: List[Md3Tag] = field(default_factory=list)
    surfaces: List[Md3SurfaceData] = field(default_factory=list)


class Md3Parser:
    """Parses MD3 model files held in memory."""

    def __init__(self, data: bytes):
        """Initialize parser with the complete file contents.

        Args:
            data: MD3 file bytes
        """
        self.reader = Md3Reader(data)

    def parse_header(self) -> Md3Header:
        """Parse the header at the start of the file.

        Raises:
            TruncatedData: If the buffer is shorter than a header
        """
        return self.reader.read(Md3Header, 0)

    def parse_frames(self, header: Md3Header) -> List[Md3Frame]:
        return self.reader.read_array(Md3Frame, header.ofs_frames, header.num_frames)

    def parse_tags(self, header: Md3Header) -> List[Md3Tag]:
        return self.reader.read_array(Md3Tag, header.ofs_tags, header.num_tags)

    def surface_offset(self, header: Md3Header, index: int) -> int:
        """Absolute file position of surface record index."""
        return header.ofs_surfaces + index * Md3Surface.SIZE

    def parse_surfaces(self, header: Md3Header) -> List[Md3Surface]:
        """Parse the surface records following ofs_surfaces.

        The whole array is read at once, so a truncated file fails before
        any surface is returned.
        """
        return self.reader.read_array(
            Md3Surface, header.ofs_surfaces, header.num_surfaces
        )

    def parse_shaders(self, surface_offset: int, surface: Md3Surface) -> List[Md3Shader]:
        return self.reader.read_array(
            Md3Shader, surface.ofs_shaders, surface.num_shaders,
            base=surface_offset, limit=surface.ofs_end,
        )

    def parse_triangles(self, surface_offset: int, surface: Md3Surface) -> List[Md3Triangle]:
        return self.reader.read_array(
            Md3Triangle, surface.ofs_triangles, surface.num_triangles,
            base=surface_offset, limit=surface.ofs_end,
        )

    def parse_tex_coords(self, surface_offset: int, surface: Md3Surface) -> List[Md3TexCoord]:
        return self.reader.read_array(
            Md3TexCoord, surface.ofs_st, surface.num_verts,
            base=surface_offset, limit=surface.ofs_end,
        )

    def parse_vertices(
        self, surface_offset: int, surface: Md3Surface, frame: int = 0
    ) -> List[Md3Vertex]:
        """Parse the compressed vertices of one frame of a surface.

        Args:
            surface_offset: Absolute file position of the surface record
            surface: The surface record
            frame: Frame whose vertex block to read

        Returns:
            List of num_verts compressed vertices
        """
        frame_offset = frame * surface.num_verts * Md3Vertex.SIZE
        return self.reader.read_array(
            Md3Vertex,
            surface.ofs_xyz_normal + frame_offset,
            surface.num_verts,
            base=surface_offset,
            limit=surface.ofs_end,
        )

    def parse(self) -> Md3Model:
        """Parse header, frames, tags and every surface with its sub-records.

        Only the first frame's vertex block of each surface is decoded.
        """
        header = self.parse_header()
        model = Md3Model(
            header=header,
            frames=self.parse_frames(header),
            tags=self.parse_tags(header),
        )

        for i, surface in enumerate(self.parse_surfaces(header)):
            offset = self.surface_offset(header, i)
            model.surfaces.append(
                Md3SurfaceData(
                    offset=offset,
                    surface=surface,
                    shaders=self.parse_shaders(offset, surface),
                    triangles=self.parse_triangles(offset, surface),
                    tex_coords=self.parse_tex_coords(offset, surface),
                    vertices=self.parse_vertices(offset, surface),
                )
            )

        return model
