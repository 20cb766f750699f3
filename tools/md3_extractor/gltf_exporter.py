"""glTF exporter for MD3 model files."""
import struct
from pathlib import Path
from typing import BinaryIO, List, Tuple, Union

from pygltflib import (
    GLTF2,
    Accessor,
    Asset,
    Buffer,
    BufferView,
    Mesh,
    Node,
    Primitive,
    Scene,
)

from md3_geometry import decode_normal, decode_vertex
from md3_parser import Md3Model, Md3Parser, Md3SurfaceData
from md3_reader import cstr
from md3_types import Md3Tag

ARRAY_BUFFER = 34962
ELEMENT_ARRAY_BUFFER = 34963
FLOAT = 5126
UNSIGNED_INT = 5125
TRIANGLES = 4


class GLTFExporter:
    """Exports the first frame of an MD3 model to glTF/GLB format."""

    def __init__(self, source: Union[str, Path, BinaryIO, bytes]):
        """Initialize exporter with MD3 file path, file-like object or bytes.

        Args:
            source: Path to MD3 file, file-like object or file contents
        """
        self.source = source
        self._model: Md3Model = None

    def _read_source(self) -> bytes:
        if isinstance(self.source, (bytes, bytearray)):
            return bytes(self.source)
        if isinstance(self.source, (str, Path)):
            with open(self.source, "rb") as file:
                return file.read()
        self.source.seek(0)
        return self.source.read()

    def load_model(self) -> Md3Model:
        """Parse and cache the model."""
        if self._model is None:
            self._model = Md3Parser(self._read_source()).parse()
        return self._model

    def _compute_bounds(self, vertices: List[Tuple[float, float, float]]) -> Tuple[List[float], List[float]]:
        """Compute min/max bounds for vertices."""
        if not vertices:
            return [0, 0, 0], [0, 0, 0]

        min_bounds = [float("inf")] * 3
        max_bounds = [float("-inf")] * 3

        for v in vertices:
            for i in range(3):
                min_bounds[i] = min(min_bounds[i], v[i])
                max_bounds[i] = max(max_bounds[i], v[i])

        return min_bounds, max_bounds

    def _tag_matrix(self, tag: Md3Tag) -> List[float]:
        """Column-major 4x4 matrix whose columns are the tag axes and origin."""
        matrix = []
        for axis in tag.axis:
            matrix.extend(axis)
            matrix.append(0.0)
        matrix.extend(tag.origin)
        matrix.append(1.0)
        return matrix

    def _add_view(self, gltf: GLTF2, buffer_data: bytearray, data: bytes, target: int = None) -> int:
        """Append data to the buffer (4-byte aligned) and return its view index."""
        if len(buffer_data) % 4 != 0:
            buffer_data.extend(b"\x00" * (4 - len(buffer_data) % 4))

        gltf.bufferViews.append(
            BufferView(
                buffer=0,
                byteOffset=len(buffer_data),
                byteLength=len(data),
                target=target,
            )
        )
        buffer_data.extend(data)
        return len(gltf.bufferViews) - 1

    def _add_surface(self, gltf: GLTF2, buffer_data: bytearray, surface_data: Md3SurfaceData) -> int:
        """Add a mesh for one surface and return its index."""
        positions = [decode_vertex(v.xyz) for v in surface_data.vertices]
        normals = [decode_normal(v.normal) for v in surface_data.vertices]

        for triangle in surface_data.triangles:
            if not all(0 <= i < len(positions) for i in triangle.indices):
                raise ValueError(
                    f"Triangle {triangle.indices} in surface "
                    f"'{cstr(surface_data.surface.name)}' references a vertex "
                    f"outside 0..{len(positions) - 1}"
                )

        position_view = self._add_view(
            gltf,
            buffer_data,
            b"".join(struct.pack("<fff", *p) for p in positions),
            ARRAY_BUFFER,
        )
        normal_view = self._add_view(
            gltf,
            buffer_data,
            b"".join(struct.pack("<fff", *n) for n in normals),
            ARRAY_BUFFER,
        )
        index_view = self._add_view(
            gltf,
            buffer_data,
            b"".join(struct.pack("<3I", *t.indices) for t in surface_data.triangles),
            ELEMENT_ARRAY_BUFFER,
        )

        min_bounds, max_bounds = self._compute_bounds(positions)
        attributes = {"POSITION": len(gltf.accessors), "NORMAL": len(gltf.accessors) + 1}
        gltf.accessors.extend([
            Accessor(
                bufferView=position_view,
                componentType=FLOAT,
                count=len(positions),
                type="VEC3",
                max=max_bounds,
                min=min_bounds,
            ),
            Accessor(
                bufferView=normal_view,
                componentType=FLOAT,
                count=len(normals),
                type="VEC3",
            ),
        ])

        indices_accessor = len(gltf.accessors)
        gltf.accessors.append(
            Accessor(
                bufferView=index_view,
                componentType=UNSIGNED_INT,
                count=len(surface_data.triangles) * 3,
                type="SCALAR",
            )
        )

        if len(surface_data.tex_coords) == len(positions):
            st_view = self._add_view(
                gltf,
                buffer_data,
                b"".join(struct.pack("<ff", *st.st) for st in surface_data.tex_coords),
                ARRAY_BUFFER,
            )
            attributes["TEXCOORD_0"] = len(gltf.accessors)
            gltf.accessors.append(
                Accessor(
                    bufferView=st_view,
                    componentType=FLOAT,
                    count=len(surface_data.tex_coords),
                    type="VEC2",
                )
            )

        gltf.meshes.append(
            Mesh(
                name=cstr(surface_data.surface.name),
                primitives=[
                    Primitive(
                        attributes=attributes,
                        indices=indices_accessor,
                        mode=TRIANGLES,
                    )
                ],
            )
        )
        return len(gltf.meshes) - 1

    def export(self, output_path: str, include_tags: bool = False):
        """Export MD3 data to glTF/GLB file.

        Args:
            output_path: Path for output .glb file
            include_tags: Whether to add a node per tag

        Raises:
            ValueError: If no surface has vertices and triangles
        """
        model = self.load_model()
        surfaces = [s for s in model.surfaces if s.vertices and s.triangles]
        if not surfaces:
            raise ValueError("No mesh data found in MD3 file")

        gltf = GLTF2()
        gltf.asset = Asset(version="2.0", generator="MD3 Extractor")

        buffer_data = bytearray()
        for surface_data in surfaces:
            mesh_index = self._add_surface(gltf, buffer_data, surface_data)
            gltf.nodes.append(Node(mesh=mesh_index, name=gltf.meshes[mesh_index].name))

        if include_tags:
            for tag in model.tags:
                gltf.nodes.append(Node(name=cstr(tag.name), matrix=self._tag_matrix(tag)))

        gltf.buffers = [Buffer(byteLength=len(buffer_data))]
        gltf.scenes = [Scene(nodes=list(range(len(gltf.nodes))))]
        gltf.scene = 0

        gltf.set_binary_blob(bytes(buffer_data))
        gltf.save(output_path)
