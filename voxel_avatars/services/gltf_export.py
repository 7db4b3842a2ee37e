"""
glTF export service.

Converts an AvatarModel into a binary glTF (GLB) file:
- One node per part, parented to a single avatar root node
- One mesh per part built from trimesh primitives
- One material per material role, shared by index across parts

The avatar is exported in its own Z-up frame; placing it in a scene is
left to the composer.
"""

import math

import numpy as np
import trimesh
from loguru import logger
from pygltflib import (
    GLTF2,
    Accessor,
    Asset,
    Buffer,
    BufferView,
    Material,
    Mesh,
    Node,
    PbrMetallicRoughness,
    Primitive,
    Scene,
)

from voxel_avatars.config import ExportSettings
from voxel_avatars.models.geometry import AvatarModel, BoxShape, Color, ConeShape, MaterialRole, Part

ARRAY_BUFFER = 34962
ELEMENT_ARRAY_BUFFER = 34963
FLOAT = 5126
UNSIGNED_INT = 5125

# Material index order in exported files
MATERIAL_ORDER: tuple[MaterialRole, ...] = (MaterialRole.SKIN, MaterialRole.CLOTH, MaterialRole.EYE)


def to_base_color(color: Color) -> list[float]:
    """Convert a palette color to a glTF RGBA base color factor (clipped to 0-1)."""
    rgb = np.clip(np.array(color.as_tuple(), dtype=np.float64), 0.0, 1.0)
    return [*rgb.tolist(), 1.0]


def euler_to_quaternion(rotation: tuple[float, float, float]) -> list[float]:
    """Convert XYZ Euler angles (radians) to a glTF [x, y, z, w] quaternion."""
    w, x, y, z = trimesh.transformations.quaternion_from_euler(*rotation, axes="rxyz")
    return [float(x), float(y), float(z), float(w)]


def part_mesh(part: Part) -> trimesh.Trimesh:
    """
    Build the mesh for a part, centered on the part origin.

    Boxes map width/height/depth to X/Y/Z. Cones point along +Y.
    """
    shape = part.shape
    if isinstance(shape, BoxShape):
        return trimesh.creation.box(extents=[shape.width, shape.height, shape.depth])
    if isinstance(shape, ConeShape):
        mesh = trimesh.creation.cone(radius=shape.radius, height=shape.height, sections=shape.segments)
        # trimesh cones point along +Z; center them on the axis and point them along +Y
        center = trimesh.transformations.translation_matrix([0.0, 0.0, -mesh.bounds[:, 2].mean()])
        to_y_up = trimesh.transformations.rotation_matrix(-math.pi / 2, [1.0, 0.0, 0.0])
        mesh.apply_transform(to_y_up @ center)
        return mesh
    raise ValueError(f"Unsupported shape: {type(shape).__name__}")


class GltfExporter:
    """Exports assembled avatars as GLB files."""

    def __init__(self, settings: ExportSettings):
        """
        Initialize the exporter.

        Args:
            settings: Export options (generator name, PBR factors)
        """
        self.settings = settings

    def export(self, model: AvatarModel, name: str = "avatar") -> bytes:
        """
        Export an avatar model as GLB.

        Args:
            model: Assembled avatar model
            name: Name of the avatar root node

        Returns:
            GLB file data as bytes
        """
        binary_data = bytearray()
        buffer_views: list[BufferView] = []
        accessors: list[Accessor] = []
        meshes: list[Mesh] = []
        nodes: list[Node] = []

        for part in model.parts:
            mesh = part_mesh(part)
            vertices = np.asarray(mesh.vertices, dtype=np.float32)
            faces = np.asarray(mesh.faces, dtype=np.uint32).flatten()

            position_accessor = self._append(
                binary_data,
                buffer_views,
                accessors,
                vertices.tobytes(),
                ARRAY_BUFFER,
                Accessor(
                    componentType=FLOAT,
                    count=len(vertices),
                    type="VEC3",
                    min=vertices.min(axis=0).tolist(),
                    max=vertices.max(axis=0).tolist(),
                ),
            )
            index_accessor = self._append(
                binary_data,
                buffer_views,
                accessors,
                faces.tobytes(),
                ELEMENT_ARRAY_BUFFER,
                Accessor(componentType=UNSIGNED_INT, count=len(faces), type="SCALAR"),
            )

            meshes.append(
                Mesh(
                    name=part.name,
                    primitives=[
                        Primitive(
                            attributes={"POSITION": position_accessor},
                            indices=index_accessor,
                            material=MATERIAL_ORDER.index(part.material),
                        )
                    ],
                )
            )
            node = Node(name=part.name, mesh=len(meshes) - 1, translation=list(part.position))
            if any(part.rotation):
                node.rotation = euler_to_quaternion(part.rotation)
            nodes.append(node)

        root_index = len(nodes)
        nodes.append(Node(name=name, children=list(range(len(model.parts)))))

        gltf = GLTF2(
            asset=Asset(version="2.0", generator=self.settings.generator),
            scene=0,
            scenes=[Scene(nodes=[root_index])],
            nodes=nodes,
            meshes=meshes,
            accessors=accessors,
            bufferViews=buffer_views,
            buffers=[Buffer(byteLength=len(binary_data))],
            materials=[self._material(role, model.palette.resolve(role)) for role in MATERIAL_ORDER],
        )
        gltf.set_binary_blob(bytes(binary_data))
        glb_data = b"".join(gltf.save_to_bytes())

        logger.info(f"Created GLB file for {name}: {len(model.parts)} parts, {len(glb_data)} bytes")
        return glb_data

    def _material(self, role: MaterialRole, color: Color) -> Material:
        return Material(
            name=role.value,
            pbrMetallicRoughness=PbrMetallicRoughness(
                baseColorFactor=to_base_color(color),
                metallicFactor=self.settings.metallic_factor,
                roughnessFactor=self.settings.roughness_factor,
            ),
            doubleSided=self.settings.double_sided,
        )

    @staticmethod
    def _append(
        binary_data: bytearray,
        buffer_views: list[BufferView],
        accessors: list[Accessor],
        data: bytes,
        target: int,
        accessor: Accessor,
    ) -> int:
        """Append data to the binary buffer and register its view and accessor."""
        buffer_views.append(
            BufferView(buffer=0, byteOffset=len(binary_data), byteLength=len(data), target=target)
        )
        binary_data.extend(data)
        accessor.bufferView = len(buffer_views) - 1
        accessors.append(accessor)
        return len(accessors) - 1
