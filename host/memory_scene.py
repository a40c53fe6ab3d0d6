#!/usr/bin/env python3
"""
Memory Scene Module
In-memory Maya-like scene graph implementing the host accessors.

No Maya installation required - nodes, curves and deformers are plain Python
objects, which makes the pipeline usable headless and testable.
"""

import uuid as uuid_module
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from core.channels import AnimatedAttribute
from core.math_utils import RotationOrder, euler_to_quaternion

from .base_host import (
    BlendShapeChannel,
    BlendShapeTargetItem,
    HostAnimCurve,
    HostBlendShape,
    HostCamera,
    HostMesh,
    HostShader,
    HostShadingGroup,
    HostSkinCluster,
    HostTransform,
    HostTweak,
    Polygon,
)

SHAPE_TYPES = {
    'mesh', 'camera',
    'spotLight', 'directionalLight', 'pointLight', 'areaLight', 'ambientLight', 'volumeLight',
}


class MayaAnimCurve(HostAnimCurve):
    """Animation curve with linearly interpolated keyframes"""

    def __init__(self, name: str, keyframes: Iterable[Tuple[float, float]] = ()):
        self.name = name
        self.keyframes: List[Tuple[float, float]] = []  # [(time, value), ...]
        for time, value in keyframes:
            self.add_key(time, value)

    def add_key(self, time: float, value: float):
        self.keyframes.append((float(time), float(value)))
        self.keyframes.sort(key=lambda kf: kf[0])

    def key_times(self) -> List[float]:
        return [kf[0] for kf in self.keyframes]

    def evaluate(self, time: float) -> float:
        """Get interpolated value at a time, constant outside the key range"""
        if not self.keyframes:
            return 0.0
        times = [kf[0] for kf in self.keyframes]
        values = [kf[1] for kf in self.keyframes]
        return float(np.interp(time, times, values))

    def __repr__(self):
        return f"MayaAnimCurve({self.name}, {len(self.keyframes)} keys)"


class MayaNode(HostTransform):
    """Scene node storing its attributes in a dict"""

    def __init__(self, name: str, node_type: str = 'transform', parent: Optional['MayaNode'] = None):
        self.name = name
        self.node_type = node_type  # 'transform', 'joint', 'camera', 'mesh', 'pointLight', etc.
        self.attributes: Dict[str, Any] = {
            'translate': (0.0, 0.0, 0.0),
            'rotate': (0.0, 0.0, 0.0),
            'scale': (1.0, 1.0, 1.0),
            'rotateOrder': int(RotationOrder.XYZ),
            'visibility': True,
        }
        self.anim_curves: Dict[str, MayaAnimCurve] = {}  # attribute -> curve
        self.children: List['MayaNode'] = []
        self._parent: Optional['MayaNode'] = None
        if parent is not None:
            parent.add_child(self)

    def add_child(self, child: 'MayaNode'):
        child._parent = self
        self.children.append(child)

    def set_attribute(self, name: str, value: Any) -> 'MayaNode':
        self.attributes[name] = value
        return self

    def animate(self, attribute: str, keyframes: Iterable[Tuple[float, float]]) -> MayaAnimCurve:
        """Connect a new animation curve to an attribute"""
        curve = MayaAnimCurve(f"{self.name}_{attribute}", keyframes)
        self.anim_curves[attribute] = curve
        return curve

    def get_name(self) -> str:
        return self.name

    def get_path(self) -> str:
        parts = [self.name]
        current = self._parent
        while current is not None:
            parts.insert(0, current.name)
            current = current._parent
        return "/" + "/".join(parts)

    def get_parent(self) -> Optional['MayaNode']:
        return self._parent

    def get_shape(self) -> Optional['MayaNode']:
        for child in self.children:
            if child.node_type in SHAPE_TYPES:
                return child
        return None

    def is_visible(self) -> bool:
        node = self
        while node is not None:
            if not node.attributes.get('visibility', True):
                return False
            node = node._parent
        return True

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def get_animated_attributes(self) -> List[AnimatedAttribute]:
        return [
            AnimatedAttribute(f"{self.name}.{attr}", curve)
            for attr, curve in self.anim_curves.items()
        ]

    def get_translation(self) -> np.ndarray:
        return np.asarray(self.attributes['translate'], dtype=np.float64)

    def get_euler_rotation(self) -> np.ndarray:
        return np.asarray(self.attributes['rotate'], dtype=np.float64)

    def get_rotation_order(self) -> int:
        return int(self.attributes.get('rotateOrder', RotationOrder.XYZ))

    def get_rotation(self) -> np.ndarray:
        return euler_to_quaternion(self.get_euler_rotation(), self.get_rotation_order())

    def get_scale(self) -> np.ndarray:
        return np.asarray(self.attributes['scale'], dtype=np.float64)

    def get_scale_orientation(self) -> Optional[np.ndarray]:
        if not self.is_joint():
            return None
        return euler_to_quaternion(self.attributes.get('rotateAxis', (0.0, 0.0, 0.0)))

    def get_joint_orientation(self) -> Optional[np.ndarray]:
        if not self.is_joint():
            return None
        return euler_to_quaternion(self.attributes.get('jointOrient', (0.0, 0.0, 0.0)))

    def __repr__(self):
        return f"MayaNode({self.name}, {self.node_type})"


class MayaCamera(MayaNode, HostCamera):
    """Camera shape; apertures in inches, focal length in mm"""

    def __init__(self, name: str, parent: Optional[MayaNode] = None):
        super().__init__(name, 'camera', parent)
        self.attributes.update({
            'orthographic': False,
            'nearClipPlane': 0.1,
            'farClipPlane': 10000.0,
            'horizontalFilmAperture': 1.417,
            'verticalFilmAperture': 0.945,
            'focalLength': 35.0,
            'focusDistance': 5.0,
        })

    def horizontal_field_of_view(self) -> float:
        aperture_mm = self.attributes['horizontalFilmAperture'] * 25.4
        return 2.0 * np.arctan(aperture_mm / (2.0 * self.attributes['focalLength']))


class MayaLight(MayaNode):
    """Light shape of any kind ('spotLight', 'pointLight', ...)"""

    def __init__(self, name: str, light_type: str = 'pointLight', parent: Optional[MayaNode] = None):
        super().__init__(name, light_type, parent)
        self.attributes.update({
            'color': (1.0, 1.0, 1.0),
            'intensity': 1.0,
        })
        if light_type == 'spotLight':
            self.attributes['coneAngle'] = np.radians(40.0)


class MayaShader(MayaNode, HostShader):
    """Lambert-like surface shader"""

    def __init__(self, name: str, color: Sequence[float] = (0.5, 0.5, 0.5, 1.0),
                 node_uuid: Optional[str] = None):
        super().__init__(name, 'lambert')
        self.attributes['color'] = tuple(color)
        self._uuid = node_uuid or str(uuid_module.uuid4())

    @property
    def uuid(self) -> str:
        return self._uuid

    def get_color(self) -> np.ndarray:
        color = list(self.attributes['color'])
        if len(color) == 3:
            color.append(1.0)
        return np.asarray(color, dtype=np.float32)


class MayaShadingGroup(MayaNode, HostShadingGroup):
    """Shading group, optionally fed by a shader"""

    def __init__(self, name: str, shader: Optional[MayaShader] = None):
        super().__init__(name, 'shadingEngine')
        self.shader = shader

    def find_upstream_shader(self) -> Optional[MayaShader]:
        return self.shader


class MayaTweak(MayaNode, HostTweak):
    """Tweak node; offsets[output_index][logical_index] = offset"""

    def __init__(self, name: str, node_type: str = 'tweak'):
        super().__init__(name, node_type)
        self.offset_lists: Dict[int, Dict[int, Tuple[float, ...]]] = {}

    def set_offset(self, output_index: int, component: int, offset: Sequence[float]):
        self.offset_lists.setdefault(output_index, {})[component] = tuple(offset)

    def offsets(self, output_index: int) -> Dict[int, Tuple[float, ...]]:
        return dict(self.offset_lists.get(output_index, {}))


class _MayaDeformer(MayaNode):
    """Shared tweak lookup of deformer nodes"""

    def __init__(self, name: str, node_type: str):
        super().__init__(name, node_type)
        self.tweak: Optional[MayaTweak] = None
        self.uv_tweak: Optional[MayaTweak] = None

    def find_tweak(self) -> Optional[MayaTweak]:
        return self.tweak

    def find_uv_tweak(self) -> Optional[MayaTweak]:
        return self.uv_tweak


class MayaBlendShape(_MayaDeformer, HostBlendShape):
    """Blend shape deformer data"""

    def __init__(self, name: str):
        super().__init__(name, 'blendShape')
        self.channels: List[BlendShapeChannel] = []

    def add_channel(self, name: str, weight: float = 0.0) -> BlendShapeChannel:
        channel = BlendShapeChannel(name=name, weight=weight)
        self.channels.append(channel)
        return channel

    def add_geometry_target(self, channel: BlendShapeChannel, slot_index: int, geometry: 'MayaMesh'):
        channel.items.append(BlendShapeTargetItem(slot_index=slot_index, geometry=geometry))

    def add_sparse_target(self, channel: BlendShapeChannel, slot_index: int,
                          components: Sequence[int], points: Sequence[Sequence[float]]):
        channel.items.append(BlendShapeTargetItem(
            slot_index=slot_index, points=list(points), components=list(components)))

    def weight_channels(self) -> List[BlendShapeChannel]:
        return list(self.channels)


class MayaSkinCluster(_MayaDeformer, HostSkinCluster):
    """Skin cluster with a dense (vertex x influence) weight table"""

    def __init__(self, name: str):
        super().__init__(name, 'skinCluster')
        self.influences: List[MayaNode] = []
        self.bind_pre_matrices: Dict[int, np.ndarray] = {}
        self.weights: Optional[np.ndarray] = None
        self.output_shapes: List['MayaMesh'] = []

    def add_influence(self, joint: MayaNode, bind_pre_matrix: Optional[Sequence[Sequence[float]]] = None):
        self.influences.append(joint)
        if bind_pre_matrix is not None:
            self.bind_pre_matrices[id(joint)] = np.asarray(bind_pre_matrix, dtype=np.float64)

    def set_weights(self, weights: Sequence[Sequence[float]]):
        self.weights = np.asarray(weights, dtype=np.float32)

    def index_for_output_shape(self, mesh: 'MayaMesh') -> int:
        for index, shape in enumerate(self.output_shapes):
            if shape is mesh:
                return index
        return 0

    def influence_objects(self) -> List[MayaNode]:
        return list(self.influences)

    def bind_pre_matrix(self, influence: MayaNode) -> Optional[np.ndarray]:
        return self.bind_pre_matrices.get(id(influence))

    def get_weights(self, mesh: 'MayaMesh') -> List[np.ndarray]:
        if self.weights is None:
            # unpainted cluster: every vertex carries zero weight
            vertex_count = 0 if mesh.points is None else len(mesh.points)
            return [np.zeros(len(self.influences), dtype=np.float32) for _ in range(vertex_count)]
        return [row for row in self.weights]


class MayaMesh(MayaNode, HostMesh):
    """Polygon mesh shape

    Faces are lists of vertex indices. Normals, UVs and colors are indexed per
    corner by lists parallel to the faces; when no per-corner indices are
    given they default to the vertex indices.
    """

    def __init__(self, name: str, points: Optional[Sequence[Sequence[float]]] = None,
                 faces: Sequence[Sequence[int]] = (), parent: Optional[MayaNode] = None):
        super().__init__(name, 'mesh', parent)
        self.points = None if points is None else np.asarray(points, dtype=np.float32)
        self.faces: List[List[int]] = [list(face) for face in faces]
        self.normals: Optional[np.ndarray] = None
        self.normal_ids: Optional[List[List[int]]] = None
        self.uv_sets: Dict[str, Tuple[np.ndarray, List[List[int]]]] = {}
        self.color_sets: Dict[str, Tuple[np.ndarray, List[List[int]]]] = {}
        self.shading_groups: List[MayaShadingGroup] = []
        self.face_shading: List[int] = []
        self.blend_shape: Optional[MayaBlendShape] = None
        self.skin_cluster: Optional[MayaSkinCluster] = None
        self.orig_mesh: Optional['MayaMesh'] = None

    def _corner_ids(self, ids: Optional[Sequence[Sequence[int]]]) -> List[List[int]]:
        if ids is None:
            return [list(face) for face in self.faces]
        return [list(face_ids) for face_ids in ids]

    def set_normals(self, normals: Sequence[Sequence[float]], ids: Optional[Sequence[Sequence[int]]] = None):
        self.normals = np.asarray(normals, dtype=np.float32)
        self.normal_ids = self._corner_ids(ids)

    def add_uv_set(self, name: str, uvs: Sequence[Sequence[float]], ids: Optional[Sequence[Sequence[int]]] = None):
        self.uv_sets[name] = (np.asarray(uvs, dtype=np.float32).reshape(-1, 2), self._corner_ids(ids))

    def add_color_set(self, name: str, colors: Sequence[Sequence[float]],
                      ids: Optional[Sequence[Sequence[int]]] = None):
        self.color_sets[name] = (np.asarray(colors, dtype=np.float32).reshape(-1, 4), self._corner_ids(ids))

    def assign_shading_group(self, group: MayaShadingGroup, faces: Iterable[int]):
        if group not in self.shading_groups:
            self.shading_groups.append(group)
        group_index = self.shading_groups.index(group)
        if len(self.face_shading) < len(self.faces):
            self.face_shading.extend([-1] * (len(self.faces) - len(self.face_shading)))
        for face in faces:
            self.face_shading[face] = group_index

    def get_points(self) -> Optional[np.ndarray]:
        return None if self.points is None else self.points.copy()

    def get_polygons(self) -> List[Polygon]:
        polygons = []
        for fi, face in enumerate(self.faces):
            polygon = Polygon(vertex_indices=list(face))
            if self.normal_ids is not None:
                polygon.normal_indices = list(self.normal_ids[fi])
            for set_name, (_, ids) in self.uv_sets.items():
                polygon.uv_indices[set_name] = list(ids[fi])
            for set_name, (_, ids) in self.color_sets.items():
                polygon.color_indices[set_name] = list(ids[fi])
            polygons.append(polygon)
        return polygons

    def get_normals(self) -> Optional[np.ndarray]:
        return self.normals

    def uv_set_names(self) -> List[str]:
        return list(self.uv_sets.keys())

    def get_uvs(self, uv_set: str) -> Tuple[np.ndarray, np.ndarray]:
        uvs, _ = self.uv_sets[uv_set]
        return uvs[:, 0], uvs[:, 1]

    def color_set_names(self) -> List[str]:
        return list(self.color_sets.keys())

    def get_colors(self, color_set: str) -> np.ndarray:
        colors, _ = self.color_sets[color_set]
        return colors

    def get_connected_shaders(self) -> Tuple[List[MayaShadingGroup], List[int]]:
        return list(self.shading_groups), list(self.face_shading)

    def find_blend_shape(self) -> Optional[MayaBlendShape]:
        return self.blend_shape

    def find_skin_cluster(self) -> Optional[MayaSkinCluster]:
        return self.skin_cluster

    def find_orig_mesh(self) -> Optional['MayaMesh']:
        return self.orig_mesh


class MayaScene:
    """Container for the nodes of an in-memory scene"""

    def __init__(self):
        self.nodes: Dict[str, MayaNode] = {}

    def _register(self, node: MayaNode) -> MayaNode:
        self.nodes[node.get_path()] = node
        return node

    def get_node(self, path: str) -> Optional[MayaNode]:
        return self.nodes.get(path)

    def add_transform(self, name: str, parent: Optional[MayaNode] = None, **attributes) -> MayaNode:
        node = MayaNode(name, 'transform', parent)
        node.attributes.update(attributes)
        return self._register(node)

    def add_joint(self, name: str, parent: Optional[MayaNode] = None, **attributes) -> MayaNode:
        node = MayaNode(name, 'joint', parent)
        node.attributes.update({
            'rotateAxis': (0.0, 0.0, 0.0),
            'jointOrient': (0.0, 0.0, 0.0),
            'segmentScaleCompensate': True,
            'inverseScale': (1.0, 1.0, 1.0),
        })
        node.attributes.update(attributes)
        return self._register(node)

    def add_camera(self, name: str, parent: Optional[MayaNode] = None, **attributes) -> Tuple[MayaNode, MayaCamera]:
        transform = self.add_transform(name, parent)
        shape = MayaCamera(f"{name}Shape", transform)
        shape.attributes.update(attributes)
        self._register(shape)
        return transform, shape

    def add_light(self, name: str, light_type: str = 'pointLight', parent: Optional[MayaNode] = None,
                  **attributes) -> Tuple[MayaNode, MayaLight]:
        transform = self.add_transform(name, parent)
        shape = MayaLight(f"{name}Shape", light_type, transform)
        shape.attributes.update(attributes)
        self._register(shape)
        return transform, shape

    def add_mesh(self, name: str, points: Sequence[Sequence[float]], faces: Sequence[Sequence[int]],
                 parent: Optional[MayaNode] = None) -> Tuple[MayaNode, MayaMesh]:
        transform = self.add_transform(name, parent)
        shape = MayaMesh(f"{name}Shape", points, faces, transform)
        self._register(shape)
        return transform, shape

    def get_cameras(self) -> List[MayaNode]:
        return [n for n in self.nodes.values() if n.node_type == 'camera']

    def get_meshes(self) -> List[MayaNode]:
        return [n for n in self.nodes.values() if n.node_type == 'mesh']

    def get_transforms(self) -> List[MayaNode]:
        return [n for n in self.nodes.values() if n.node_type in ('transform', 'joint')]
