#!/usr/bin/env python3
"""
Scene Data Module
Format-agnostic records populated by the extraction pipeline.

Records are created empty by the caller (traversal/session layer), handed to
the extractors by reference and filled in place. Their serialization belongs
to the consumer.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Union

import numpy as np

from .math_utils import compose_trs, identity_quaternion


class AnimationKind(Enum):
    """Tag of an animation block"""
    TRANSFORM = "transform"
    CAMERA = "camera"
    LIGHT = "light"


class LightType(Enum):
    """Supported light kinds"""
    UNKNOWN = "unknown"
    SPOT = "spot"
    DIRECTIONAL = "directional"
    POINT = "point"
    AREA = "area"


@dataclass
class Sample:
    """One time-value pair of a channel

    Attributes:
        time: Time in seconds
        value: float, bool or numpy vector/quaternion depending on the channel
    """
    time: float
    value: Any


@dataclass
class TransformAnimation:
    """Sampled transform channels

    Attributes:
        translation: 3-vector samples
        rotation: (x, y, z, w) quaternion samples
        scale: 3-vector samples
        visible: bool samples
    """
    kind: ClassVar[AnimationKind] = AnimationKind.TRANSFORM

    translation: List[Sample] = field(default_factory=list)
    rotation: List[Sample] = field(default_factory=list)
    scale: List[Sample] = field(default_factory=list)
    visible: List[Sample] = field(default_factory=list)

    def channels(self) -> Dict[str, List[Sample]]:
        """All channels of the block by name"""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def is_empty(self) -> bool:
        return not any(self.channels().values())


@dataclass
class CameraAnimation(TransformAnimation):
    """Transform channels plus camera channels (fov in degrees, apertures in mm)"""
    kind: ClassVar[AnimationKind] = AnimationKind.CAMERA

    near_plane: List[Sample] = field(default_factory=list)
    far_plane: List[Sample] = field(default_factory=list)
    fov: List[Sample] = field(default_factory=list)
    horizontal_aperture: List[Sample] = field(default_factory=list)
    vertical_aperture: List[Sample] = field(default_factory=list)
    focal_length: List[Sample] = field(default_factory=list)
    focus_distance: List[Sample] = field(default_factory=list)


@dataclass
class LightAnimation(TransformAnimation):
    """Transform channels plus light channels (RGBA color, intensity)"""
    kind: ClassVar[AnimationKind] = AnimationKind.LIGHT

    color: List[Sample] = field(default_factory=list)
    intensity: List[Sample] = field(default_factory=list)


AnimationBlock = Union[TransformAnimation, CameraAnimation, LightAnimation]


def _vec3(value=0.0):
    return np.full(3, value, dtype=np.float64)


@dataclass
class TransformRecord:
    """Local transform of a node

    Attributes:
        path: Hierarchy path, used as the external key
        position: Local translation
        rotation: Local rotation, normalized (x, y, z, w) quaternion
        scale: Local scale
        visible_hierarchy: Node and all its ancestors are visible
        animation: Sampled animation, None when nothing is animated
    """
    animation_type: ClassVar[type] = TransformAnimation

    path: str = ""
    position: np.ndarray = field(default_factory=_vec3)
    rotation: np.ndarray = field(default_factory=identity_quaternion)
    scale: np.ndarray = field(default_factory=lambda: _vec3(1.0))
    visible_hierarchy: bool = True
    animation: Optional[AnimationBlock] = None

    def create_animation(self) -> AnimationBlock:
        """Get the animation block, creating the record's variant if absent"""
        if self.animation is None:
            self.animation = self.animation_type()
        return self.animation

    def discard_empty_animation(self):
        """An animation block without samples is never kept"""
        if self.animation is not None and self.animation.is_empty():
            self.animation = None

    def to_matrix(self) -> np.ndarray:
        """Local TRS as a row-vector 4x4 matrix"""
        return compose_trs(self.position, self.rotation, self.scale)


@dataclass
class CameraRecord(TransformRecord):
    """Camera transform plus projection parameters

    Attributes:
        is_ortho: Orthographic projection
        near_plane: Near clip distance
        far_plane: Far clip distance
        fov: Horizontal field of view in degrees
        horizontal_aperture: Film aperture width in mm
        vertical_aperture: Film aperture height in mm
        focal_length: Focal length in mm
        focus_distance: Focus distance in scene units
    """
    animation_type: ClassVar[type] = CameraAnimation

    is_ortho: bool = False
    near_plane: float = 0.0
    far_plane: float = 0.0
    fov: float = 0.0
    horizontal_aperture: float = 0.0
    vertical_aperture: float = 0.0
    focal_length: float = 0.0
    focus_distance: float = 0.0


@dataclass
class LightRecord(TransformRecord):
    """Light transform plus light parameters

    Attributes:
        light_type: LightType.UNKNOWN until a supported light shape is found
        color: RGBA color
        intensity: Light intensity
        spot_angle: Spot cone angle in degrees (spot lights only)
    """
    animation_type: ClassVar[type] = LightAnimation

    light_type: LightType = LightType.UNKNOWN
    color: np.ndarray = field(default_factory=lambda: np.ones(4, dtype=np.float32))
    intensity: float = 1.0
    spot_angle: float = 0.0


@dataclass
class BlendShapeFrame:
    """One in-between of a blend shape channel

    Attributes:
        weight: Weight (0-100) at which the frame is fully applied
        points: Per-vertex deltas, sized to the mesh's vertex count
    """
    weight: float = 0.0
    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float32))


@dataclass
class BlendShapeData:
    """A blend shape weight channel with its frames

    Attributes:
        name: Channel name
        weight: Current weight (0-100)
        frames: Frames ordered as the deformer stores them
    """
    name: str = ""
    weight: float = 0.0
    frames: List[BlendShapeFrame] = field(default_factory=list)


@dataclass
class BoneData:
    """A skin influence

    Attributes:
        path: Hierarchy path of the joint
        bindpose: Row-vector 4x4 inverse bind matrix (object space)
        weights: Per-vertex weights, index-aligned with MeshRecord.points
    """
    path: str = ""
    bindpose: np.ndarray = field(default_factory=lambda: np.identity(4))
    weights: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float32))


@dataclass
class RefineSettings:
    """Processing directives for the consumer

    Attributes:
        gen_tangents: Consumer should generate tangents
        swap_faces: Consumer should flip winding to its handedness
        apply_local2world: Consumer should bake local2world into the geometry
        local2world: Row-vector 4x4 matrix used with apply_local2world
    """
    gen_tangents: bool = False
    swap_faces: bool = False
    apply_local2world: bool = False
    local2world: np.ndarray = field(default_factory=lambda: np.identity(4))


@dataclass
class MeshFlags:
    """Summary of which optional mesh arrays are populated"""
    has_points: bool = False
    has_counts: bool = False
    has_indices: bool = False
    has_normals: bool = False
    has_uv0: bool = False
    has_colors: bool = False
    has_material_ids: bool = False
    has_blendshapes: bool = False
    has_bones: bool = False
    has_refine_settings: bool = False
    apply_trs: bool = False


@dataclass
class MeshRecord(TransformRecord):
    """Polygon mesh snapshot

    Per-corner arrays (normals, uv0, colors) follow the flattened corner order
    of `indices`, not vertex order.

    Attributes:
        visible: Shape visibility
        points: (V, 3) vertex positions
        counts: Vertex count of each face
        indices: Flattened corner -> vertex index array
        normals: (len(indices), 3) face-varying normals, empty if not synced
        uv0: (len(indices), 2) first UV set, empty if not synced
        colors: (len(indices), 4) first color set, empty if not synced
        material_ids: Per-face material id, -1 when unresolved
        blendshapes: Blend shape channels
        bones: Skin influences
        root_bone: Path of the topmost ancestor of the first bone
        refine_settings: Processing directives
        flags: Summary flags, see setup_flags()
    """
    visible: bool = True
    points: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float32))
    counts: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    indices: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    normals: np.ndarray = field(default_factory=lambda: np.zeros((0, 3), dtype=np.float32))
    uv0: np.ndarray = field(default_factory=lambda: np.zeros((0, 2), dtype=np.float32))
    colors: np.ndarray = field(default_factory=lambda: np.zeros((0, 4), dtype=np.float32))
    material_ids: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.int32))
    blendshapes: List[BlendShapeData] = field(default_factory=list)
    bones: List[BoneData] = field(default_factory=list)
    root_bone: str = ""
    refine_settings: RefineSettings = field(default_factory=RefineSettings)
    flags: MeshFlags = field(default_factory=MeshFlags)

    @property
    def vertex_count(self) -> int:
        return len(self.points)

    @property
    def index_count(self) -> int:
        return len(self.indices)

    @property
    def face_count(self) -> int:
        return len(self.counts)

    def setup_flags(self):
        """Recompute flags from the populated arrays"""
        self.flags.has_points = len(self.points) > 0
        self.flags.has_counts = len(self.counts) > 0
        self.flags.has_indices = len(self.indices) > 0
        self.flags.has_normals = len(self.normals) > 0
        self.flags.has_uv0 = len(self.uv0) > 0
        self.flags.has_colors = len(self.colors) > 0
        self.flags.has_material_ids = len(self.material_ids) > 0
        self.flags.has_blendshapes = len(self.blendshapes) > 0
        self.flags.has_bones = len(self.bones) > 0


@dataclass
class MaterialRecord:
    """Shader exposed to the consumer

    Attributes:
        id: Session-stable id, matches MeshRecord.material_ids
        name: Shader node name
        color: RGBA base color
    """
    id: int = -1
    name: str = ""
    color: np.ndarray = field(default_factory=lambda: np.ones(4, dtype=np.float32))


@dataclass
class SceneSnapshot:
    """All records handed to one extraction session

    The snapshot only references the caller's records; ownership stays with
    the caller.

    Attributes:
        transforms: Plain transform records
        cameras: Camera records
        lights: Light records
        meshes: Mesh records
        materials: Material records
    """
    transforms: List[TransformRecord] = field(default_factory=list)
    cameras: List[CameraRecord] = field(default_factory=list)
    lights: List[LightRecord] = field(default_factory=list)
    meshes: List[MeshRecord] = field(default_factory=list)
    materials: List[MaterialRecord] = field(default_factory=list)

    def add(self, record):
        """File a record under its kind"""
        if isinstance(record, MeshRecord):
            self.meshes.append(record)
        elif isinstance(record, CameraRecord):
            self.cameras.append(record)
        elif isinstance(record, LightRecord):
            self.lights.append(record)
        elif isinstance(record, MaterialRecord):
            self.materials.append(record)
        elif isinstance(record, TransformRecord):
            self.transforms.append(record)
        else:
            raise TypeError(f"Not a snapshot record: {type(record).__name__}")

    def all_records(self) -> List[TransformRecord]:
        return self.transforms + self.cameras + self.lights + self.meshes

    def get_record_by_path(self, path: str) -> Optional[TransformRecord]:
        """Find a transform-derived record by hierarchy path

        Args:
            path: Hierarchy path to find

        Returns:
            The record if found, None otherwise
        """
        for record in self.all_records():
            if record.path == path:
                return record
        return None

    def get_material_by_id(self, material_id: int) -> Optional[MaterialRecord]:
        for material in self.materials:
            if material.id == material_id:
                return material
        return None
