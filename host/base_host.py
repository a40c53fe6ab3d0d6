#!/usr/bin/env python3
"""
Base Host Module
Abstract accessors the extraction pipeline needs from a host scene graph.

A host binding (a live Maya session, a parsed scene, the in-memory scene in
host.memory_scene) implements these classes. Accessors return None for
missing data instead of raising.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from core.channels import AnimatedAttribute


class HostAnimCurve(ABC):
    """Animation curve driving one scalar attribute"""

    @abstractmethod
    def evaluate(self, time: float) -> float:
        """Evaluate the curve at a time in seconds"""
        pass

    @abstractmethod
    def key_times(self) -> Sequence[float]:
        """Native keyframe times in seconds, sorted"""
        pass


class HostNode(ABC):
    """Node of the host's scene hierarchy

    Provides a consistent interface for reading transforms, attributes and
    animation from any host binding.
    """

    node_type = 'node'

    @abstractmethod
    def get_name(self) -> str:
        pass

    @abstractmethod
    def get_path(self) -> str:
        """Full hierarchy path (e.g., "/root/group1/pCube1")"""
        pass

    @abstractmethod
    def get_parent(self) -> Optional['HostNode']:
        pass

    @abstractmethod
    def get_shape(self) -> Optional['HostNode']:
        """First shape node under this transform, None if there is none"""
        pass

    @abstractmethod
    def is_visible(self) -> bool:
        """Visibility combined with every ancestor's visibility"""
        pass

    @abstractmethod
    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Current value of a named attribute

        Args:
            name: Long attribute name
            default: Returned when the attribute does not exist

        Returns:
            Attribute value or default
        """
        pass

    @abstractmethod
    def get_animated_attributes(self) -> List[AnimatedAttribute]:
        """Attributes driven by an animation curve"""
        pass

    def is_animated(self) -> bool:
        return len(self.get_animated_attributes()) > 0

    def has_fn(self, node_type: str) -> bool:
        return self.node_type == node_type

    def get_root_path(self) -> str:
        """Path of the topmost ancestor of this node"""
        node = self
        while node.get_parent() is not None:
            node = node.get_parent()
        return node.get_path()


class HostTransform(HostNode):
    """Transform (or joint) node"""

    @abstractmethod
    def get_translation(self) -> Sequence[float]:
        pass

    @abstractmethod
    def get_rotation(self) -> Sequence[float]:
        """Local rotation as (x, y, z, w) quaternion"""
        pass

    @abstractmethod
    def get_euler_rotation(self) -> Sequence[float]:
        """Local rotation as Euler angles in radians"""
        pass

    @abstractmethod
    def get_rotation_order(self) -> int:
        """core.math_utils.RotationOrder value"""
        pass

    @abstractmethod
    def get_scale(self) -> Sequence[float]:
        pass

    def is_joint(self) -> bool:
        return self.node_type == 'joint'

    def get_scale_orientation(self) -> Optional[Sequence[float]]:
        """Joint scale orientation quaternion, None for non-joints"""
        return None

    def get_joint_orientation(self) -> Optional[Sequence[float]]:
        """Joint orientation quaternion, None for non-joints"""
        return None


class HostCamera(HostNode):
    """Camera shape"""

    node_type = 'camera'

    @abstractmethod
    def horizontal_field_of_view(self) -> float:
        """Horizontal field of view in radians"""
        pass


class HostShader(HostNode):
    """Surface shader (lambert and derived)"""

    @property
    @abstractmethod
    def uuid(self) -> str:
        """Persistent unique id, stable across sessions and reordering"""
        pass

    @abstractmethod
    def get_color(self) -> Sequence[float]:
        """RGBA base color"""
        pass


class HostShadingGroup(HostNode):
    """Shading group assigned to mesh faces"""

    node_type = 'shadingEngine'

    @abstractmethod
    def find_upstream_shader(self) -> Optional[HostShader]:
        pass


class HostTweak(HostNode):
    """Manual per-component offsets layered on top of a deformer output"""

    @abstractmethod
    def offsets(self, output_index: int) -> Dict[int, Sequence[float]]:
        """Offsets of one deformer output, keyed by logical component index"""
        pass


class HostDeformer(HostNode):
    """Deformer node in a mesh's history"""

    @abstractmethod
    def find_tweak(self) -> Optional[HostTweak]:
        """Upstream vertex tweak node"""
        pass

    @abstractmethod
    def find_uv_tweak(self) -> Optional[HostTweak]:
        """Downstream UV tweak node"""
        pass


@dataclass
class BlendShapeTargetItem:
    """One in-between of a blend shape target

    Attributes:
        slot_index: Encoded weight slot (5000 -> 0.0, 6000 -> 1.0)
        geometry: Connected target mesh, None when the target is stored in the deformer
        points: Stored positions of the sparse encoding
        components: Vertex indices of the sparse encoding, parallel to points
    """
    slot_index: int
    geometry: Optional['HostMesh'] = None
    points: Optional[Sequence[Sequence[float]]] = None
    components: Optional[Sequence[int]] = None


@dataclass
class BlendShapeChannel:
    """One weight channel of a blend shape deformer

    Attributes:
        name: Channel (alias) name
        weight: Current weight in the host's 0-1 range
        items: Target items in physical order
    """
    name: str
    weight: float = 0.0
    items: List[BlendShapeTargetItem] = field(default_factory=list)


class HostBlendShape(HostDeformer):
    """Blend shape deformer"""

    node_type = 'blendShape'

    @abstractmethod
    def weight_channels(self) -> List[BlendShapeChannel]:
        """Weight channels for the first input geometry"""
        pass


class HostSkinCluster(HostDeformer):
    """Skin cluster deformer"""

    node_type = 'skinCluster'

    @abstractmethod
    def index_for_output_shape(self, mesh: 'HostMesh') -> int:
        pass

    @abstractmethod
    def influence_objects(self) -> List[HostNode]:
        """Influence joints in influence index order"""
        pass

    @abstractmethod
    def bind_pre_matrix(self, influence: HostNode) -> Optional[Sequence[Sequence[float]]]:
        """Stored inverse bind matrix of an influence"""
        pass

    @abstractmethod
    def get_weights(self, mesh: 'HostMesh') -> Iterable[Sequence[float]]:
        """Per-vertex weights, one value per influence, in vertex order"""
        pass


@dataclass
class Polygon:
    """One polygon of a mesh, in native order

    Attributes:
        vertex_indices: Vertex index per corner
        normal_indices: Normal index per corner
        uv_indices: UV set name -> UV index per corner (-1 when unmapped)
        color_indices: Color set name -> color index per corner (-1 when unset)
    """
    vertex_indices: List[int]
    normal_indices: List[int] = field(default_factory=list)
    uv_indices: Dict[str, List[int]] = field(default_factory=dict)
    color_indices: Dict[str, List[int]] = field(default_factory=dict)

    @property
    def vertex_count(self) -> int:
        return len(self.vertex_indices)


class HostMesh(HostNode):
    """Polygon mesh shape"""

    node_type = 'mesh'

    @abstractmethod
    def get_points(self) -> Optional[Sequence[Sequence[float]]]:
        """Vertex positions, None when the points cannot be read"""
        pass

    @abstractmethod
    def get_polygons(self) -> List[Polygon]:
        pass

    @abstractmethod
    def get_normals(self) -> Optional[Sequence[Sequence[float]]]:
        pass

    @abstractmethod
    def uv_set_names(self) -> List[str]:
        pass

    @abstractmethod
    def get_uvs(self, uv_set: str) -> Tuple[Sequence[float], Sequence[float]]:
        """(u values, v values) of a UV set"""
        pass

    @abstractmethod
    def color_set_names(self) -> List[str]:
        pass

    @abstractmethod
    def get_colors(self, color_set: str) -> Sequence[Sequence[float]]:
        """RGBA values of a color set"""
        pass

    @abstractmethod
    def get_connected_shaders(self) -> Tuple[List[HostShadingGroup], List[int]]:
        """Shading groups and, per face, an index into them (-1 when unassigned)"""
        pass

    @abstractmethod
    def find_blend_shape(self) -> Optional[HostBlendShape]:
        pass

    @abstractmethod
    def find_skin_cluster(self) -> Optional[HostSkinCluster]:
        pass

    @abstractmethod
    def find_orig_mesh(self) -> Optional['HostMesh']:
        """Pre-deformation mesh feeding the deformer chain"""
        pass
