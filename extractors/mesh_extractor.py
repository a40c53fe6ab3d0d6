#!/usr/bin/env python3
"""
Mesh Extractor Module
Geometry, material ids, blend shapes and skinning of a polygon mesh.

Per-corner arrays (normals, uv0, colors) are built by walking the polygons in
their native order, so element i of each array belongs to corner i of
`indices`. Every per-corner array is allocated to len(indices) up front and
the corner cursor advances once per polygon vertex even when a corner has no
data, which keeps the arrays aligned.

Deformed meshes:
- With blend shapes or skinning synced, geometry is read from the original
  (pre-deformation) mesh; the consumer rebuilds the deformation from the
  blend shape deltas and skin weights.
- At most one blend shape and one skin cluster are modeled, with the blend
  shape evaluated after skinning. Other deformer stacks are not detected.
"""

import logging
from typing import Optional, Set

import numpy as np

from core.scene_data import BlendShapeData, BlendShapeFrame, BoneData

from .material_resolver import MaterialIdentityResolver
from .transform_extractor import TransformExtractor

logger = logging.getLogger(__name__)

# blend shape target items are stored at slot 5000 + weight * 1000
BLEND_SHAPE_SLOT_BASE = 5000


def decode_slot_weight(slot_index: int) -> float:
    """Convert a blend shape target slot index into a 0-100 weight

    Args:
        slot_index: Logical index of the target item (5000-6000 in practice)

    Returns:
        float: 5000 -> 0.0, 5500 -> 50.0, 6000 -> 100.0
    """
    return (slot_index - BLEND_SHAPE_SLOT_BASE) / 10.0


class MeshExtractor(TransformExtractor):
    """Extracts MeshRecord data

    Failing to resolve a visible polygon mesh or its points returns early,
    leaving a record without points; callers treat that as "no mesh".
    """

    def __init__(self, settings, material_resolver=None, **kwargs):
        """Initialize extractor

        Args:
            settings: SyncSettings for this session
            material_resolver: Session MaterialIdentityResolver (a private one when None)
            **kwargs: Passed to BaseExtractor
        """
        super().__init__(settings, **kwargs)
        if material_resolver is None:
            material_resolver = MaterialIdentityResolver()
        self.material_resolver = material_resolver

    def get_record_name(self):
        return "Mesh"

    def extract(self, dst, node):
        super().extract(dst, node)

        shape = node.get_shape()
        if shape is None or not shape.has_fn('mesh'):
            return

        dst.visible = shape.is_visible()
        if not dst.visible:
            return

        dst.flags.has_refine_settings = True
        dst.flags.apply_trs = True
        dst.refine_settings.gen_tangents = True
        dst.refine_settings.swap_faces = True

        blend_shape = shape.find_blend_shape()
        skin_cluster = shape.find_skin_cluster()
        source, output_index = self.resolve_source_mesh(shape, blend_shape, skin_cluster)

        points = source.get_points()
        if points is None:
            logger.warning("%s: cannot read points, mesh left empty", dst.path)
            return
        dst.points = np.asarray(points, dtype=np.float32).reshape(-1, 3).copy()

        polygons = source.get_polygons()
        self.extract_faces(dst, polygons)

        if self.settings.sync_normals:
            self.extract_normals(dst, source, polygons)

        uv_corners = None
        if self.settings.sync_uvs:
            uv_corners = self.extract_uvs(dst, source, polygons)

        if self.settings.sync_colors:
            self.extract_colors(dst, source, polygons)

        self.extract_material_ids(dst, shape)

        applied_tweaks: Set[int] = set()
        if self.settings.sync_blendshapes and blend_shape is not None:
            self.extract_blendshapes(dst, blend_shape)
            if self.settings.apply_tweak:
                self.apply_tweaks(dst, blend_shape, output_index, uv_corners, applied_tweaks)

        if self.settings.sync_bones and skin_cluster is not None:
            self.extract_bones(dst, shape, skin_cluster)
            if self.settings.apply_tweak:
                self.apply_tweaks(dst, skin_cluster, output_index, uv_corners, applied_tweaks)

        dst.setup_flags()
        self.log(f"{dst.path}: {dst.vertex_count} points, {dst.face_count} faces")

    def resolve_source_mesh(self, shape, blend_shape, skin_cluster):
        """Pick the mesh geometry is read from

        Args:
            shape: Final (deformed) mesh shape
            blend_shape: Upstream blend shape deformer or None
            skin_cluster: Upstream skin cluster or None

        Returns:
            tuple: (source mesh, output index of shape in the skin cluster)
        """
        source = shape
        output_index = 0
        if self.settings.sync_blendshapes and blend_shape is not None:
            orig = shape.find_orig_mesh()
            if orig is not None and orig.has_fn('mesh'):
                source = orig
        if self.settings.sync_bones and skin_cluster is not None:
            orig = shape.find_orig_mesh()
            if orig is not None and orig.has_fn('mesh'):
                source = orig
                output_index = skin_cluster.index_for_output_shape(shape)
        return source, output_index

    def extract_faces(self, dst, polygons):
        counts = []
        indices = []
        for polygon in polygons:
            counts.append(polygon.vertex_count)
            indices.extend(polygon.vertex_indices)
        dst.counts = np.asarray(counts, dtype=np.int32)
        dst.indices = np.asarray(indices, dtype=np.int32)

    def extract_normals(self, dst, source, polygons):
        """Face-varying normals, one per corner"""
        normals = source.get_normals()
        if normals is None:
            return
        normals = np.asarray(normals, dtype=np.float32).reshape(-1, 3)

        out = np.zeros((dst.index_count, 3), dtype=np.float32)
        ii = 0
        for polygon in polygons:
            ids = polygon.normal_indices
            for i in range(polygon.vertex_count):
                ni = ids[i] if i < len(ids) else -1
                if 0 <= ni < len(normals):
                    out[ii] = normals[ni]
                ii += 1
        dst.normals = out

    def extract_uvs(self, dst, source, polygons) -> Optional[np.ndarray]:
        """First UV set, one (u, v) per corner

        Returns:
            np.ndarray: UV index of each corner (-1 where unmapped), None
            when the mesh has no UVs
        """
        uv_sets = source.uv_set_names()
        if not uv_sets:
            return None
        uv_set = uv_sets[0]
        u, v = source.get_uvs(uv_set)
        if len(u) == 0:
            return None

        out = np.zeros((dst.index_count, 2), dtype=np.float32)
        corner_uvs = np.full(dst.index_count, -1, dtype=np.int32)
        ii = 0
        for polygon in polygons:
            ids = polygon.uv_indices.get(uv_set, [])
            for i in range(polygon.vertex_count):
                iu = ids[i] if i < len(ids) else -1
                if 0 <= iu < len(u):
                    out[ii] = (u[iu], v[iu])
                    corner_uvs[ii] = iu
                ii += 1
        dst.uv0 = out
        return corner_uvs

    def extract_colors(self, dst, source, polygons):
        """First color set, one RGBA per corner, opaque white where unset"""
        color_sets = source.color_set_names()
        if not color_sets:
            return
        color_set = color_sets[0]
        colors = np.asarray(source.get_colors(color_set), dtype=np.float32).reshape(-1, 4)
        if len(colors) == 0:
            return

        out = np.ones((dst.index_count, 4), dtype=np.float32)
        ii = 0
        for polygon in polygons:
            ids = polygon.color_indices.get(color_set, [])
            for i in range(polygon.vertex_count):
                ic = ids[i] if i < len(ids) else -1
                if 0 <= ic < len(colors):
                    out[ii] = colors[ic]
                ii += 1
        dst.colors = out

    def extract_material_ids(self, dst, shape):
        """Per-face material ids from the shading group assignment"""
        groups, face_groups = shape.get_connected_shaders()
        if not groups:
            return
        group_ids = [self.material_resolver.id_for(group.find_upstream_shader()) for group in groups]

        material_ids = np.full(dst.face_count, -1, dtype=np.int32)
        for fi in range(min(dst.face_count, len(face_groups))):
            gi = face_groups[fi]
            if 0 <= gi < len(group_ids):
                material_ids[fi] = group_ids[gi]
        dst.material_ids = material_ids

    def apply_tweaks(self, dst, deformer, output_index: int, uv_corners, applied: Set[int]):
        """Add manual tweak offsets of a deformer's output to points and UVs

        Each tweak node is applied at most once per mesh.

        Args:
            dst: MeshRecord with points (and uv0) extracted
            deformer: Deformer whose tweak nodes are looked up
            output_index: Output index of the mesh in the deformer
            uv_corners: UV index per corner from extract_uvs, or None
            applied: ids of tweak nodes already applied
        """
        tweak = deformer.find_tweak()
        if tweak is not None and id(tweak) not in applied:
            applied.add(id(tweak))
            for vertex, offset in tweak.offsets(output_index).items():
                if 0 <= vertex < dst.vertex_count:
                    dst.points[vertex] += np.asarray(offset[:3], dtype=np.float32)

        uv_tweak = deformer.find_uv_tweak()
        if uv_tweak is not None and uv_corners is not None and id(uv_tweak) not in applied:
            applied.add(id(uv_tweak))
            for uv_index, offset in uv_tweak.offsets(output_index).items():
                dst.uv0[uv_corners == uv_index] += np.asarray(offset[:2], dtype=np.float32)

    def extract_blendshapes(self, dst, blend_shape):
        """One BlendShapeData per weight channel, one frame per target item"""
        for channel in blend_shape.weight_channels():
            data = BlendShapeData(name=channel.name, weight=float(channel.weight) * 100.0)
            for item in channel.items:
                frame = BlendShapeFrame(
                    weight=decode_slot_weight(item.slot_index),
                    points=np.zeros_like(dst.points),
                )
                if item.geometry is not None:
                    self._dense_delta(dst, frame, item.geometry)
                else:
                    self._sparse_delta(dst, frame, item.components, item.points)
                data.frames.append(frame)
            dst.blendshapes.append(data)

    def _dense_delta(self, dst, frame, geometry):
        target = geometry.get_points()
        if target is None:
            return
        target = np.asarray(target, dtype=np.float32).reshape(-1, 3)
        n = min(len(target), dst.vertex_count)
        frame.points[:n] = target[:n] - dst.points[:n]

    def _sparse_delta(self, dst, frame, components, points):
        # neither a connected target nor a stored component list: deltas stay zero
        if components is None or points is None:
            return
        for vertex, point in zip(components, points):
            if 0 <= vertex < dst.vertex_count:
                frame.points[vertex] = np.asarray(point[:3], dtype=np.float32)

    def extract_bones(self, dst, shape, skin_cluster):
        """Bones, bind poses and index-aligned weights of a skin cluster"""
        # skin weights live in bind-time object space: consumer bakes local2world
        dst.refine_settings.apply_local2world = True
        dst.refine_settings.local2world = dst.to_matrix()

        for joint in skin_cluster.influence_objects():
            if not dst.bones:
                dst.root_bone = joint.get_root_path()
            bind_pre_matrix = skin_cluster.bind_pre_matrix(joint)
            bone = BoneData(path=joint.get_path())
            if bind_pre_matrix is not None:
                bone.bindpose = np.asarray(bind_pre_matrix, dtype=np.float64).reshape(4, 4)
            dst.bones.append(bone)

        # one weight per vertex of the extracted points, zero where the host has none
        rows = list(skin_cluster.get_weights(shape))
        weights = np.zeros((len(dst.bones), dst.vertex_count), dtype=np.float32)
        for vi in range(min(dst.vertex_count, len(rows))):
            vertex_weights = rows[vi]
            for ij in range(min(len(dst.bones), len(vertex_weights))):
                weights[ij, vi] = vertex_weights[ij]
        for bone, bone_weights in zip(dst.bones, weights):
            bone.weights = bone_weights.copy()
