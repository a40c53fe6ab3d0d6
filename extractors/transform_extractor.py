#!/usr/bin/env python3
"""
Transform Extractor Module
Local TRS, hierarchy visibility and transform animation of a node.

Joints get their scale orientation and joint orientation folded into the
rotation, and segment scale compensation divided out of the scale, both for
the static pose and for every rotation/scale sample.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from core.channels import ROTATION_ROLES, SCALE_ROLES, TRANSFORM_ROLES, TRANSLATION_ROLES, ChannelRole
from core.math_utils import RotationOrder, normalize_quaternion, quaternion_multiply

from .base_extractor import BaseExtractor

logger = logging.getLogger(__name__)


@dataclass
class JointCorrection:
    """Joint corrections applied to the static pose and to samples

    Attributes:
        scale_orient: Scale orientation quaternion, applied on the left
        joint_orient: Joint orientation quaternion, applied on the right
        inverse_parent_scale: Divisor of the scale, None without compensation
    """
    scale_orient: np.ndarray
    joint_orient: np.ndarray
    inverse_parent_scale: Optional[np.ndarray] = None

    def rotation(self, rotation) -> np.ndarray:
        q = quaternion_multiply(self.scale_orient, rotation)
        return normalize_quaternion(quaternion_multiply(q, self.joint_orient))

    def scale(self, scale) -> np.ndarray:
        scale = np.asarray(scale, dtype=np.float64)
        if self.inverse_parent_scale is None:
            return scale
        divisor = self.inverse_parent_scale
        # zero components cannot be divided out, keep the raw value
        safe = np.where(divisor != 0.0, divisor, 1.0)
        return scale / safe


class TransformExtractor(BaseExtractor):
    """Extracts TransformRecord data (also the first step of every other extractor)"""

    def get_record_name(self):
        return "Transform"

    def extract(self, dst, node):
        """Populate the transform portion of a record

        Args:
            dst: TransformRecord (or subclass)
            node: HostTransform node
        """
        dst.path = node.get_path()
        dst.position = np.asarray(node.get_translation(), dtype=np.float64)
        dst.rotation = normalize_quaternion(node.get_rotation())
        dst.scale = np.asarray(node.get_scale(), dtype=np.float64)
        dst.visible_hierarchy = node.is_visible()

        correction = self.get_joint_correction(node)
        if correction is not None:
            dst.rotation = correction.rotation(dst.rotation)
            dst.scale = correction.scale(dst.scale)

        if self.settings.sync_animations and node.is_animated():
            self.extract_animation(dst, node, correction)

    def get_joint_correction(self, node) -> Optional[JointCorrection]:
        """Read the joint orientation attributes

        Args:
            node: HostTransform node

        Returns:
            JointCorrection for joints, None for plain transforms
        """
        if not node.is_joint():
            return None

        scale_orient = node.get_scale_orientation()
        joint_orient = node.get_joint_orientation()
        correction = JointCorrection(
            scale_orient=normalize_quaternion(scale_orient) if scale_orient is not None
            else np.array([0.0, 0.0, 0.0, 1.0]),
            joint_orient=normalize_quaternion(joint_orient) if joint_orient is not None
            else np.array([0.0, 0.0, 0.0, 1.0]),
        )

        if node.get_attribute('segmentScaleCompensate', False):
            inverse_scale = node.get_attribute('inverseScale')
            if inverse_scale is not None:
                correction.inverse_parent_scale = np.asarray(inverse_scale, dtype=np.float64)
        return correction

    def extract_animation(self, dst, node, correction: Optional[JointCorrection] = None):
        """Sample translation, rotation, scale and visibility curves

        Args:
            dst: TransformRecord (or subclass)
            node: Animated HostTransform node
            correction: Joint corrections to apply per sample
        """
        curves = self.classifier.collect(node.get_animated_attributes(), TRANSFORM_ROLES)
        if not curves:
            return

        anim = dst.create_animation()
        anim.visible = self.sampler.sample_bool(curves.get(ChannelRole.VISIBILITY))
        anim.translation = self.sampler.sample_float3(
            [curves.get(role) for role in TRANSLATION_ROLES], dst.position)
        anim.scale = self.sampler.sample_float3(
            [curves.get(role) for role in SCALE_ROLES], node.get_scale())
        anim.rotation = self.sampler.sample_rotation(
            [curves.get(role) for role in ROTATION_ROLES],
            node.get_euler_rotation(),
            RotationOrder(node.get_rotation_order()))

        if correction is not None:
            for sample in anim.rotation:
                sample.value = correction.rotation(sample.value)
            for sample in anim.scale:
                sample.value = correction.scale(sample.value)

        dst.discard_empty_animation()
        logger.debug("%s: %d animated transform channels", dst.path, len(curves))
