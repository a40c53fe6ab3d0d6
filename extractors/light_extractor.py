#!/usr/bin/env python3
"""
Light Extractor Module
Light transform plus type, color, intensity and their animation.
"""

import logging

import numpy as np

from core.channels import COLOR_ROLES, LIGHT_ROLES, ChannelRole
from core.math_utils import RAD_TO_DEG
from core.scene_data import LightType

from .camera_extractor import apply_flip_y
from .transform_extractor import TransformExtractor

logger = logging.getLogger(__name__)

# Supported light shape types
LIGHT_TYPES = {
    'spotLight': LightType.SPOT,
    'directionalLight': LightType.DIRECTIONAL,
    'pointLight': LightType.POINT,
    'areaLight': LightType.AREA,
}


def to_rgba(color) -> np.ndarray:
    rgba = [float(c) for c in color]
    if len(rgba) == 3:
        rgba.append(1.0)
    return np.asarray(rgba[:4], dtype=np.float32)


class LightExtractor(TransformExtractor):
    """Extracts LightRecord data

    Only spot, directional, point and area lights are read; any other shape
    leaves the record with its transform and LightType.UNKNOWN.
    """

    def get_record_name(self):
        return "Light"

    def extract(self, dst, node):
        super().extract(dst, node)

        shape = node.get_shape()
        light_type = LIGHT_TYPES.get(shape.node_type) if shape is not None else None
        if light_type is not None:
            self.extract_light_shape(dst, shape, light_type)
        else:
            logger.debug("%s: no supported light shape", dst.path)

        apply_flip_y(dst)

    def extract_light_shape(self, dst, shape, light_type):
        """Read light parameters from a light shape

        Args:
            dst: LightRecord
            shape: Light shape node
            light_type: LightType of the shape
        """
        dst.light_type = light_type
        if light_type == LightType.SPOT:
            dst.spot_angle = float(shape.get_attribute('coneAngle', 0.0)) * RAD_TO_DEG
        dst.color = to_rgba(shape.get_attribute('color', (1.0, 1.0, 1.0)))
        dst.intensity = float(shape.get_attribute('intensity', 1.0))

        if self.settings.sync_animations and shape.is_animated():
            curves = self.classifier.collect(shape.get_animated_attributes(), LIGHT_ROLES)
            if curves:
                anim = dst.create_animation()
                anim.color = self.sampler.sample_float4([curves.get(role) for role in COLOR_ROLES], dst.color)
                anim.intensity = self.sampler.sample_float(curves.get(ChannelRole.INTENSITY))
                dst.discard_empty_animation()
