#!/usr/bin/env python3
"""
Camera Extractor Module
Camera transform plus projection parameters and their animation.
"""

from core.animation_sampler import scale_samples
from core.channels import CAMERA_ROLES, ChannelRole
from core.math_utils import INCH_TO_MILLIMETER, RAD_TO_DEG, flip_y

from .transform_extractor import TransformExtractor


class CameraExtractor(TransformExtractor):
    """Extracts CameraRecord data

    The host's cameras look down -Z; every extracted rotation (static and
    sampled) is flipped around Y for the consumer's convention.
    """

    def get_record_name(self):
        return "Camera"

    def extract(self, dst, node):
        super().extract(dst, node)

        shape = node.get_shape()
        if shape is not None and shape.has_fn('camera'):
            self.extract_camera_shape(dst, shape)

        apply_flip_y(dst)

    def extract_camera_shape(self, dst, shape):
        """Read projection parameters from a camera shape

        Args:
            dst: CameraRecord
            shape: HostCamera shape node
        """
        dst.is_ortho = bool(shape.get_attribute('orthographic', False))
        dst.near_plane = float(shape.get_attribute('nearClipPlane', 0.0))
        dst.far_plane = float(shape.get_attribute('farClipPlane', 0.0))
        dst.fov = float(shape.horizontal_field_of_view()) * RAD_TO_DEG
        dst.horizontal_aperture = float(shape.get_attribute('horizontalFilmAperture', 0.0)) * INCH_TO_MILLIMETER
        dst.vertical_aperture = float(shape.get_attribute('verticalFilmAperture', 0.0)) * INCH_TO_MILLIMETER
        dst.focal_length = float(shape.get_attribute('focalLength', 0.0))
        dst.focus_distance = float(shape.get_attribute('focusDistance', 0.0))

        if self.settings.sync_animations and shape.is_animated():
            self.extract_camera_animation(dst, shape)

    def extract_camera_animation(self, dst, shape):
        curves = self.classifier.collect(shape.get_animated_attributes(), CAMERA_ROLES)
        if not curves:
            return

        anim = dst.create_animation()
        anim.near_plane = self.sampler.sample_float(curves.get(ChannelRole.NEAR_PLANE))
        anim.far_plane = self.sampler.sample_float(curves.get(ChannelRole.FAR_PLANE))
        anim.focal_length = self.sampler.sample_float(curves.get(ChannelRole.FOCAL_LENGTH))
        anim.focus_distance = self.sampler.sample_float(curves.get(ChannelRole.FOCUS_DISTANCE))

        # apertures are keyed in inches
        anim.horizontal_aperture = scale_samples(
            self.sampler.sample_float(curves.get(ChannelRole.APERTURE_H)),
            INCH_TO_MILLIMETER)
        anim.vertical_aperture = scale_samples(
            self.sampler.sample_float(curves.get(ChannelRole.APERTURE_V)),
            INCH_TO_MILLIMETER)

        anim.fov = self.sampler.sample_fov(
            curves.get(ChannelRole.APERTURE_H),
            curves.get(ChannelRole.FOCAL_LENGTH),
            dst.horizontal_aperture,
            dst.focal_length)

        dst.discard_empty_animation()


def apply_flip_y(dst):
    """Flip the static rotation and every rotation sample of a record around Y"""
    dst.rotation = flip_y(dst.rotation)
    if dst.animation is not None:
        for sample in dst.animation.rotation:
            sample.value = flip_y(sample.value)
