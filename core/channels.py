#!/usr/bin/env python3
"""
Channel Classification Module
Maps host attribute names to the semantic channel roles the samplers fill.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional


class ChannelRole(Enum):
    """Semantic role of an animatable scalar attribute"""
    TX = "tx"
    TY = "ty"
    TZ = "tz"
    RX = "rx"
    RY = "ry"
    RZ = "rz"
    SX = "sx"
    SY = "sy"
    SZ = "sz"
    VISIBILITY = "visibility"
    COLOR_R = "color_r"
    COLOR_G = "color_g"
    COLOR_B = "color_b"
    COLOR_A = "color_a"
    INTENSITY = "intensity"
    NEAR_PLANE = "near_plane"
    FAR_PLANE = "far_plane"
    APERTURE_H = "aperture_h"
    APERTURE_V = "aperture_v"
    FOCAL_LENGTH = "focal_length"
    FOCUS_DISTANCE = "focus_distance"


TRANSLATION_ROLES = (ChannelRole.TX, ChannelRole.TY, ChannelRole.TZ)
ROTATION_ROLES = (ChannelRole.RX, ChannelRole.RY, ChannelRole.RZ)
SCALE_ROLES = (ChannelRole.SX, ChannelRole.SY, ChannelRole.SZ)
TRANSFORM_ROLES = TRANSLATION_ROLES + ROTATION_ROLES + SCALE_ROLES + (ChannelRole.VISIBILITY,)
CAMERA_ROLES = (
    ChannelRole.NEAR_PLANE, ChannelRole.FAR_PLANE,
    ChannelRole.APERTURE_H, ChannelRole.APERTURE_V,
    ChannelRole.FOCAL_LENGTH, ChannelRole.FOCUS_DISTANCE,
)
COLOR_ROLES = (ChannelRole.COLOR_R, ChannelRole.COLOR_G, ChannelRole.COLOR_B, ChannelRole.COLOR_A)
LIGHT_ROLES = COLOR_ROLES + (ChannelRole.INTENSITY,)


@dataclass
class AnimatedAttribute:
    """An animated attribute reported by the host binding

    Attributes:
        name: Attribute or plug name ("translateX" or "pCube1.translateX")
        curve: Animation curve driving the attribute
        role: Channel role from the binding's attribute metadata, if it knows it
    """
    name: str
    curve: Any
    role: Optional[ChannelRole] = None


class ChannelClassifier:
    """Resolves the channel role of animated attributes

    The role reported by the host binding wins. Otherwise the attribute's
    long or short name is looked up exactly.
    """

    ATTRIBUTE_ROLES = {
        'translateX': ChannelRole.TX, 'tx': ChannelRole.TX,
        'translateY': ChannelRole.TY, 'ty': ChannelRole.TY,
        'translateZ': ChannelRole.TZ, 'tz': ChannelRole.TZ,
        'rotateX': ChannelRole.RX, 'rx': ChannelRole.RX,
        'rotateY': ChannelRole.RY, 'ry': ChannelRole.RY,
        'rotateZ': ChannelRole.RZ, 'rz': ChannelRole.RZ,
        'scaleX': ChannelRole.SX, 'sx': ChannelRole.SX,
        'scaleY': ChannelRole.SY, 'sy': ChannelRole.SY,
        'scaleZ': ChannelRole.SZ, 'sz': ChannelRole.SZ,
        'visibility': ChannelRole.VISIBILITY, 'v': ChannelRole.VISIBILITY,
        'colorR': ChannelRole.COLOR_R, 'cr': ChannelRole.COLOR_R,
        'colorG': ChannelRole.COLOR_G, 'cg': ChannelRole.COLOR_G,
        'colorB': ChannelRole.COLOR_B, 'cb': ChannelRole.COLOR_B,
        'colorA': ChannelRole.COLOR_A, 'ca': ChannelRole.COLOR_A,
        'intensity': ChannelRole.INTENSITY, 'in': ChannelRole.INTENSITY,
        'nearClipPlane': ChannelRole.NEAR_PLANE, 'ncp': ChannelRole.NEAR_PLANE,
        'farClipPlane': ChannelRole.FAR_PLANE, 'fcp': ChannelRole.FAR_PLANE,
        'horizontalFilmAperture': ChannelRole.APERTURE_H, 'hfa': ChannelRole.APERTURE_H,
        'verticalFilmAperture': ChannelRole.APERTURE_V, 'vfa': ChannelRole.APERTURE_V,
        'focalLength': ChannelRole.FOCAL_LENGTH, 'fl': ChannelRole.FOCAL_LENGTH,
        'focusDistance': ChannelRole.FOCUS_DISTANCE, 'fd': ChannelRole.FOCUS_DISTANCE,
    }

    def classify(self, attribute) -> Optional[ChannelRole]:
        """Get the channel role of an attribute

        Args:
            attribute: AnimatedAttribute or plain attribute/plug name

        Returns:
            ChannelRole, or None if the attribute is not a known channel
        """
        if isinstance(attribute, AnimatedAttribute):
            if attribute.role is not None:
                return attribute.role
            name = attribute.name
        else:
            name = attribute

        # plug names carry the node name in front
        attr_name = name.rsplit('.', 1)[-1]
        return self.ATTRIBUTE_ROLES.get(attr_name)

    def collect(self, attributes: Iterable[AnimatedAttribute],
                roles: Optional[Iterable[ChannelRole]] = None) -> Dict[ChannelRole, Any]:
        """Classify animated attributes into a role -> curve mapping

        Args:
            attributes: Animated attributes of a node
            roles: Only keep these roles (all roles if None)

        Returns:
            dict: ChannelRole -> curve, first curve wins for duplicate roles
        """
        wanted = set(roles) if roles is not None else None
        curves = {}
        for attribute in attributes:
            if attribute.curve is None:
                continue
            role = self.classify(attribute)
            if role is None or role in curves:
                continue
            if wanted is not None and role not in wanted:
                continue
            curves[role] = attribute.curve
        return curves
