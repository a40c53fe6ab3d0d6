#!/usr/bin/env python3
"""
Core Module
Snapshot records, channel roles, math and animation sampling shared by the
host bindings and the extractors.
"""

from .animation_sampler import AnimationSampler
from .channels import AnimatedAttribute, ChannelClassifier, ChannelRole
from .math_utils import RotationOrder
from .scene_data import (
    AnimationBlock,
    AnimationKind,
    BlendShapeData,
    BlendShapeFrame,
    BoneData,
    CameraAnimation,
    CameraRecord,
    LightAnimation,
    LightRecord,
    LightType,
    MaterialRecord,
    MeshFlags,
    MeshRecord,
    RefineSettings,
    Sample,
    SceneSnapshot,
    TransformAnimation,
    TransformRecord,
)
from .settings import SyncSettings

__all__ = [
    'AnimationSampler',
    'AnimatedAttribute',
    'ChannelClassifier',
    'ChannelRole',
    'RotationOrder',
    'AnimationBlock',
    'AnimationKind',
    'BlendShapeData',
    'BlendShapeFrame',
    'BoneData',
    'CameraAnimation',
    'CameraRecord',
    'LightAnimation',
    'LightRecord',
    'LightType',
    'MaterialRecord',
    'MeshFlags',
    'MeshRecord',
    'RefineSettings',
    'Sample',
    'SceneSnapshot',
    'TransformAnimation',
    'TransformRecord',
    'SyncSettings',
]
