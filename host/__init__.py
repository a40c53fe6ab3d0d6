#!/usr/bin/env python3
"""
Host Module
Scene-graph accessors consumed by the extractors, plus an in-memory
Maya-like scene implementing them.
"""

from .base_host import (
    BlendShapeChannel,
    BlendShapeTargetItem,
    HostAnimCurve,
    HostBlendShape,
    HostCamera,
    HostDeformer,
    HostMesh,
    HostNode,
    HostShader,
    HostShadingGroup,
    HostSkinCluster,
    HostTransform,
    HostTweak,
    Polygon,
)
from .memory_scene import (
    MayaAnimCurve,
    MayaBlendShape,
    MayaCamera,
    MayaLight,
    MayaMesh,
    MayaNode,
    MayaScene,
    MayaShader,
    MayaShadingGroup,
    MayaSkinCluster,
    MayaTweak,
)

__all__ = [
    'BlendShapeChannel',
    'BlendShapeTargetItem',
    'HostAnimCurve',
    'HostBlendShape',
    'HostCamera',
    'HostDeformer',
    'HostMesh',
    'HostNode',
    'HostShader',
    'HostShadingGroup',
    'HostSkinCluster',
    'HostTransform',
    'HostTweak',
    'Polygon',
    'MayaAnimCurve',
    'MayaBlendShape',
    'MayaCamera',
    'MayaLight',
    'MayaMesh',
    'MayaNode',
    'MayaScene',
    'MayaShader',
    'MayaShadingGroup',
    'MayaSkinCluster',
    'MayaTweak',
]
