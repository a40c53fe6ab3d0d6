#!/usr/bin/env python3
"""
Extractors Module
Populate snapshot records from host scene nodes.
"""

from .base_extractor import BaseExtractor
from .camera_extractor import CameraExtractor
from .light_extractor import LightExtractor
from .material_extractor import MaterialExtractor
from .material_resolver import MaterialIdentityResolver
from .mesh_extractor import MeshExtractor
from .task_queue import ExtractionKind, ExtractionTask, ExtractionTaskQueue
from .transform_extractor import TransformExtractor

__all__ = [
    'BaseExtractor',
    'CameraExtractor',
    'LightExtractor',
    'MaterialExtractor',
    'MaterialIdentityResolver',
    'MeshExtractor',
    'ExtractionKind',
    'ExtractionTask',
    'ExtractionTaskQueue',
    'TransformExtractor',
]
