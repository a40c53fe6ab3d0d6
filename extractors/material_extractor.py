#!/usr/bin/env python3
"""
Material Extractor Module
Material records for the shaders referenced by mesh material ids.
"""

from typing import Iterable, List

from core.scene_data import MaterialRecord


class MaterialExtractor:
    """Builds MaterialRecords sharing ids with MeshRecord.material_ids"""

    def __init__(self, resolver):
        """Initialize extractor

        Args:
            resolver: MaterialIdentityResolver of the session
        """
        self.resolver = resolver

    def extract(self, dst: MaterialRecord, shader) -> MaterialRecord:
        dst.id = self.resolver.id_for(shader)
        dst.name = shader.get_name()
        dst.color = shader.get_color()
        return dst

    def extract_all(self, shaders: Iterable) -> List[MaterialRecord]:
        """Build one record per shader, in the given order

        Args:
            shaders: HostShader nodes supplied by the traversal layer

        Returns:
            list: MaterialRecords
        """
        return [self.extract(MaterialRecord(), shader) for shader in shaders]
