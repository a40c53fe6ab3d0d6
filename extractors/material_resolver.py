#!/usr/bin/env python3
"""
Material Identity Module
Session-stable integer ids for shader nodes.
"""

from typing import Dict


class MaterialIdentityResolver:
    """Assigns sequential ids to shaders keyed by their persistent UUID

    Ids live as long as the resolver (one extraction session) and are never
    evicted.
    """

    def __init__(self):
        self._ids: Dict[str, int] = {}

    def id_for(self, shader) -> int:
        """Get the id of a shader, allocating one on first lookup

        Args:
            shader: HostShader, or None for an unresolved shader

        Returns:
            int: Material id, -1 for None
        """
        if shader is None:
            return -1
        key = shader.uuid
        material_id = self._ids.get(key)
        if material_id is None:
            material_id = len(self._ids)
            self._ids[key] = material_id
        return material_id

    def reset(self):
        self._ids.clear()

    def __len__(self):
        return len(self._ids)
