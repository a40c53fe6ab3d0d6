#!/usr/bin/env python3
"""
Sync Settings Module
Immutable configuration consumed by every extractor.

Settings are passed explicitly into the extractors; nothing reads them from
module-level state.
"""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class SyncSettings:
    """Flags controlling what the extraction pipeline reads from the host

    Attributes:
        sync_animations: Sample animation curves into animation blocks
        sync_normals: Extract face-varying normals
        sync_uvs: Extract the first UV set
        sync_colors: Extract the first vertex color set
        sync_blendshapes: Extract blend shape targets (and read the original mesh)
        sync_bones: Extract skin weights and bind poses (and read the original mesh)
        apply_tweak: Add manual tweak offsets on top of extracted points/UVs
        sample_animation: Sample at a fixed rate instead of at native key times
        animation_sps: Samples per second used when sample_animation is set
    """
    sync_animations: bool = True
    sync_normals: bool = True
    sync_uvs: bool = True
    sync_colors: bool = True
    sync_blendshapes: bool = True
    sync_bones: bool = True
    apply_tweak: bool = True
    sample_animation: bool = False
    animation_sps: int = 30

    def __post_init__(self):
        if self.animation_sps < 0:
            raise ValueError(f"animation_sps must be >= 0, got {self.animation_sps}")
        if self.sample_animation and self.animation_sps == 0:
            raise ValueError("sample_animation requires animation_sps > 0")

    @property
    def samples_per_second(self) -> int:
        """Sampling rate handed to the animation sampler (0 = native key times)"""
        return self.animation_sps if self.sample_animation else 0

    def with_overrides(self, **kwargs) -> 'SyncSettings':
        """Return a copy with the given fields replaced"""
        return replace(self, **kwargs)
