#!/usr/bin/env python3
"""
Animation Sampler Module
Turns host animation curves into time-ordered channel samples.

Two sampling policies are supported:
- samples_per_second == 0: sample at every native key time of the curves
  involved (deduplicated, sorted)
- samples_per_second == N: sample every 1/N seconds across the union of the
  curves' key ranges, the last sample clamped to the range end
"""

import math
from typing import List, Sequence

import numpy as np

from .math_utils import INCH_TO_MILLIMETER, RotationOrder, compute_fov, euler_to_quaternion
from .scene_data import Sample


class AnimationSampler:
    """Samples curves on a common time base

    Curves only need `evaluate(time) -> float` and `key_times() -> sequence`.
    Missing curves (None) fall back to the static value passed by the caller.
    """

    def __init__(self, samples_per_second: int = 0):
        """Initialize sampler

        Args:
            samples_per_second: 0 for native key times, N for fixed-rate sampling
        """
        if samples_per_second < 0:
            raise ValueError(f"samples_per_second must be >= 0, got {samples_per_second}")
        self.samples_per_second = samples_per_second

    @classmethod
    def from_settings(cls, settings) -> 'AnimationSampler':
        return cls(settings.samples_per_second)

    def build_time_samples(self, curves: Sequence) -> List[float]:
        """Build the sample times for a group of curves

        Args:
            curves: Curves, None entries are ignored

        Returns:
            list: Strictly increasing times in seconds (empty if no curve has keys)
        """
        key_sets = [np.asarray(c.key_times(), dtype=np.float64) for c in curves if c is not None]
        key_sets = [keys for keys in key_sets if len(keys) > 0]
        if not key_sets:
            return []

        if self.samples_per_second == 0:
            return np.unique(np.concatenate(key_sets)).tolist()

        start = min(float(keys.min()) for keys in key_sets)
        end = max(float(keys.max()) for keys in key_sets)
        interval = 1.0 / self.samples_per_second
        # small epsilon keeps an exact multiple from producing a duplicate end sample
        steps = int(math.ceil((end - start) * self.samples_per_second - 1e-9))
        times = [start + interval * i for i in range(max(steps, 0))]
        times.append(end)
        return times

    def sample_float(self, curve) -> List[Sample]:
        """Samples of a single curve, empty when the channel is not animated"""
        if curve is None:
            return []
        return [Sample(t, float(curve.evaluate(t))) for t in self.build_time_samples([curve])]

    def sample_components(self, curves: Sequence, defaults: Sequence[float]) -> List[Sample]:
        """Sample a vector channel whose components are independent curves

        Args:
            curves: One curve (or None) per component
            defaults: Static value per component, used where the curve is None

        Returns:
            list: Samples with numpy vector values, empty if every curve is None
        """
        if all(c is None for c in curves):
            return []
        samples = []
        for t in self.build_time_samples(curves):
            value = np.array([
                float(c.evaluate(t)) if c is not None else float(d)
                for c, d in zip(curves, defaults)
            ])
            samples.append(Sample(t, value))
        return samples

    def sample_float3(self, curves: Sequence, defaults: Sequence[float]) -> List[Sample]:
        return self.sample_components(list(curves)[:3], list(defaults)[:3])

    def sample_float4(self, curves: Sequence, defaults: Sequence[float]) -> List[Sample]:
        return self.sample_components(list(curves)[:4], list(defaults)[:4])

    def sample_bool(self, curve) -> List[Sample]:
        if curve is None:
            return []
        return [Sample(t, float(curve.evaluate(t)) > 0.5) for t in self.build_time_samples([curve])]

    def sample_rotation(self, curves: Sequence, static_euler: Sequence[float],
                        rotation_order=RotationOrder.XYZ) -> List[Sample]:
        """Sample per-axis angle curves and convert each triple to a quaternion

        Args:
            curves: (rx, ry, rz) curves in radians, None where not animated
            static_euler: Static Euler angles used for missing axes
            rotation_order: RotationOrder of the node

        Returns:
            list: Quaternion samples, empty if no axis is animated
        """
        euler = self.sample_float3(curves, static_euler)
        return [Sample(s.time, euler_to_quaternion(s.value, rotation_order)) for s in euler]

    def sample_fov(self, aperture_curve, focal_length_curve,
                   static_aperture_mm: float, static_focal_length: float) -> List[Sample]:
        """Derive the horizontal field of view channel

        Args:
            aperture_curve: Horizontal film aperture curve (inches), or None
            focal_length_curve: Focal length curve (mm), or None
            static_aperture_mm: Static horizontal aperture in mm
            static_focal_length: Static focal length in mm

        Returns:
            list: FOV samples in degrees, empty if neither curve exists
        """
        if aperture_curve is None and focal_length_curve is None:
            return []
        samples = []
        for t in self.build_time_samples([aperture_curve, focal_length_curve]):
            if aperture_curve is not None:
                aperture = float(aperture_curve.evaluate(t)) * INCH_TO_MILLIMETER
            else:
                aperture = static_aperture_mm
            if focal_length_curve is not None:
                focal_length = float(focal_length_curve.evaluate(t))
            else:
                focal_length = static_focal_length
            samples.append(Sample(t, compute_fov(aperture, focal_length)))
        return samples


def scale_samples(samples: List[Sample], factor: float) -> List[Sample]:
    """Multiply every sample value in place (unit conversion)"""
    for sample in samples:
        sample.value = sample.value * factor
    return samples
