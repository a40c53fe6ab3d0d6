import math
import unittest

from parameterized import parameterized

from core.animation_sampler import AnimationSampler, scale_samples
from core.math_utils import RotationOrder, compute_fov, euler_to_quaternion
from core.scene_data import Sample
from core.settings import SyncSettings
from host.memory_scene import MayaAnimCurve
from tests.scene_testcase import SceneTestCase


def curve(*keys):
    return MayaAnimCurve("curve", keys)


class TestTimeSamples(SceneTestCase):
    def test_native_key_union(self):
        sampler = AnimationSampler(0)
        times = sampler.build_time_samples([curve((0, 0), (1, 1)), curve((1, 5), (2.5, 0)), None])
        self.assertEqual(times, [0.0, 1.0, 2.5])

    @parameterized.expand(
        [
            ("two_seconds_at_2", 0.0, 2.0, 2, 5),
            ("fractional_end", 0.0, 2.5, 1, 4),
            ("offset_start", 1.0, 3.0, 4, 9),
            ("single_key", 1.0, 1.0, 30, 1),
        ]
    )
    def test_fixed_rate(self, _, start, end, rate, count):
        sampler = AnimationSampler(rate)
        keys = [(start, 0.0)] if start == end else [(start, 0.0), (end, 1.0)]
        times = sampler.build_time_samples([curve(*keys)])

        self.assertEqual(len(times), count)
        self.assertEqual(len(times), math.ceil((end - start) * rate) + 1)
        self.assertAlmostEqual(times[0], start)
        self.assertAlmostEqual(times[-1], end)
        self.assertTrue(all(a < b for a, b in zip(times, times[1:])))

    def test_no_keys(self):
        self.assertEqual(AnimationSampler(0).build_time_samples([None, curve()]), [])

    def test_negative_rate(self):
        with self.assertRaises(ValueError):
            AnimationSampler(-1)

    def test_from_settings(self):
        self.assertEqual(AnimationSampler.from_settings(SyncSettings()).samples_per_second, 0)
        settings = SyncSettings(sample_animation=True, animation_sps=24)
        self.assertEqual(AnimationSampler.from_settings(settings).samples_per_second, 24)


class TestChannelSampling(SceneTestCase):
    def setUp(self):
        super().setUp()
        self.sampler = AnimationSampler(0)

    def test_sample_float(self):
        samples = self.sampler.sample_float(curve((0, 1), (2, 3)))
        self.assertEqual([(s.time, s.value) for s in samples], [(0.0, 1.0), (2.0, 3.0)])
        self.assertEqual(self.sampler.sample_float(None), [])

    def test_missing_components_use_static_value(self):
        samples = self.sampler.sample_float3([None, curve((0, 1), (1, 2)), None], (7.0, 8.0, 9.0))
        self.assertEqual(len(samples), 2)
        self.assertArrayAlmostEqual(samples[0].value, (7.0, 1.0, 9.0))
        self.assertArrayAlmostEqual(samples[1].value, (7.0, 2.0, 9.0))

    def test_components_share_time_base(self):
        samples = self.sampler.sample_float4(
            [curve((0, 0), (1, 1)), None, curve((0.5, 0), (2, 1)), None], (0.0, 0.5, 0.0, 1.0))
        self.assertEqual([s.time for s in samples], [0.0, 0.5, 1.0, 2.0])
        self.assertIncreasingTimes(samples)

    def test_sample_bool(self):
        samples = self.sampler.sample_bool(curve((0, 1), (1, 0)))
        self.assertEqual([s.value for s in samples], [True, False])
        self.assertEqual(self.sampler.sample_bool(None), [])

    def test_sample_rotation(self):
        samples = self.sampler.sample_rotation(
            [curve((0, 0), (1, 1)), None, None], (0.0, 0.5, 0.0), RotationOrder.ZYX)
        self.assertEqual(len(samples), 2)
        self.assertArrayAlmostEqual(samples[1].value, euler_to_quaternion((1.0, 0.5, 0.0), RotationOrder.ZYX))

        self.assertEqual(self.sampler.sample_rotation([None, None, None], (0.0, 0.0, 0.0)), [])

    def test_sample_fov_static_aperture(self):
        focal = curve((0, 12), (1, 24), (2, 36), (3, 48), (4, 60))
        samples = self.sampler.sample_fov(None, focal, 24.0, 35.0)

        self.assertEqual(len(samples), 5)
        for sample, f in zip(samples, (12, 24, 36, 48, 60)):
            self.assertAlmostEqual(sample.value, compute_fov(24.0, f), places=5)

    def test_sample_fov_aperture_in_inches(self):
        aperture = curve((0, 1.0), (1, 4.0))
        samples = self.sampler.sample_fov(aperture, None, 0.0, 50.8)
        self.assertAlmostEqual(samples[0].value, compute_fov(25.4, 50.8), places=5)
        self.assertAlmostEqual(samples[1].value, 90.0, places=5)

    def test_sample_fov_no_curves(self):
        self.assertEqual(self.sampler.sample_fov(None, None, 24.0, 35.0), [])

    def test_scale_samples(self):
        samples = scale_samples([Sample(0.0, 1.0), Sample(1.0, 2.0)], 25.4)
        self.assertEqual([s.value for s in samples], [25.4, 50.8])


class TestSyncSettings(unittest.TestCase):
    def test_defaults(self):
        settings = SyncSettings()
        self.assertTrue(settings.sync_animations)
        self.assertEqual(settings.samples_per_second, 0)

    def test_with_overrides(self):
        settings = SyncSettings().with_overrides(sample_animation=True, animation_sps=10)
        self.assertEqual(settings.samples_per_second, 10)

    @parameterized.expand(
        [
            ("negative", dict(animation_sps=-1)),
            ("sampling_without_rate", dict(sample_animation=True, animation_sps=0)),
        ]
    )
    def test_invalid(self, _, kwargs):
        with self.assertRaises(ValueError):
            SyncSettings(**kwargs)


if __name__ == "__main__":
    unittest.main()
