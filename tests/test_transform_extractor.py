import math
import unittest

from parameterized import parameterized

from core.math_utils import RotationOrder, euler_to_quaternion, normalize_quaternion, quaternion_multiply
from core.scene_data import TransformRecord
from extractors.transform_extractor import JointCorrection, TransformExtractor
from tests.scene_testcase import SceneTestCase


class TestTransformExtractor(SceneTestCase):
    def extract(self, node, settings=None):
        dst = TransformRecord()
        TransformExtractor(settings or self.settings).extract(dst, node)
        return dst

    @parameterized.expand([(order,) for order in RotationOrder])
    def test_static_trs(self, order):
        node = self.scene.add_transform(
            "pCube1", translate=(1.0, 2.0, 3.0), rotate=(0.1, 0.2, 0.3), scale=(1.0, 2.0, 3.0),
            rotateOrder=int(order))
        dst = self.extract(node)

        self.assertEqual(dst.path, "/pCube1")
        self.assertArrayAlmostEqual(dst.position, (1.0, 2.0, 3.0))
        self.assertArrayAlmostEqual(dst.rotation, euler_to_quaternion((0.1, 0.2, 0.3), order))
        self.assertArrayAlmostEqual(dst.scale, (1.0, 2.0, 3.0))
        self.assertTrue(dst.visible_hierarchy)
        self.assertIsNone(dst.animation)

    def test_hidden_ancestor(self):
        group = self.scene.add_transform("group1", visibility=False)
        node = self.scene.add_transform("pCube1", group)
        dst = self.extract(node)

        self.assertEqual(dst.path, "/group1/pCube1")
        self.assertFalse(dst.visible_hierarchy)

    def test_translation_animation(self):
        node = self.scene.add_transform("pCube1", translate=(0.0, 2.0, 3.0))
        node.animate("translateX", [(0.0, 0.0), (1.0, 10.0)])
        dst = self.extract(node)

        anim = dst.animation
        self.assertEqual(len(anim.translation), 2)
        self.assertArrayAlmostEqual(anim.translation[0].value, (0.0, 2.0, 3.0))
        self.assertArrayAlmostEqual(anim.translation[1].value, (10.0, 2.0, 3.0))
        self.assertEqual(anim.rotation, [])
        self.assertEqual(anim.scale, [])
        self.assertEqual(anim.visible, [])

    def test_rotation_and_visibility_animation(self):
        node = self.scene.add_transform("pCube1", rotate=(0.0, 0.5, 0.0), rotateOrder=int(RotationOrder.YXZ))
        node.animate("rotateZ", [(0.0, 0.0), (1.0, 1.0), (2.0, 0.5)])
        node.animate("visibility", [(0.0, 1.0), (2.0, 0.0)])
        dst = self.extract(node)

        anim = dst.animation
        self.assertEqual(len(anim.rotation), 3)
        self.assertIncreasingTimes(anim.rotation)
        self.assertArrayAlmostEqual(anim.rotation[1].value, euler_to_quaternion((0.0, 0.5, 1.0), RotationOrder.YXZ))
        self.assertEqual([s.value for s in anim.visible], [True, False])

    def test_fixed_rate_animation(self):
        node = self.scene.add_transform("pCube1")
        node.animate("sx", [(0.0, 1.0), (2.0, 3.0)])
        settings = self.settings.with_overrides(sample_animation=True, animation_sps=2)
        dst = self.extract(node, settings)

        self.assertEqual([s.time for s in dst.animation.scale], [0.0, 0.5, 1.0, 1.5, 2.0])
        self.assertArrayAlmostEqual(dst.animation.scale[1].value, (1.5, 1.0, 1.0))

    def test_unrelated_animation_is_discarded(self):
        node = self.scene.add_transform("pCube1")
        node.animate("blendWeight", [(0.0, 0.0), (1.0, 1.0)])
        dst = self.extract(node)
        self.assertIsNone(dst.animation)

    def test_animation_sync_disabled(self):
        node = self.scene.add_transform("pCube1")
        node.animate("translateX", [(0.0, 0.0), (1.0, 10.0)])
        dst = self.extract(node, self.settings.with_overrides(sync_animations=False))
        self.assertIsNone(dst.animation)


class TestJoints(SceneTestCase):
    def extract(self, node):
        dst = TransformRecord()
        TransformExtractor(self.settings).extract(dst, node)
        return dst

    def test_orientation_composition(self):
        joint = self.scene.add_joint(
            "hip", rotate=(0.0, 0.2, 0.0), rotateAxis=(0.3, 0.0, 0.0), jointOrient=(0.0, 0.0, math.pi / 2))
        dst = self.extract(joint)

        so = euler_to_quaternion((0.3, 0.0, 0.0))
        r = euler_to_quaternion((0.0, 0.2, 0.0))
        jo = euler_to_quaternion((0.0, 0.0, math.pi / 2))
        expected = normalize_quaternion(quaternion_multiply(quaternion_multiply(so, r), jo))
        self.assertArrayAlmostEqual(dst.rotation, expected)

    @parameterized.expand(
        [
            ("compensated", True, (2.0, 0.0, 3.0), (1.0, 4.0, 2.0)),
            ("zero_divisor_kept", True, (0.0, 0.0, 0.0), (2.0, 4.0, 6.0)),
            ("not_compensated", False, (2.0, 0.0, 3.0), (2.0, 4.0, 6.0)),
        ]
    )
    def test_segment_scale_compensation(self, _, compensate, inverse_scale, expected):
        joint = self.scene.add_joint(
            "knee", scale=(2.0, 4.0, 6.0), segmentScaleCompensate=compensate, inverseScale=inverse_scale)
        dst = self.extract(joint)
        self.assertArrayAlmostEqual(dst.scale, expected)

    def test_plain_transform_has_no_correction(self):
        node = self.scene.add_transform("pCube1", jointOrient=(1.0, 0.0, 0.0))
        self.assertIsNone(TransformExtractor(self.settings).get_joint_correction(node))

    def test_corrections_applied_per_sample(self):
        joint = self.scene.add_joint(
            "hip", jointOrient=(0.0, math.pi / 2, 0.0), scale=(2.0, 2.0, 2.0), inverseScale=(2.0, 1.0, 1.0))
        joint.animate("rotateX", [(0.0, 0.0), (1.0, 0.4)])
        joint.animate("scaleY", [(0.0, 2.0), (1.0, 4.0)])
        dst = self.extract(joint)

        jo = euler_to_quaternion((0.0, math.pi / 2, 0.0))
        for sample, angle in zip(dst.animation.rotation, (0.0, 0.4)):
            expected = normalize_quaternion(quaternion_multiply(euler_to_quaternion((angle, 0.0, 0.0)), jo))
            self.assertArrayAlmostEqual(sample.value, expected)
        self.assertArrayAlmostEqual(dst.animation.scale[1].value, (1.0, 4.0, 2.0))


class TestJointCorrection(unittest.TestCase):
    def test_identity(self):
        correction = JointCorrection((0.0, 0.0, 0.0, 1.0), (0.0, 0.0, 0.0, 1.0))
        q = euler_to_quaternion((0.1, 0.2, 0.3))
        self.assertTrue((abs(correction.rotation(q) - q) < 1e-9).all())
        self.assertEqual(correction.scale((1.0, 2.0, 3.0)).tolist(), [1.0, 2.0, 3.0])


if __name__ == "__main__":
    unittest.main()
