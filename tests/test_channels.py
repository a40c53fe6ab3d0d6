import unittest

from parameterized import parameterized

from core.channels import TRANSFORM_ROLES, AnimatedAttribute, ChannelClassifier, ChannelRole
from host.memory_scene import MayaAnimCurve


class TestChannelClassifier(unittest.TestCase):
    def setUp(self):
        self.classifier = ChannelClassifier()

    @parameterized.expand(
        [
            ("translateX", ChannelRole.TX),
            ("pCube1.translateX", ChannelRole.TX),
            ("tx", ChannelRole.TX),
            ("pCube1.rz", ChannelRole.RZ),
            ("scaleY", ChannelRole.SY),
            ("visibility", ChannelRole.VISIBILITY),
            ("spotLightShape1.colorA", ChannelRole.COLOR_A),
            ("intensity", ChannelRole.INTENSITY),
            ("cameraShape1.horizontalFilmAperture", ChannelRole.APERTURE_H),
            ("vfa", ChannelRole.APERTURE_V),
            ("fl", ChannelRole.FOCAL_LENGTH),
            ("focusDistance", ChannelRole.FOCUS_DISTANCE),
            ("nearClipPlane", ChannelRole.NEAR_PLANE),
            ("fcp", ChannelRole.FAR_PLANE),
        ]
    )
    def test_known_names(self, name, role):
        self.assertEqual(self.classifier.classify(name), role)

    @parameterized.expand(
        [
            ("myTranslateX",),
            ("translateXY",),
            ("pCube1.blendWeight",),
            ("color",),
        ]
    )
    def test_unknown_names(self, name):
        self.assertIsNone(self.classifier.classify(name))

    def test_metadata_role_wins(self):
        attribute = AnimatedAttribute("light.customBrightness", MayaAnimCurve("c"), ChannelRole.INTENSITY)
        self.assertEqual(self.classifier.classify(attribute), ChannelRole.INTENSITY)

        attribute = AnimatedAttribute("node.translateX", MayaAnimCurve("c"), ChannelRole.TY)
        self.assertEqual(self.classifier.classify(attribute), ChannelRole.TY)

    def test_collect(self):
        tx = MayaAnimCurve("tx", [(0, 1)])
        tx_short = MayaAnimCurve("tx_short", [(0, 2)])
        intensity = MayaAnimCurve("intensity", [(0, 3)])
        attributes = [
            AnimatedAttribute("node.translateX", tx),
            AnimatedAttribute("node.tx", tx_short),
            AnimatedAttribute("node.intensity", intensity),
            AnimatedAttribute("node.unknownAttr", MayaAnimCurve("other", [(0, 4)])),
        ]

        curves = self.classifier.collect(attributes)
        self.assertEqual(set(curves), {ChannelRole.TX, ChannelRole.INTENSITY})
        self.assertIs(curves[ChannelRole.TX], tx)

        curves = self.classifier.collect(attributes, TRANSFORM_ROLES)
        self.assertEqual(list(curves), [ChannelRole.TX])


if __name__ == "__main__":
    unittest.main()
