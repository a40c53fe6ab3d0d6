from core.math_utils import compute_fov
from core.scene_data import CameraRecord, LightRecord, LightType, MeshRecord, TransformRecord
from host.memory_scene import MayaShader, MayaShadingGroup
from snapshot_extractor import SnapshotExtractor
from tests.scene_testcase import SceneTestCase

QUAD_POINTS = [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0), (0.0, 1.0, 0.0)]


class TestSnapshotExtractor(SceneTestCase):
    def setUp(self):
        super().setUp()
        self.messages = []
        self.extractor = SnapshotExtractor(self.settings, progress_callback=self.messages.append)

        self.group = self.scene.add_transform("group1", translate=(0.0, 1.0, 0.0))
        self.camera, _ = self.scene.add_camera(
            "camera1", self.group, horizontalFilmAperture=24.0 / 25.4, focalLength=24.0)
        self.light, _ = self.scene.add_light("key", "spotLight", intensity=2.0)
        self.mesh, self.mesh_shape = self.scene.add_mesh("plane1", QUAD_POINTS, [[0, 1, 2], [0, 2, 3]])
        self.shader = MayaShader("lambert2", (0.2, 0.4, 0.6))
        self.mesh_shape.assign_shading_group(MayaShadingGroup("lambert2SG", self.shader), [1])

    def test_deferred_extraction(self):
        transform, camera, light, mesh = TransformRecord(), CameraRecord(), LightRecord(), MeshRecord()
        self.extractor.extract_transform(transform, self.group)
        self.extractor.extract_camera(camera, self.camera)
        self.extractor.extract_light(light, self.light)
        self.extractor.extract_mesh(mesh, self.mesh)

        self.assertEqual(mesh.path, "")
        self.assertEqual(len(self.extractor.queue), 4)

        snapshot = self.extractor.run_deferred_extraction()
        self.assertEqual(len(self.extractor.queue), 0)
        self.assertIs(snapshot.get_record_by_path("/group1"), transform)
        self.assertIs(snapshot.get_record_by_path("/group1/camera1"), camera)
        self.assertIs(snapshot.get_record_by_path("/key"), light)
        self.assertIs(snapshot.get_record_by_path("/plane1"), mesh)
        self.assertEqual(len(snapshot.all_records()), 4)

        self.assertAlmostEqual(camera.fov, compute_fov(24.0, 24.0), places=5)
        self.assertEqual(light.light_type, LightType.SPOT)
        self.assertEqual(mesh.material_ids.tolist(), [-1, 0])
        self.assertTrue(self.messages)

    def test_material_ids_shared_with_meshes(self):
        mesh = MeshRecord()
        self.extractor.extract_mesh(mesh, self.mesh)
        snapshot = self.extractor.run_deferred_extraction()

        other = MayaShader("unused")
        materials = self.extractor.extract_materials([other, self.shader])
        self.assertEqual(len(snapshot.materials), 2)

        material = snapshot.get_material_by_id(mesh.material_ids[1])
        self.assertIs(material, materials[1])
        self.assertEqual(material.name, "lambert2")
        self.assertEqual(materials[0].id, 1)

    def test_failed_record_does_not_stop_session(self):
        broken, mesh = TransformRecord(), MeshRecord()
        self.extractor.extract_transform(broken, None)
        self.extractor.extract_mesh(mesh, self.mesh)

        with self.assertLogs("extractors.task_queue", level="ERROR"):
            self.extractor.run_deferred_extraction()
        self.assertEqual(broken.path, "")
        self.assertEqual(mesh.path, "/plane1")
        self.assertEqual(len(mesh.points), 4)

    def test_reset_keeps_material_ids(self):
        first = MeshRecord()
        self.extractor.extract_mesh(first, self.mesh)
        self.extractor.run_deferred_extraction()
        self.extractor.reset()

        second = MeshRecord()
        self.extractor.extract_mesh(second, self.mesh)
        snapshot = self.extractor.run_deferred_extraction()
        self.assertEqual(len(snapshot.meshes), 1)
        self.assertIs(snapshot.meshes[0], second)
        self.assertEqual(second.material_ids.tolist(), first.material_ids.tolist())

    def test_reset_drops_pending_tasks(self):
        stale, fresh = MeshRecord(), TransformRecord()
        self.extractor.extract_mesh(stale, self.mesh)
        with self.assertLogs("snapshot_extractor", level="WARNING"):
            self.extractor.reset()
        self.assertEqual(len(self.extractor.queue), 0)

        self.extractor.extract_transform(fresh, self.group)
        snapshot = self.extractor.run_deferred_extraction()
        self.assertEqual(stale.path, "")
        self.assertIsNone(snapshot.get_record_by_path("/plane1"))
        self.assertIs(snapshot.get_record_by_path("/group1"), fresh)
        self.assertEqual(len(snapshot.all_records()), 1)

    def test_snapshot_rejects_foreign_objects(self):
        with self.assertRaises(TypeError):
            self.extractor.snapshot.add(object())
