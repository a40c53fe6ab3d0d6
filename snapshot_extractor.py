#!/usr/bin/env python3
"""
Scene Snapshot Extractor - Main Orchestrator Module
Coordinates deferred extraction of scene records using the extractors.

The traversal/session layer creates empty records, requests their extraction
while walking the scene and then runs the deferred work in one pass. The
resulting SceneSnapshot references every record handed in, ready to be
serialized by the consumer.
"""

import logging

from core.scene_data import SceneSnapshot
from core.settings import SyncSettings
from extractors import (
    CameraExtractor,
    ExtractionKind,
    ExtractionTask,
    ExtractionTaskQueue,
    LightExtractor,
    MaterialExtractor,
    MaterialIdentityResolver,
    MeshExtractor,
    TransformExtractor,
)

logger = logging.getLogger(__name__)


class SnapshotExtractor:
    """Scene snapshot extractor (orchestrator/facade)

    This class coordinates one extraction session:
    1. Record extraction requests (extract_transform/camera/light/mesh)
    2. Run them in request order (run_deferred_extraction)
    3. Resolve shaders referenced by mesh material ids (extract_materials)

    Material ids are stable for the lifetime of the extractor.
    """

    def __init__(self, settings=None, progress_callback=None):
        """Initialize extractor

        Args:
            settings: SyncSettings (defaults when None)
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.settings = settings or SyncSettings()
        self.progress_callback = progress_callback
        self.material_resolver = MaterialIdentityResolver()

        common = dict(progress_callback=progress_callback)
        self.transform_extractor = TransformExtractor(self.settings, **common)
        self.camera_extractor = CameraExtractor(self.settings, **common)
        self.light_extractor = LightExtractor(self.settings, **common)
        self.mesh_extractor = MeshExtractor(self.settings, self.material_resolver, **common)
        self.material_extractor = MaterialExtractor(self.material_resolver)

        self.queue = ExtractionTaskQueue({
            ExtractionKind.TRANSFORM: self.transform_extractor.extract,
            ExtractionKind.CAMERA: self.camera_extractor.extract,
            ExtractionKind.LIGHT: self.light_extractor.extract,
            ExtractionKind.MESH: self.mesh_extractor.extract,
        })
        self.snapshot = SceneSnapshot()

    def log(self, message):
        """Send progress updates to callback"""
        if self.progress_callback:
            self.progress_callback(message)
        logger.info(message)

    def _defer(self, kind, dst, node):
        self.queue.defer(ExtractionTask(kind, dst, node))
        self.snapshot.add(dst)

    def extract_transform(self, dst, node):
        """Request extraction of a TransformRecord, returns immediately"""
        self._defer(ExtractionKind.TRANSFORM, dst, node)

    def extract_camera(self, dst, node):
        """Request extraction of a CameraRecord, returns immediately"""
        self._defer(ExtractionKind.CAMERA, dst, node)

    def extract_light(self, dst, node):
        """Request extraction of a LightRecord, returns immediately"""
        self._defer(ExtractionKind.LIGHT, dst, node)

    def extract_mesh(self, dst, node):
        """Request extraction of a MeshRecord, returns immediately"""
        self._defer(ExtractionKind.MESH, dst, node)

    def run_deferred_extraction(self) -> SceneSnapshot:
        """Run every pending request

        Returns:
            SceneSnapshot: Snapshot of the records requested so far
        """
        pending = len(self.queue)
        self.log(f"Extracting {pending} records...")
        failures = self.queue.run_all()
        if failures:
            logger.warning("%d of %d extractions failed", failures, pending)
        self.log(f"Extracted {pending - failures}/{pending} records")
        return self.snapshot

    def extract_materials(self, shaders):
        """Build material records for shader nodes

        Args:
            shaders: HostShader nodes supplied by the traversal layer

        Returns:
            list: MaterialRecords added to the snapshot
        """
        materials = self.material_extractor.extract_all(shaders)
        for material in materials:
            self.snapshot.add(material)
        self.log(f"Extracted {len(materials)} materials")
        return materials

    def reset(self):
        """Start a new snapshot, keeping material ids

        Tasks deferred for the previous snapshot are dropped unrun.
        """
        dropped = self.queue.clear()
        if dropped:
            logger.warning("Reset dropped %d pending extraction tasks", dropped)
        self.snapshot = SceneSnapshot()
