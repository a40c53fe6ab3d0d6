#!/usr/bin/env python3
"""
Base Extractor Module
Abstract base class ensuring a consistent interface across all extractors.

Extractors receive the immutable SyncSettings explicitly and populate a
caller-owned record in place.
"""

import logging
from abc import ABC, abstractmethod

from core.animation_sampler import AnimationSampler
from core.channels import ChannelClassifier

logger = logging.getLogger(__name__)


class BaseExtractor(ABC):
    """Abstract base class for all record extractors

    Key principles:
    - Records are populated in place, never replaced
    - Missing or mismatched host data degrades to a partial record
    - Settings are read-only during extraction
    """

    def __init__(self, settings, classifier=None, sampler=None, progress_callback=None):
        """Initialize extractor

        Args:
            settings: SyncSettings for this session
            classifier: ChannelClassifier (a default one when None)
            sampler: AnimationSampler (built from settings when None)
            progress_callback: Optional function to call for progress updates
                              Signature: callback(message: str) -> None
        """
        self.settings = settings
        self.classifier = classifier or ChannelClassifier()
        self.sampler = sampler or AnimationSampler.from_settings(settings)
        self.progress_callback = progress_callback

    def log(self, message):
        """Send progress/status message

        Args:
            message: Message to log
        """
        if self.progress_callback:
            self.progress_callback(message)
        logger.debug(message)

    @abstractmethod
    def extract(self, dst, node):
        """Populate dst from a host node

        Args:
            dst: Record to fill in place
            node: Host transform node
        """
        pass

    @abstractmethod
    def get_record_name(self):
        """Return human-readable record kind (e.g., "Mesh")"""
        pass
