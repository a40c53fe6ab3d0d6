#!/usr/bin/env python3
"""
Extraction Task Queue Module
Deferred extraction: requests are recorded while the scene is traversed and
run together afterwards.
"""

import logging
import traceback
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class ExtractionKind(Enum):
    """Routine a deferred task is dispatched to"""
    TRANSFORM = "transform"
    CAMERA = "camera"
    LIGHT = "light"
    MESH = "mesh"


@dataclass(frozen=True, eq=False)
class ExtractionTask:
    """One deferred extraction request

    Attributes:
        kind: ExtractionKind selecting the routine
        record: Caller-owned record to populate
        node: Host node to read from
    """
    kind: ExtractionKind
    record: Any
    node: Any


Handler = Callable[[Any, Any], None]


class ExtractionTaskQueue:
    """Ordered queue of ExtractionTasks

    Tasks run once, in the order they were deferred. A task that raises is
    logged and skipped; its record keeps whatever was written before the
    failure.
    """

    def __init__(self, handlers: Optional[Dict[ExtractionKind, Handler]] = None):
        self.handlers: Dict[ExtractionKind, Handler] = dict(handlers or {})
        self.tasks: List[ExtractionTask] = []

    def register(self, kind: ExtractionKind, handler: Handler):
        self.handlers[kind] = handler

    def defer(self, task: ExtractionTask):
        if task.kind not in self.handlers:
            raise ValueError(f"No extraction routine registered for {task.kind}")
        self.tasks.append(task)

    def run_all(self) -> int:
        """Run and clear every pending task

        Returns:
            int: Number of tasks that failed
        """
        tasks, self.tasks = self.tasks, []
        failures = 0
        for task in tasks:
            try:
                self.handlers[task.kind](task.record, task.node)
            except Exception as e:
                failures += 1
                logger.error("%s extraction failed for %r: %s", task.kind.value, task.node, e)
                logger.error(traceback.format_exc())
        return failures

    def clear(self) -> int:
        """Drop every pending task without running it

        Returns:
            int: Number of tasks dropped
        """
        dropped = len(self.tasks)
        self.tasks = []
        return dropped

    def __len__(self):
        return len(self.tasks)
