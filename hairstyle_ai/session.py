"""One detection cycle: detect -> classify -> recommend.

Nothing is carried from one cycle to the next. The same face may come out
with a different label on the next frame if its box jitters; that is left
as is.
"""
import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from . import suggester
from .config import Settings
from .detect import FaceDetector, detect_safely
from .errors import ClassificationError
from .face_shape import Classifier, describe, get_classifier
from .hairstyles import HAIRSTYLES
from .schemas import DetectedFace, FaceShapeResult, HairstyleEntry

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Everything a cycle needs, handed in explicitly."""

    detector: FaceDetector
    classifier: Classifier
    policy: str = "filter"
    random_count: int = 2
    no_label_result: str = "empty"
    table: tuple = HAIRSTYLES
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def from_settings(cls, settings: Settings, detector: FaceDetector,
                      rng: Optional[random.Random] = None) -> "Session":
        if settings.heuristic == "landmark_ratio" and not detector.has_landmarks:
            raise ValueError("landmark_ratio heuristic needs a detector that returns landmarks")
        return cls(
            detector=detector,
            classifier=get_classifier(settings.heuristic),
            policy=settings.policy,
            random_count=settings.random_count,
            no_label_result=settings.no_label_result,
            rng=rng or random.Random(),
        )

    def recommend(self, result: Optional[FaceShapeResult]) -> List[HairstyleEntry]:
        return suggester.select(
            result.type if result else None,
            policy=self.policy,
            random_count=self.random_count,
            no_label_result=self.no_label_result,
            table=self.table,
            rng=self.rng,
        )


@dataclass
class CycleResult:
    face: Optional[DetectedFace]
    shape: Optional[FaceShapeResult]
    recommendations: List[HairstyleEntry]

    @property
    def message(self) -> str:
        if self.face is None:
            return describe(None)
        if self.shape is None:
            return "Face detected, but its shape could not be measured."
        return describe(self.shape.type)


def classify_face(session: Session, face: DetectedFace, canvas_width: float) -> Optional[FaceShapeResult]:
    try:
        return session.classifier(face, canvas_width=canvas_width)
    except ClassificationError as e:
        logger.warning("Could not classify face: %s", e)
        return None


def run_cycle(session: Session, frame: Optional[np.ndarray]) -> CycleResult:
    face = detect_safely(session.detector, frame)
    if face is None:
        return CycleResult(face=None, shape=None, recommendations=session.recommend(None))

    shape = classify_face(session, face, canvas_width=frame.shape[1])
    return CycleResult(face=face, shape=shape, recommendations=session.recommend(shape))
