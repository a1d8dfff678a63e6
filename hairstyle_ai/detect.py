# hairstyle_ai/detect.py
from __future__ import annotations

import logging
import threading
from typing import List, Optional, Protocol, Sequence, Tuple, runtime_checkable

import cv2
import numpy as np

from .errors import ModelUnavailableError
from .schemas import DetectedFace, Point

# MediaPipe
try:
    import mediapipe as mp
except Exception:
    mp = None

logger = logging.getLogger(__name__)

# FaceMesh (468) indices tracing the jaw the way points 0..16 of the
# 68-point scheme do: left ear, down to the chin (152), up to the right ear.
JAW_OUTLINE = [127, 234, 93, 132, 58, 172, 136, 150, 152,
               379, 365, 397, 288, 361, 323, 454, 356]


@runtime_checkable
class FaceDetector(Protocol):
    """Anything that turns a BGR frame into at most one face."""

    has_landmarks: bool

    def detect(self, frame: np.ndarray) -> Optional[DetectedFace]:
        ...

    def close(self) -> None:
        ...


def decode_image_bytes(b: bytes) -> Optional[np.ndarray]:
    if not b:
        return None
    arr = np.frombuffer(b, dtype=np.uint8)
    return cv2.imdecode(arr, cv2.IMREAD_COLOR)


def _clamp(v: float, hi: float) -> float:
    return max(0.0, min(float(v), float(hi)))


def face_from_relative_box(xmin: float, ymin: float, w: float, h: float,
                           img_shape: Tuple[int, ...]) -> DetectedFace:
    """Normalized box (as returned by the detector) -> pixel DetectedFace."""
    ih, iw = img_shape[:2]
    x0, y0 = _clamp(xmin * iw, iw), _clamp(ymin * ih, ih)
    x1, y1 = _clamp((xmin + w) * iw, iw), _clamp((ymin + h) * ih, ih)
    return DetectedFace(top_left=Point(x=x0, y=y0), bottom_right=Point(x=x1, y=y1))


def face_from_landmarks(lm: Sequence[Tuple[float, float]],
                        img_shape: Tuple[int, ...]) -> DetectedFace:
    """
    lm: normalized (x, y) face mesh landmarks.
    The box is the extent of all landmarks; the jaw outline is picked out of
    them with JAW_OUTLINE.
    """
    ih, iw = img_shape[:2]
    xs = [p[0] * iw for p in lm]
    ys = [p[1] * ih for p in lm]
    jaw = [Point(x=lm[i][0] * iw, y=lm[i][1] * ih) for i in JAW_OUTLINE]
    return DetectedFace(
        top_left=Point(x=_clamp(min(xs), iw), y=_clamp(min(ys), ih)),
        bottom_right=Point(x=_clamp(max(xs), iw), y=_clamp(max(ys), ih)),
        jaw_outline=jaw,
    )


def _require_mediapipe():
    if mp is None:
        raise ModelUnavailableError("mediapipe is not available.")
    return mp


class MediaPipeBoxDetector:
    """BlazeFace short-range model; box only."""

    has_landmarks = False

    def __init__(self, min_detection_confidence: float = 0.5):
        solutions = _require_mediapipe().solutions
        self._fd = solutions.face_detection.FaceDetection(
            model_selection=0,
            min_detection_confidence=min_detection_confidence,
        )
        # one graph per detector; process() must not run from two threads at once
        self._lock = threading.Lock()

    def detect(self, frame: np.ndarray) -> Optional[DetectedFace]:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        with self._lock:
            res = self._fd.process(rgb)
            if not res.detections:
                return None
            # first result wins
            bb = res.detections[0].location_data.relative_bounding_box
            return face_from_relative_box(bb.xmin, bb.ymin, bb.width, bb.height, frame.shape)

    def close(self) -> None:
        with self._lock:
            self._fd.close()


class MediaPipeLandmarkDetector:
    """
    Face mesh model; box plus jaw outline.

    Always runs in static image mode: every frame gets a fresh detection,
    nothing is tracked from the previous one.
    """

    has_landmarks = True

    def __init__(self, min_detection_confidence: float = 0.5):
        solutions = _require_mediapipe().solutions
        self._fm = solutions.face_mesh.FaceMesh(
            static_image_mode=True,
            max_num_faces=1,
            refine_landmarks=False,
            min_detection_confidence=min_detection_confidence,
        )
        self._lock = threading.Lock()

    def detect(self, frame: np.ndarray) -> Optional[DetectedFace]:
        rgb = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        with self._lock:
            res = self._fm.process(rgb)
            if not res.multi_face_landmarks:
                return None
            lm: List[Tuple[float, float]] = [(p.x, p.y) for p in res.multi_face_landmarks[0].landmark]
        return face_from_landmarks(lm, frame.shape)

    def close(self) -> None:
        with self._lock:
            self._fm.close()


def build_detector(kind: str, min_detection_confidence: float = 0.5) -> FaceDetector:
    if kind == "box":
        return MediaPipeBoxDetector(min_detection_confidence)
    if kind == "landmark":
        return MediaPipeLandmarkDetector(min_detection_confidence)
    raise ValueError(f"Unknown detector backend: {kind!r}")


def detect_safely(detector: FaceDetector, frame: Optional[np.ndarray]) -> Optional[DetectedFace]:
    """A failing frame counts as 'no face'; the caller moves on to the next one."""
    if frame is None:
        return None
    try:
        return detector.detect(frame)
    except Exception:
        logger.exception("Face detection failed for this frame")
        return None
