# hairstyle_ai/face_shape.py
from __future__ import annotations

from typing import Callable, Dict, Optional

from .errors import ClassificationError
from .schemas import DetectedFace, FaceShape, FaceShapeResult

# ---------------- Tunables ----------------
# Heuristic A: face height over jaw width
LONG_MIN    = 1.75
OVAL_MIN    = 1.5
HEART_MIN   = 1.25
SQUARE_MIN  = 1.0

# Heuristic B: box width over box height
ROUND_MIN       = 0.95
OVAL_MAX        = 0.85
SQUARE_CANVAS_W = 0.4

JAW_LEFT  = 0
JAW_RIGHT = 16

# Neither heuristic is calibrated; every label carries the same score.
PLACEHOLDER_CONFIDENCE = 0.8
# ------------------------------------------

Classifier = Callable[..., FaceShapeResult]


def _check_box(face: DetectedFace) -> None:
    if face.width <= 0 or face.height <= 0:
        raise ClassificationError(
            f"Bounding box must have positive size, got {face.width}x{face.height}."
        )


def jaw_width(face: DetectedFace) -> float:
    jaw = face.jaw_outline
    if not jaw or len(jaw) <= JAW_RIGHT:
        raise ClassificationError("Jaw outline with 17 points is required.")
    return jaw[JAW_RIGHT].x - jaw[JAW_LEFT].x


# ---------------- Heuristics ----------------
def shape_from_height_jaw_ratio(ratio: float) -> FaceShape:
    if ratio > LONG_MIN:
        return FaceShape.long
    if ratio > OVAL_MIN:
        return FaceShape.oval
    if ratio > HEART_MIN:
        return FaceShape.heart
    if ratio > SQUARE_MIN:
        return FaceShape.square
    return FaceShape.round


def shape_from_box_ratio(ratio: float, box_w: float, canvas_w: float) -> FaceShape:
    if ratio > ROUND_MIN:
        return FaceShape.round
    if ratio < OVAL_MAX:
        return FaceShape.oval
    if box_w > SQUARE_CANVAS_W * canvas_w:
        return FaceShape.square
    return FaceShape.oval


def classify_landmark_ratio(face: DetectedFace, canvas_width: Optional[float] = None) -> FaceShapeResult:
    """
    Heuristic A. ratio = box height / jaw width, where jaw width is the
    horizontal span between the first and last jaw outline points.
    canvas_width is accepted so both heuristics share a signature.
    """
    _check_box(face)
    jw = jaw_width(face)
    if jw <= 0:
        raise ClassificationError(f"Jaw width must be positive, got {jw}.")
    shape = shape_from_height_jaw_ratio(face.height / jw)
    return FaceShapeResult(type=shape, confidence=PLACEHOLDER_CONFIDENCE)


def classify_box_ratio(face: DetectedFace, canvas_width: Optional[float] = None) -> FaceShapeResult:
    """
    Heuristic B. ratio = box width / box height. The square branch compares
    the box against the width of the frame it was detected in.
    """
    _check_box(face)
    if canvas_width is None or canvas_width <= 0:
        raise ClassificationError("box_ratio heuristic needs the canvas width.")
    shape = shape_from_box_ratio(face.width / face.height, face.width, canvas_width)
    return FaceShapeResult(type=shape, confidence=PLACEHOLDER_CONFIDENCE)


CLASSIFIERS: Dict[str, Classifier] = {
    "landmark_ratio": classify_landmark_ratio,
    "box_ratio": classify_box_ratio,
}


def get_classifier(name: str) -> Classifier:
    try:
        return CLASSIFIERS[name]
    except KeyError:
        raise ValueError(f"Unknown face shape heuristic: {name!r}") from None


def describe(face_shape: Optional[FaceShape]) -> str:
    msgs = {
        FaceShape.oval: "Balanced proportions, most cuts will suit you.",
        FaceShape.round: "Soft, even proportions; height on top lengthens the face.",
        FaceShape.square: "Strong jawline; textured layers soften the angles.",
        FaceShape.heart: "Wider forehead, narrow chin; volume near the jaw balances it.",
        FaceShape.long: "Longer than wide; layers and side volume add width.",
    }
    if face_shape is None:
        return "No face detected. Please position your face in the camera."
    return msgs.get(face_shape, "Face analyzed.")
