"""Drawing on frames for the live window."""

from typing import List, Optional, Sequence

import cv2
import numpy as np

from .schemas import DetectedFace, FaceShapeResult, HairstyleEntry

BOX_COLOR = (0, 255, 0)
TEXT_COLOR = (255, 255, 255)
FONT = cv2.FONT_HERSHEY_SIMPLEX


def draw_face(frame: np.ndarray, face: DetectedFace,
              shape: Optional[FaceShapeResult] = None, thickness: int = 2) -> np.ndarray:
    x0, y0 = int(face.top_left.x), int(face.top_left.y)
    x1, y1 = int(face.bottom_right.x), int(face.bottom_right.y)
    cv2.rectangle(frame, (x0, y0), (x1, y1), BOX_COLOR, thickness)

    if face.jaw_outline:
        pts = np.array([[int(p.x), int(p.y)] for p in face.jaw_outline], dtype=np.int32)
        cv2.polylines(frame, [pts], False, BOX_COLOR, 1)

    if shape is not None:
        label = shape.type.value.capitalize()
        cv2.putText(frame, label, (x0, max(15, y0 - 8)), FONT, 0.6, BOX_COLOR, 2)
    return frame


def draw_lines(frame: np.ndarray, lines: Sequence[str], y_offset: int = 25,
               font_scale: float = 0.5) -> np.ndarray:
    line_height = int(20 * font_scale / 0.45)
    y = y_offset
    for line in lines:
        # dark outline first so the text stays readable on bright frames
        cv2.putText(frame, line, (10, y), FONT, font_scale, (0, 0, 0), 3)
        cv2.putText(frame, line, (10, y), FONT, font_scale, TEXT_COLOR, 1)
        y += line_height
    return frame


def status_lines(message: str, recommendations: List[HairstyleEntry]) -> List[str]:
    lines = [message]
    if recommendations:
        lines.append("Recommended hairstyles:")
        lines.extend(f"  - {h.name}" for h in recommendations)
    return lines
