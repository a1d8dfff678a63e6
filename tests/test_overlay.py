"""Tests for frame overlays."""

import numpy as np

from hairstyle_ai.hairstyles import HAIRSTYLES
from hairstyle_ai.overlay import BOX_COLOR, draw_face, draw_lines, status_lines
from hairstyle_ai.schemas import FaceShape, FaceShapeResult

from conftest import make_face


class TestDrawFace:
    def test_draws_box(self):
        frame = np.zeros((100, 200, 3), dtype=np.uint8)
        result = draw_face(frame, make_face(10, 20, 60, 80))
        assert tuple(result[20, 30]) == BOX_COLOR
        assert tuple(result[50, 30]) == (0, 0, 0)

    def test_draws_label_and_jaw(self):
        frame = np.zeros((120, 200, 3), dtype=np.uint8)
        plain = draw_face(frame.copy(), make_face(10, 30, 60, 100))
        labelled = draw_face(
            frame.copy(),
            make_face(10, 30, 60, 100, jaw_width=40),
            FaceShapeResult(type=FaceShape.oval, confidence=0.8),
        )
        assert not np.array_equal(plain, labelled)

    def test_returns_same_shape(self):
        frame = np.zeros((100, 200, 3), dtype=np.uint8)
        assert draw_face(frame, make_face(0, 0, 50, 50)).shape == (100, 200, 3)


def test_draw_lines_modifies_frame():
    frame = np.zeros((100, 300, 3), dtype=np.uint8)
    result = draw_lines(frame.copy(), ["hello", "world"])
    assert not np.array_equal(result, frame)


def test_status_lines():
    lines = status_lines("Face analyzed.", list(HAIRSTYLES[:2]))
    assert lines[0] == "Face analyzed."
    assert lines[1] == "Recommended hairstyles:"
    assert len(lines) == 4


def test_status_lines_without_recommendations():
    assert status_lines("No face detected.", []) == ["No face detected."]
