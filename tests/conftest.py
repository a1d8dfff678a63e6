import threading
import time
from types import SimpleNamespace
from typing import List, Optional

import numpy as np
import pytest

from hairstyle_ai import detect
from hairstyle_ai.schemas import DetectedFace, Point


def make_face(x0, y0, x1, y1, jaw_width: Optional[float] = None) -> DetectedFace:
    """Box face; with jaw_width, a flat 17-point jaw centred under the box."""
    jaw = None
    if jaw_width is not None:
        cx = (x0 + x1) / 2.0
        left = cx - jaw_width / 2.0
        jaw = [Point(x=left + jaw_width * i / 16.0, y=y1) for i in range(17)]
    return DetectedFace(top_left=Point(x=x0, y=y0), bottom_right=Point(x=x1, y=y1), jaw_outline=jaw)


class FakeDetector:
    """Returns the queued faces in order, then the last one forever."""

    def __init__(self, faces: List[Optional[DetectedFace]] = None, error: Exception = None,
                 has_landmarks: bool = True):
        self.faces = list(faces or [None])
        self.error = error
        self.has_landmarks = has_landmarks
        self.calls = 0
        self.closed = False

    def detect(self, frame):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if len(self.faces) > 1:
            return self.faces.pop(0)
        return self.faces[0]

    def close(self):
        self.closed = True


class FakeCapture:
    """Stands in for cv2.VideoCapture."""

    def __init__(self, frames=None, opened=True):
        self.frames = list(frames) if frames is not None else [np.zeros((480, 640, 3), dtype=np.uint8)]
        self.opened = opened
        self.released = False
        self.props = {}

    def isOpened(self):
        return self.opened

    def set(self, prop, value):
        self.props[prop] = value
        return True

    def read(self):
        if not self.frames:
            return False, None
        if len(self.frames) > 1:
            return True, self.frames.pop(0)
        return True, self.frames[0]

    def release(self):
        self.released = True


@pytest.fixture
def frame():
    return np.zeros((480, 640, 3), dtype=np.uint8)


def _mesh_result():
    # jaw spans 0.4..0.6 of the width, face spans 0.1..0.9 of the height
    pts = [SimpleNamespace(x=0.5, y=0.5) for _ in range(468)]
    pts[detect.JAW_OUTLINE[0]] = SimpleNamespace(x=0.4, y=0.5)
    pts[detect.JAW_OUTLINE[-1]] = SimpleNamespace(x=0.6, y=0.5)
    pts[10] = SimpleNamespace(x=0.5, y=0.1)
    pts[152] = SimpleNamespace(x=0.5, y=0.9)
    return SimpleNamespace(multi_face_landmarks=[SimpleNamespace(landmark=pts)])


def _box_result():
    bb = SimpleNamespace(xmin=0.25, ymin=0.1, width=0.5, height=0.5)
    return SimpleNamespace(detections=[SimpleNamespace(location_data=SimpleNamespace(relative_bounding_box=bb))])


class FakeGraph:
    """Stands in for a mediapipe solution graph; records overlapping process() calls."""

    def __init__(self, result, delay, **kwargs):
        self.result = result
        self.delay = delay
        self.kwargs = kwargs
        self.active = 0
        self.max_active = 0
        self.calls = 0
        self.closed = False
        self._count = threading.Lock()

    def process(self, rgb):
        with self._count:
            self.active += 1
            self.calls += 1
            self.max_active = max(self.max_active, self.active)
        time.sleep(self.delay)
        with self._count:
            self.active -= 1
        return self.result

    def close(self):
        self.closed = True


class FakeMediaPipe:
    def __init__(self, delay=0.0):
        self.delay = delay
        self.graphs: List[FakeGraph] = []
        self.solutions = SimpleNamespace(
            face_mesh=SimpleNamespace(FaceMesh=self._graph(_mesh_result)),
            face_detection=SimpleNamespace(FaceDetection=self._graph(_box_result)),
        )

    def _graph(self, make_result):
        def build(**kwargs):
            g = FakeGraph(make_result(), self.delay, **kwargs)
            self.graphs.append(g)
            return g
        return build


@pytest.fixture
def fake_mediapipe(monkeypatch):
    fake = FakeMediaPipe(delay=0.05)
    monkeypatch.setattr(detect, "mp", fake)
    return fake
