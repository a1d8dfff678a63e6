# hairstyle_ai/live.py
"""Live webcam window: ``hairstyle-ai-live``.

Keys:
    c / space   capture a still and analyze it (manual mode)
    r           retake / reset the result
    s           stop or start the camera
    q / ESC     quit
"""

import argparse
import logging
import sys
import time
from typing import Callable, List, Optional

import cv2
import numpy as np
from pydantic import ValidationError

from .camera import CameraSource
from .config import Settings, get_settings
from .detect import build_detector
from .errors import CameraError, ModelUnavailableError
from .loader import ModelLoader
from .overlay import draw_face, draw_lines, status_lines
from .session import CycleResult, Session, run_cycle

logger = logging.getLogger(__name__)

WINDOW_TITLE = "AI Hairstyle Recommender"
KEY_ESC = 27


class LiveApp:
    """
    State of the live window. Drawing and key handling are kept apart from
    cv2.imshow so the loop can be driven without a display.

    interval mode re-runs a cycle on the live feed every `interval_ms`.
    manual mode only runs one when a still is captured.
    """

    def __init__(self, session: Session, camera: CameraSource, mode: str = "interval",
                 interval_ms: int = 500, clock: Callable[[], float] = time.monotonic):
        if mode not in ("interval", "manual"):
            raise ValueError(f"Unknown live mode: {mode!r}")
        self.session = session
        self.camera = camera
        self.mode = mode
        self.interval = interval_ms / 1000.0
        self._clock = clock
        self._last_run: Optional[float] = None
        self.captured: Optional[np.ndarray] = None
        self.result: Optional[CycleResult] = None
        self.error: Optional[str] = None

    # ---------------- Camera ----------------
    def start_camera(self) -> bool:
        try:
            self.camera.start()
        except CameraError as e:
            logger.error("Camera error: %s", e)
            self.error = str(e)
            return False
        self.error = None
        return True

    def stop_camera(self) -> None:
        self.camera.stop()
        self.reset()

    # ---------------- Controls ----------------
    def capture(self) -> Optional[CycleResult]:
        try:
            still = self.camera.capture()
        except CameraError as e:
            logger.error("Capture failed: %s", e)
            self.error = str(e)
            return None
        self.captured = still
        self.result = run_cycle(self.session, still)
        return self.result

    def reset(self) -> None:
        self.captured = None
        self.result = None
        self._last_run = None

    def handle_key(self, key: int) -> bool:
        """Returns False when the user asked to quit."""
        if key in (ord("q"), KEY_ESC):
            return False
        if key in (ord("c"), ord(" ")) and self.mode == "manual" and self.captured is None:
            self.capture()
        elif key == ord("r"):
            self.reset()
        elif key == ord("s"):
            if self.camera.is_running:
                self.stop_camera()
            else:
                self.start_camera()
        return True

    # ---------------- Loop ----------------
    def tick(self) -> Optional[np.ndarray]:
        """Advance one step and return the frame to show."""
        if self.captured is not None:
            return self.captured.copy()

        frame = self.camera.read()
        if frame is None:
            return None

        if self.mode == "interval":
            now = self._clock()
            if self._last_run is None or now - self._last_run >= self.interval:
                self._last_run = now
                self.result = run_cycle(self.session, frame)
        return frame

    def status(self) -> List[str]:
        if self.error:
            return [self.error, "Press 's' to try the camera again."]
        if not self.camera.is_running:
            return ["Camera stopped. Press 's' to start."]
        if self.result is None:
            if self.mode == "manual":
                return ["Press 'c' to capture."]
            return ["Looking for a face..."]
        return status_lines(self.result.message, self.result.recommendations)

    def render(self, frame: Optional[np.ndarray]) -> np.ndarray:
        if frame is None:
            frame = np.zeros((self.camera.height or 480, self.camera.width or 640, 3), dtype=np.uint8)
        else:
            frame = frame.copy()
        if self.result is not None and self.result.face is not None:
            draw_face(frame, self.result.face, self.result.shape)
        return draw_lines(frame, self.status())

    def run(self) -> None:
        self.start_camera()
        try:
            while True:
                cv2.imshow(WINDOW_TITLE, self.render(self.tick()))
                key = cv2.waitKey(1) & 0xFF
                if key != 0xFF and not self.handle_key(key):
                    break
        finally:
            self.camera.stop()
            cv2.destroyAllWindows()


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hairstyle-ai-live",
        description="Detect your face shape from the webcam and suggest hairstyles",
    )
    parser.add_argument("--camera", type=int, default=None, help="Camera index")
    parser.add_argument(
        "--mode",
        choices=["interval", "manual"],
        default=None,
        help="interval: analyze the live feed periodically; manual: analyze captured stills",
    )
    parser.add_argument("--detector", choices=["box", "landmark"], default=None)
    parser.add_argument("--heuristic", choices=["landmark_ratio", "box_ratio"], default=None)
    parser.add_argument("--policy", choices=["filter", "random"], default=None)
    parser.add_argument("--interval-ms", type=int, default=None,
                        help="Detection period in interval mode")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    return parser


def _settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {
        "camera_index": args.camera,
        "live_mode": args.mode,
        "detector": args.detector,
        "heuristic": args.heuristic,
        "policy": args.policy,
        "detection_interval_ms": args.interval_ms,
    }
    return get_settings(**{k: v for k, v in overrides.items() if v is not None})


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        settings = _settings_from_args(args)
    except ValidationError as e:
        parser.error(f"invalid settings: {e}")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    loader = ModelLoader(lambda: build_detector(settings.detector, settings.min_detection_confidence))
    print("Loading AI models...")
    try:
        detector = loader.load_sync()
    except ModelUnavailableError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    camera = CameraSource(settings.camera_index, settings.frame_width, settings.frame_height)
    app = LiveApp(
        Session.from_settings(settings, detector),
        camera,
        mode=settings.live_mode,
        interval_ms=settings.detection_interval_ms,
    )
    try:
        app.run()
    finally:
        loader.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
