import asyncio
import logging
import threading
from enum import Enum
from typing import Callable, Optional

from .detect import FaceDetector
from .errors import ModelUnavailableError

logger = logging.getLogger(__name__)


class ModelState(str, Enum):
    loading = "loading"
    ready = "ready"
    unavailable = "unavailable"


class ModelLoader:
    """
    Loads a detector once, off the event loop.

    A failed load is final for this loader: the error is logged and kept,
    and nothing retries it. Create a new loader (restart) to try again.
    """

    def __init__(self, factory: Callable[[], FaceDetector]):
        self._factory = factory
        self._detector: Optional[FaceDetector] = None
        self._error: Optional[BaseException] = None
        self._task: Optional[asyncio.Task] = None
        # guards _detector/_closed between the loading thread and close()
        self._lock = threading.Lock()
        self._closed = False
        self.state = ModelState.loading

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    @property
    def detector(self) -> FaceDetector:
        if self.state is ModelState.ready:
            return self._detector
        if self.state is ModelState.unavailable:
            if self._error is None:
                raise ModelUnavailableError("Face detection model was closed.")
            raise ModelUnavailableError(f"Face detection model failed to load: {self._error}")
        raise ModelUnavailableError("Face detection model is still loading.")

    async def wait(self) -> ModelState:
        """Start loading if needed and wait for it to finish, without raising."""
        if self._task is None:
            self._task = asyncio.ensure_future(self._load())
        await self._task
        return self.state

    async def load(self) -> FaceDetector:
        await self.wait()
        return self.detector

    def _build(self) -> Optional[FaceDetector]:
        """Runs in a worker thread. A loader closed meanwhile gets nothing."""
        detector = self._factory()
        with self._lock:
            if not self._closed:
                self._detector = detector
                return detector
        logger.info("Loader closed while the model was loading; releasing it")
        detector.close()
        return None

    async def _load(self) -> None:
        logger.info("Loading face detection model...")
        try:
            detector = await asyncio.to_thread(self._build)
        except Exception as e:
            self._error = e
            self.state = ModelState.unavailable
            logger.error("Error loading face detection model: %s", e)
            return
        if detector is None:
            self.state = ModelState.unavailable
            return
        self.state = ModelState.ready
        logger.info("Face detection model ready")

    def load_sync(self) -> FaceDetector:
        """Blocking variant for the live tool, which has no event loop."""
        return asyncio.run(self.load())

    def close(self) -> None:
        with self._lock:
            self._closed = True
            detector, self._detector = self._detector, None
        self.state = ModelState.unavailable
        if detector is not None:
            detector.close()
