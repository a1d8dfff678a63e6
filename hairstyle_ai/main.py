# hairstyle_ai/main.py

import asyncio
import logging
import random
from contextlib import asynccontextmanager, suppress
from typing import Callable, List, Optional

from fastapi import FastAPI, File, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

import uvicorn

from . import suggester
from .config import Settings, settings as default_settings
from .detect import FaceDetector, build_detector, decode_image_bytes
from .errors import ModelUnavailableError
from .hairstyles import HAIRSTYLES
from .loader import ModelLoader
from .schemas import DetectResponse, FaceShape, HairstyleEntry, HealthResponse, RecommendationsResponse
from .session import Session, run_cycle

__version__ = "1.0.0"

logger = logging.getLogger(__name__)


def _default_factory(settings: Settings) -> Callable[[], FaceDetector]:
    return lambda: build_detector(settings.detector, settings.min_detection_confidence)


def create_app(settings: Optional[Settings] = None,
               detector_factory: Optional[Callable[[], FaceDetector]] = None,
               preload: bool = False,
               rng: Optional[random.Random] = None) -> FastAPI:
    """
    preload=True waits for the model before serving; otherwise it loads in
    the background and detection answers 503 until it is ready.
    """
    settings = settings or default_settings
    loader = ModelLoader(detector_factory or _default_factory(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Hairstyle AI starting (detector=%s, heuristic=%s, policy=%s)",
                    settings.detector, settings.heuristic, settings.policy)
        task = asyncio.ensure_future(loader.wait())
        if preload:
            await task
        try:
            yield
        finally:
            # close first: a model still being built is released when it arrives
            loader.close()
            if not task.done():
                task.cancel()
                with suppress(asyncio.CancelledError):
                    await task

    app = FastAPI(title="Hairstyle AI", version=__version__, lifespan=lifespan)
    app.state.settings = settings
    app.state.loader = loader
    app.state.rng = rng or random.Random()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            ok=True,
            version=app.version,
            model=loader.state.value,
            detector=settings.detector,
            heuristic=settings.heuristic,
            policy=settings.policy,
        )

    @app.get("/hairstyles", response_model=List[HairstyleEntry])
    def hairstyles() -> List[HairstyleEntry]:
        return list(HAIRSTYLES)

    @app.get("/recommendations", response_model=RecommendationsResponse)
    def recommendations(request: Request, face_shape: Optional[FaceShape] = None) -> RecommendationsResponse:
        picked = suggester.select(
            face_shape,
            policy=settings.policy,
            random_count=settings.random_count,
            no_label_result=settings.no_label_result,
            rng=request.app.state.rng,
        )
        return RecommendationsResponse(face_shape=face_shape, policy=settings.policy,
                                       recommendations=picked)

    @app.post("/detect/face-shape", response_model=DetectResponse)
    async def detect_face_shape(request: Request,
                                file: UploadFile = File(..., description="captured frame")) -> DetectResponse:
        data = await file.read()
        await file.close()
        if not data:
            raise HTTPException(status_code=400, detail="No image received.")

        img = decode_image_bytes(data)
        if img is None:
            raise HTTPException(status_code=400, detail="Could not decode image.")

        try:
            detector = loader.detector
        except ModelUnavailableError as e:
            raise HTTPException(status_code=503, detail=str(e))

        session = Session.from_settings(settings, detector, rng=request.app.state.rng)
        result = await run_in_threadpool(run_cycle, session, img)

        return DetectResponse(
            face_shape=result.shape.type if result.shape else None,
            confidence=result.shape.confidence if result.shape else None,
            message=result.message,
            face=result.face,
            recommendations=result.recommendations,
        )

    return app


app = create_app()


def run() -> None:
    logging.basicConfig(
        level=logging.DEBUG if default_settings.debug else default_settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    uvicorn.run("hairstyle_ai.main:app", host=default_settings.api_host,
                port=default_settings.api_port, reload=default_settings.debug)


if __name__ == "__main__":
    run()
