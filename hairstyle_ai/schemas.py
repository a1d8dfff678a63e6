from enum import Enum
from typing import FrozenSet, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FaceShape(str, Enum):
    oval = "oval"
    round = "round"
    square = "square"
    heart = "heart"
    long = "long"


class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class DetectedFace(BaseModel):
    """
    One face in one frame, in pixel coordinates of that frame.
    jaw_outline is only filled by the landmark backend: 17 points running
    from the left ear over the chin to the right ear.
    """
    model_config = ConfigDict(frozen=True)

    top_left: Point
    bottom_right: Point
    jaw_outline: Optional[List[Point]] = None

    @property
    def width(self) -> float:
        return self.bottom_right.x - self.top_left.x

    @property
    def height(self) -> float:
        return self.bottom_right.y - self.top_left.y


class FaceShapeResult(BaseModel):
    type: FaceShape
    confidence: float = Field(..., ge=0.0, le=1.0)


class HairstyleEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str
    image_url: str
    suitable_for: FrozenSet[FaceShape]


class RecommendationsResponse(BaseModel):
    face_shape: Optional[FaceShape]
    policy: str
    recommendations: List[HairstyleEntry]


class DetectResponse(BaseModel):
    face_shape: Optional[FaceShape]
    confidence: Optional[float] = None
    message: str
    face: Optional[DetectedFace] = None
    recommendations: List[HairstyleEntry]


class HealthResponse(BaseModel):
    ok: bool
    version: str
    model: str
    detector: str
    heuristic: str
    policy: str
