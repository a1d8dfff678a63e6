from typing import Literal, Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings, read from HAIRSTYLE_* environment variables or .env"""

    # API
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    debug: bool = False
    log_level: str = "INFO"

    # Detection
    detector: Literal["box", "landmark"] = "landmark"
    # None picks the heuristic that matches the detector
    heuristic: Optional[Literal["landmark_ratio", "box_ratio"]] = None
    min_detection_confidence: float = Field(default=0.5, ge=0.0, le=1.0)

    # Recommendations
    policy: Literal["filter", "random"] = "filter"
    random_count: int = Field(default=2, ge=1)
    no_label_result: Literal["empty", "all"] = "empty"

    # Camera / live loop
    camera_index: int = 0
    frame_width: int = 640
    frame_height: int = 480
    detection_interval_ms: int = Field(default=500, ge=0)
    live_mode: Literal["interval", "manual"] = "interval"

    model_config = SettingsConfigDict(
        env_prefix="HAIRSTYLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_heuristic(self) -> "Settings":
        if self.heuristic is None:
            self.heuristic = "landmark_ratio" if self.detector == "landmark" else "box_ratio"
        if self.heuristic == "landmark_ratio" and self.detector == "box":
            raise ValueError("landmark_ratio heuristic needs the landmark detector")
        return self


def get_settings(**overrides) -> Settings:
    return Settings(**overrides)


settings = get_settings()
