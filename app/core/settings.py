import os

from dotenv import load_dotenv
from pydantic import BaseModel

from app.core.schemas import FitAnchor

load_dotenv()


class Settings(BaseModel):
    # Gap inserted between consecutive activities when a fix cascades
    travel_buffer_minutes: int = int(os.getenv("TRAVEL_BUFFER_MINUTES", "15"))
    hours_max_fix_passes: int = int(os.getenv("HOURS_MAX_FIX_PASSES", "3"))
    hours_fit_anchor: FitAnchor = os.getenv("HOURS_FIT_ANCHOR", "nearest")  # type: ignore[assignment]
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    allowed_origins: str = os.getenv("ALLOWED_ORIGINS", "")


def get_settings() -> Settings:
    return Settings()
