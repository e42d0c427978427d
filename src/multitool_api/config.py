"""Configuration settings for the multitool API."""
import os
from typing import List, Literal, Optional


EnvironmentType = Literal["development", "staging", "production"]


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    PORT: int = 3000
    BASE_URL: str = "http://localhost:3000"
    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    # Feature flags
    TWITTER_DOWNLOADS_ENABLED: bool = False

    # Video extraction
    MAX_FORMAT_RESULTS: int = 10
    YTDLP_BINARY: str = "yt-dlp"
    EXTRACTION_MAX_ATTEMPTS: int = 3
    STREAM_CHUNK_SIZE: int = 64 * 1024

    # Tools
    MAX_UPLOAD_BYTES: int = 20 * 1024 * 1024

    # Any Vercel preview/production deployment of the frontend
    CORS_ORIGIN_REGEX: str = r"https://.*\.vercel\.app"

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"

        self.PORT = _env_int("PORT", 3000)
        self.FRONTEND_URL = os.getenv("FRONTEND_URL") or None
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Public base URL, as exposed by the hosting platform
        railway_domain = os.getenv("RAILWAY_PUBLIC_DOMAIN")
        render_url = os.getenv("RENDER_EXTERNAL_URL")
        if railway_domain:
            self.BASE_URL = f"https://{railway_domain}"
        elif render_url:
            self.BASE_URL = render_url.rstrip("/")
        else:
            self.BASE_URL = f"http://localhost:{self.PORT}"

        # Feature flags
        self.TWITTER_DOWNLOADS_ENABLED = os.getenv("TWITTER_DOWNLOADS_ENABLED", "false").lower() == "true"

        # Video extraction
        self.MAX_FORMAT_RESULTS = max(1, _env_int("MAX_FORMAT_RESULTS", 10))
        self.YTDLP_BINARY = os.getenv("YTDLP_BINARY", "yt-dlp")
        self.EXTRACTION_MAX_ATTEMPTS = max(1, _env_int("EXTRACTION_MAX_ATTEMPTS", 3))
        self.STREAM_CHUNK_SIZE = max(1024, _env_int("STREAM_CHUNK_SIZE", 64 * 1024))

        self.MAX_UPLOAD_BYTES = _env_int("MAX_UPLOAD_BYTES", 20 * 1024 * 1024)

    @property
    def CORS_ORIGINS(self) -> List[str]:
        origins = ["http://localhost:5173", "http://localhost:3000"]
        if self.FRONTEND_URL:
            origins.append(self.FRONTEND_URL)
        return origins


settings = Settings()
