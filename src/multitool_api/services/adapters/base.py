"""Base classes for platform adapters."""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

from multitool_api.config import settings
from multitool_api.models import VideoInfo
from multitool_api.services.extractor import MediaExtractor
from multitool_api.services.url_router import ClassifiedUrl, Platform


class PlatformUnavailableError(RuntimeError):
    """Raised when downloads from a platform are switched off."""


def safe_filename(title: Optional[str], fallback: str = "video") -> str:
    """Reduce a title to [A-Za-z0-9_], at most 50 characters."""
    return re.sub(r"[^a-z0-9]", "_", title or fallback, flags=re.IGNORECASE)[:50]


class PlatformAdapter(ABC):
    """Abstract base class for all platform download adapters."""

    display_name: str = ""
    default_title: str = "video"

    @staticmethod
    @abstractmethod
    def platform_name() -> Platform:
        """Return the platform this adapter serves."""
        ...

    @property
    def available(self) -> bool:
        return True

    @property
    def unavailable_message(self) -> str:
        return f"{self.display_name} downloads are temporarily unavailable."

    def ensure_available(self) -> None:
        if not self.available:
            raise PlatformUnavailableError(self.unavailable_message)

    def stream_url(self, url: str) -> str:
        """Public URL of the stream endpoint for this video."""
        slug = self.platform_name().value
        return f"{settings.BASE_URL}/api/download-{slug}-stream?url={quote(url, safe='')}"

    @abstractmethod
    def fetch(self, url: str, classified: ClassifiedUrl, extractor: MediaExtractor) -> VideoInfo:
        """Read video details for the download page."""
        ...

    def stream_format(self, format_id: Optional[str] = None) -> str:
        """yt-dlp format selector used by the stream endpoint."""
        return "best[ext=mp4]/best"
