"""YouTube platform adapter: yt-dlp metadata plus a per-resolution format list."""
from __future__ import annotations

import logging
from typing import Optional

from .base import PlatformAdapter
from . import register_adapter
from multitool_api.models import VideoInfo
from multitool_api.services.extractor import MediaExtractor
from multitool_api.services.format_selector import select_formats
from multitool_api.services.url_router import ClassifiedUrl, Platform

logger = logging.getLogger(__name__)

# Best mp4 video + m4a audio, falling back to whatever merges, then to a single file
DEFAULT_STREAM_FORMAT = "bestvideo[ext=mp4]+bestaudio[ext=m4a]/bestvideo+bestaudio/best"


class YouTubeAdapter(PlatformAdapter):
    display_name = "YouTube"
    default_title = "video"

    @staticmethod
    def platform_name() -> Platform:
        return Platform.YOUTUBE

    @staticmethod
    def thumbnail_for(video_id: str) -> str:
        return f"https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

    def fetch(self, url: str, classified: ClassifiedUrl, extractor: MediaExtractor) -> VideoInfo:
        info = extractor.extract_info(url)
        formats = select_formats(info.get("formats") or [])
        logger.info(f"YouTube {classified.external_id}: {len(formats)} formats offered")

        return VideoInfo(
            platform=self.platform_name().value,
            video_id=classified.external_id,
            title=info.get("title") or self.default_title,
            thumbnail=info.get("thumbnail") or self.thumbnail_for(classified.external_id),
            formats=formats,
            download_url=self.stream_url(url),
        )

    def stream_format(self, format_id: Optional[str] = None) -> str:
        if format_id:
            # Selected video stream merged with the best audio
            return f"{format_id}+bestaudio/best"
        return DEFAULT_STREAM_FORMAT


register_adapter(YouTubeAdapter)
