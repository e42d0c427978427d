"""Adapters for single-rendition platforms (Instagram, TikTok, Twitter/X)."""
from __future__ import annotations

from .base import PlatformAdapter
from . import register_adapter
from multitool_api.config import settings
from multitool_api.models import VideoInfo
from multitool_api.services.extractor import MediaExtractor
from multitool_api.services.url_router import ClassifiedUrl, Platform


class SocialVideoAdapter(PlatformAdapter):
    """Title and thumbnail only; the stream endpoint picks the best mp4."""

    def fetch(self, url: str, classified: ClassifiedUrl, extractor: MediaExtractor) -> VideoInfo:
        self.ensure_available()
        info = extractor.extract_info(url)
        return VideoInfo(
            platform=self.platform_name().value,
            video_id=classified.external_id,
            title=info.get("title") or self.default_title,
            thumbnail=info.get("thumbnail") or "",
            download_url=self.stream_url(url),
        )


class InstagramAdapter(SocialVideoAdapter):
    display_name = "Instagram"
    default_title = "Instagram Video"

    @staticmethod
    def platform_name() -> Platform:
        return Platform.INSTAGRAM


class TikTokAdapter(SocialVideoAdapter):
    display_name = "TikTok"
    default_title = "TikTok Video"

    @staticmethod
    def platform_name() -> Platform:
        return Platform.TIKTOK


class TwitterAdapter(SocialVideoAdapter):
    display_name = "Twitter/X"
    default_title = "Twitter Video"

    @staticmethod
    def platform_name() -> Platform:
        return Platform.TWITTER

    @property
    def available(self) -> bool:
        return settings.TWITTER_DOWNLOADS_ENABLED

    @property
    def unavailable_message(self) -> str:
        return (
            "Twitter/X downloads are temporarily unavailable due to platform "
            "restrictions. Please use YouTube, TikTok or Instagram."
        )


register_adapter(InstagramAdapter)
register_adapter(TikTokAdapter)
register_adapter(TwitterAdapter)
