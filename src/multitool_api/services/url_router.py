"""Classify a URL into a supported platform and its external ID."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class Platform(str, Enum):
    YOUTUBE = "youtube"
    TIKTOK = "tiktok"
    TWITTER = "twitter"
    INSTAGRAM = "instagram"


@dataclass(frozen=True)
class ClassifiedUrl:
    """Result of classifying a URL."""
    platform: Platform
    external_id: str


# Exactly 11 id characters, not followed by a 12th.
YOUTUBE_ID = r"([A-Za-z0-9_-]{11})(?![A-Za-z0-9_-])"

# Each entry: (compiled_pattern, platform)
# The first capture group must be the external ID.
_PATTERNS: List[Tuple[re.Pattern, Platform]] = [
    (re.compile(r"youtube\.com/watch/?\?(?:[^#]*&)?v=" + YOUTUBE_ID, re.IGNORECASE), Platform.YOUTUBE),
    (re.compile(r"youtu\.be/" + YOUTUBE_ID, re.IGNORECASE), Platform.YOUTUBE),
    (re.compile(r"youtube(?:-nocookie)?\.com/(?:embed|v|e|shorts)/" + YOUTUBE_ID, re.IGNORECASE), Platform.YOUTUBE),
    (re.compile(r"tiktok\.com/(?:@[\w.-]+/)?video/(\d+)", re.IGNORECASE), Platform.TIKTOK),
    (re.compile(r"(?:^|[/.])(?:twitter|x)\.com/\w+/status/(\d+)", re.IGNORECASE), Platform.TWITTER),
    (re.compile(r"instagram\.com/(?:p|reels?|tv)/([A-Za-z0-9_-]+)", re.IGNORECASE), Platform.INSTAGRAM),
]


def classify(raw: str) -> Optional[ClassifiedUrl]:
    """Classify a URL, returning None when no supported platform matches."""
    raw = raw.strip()
    for pattern, platform in _PATTERNS:
        match = pattern.search(raw)
        if match:
            return ClassifiedUrl(platform=platform, external_id=match.group(1))
    return None


def is_supported(raw: str) -> bool:
    return classify(raw) is not None


def canonical_url(classified: ClassifiedUrl) -> str:
    """Return the canonical page URL for a classified ID."""
    platform, external_id = classified.platform, classified.external_id
    if platform == Platform.YOUTUBE:
        return f"https://www.youtube.com/watch?v={external_id}"
    if platform == Platform.TIKTOK:
        return f"https://www.tiktok.com/video/{external_id}"
    if platform == Platform.TWITTER:
        return f"https://x.com/i/status/{external_id}"
    return f"https://www.instagram.com/p/{external_id}/"
