"""
Pick the downloadable video formats offered to the user.

yt-dlp reports every rendition of a video (DASH video-only streams, several
bitrates per resolution, audio-only tracks, storyboards). The selector keeps
video streams in common containers, orders them by resolution and keeps one
entry per resolution. The first-seen descriptor wins when heights tie, so the
ordering of yt-dlp's own list decides between bitrate variants.
"""
from __future__ import annotations

import math
from typing import Any, List, Mapping, Optional, Sequence

from multitool_api.config import settings
from multitool_api.models import SelectedFormat

ACCEPTED_CONTAINERS = frozenset({"mp4", "webm"})

# Shown while the size of a stream is not known yet.
SIZE_UNKNOWN_LABEL = "Calculando..."

# Output container after the stream endpoint merges video + best audio.
MERGED_CONTAINER = "mp4"


def _positive_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return None
    return number if number > 0 else None


def _is_acceptable(fmt: Any) -> bool:
    if not isinstance(fmt, Mapping):
        return False
    vcodec = fmt.get("vcodec")
    if not isinstance(vcodec, str) or not vcodec or vcodec == "none":
        return False
    if _positive_int(fmt.get("height")) is None:
        return False
    ext = fmt.get("ext")
    return isinstance(ext, str) and ext in ACCEPTED_CONTAINERS


def format_size_label(filesize: Any = None, filesize_approx: Any = None) -> str:
    """Render a byte count as megabytes, '~' prefixed when approximate."""
    exact = _positive_int(filesize)
    if exact is not None:
        return f"{exact / 1024 / 1024:.1f} MB"
    approx = _positive_int(filesize_approx)
    if approx is not None:
        return f"~{approx / 1024 / 1024:.1f} MB"
    return SIZE_UNKNOWN_LABEL


def rank_formats(formats: Sequence[Any], max_results: Optional[int] = None) -> List[Mapping]:
    """
    Filter, sort, dedupe and cap raw yt-dlp format descriptors.

    Args:
        formats: Format dicts as found in yt-dlp's ``info["formats"]``
        max_results: Maximum number of descriptors to return

    Returns:
        At most ``max_results`` descriptors, one per height, tallest first

    Raises:
        ValueError: If max_results is not positive
    """
    if max_results is None:
        max_results = settings.MAX_FORMAT_RESULTS
    if max_results <= 0:
        raise ValueError("max_results must be positive")

    candidates = [fmt for fmt in (formats or []) if _is_acceptable(fmt)]
    # sorted() is stable: equal heights keep their original relative order
    candidates = sorted(candidates, key=lambda fmt: _positive_int(fmt.get("height")), reverse=True)

    ranked: List[Mapping] = []
    seen_heights = set()
    for fmt in candidates:
        height = _positive_int(fmt.get("height"))
        if height in seen_heights:
            continue
        seen_heights.add(height)
        ranked.append(fmt)
        if len(ranked) == max_results:
            break
    return ranked


def to_selected_format(fmt: Mapping) -> SelectedFormat:
    """Describe a single ranked descriptor for the client."""
    height = _positive_int(fmt.get("height"))
    width = _positive_int(fmt.get("width")) or 0
    fps = fmt.get("fps")
    try:
        fps = float(fps) if fps and not isinstance(fps, bool) else None
    except (TypeError, ValueError):
        fps = None
    fps = int(round(fps)) if fps is not None and math.isfinite(fps) and fps > 0 else None

    note = fmt.get("format_note")
    return SelectedFormat(
        format_id=str(fmt.get("format_id") or ""),
        quality=note if isinstance(note, str) and note else f"{height}p",
        container=MERGED_CONTAINER,
        resolution=f"{width}x{height}",
        filesize=format_size_label(fmt.get("filesize"), fmt.get("filesize_approx")),
        fps=fps,
        vcodec=fmt.get("vcodec"),
    )


def select_formats(formats: Sequence[Any], max_results: Optional[int] = None) -> List[SelectedFormat]:
    """Return the formats offered to the user, tallest first, one per resolution."""
    return [to_selected_format(fmt) for fmt in rank_formats(formats, max_results)]
