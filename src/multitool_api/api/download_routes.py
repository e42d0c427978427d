"""API routes for video link classification and downloads."""
import logging
from typing import Iterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse, StreamingResponse

from multitool_api.models import (
    ClassifyResponse,
    FormatSelectRequest,
    FormatSelectResponse,
    UrlRequest,
    VideoInfo,
)
from multitool_api.services.adapters import (
    PlatformAdapter,
    PlatformUnavailableError,
    get_adapter,
    safe_filename,
)
from multitool_api.services.extractor import ExtractionError, MediaExtractor, get_extractor
from multitool_api.services.format_selector import select_formats
from multitool_api.services.url_router import ClassifiedUrl, Platform, canonical_url, classify

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["download"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _classify_for(url: str, platform: Optional[Platform] = None) -> ClassifiedUrl:
    """Classify a URL, rejecting it when it is unsupported or of another platform."""
    classified = classify(url)
    if classified is None:
        if platform is None:
            raise HTTPException(status_code=400, detail="Unsupported URL")
        raise HTTPException(status_code=400, detail=f"Invalid {get_adapter(platform).display_name} URL")
    if platform is not None and classified.platform != platform:
        raise HTTPException(status_code=400, detail=f"Invalid {get_adapter(platform).display_name} URL")
    return classified


def _unavailable_response(adapter: PlatformAdapter, error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=503,
        content={
            "success": False,
            "error": str(error),
            "platform": adapter.platform_name().value,
            "unavailable": True,
        },
    )


def _video_info(url: str, classified: ClassifiedUrl, extractor: MediaExtractor):
    adapter = get_adapter(classified.platform)
    logger.info(f"Fetching {adapter.display_name} video {canonical_url(classified)}")
    try:
        return adapter.fetch(url, classified, extractor)
    except PlatformUnavailableError as e:
        return _unavailable_response(adapter, e)
    except ExtractionError as e:
        logger.error(f"Error processing {adapter.display_name} URL: {e}")
        raise HTTPException(status_code=502, detail=str(e))


def _primed(chunks: Iterator[bytes]) -> Iterator[bytes]:
    """Pull the first chunk now so startup failures surface before headers are sent."""
    try:
        first = next(chunks)
    except StopIteration:
        return iter(())
    return _relay(first, chunks)


def _relay(first: bytes, chunks: Iterator[bytes]) -> Iterator[bytes]:
    # Closing this generator closes the extractor stream, which kills yt-dlp
    try:
        yield first
        yield from chunks
    finally:
        close = getattr(chunks, "close", None)
        if close is not None:
            close()


# ---------------------------------------------------------------------------
# Classification / format selection
# ---------------------------------------------------------------------------


@router.post("/classify", response_model=ClassifyResponse)
def classify_url(body: UrlRequest):
    """Identify the platform and external ID of a video link."""
    classified = _classify_for(body.url)
    return ClassifyResponse(platform=classified.platform.value, external_id=classified.external_id)


@router.post("/formats/select", response_model=FormatSelectResponse)
def select_format_list(body: FormatSelectRequest):
    """Reduce a raw yt-dlp format list to one entry per resolution."""
    return FormatSelectResponse(formats=select_formats(body.formats, body.max_results))


# ---------------------------------------------------------------------------
# Video info
# ---------------------------------------------------------------------------


@router.post("/download", response_model=VideoInfo)
def download_any(body: UrlRequest, extractor: MediaExtractor = Depends(get_extractor)):
    """Get video info for a link from any supported platform."""
    classified = _classify_for(body.url)
    return _video_info(body.url, classified, extractor)


@router.post("/download-{platform}", response_model=VideoInfo)
def download_platform(
    platform: Platform,
    body: UrlRequest,
    extractor: MediaExtractor = Depends(get_extractor),
):
    """Get video info (title, thumbnail, formats) for a link of one platform."""
    classified = _classify_for(body.url, platform)
    return _video_info(body.url, classified, extractor)


# ---------------------------------------------------------------------------
# Streaming
# ---------------------------------------------------------------------------


@router.get("/download-{platform}-stream")
def download_platform_stream(
    platform: Platform,
    url: Optional[str] = Query(None),
    format_id: Optional[str] = Query(None, alias="formatId"),
    extractor: MediaExtractor = Depends(get_extractor),
):
    """Stream the video file produced by yt-dlp."""
    if not url:
        raise HTTPException(status_code=400, detail="URL is required")
    _classify_for(url, platform)

    adapter = get_adapter(platform)
    try:
        adapter.ensure_available()
    except PlatformUnavailableError as e:
        return _unavailable_response(adapter, e)

    try:
        info = extractor.extract_info(url)
    except ExtractionError as e:
        logger.error(f"Error getting video info for {url}: {e}")
        raise HTTPException(status_code=500, detail="Error getting video information")

    filename = safe_filename(info.get("title"), fallback=f"{platform.value}_video")
    format_spec = adapter.stream_format(format_id)

    try:
        chunks = _primed(extractor.stream(url, format_spec))
    except ExtractionError as e:
        logger.error(f"Error streaming {url}: {e}")
        raise HTTPException(status_code=502, detail="Error downloading video")

    return StreamingResponse(
        chunks,
        media_type="video/mp4",
        headers={"Content-Disposition": f'attachment; filename="{filename}.mp4"'},
    )
