"""Request and response models for the multitool API."""
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire."""
    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Video download
# ---------------------------------------------------------------------------


class UrlRequest(BaseModel):
    url: str = Field(..., min_length=1)


class ClassifyResponse(CamelModel):
    platform: str
    external_id: str = Field(..., alias="externalId")


class SelectedFormat(CamelModel):
    """A single downloadable quality offered to the user."""
    format_id: str = Field(..., alias="formatId")
    quality: str
    container: str = "mp4"
    resolution: str  # "WxH"
    filesize: str
    fps: Optional[int] = None
    vcodec: Optional[str] = None
    acodec: str = "merged"  # audio is merged in at download time


class FormatSelectRequest(CamelModel):
    formats: List[Dict[str, Any]] = Field(default_factory=list)
    max_results: Optional[int] = Field(default=None, alias="maxResults", gt=0)


class FormatSelectResponse(BaseModel):
    formats: List[SelectedFormat]


class VideoInfo(CamelModel):
    """Video details returned before a download starts."""
    success: bool = True
    platform: str
    video_id: str = Field(..., alias="videoId")
    title: str
    thumbnail: str = ""
    formats: List[SelectedFormat] = Field(default_factory=list)
    download_url: str = Field("", alias="downloadUrl")
    message: str = "Click the download button to download the video"


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


class TextToPdfRequest(BaseModel):
    text: str = Field(..., min_length=1)
    title: Optional[str] = None


class HtmlToPdfRequest(BaseModel):
    html: str = Field(..., min_length=1)
    title: Optional[str] = None


class QrRequest(CamelModel):
    text: str = Field(..., min_length=1)
    size: int = Field(256, ge=64, le=1024)
    fg_color: str = Field("#000000", alias="fgColor")
    bg_color: str = Field("#FFFFFF", alias="bgColor")
    level: Literal["L", "M", "Q", "H"] = "M"
