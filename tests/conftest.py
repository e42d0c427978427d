"""
Test fixtures for multitool-api.

Provides a fake extractor in place of yt-dlp so route tests run offline
and never spawn a subprocess.
"""

import io
import sys
import zipfile
from pathlib import Path
from typing import Any, Dict, Iterator, List

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import multitool_api...`
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from multitool_api.main import app
from multitool_api.services.extractor import ExtractionError, MediaExtractor, get_extractor


# ---------------------------------------------------------------------------
# Sample yt-dlp data
# ---------------------------------------------------------------------------


@pytest.fixture
def raw_formats() -> List[Dict[str, Any]]:
    """A trimmed-down yt-dlp format list for a YouTube video."""
    return [
        {"format_id": "139", "ext": "m4a", "vcodec": "none", "acodec": "mp4a.40.5", "height": None},
        {"format_id": "sb0", "ext": "mhtml", "vcodec": "none", "height": 45, "width": 80},
        {"format_id": "134", "ext": "mp4", "vcodec": "avc1.4d401e", "height": 360, "width": 640,
         "fps": 30, "filesize": 5_242_880, "format_note": "360p"},
        {"format_id": "136", "ext": "mp4", "vcodec": "avc1.4d401f", "height": 720, "width": 1280,
         "fps": 30, "filesize": 20_971_520, "format_note": "720p"},
        {"format_id": "247", "ext": "webm", "vcodec": "vp9", "height": 720, "width": 1280,
         "fps": 30, "filesize_approx": 18_000_000, "format_note": "720p"},
        {"format_id": "137", "ext": "mp4", "vcodec": "avc1.640028", "height": 1080, "width": 1920,
         "fps": 29.97, "format_note": "1080p"},
        {"format_id": "398", "ext": "mp4", "vcodec": "av01.0.05M.08", "height": 1080, "width": 1920,
         "fps": 30, "filesize": 40_000_000, "format_note": "1080p"},
    ]


@pytest.fixture
def youtube_info(raw_formats) -> Dict[str, Any]:
    """Mock yt-dlp extract_info response for YouTube."""
    return {
        "id": "dQw4w9WgXcQ",
        "title": "Never Gonna Give You Up",
        "thumbnail": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hq720.jpg",
        "formats": raw_formats,
    }


# ---------------------------------------------------------------------------
# Fake extractor
# ---------------------------------------------------------------------------


class FakeExtractor(MediaExtractor):
    """Records calls; returns canned info and stream chunks."""

    def __init__(self, info: Dict[str, Any], chunks: List[bytes] = None, error: Exception = None):
        self.info = info
        self.chunks = chunks if chunks is not None else [b"\x00\x00\x00\x18ftypmp42", b"moov"]
        self.error = error
        self.info_calls: List[str] = []
        self.stream_calls: List[tuple] = []

    def extract_info(self, url: str) -> Dict[str, Any]:
        self.info_calls.append(url)
        if self.error is not None:
            raise self.error
        return self.info

    def stream(self, url: str, format_spec: str) -> Iterator[bytes]:
        self.stream_calls.append((url, format_spec))
        yield from self.chunks


@pytest.fixture
def fake_extractor(youtube_info) -> FakeExtractor:
    return FakeExtractor(youtube_info)


@pytest.fixture
def failing_extractor() -> FakeExtractor:
    return FakeExtractor({}, error=ExtractionError("Could not get video information: Video unavailable"))


# ---------------------------------------------------------------------------
# Test clients
# ---------------------------------------------------------------------------


@pytest.fixture
def client(fake_extractor) -> Iterator[TestClient]:
    """Per-test TestClient wired to the fake extractor."""
    app.dependency_overrides[get_extractor] = lambda: fake_extractor
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client(failing_extractor) -> Iterator[TestClient]:
    app.dependency_overrides[get_extractor] = lambda: failing_extractor
    yield TestClient(app)
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------


@pytest.fixture
def png_bytes() -> bytes:
    """A 1200x800 RGBA PNG."""
    from PIL import Image

    img = Image.new("RGBA", (1200, 800), color=(200, 30, 30, 255))
    buf = io.BytesIO()
    img.save(buf, "PNG")
    return buf.getvalue()


@pytest.fixture
def small_jpeg_bytes() -> bytes:
    from PIL import Image

    img = Image.new("RGB", (100, 50), color="white")
    buf = io.BytesIO()
    img.save(buf, "JPEG")
    return buf.getvalue()


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@pytest.fixture
def docx_bytes() -> bytes:
    """A minimal Word document with a heading and two paragraphs."""
    content_types = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
        '<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>'
        '<Default Extension="xml" ContentType="application/xml"/>'
        '<Override PartName="/word/document.xml" '
        'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
        "</Types>"
    )
    rels = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">'
        '<Relationship Id="rId1" '
        'Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" '
        'Target="word/document.xml"/>'
        "</Relationships>"
    )
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        "<w:body>"
        "<w:p><w:r><w:t>Quarterly report</w:t></w:r></w:p>"
        "<w:p><w:r><w:t>Revenue grew in every region.</w:t></w:r></w:p>"
        "</w:body>"
        "</w:document>"
    )
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("[Content_Types].xml", content_types)
        zf.writestr("_rels/.rels", rels)
        zf.writestr("word/document.xml", document)
    return buf.getvalue()
