"""PDF conversion service (images, text, HTML and Word documents) using Pillow's PDF writer."""
import io
import logging
import re
import textwrap
import zipfile
from typing import List, Optional, Sequence, Tuple

import mammoth
from bs4 import BeautifulSoup
from PIL import Image, ImageDraw, ImageFont

from multitool_api.services.image_service import ImageService, ImageServiceError

logger = logging.getLogger(__name__)

# A4 at 72 dpi
PAGE_WIDTH = 595
PAGE_HEIGHT = 842
MARGIN = 40
LINE_HEIGHT = 14
WRAP_COLUMNS = 95

# Elements that end a line when HTML is flattened to text
BLOCK_TAGS = [
    "p", "div", "br", "li", "tr", "pre", "blockquote", "table", "ul", "ol",
    "section", "article", "header", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
]


class PdfServiceError(RuntimeError):
    """Raised when input cannot be turned into a PDF."""


class PdfService:
    """Service for building PDF documents."""

    @staticmethod
    def _save_pages(pages: Sequence[Image.Image]) -> bytes:
        rgb_pages = [page.convert("RGB") if page.mode != "RGB" else page for page in pages]
        buf = io.BytesIO()
        rgb_pages[0].save(buf, "PDF", save_all=True, append_images=rgb_pages[1:])
        return buf.getvalue()

    @staticmethod
    def images_to_pdf(images: Sequence[bytes]) -> bytes:
        """
        Convert images into a PDF with one page per image.

        Raises:
            PdfServiceError: If no images are given or one cannot be decoded
        """
        if not images:
            raise PdfServiceError("At least one image is required")
        try:
            pages = [ImageService.load(data) for data in images]
        except ImageServiceError as e:
            raise PdfServiceError(str(e)) from e
        pdf = PdfService._save_pages(pages)
        logger.info(f"Built {len(pages)}-page PDF from images ({len(pdf)} bytes)")
        return pdf

    @staticmethod
    def wrap_text(text: str, width: int = WRAP_COLUMNS) -> List[str]:
        """Wrap text to page width, keeping blank lines."""
        lines: List[str] = []
        for paragraph in text.splitlines():
            if not paragraph.strip():
                lines.append("")
                continue
            lines.extend(textwrap.wrap(paragraph, width=width, replace_whitespace=False) or [""])
        return lines

    @staticmethod
    def text_to_pdf(text: str, title: Optional[str] = None) -> bytes:
        """
        Render plain text onto A4 pages.

        Raises:
            PdfServiceError: If the text is empty
        """
        if not text or not text.strip():
            raise PdfServiceError("Text is required")

        lines = PdfService.wrap_text(text)
        if title:
            lines = [title, ""] + lines

        font = ImageFont.load_default()
        per_page = (PAGE_HEIGHT - 2 * MARGIN) // LINE_HEIGHT
        pages = []
        for start in range(0, len(lines), per_page):
            page = Image.new("RGB", (PAGE_WIDTH, PAGE_HEIGHT), "white")
            draw = ImageDraw.Draw(page)
            y = MARGIN
            for line in lines[start:start + per_page]:
                draw.text((MARGIN, y), line, fill="black", font=font)
                y += LINE_HEIGHT
            pages.append(page)

        pdf = PdfService._save_pages(pages)
        logger.info(f"Built {len(pages)}-page PDF from {len(lines)} lines of text")
        return pdf

    @staticmethod
    def html_to_text(html: str) -> Tuple[Optional[str], str]:
        """Flatten HTML to plain text lines, returning ``(title, text)``."""
        soup = BeautifulSoup(html, "html.parser")
        title = soup.title.get_text(strip=True) if soup.title else None
        for tag in soup(["script", "style", "head", "title", "template"]):
            tag.decompose()
        for tag in soup.find_all("li"):
            tag.insert(0, "- ")
        for tag in soup.find_all(BLOCK_TAGS):
            tag.insert_after("\n")

        lines: List[str] = []
        for raw in soup.get_text().splitlines():
            line = re.sub(r"\s+", " ", raw).strip()
            if line or (lines and lines[-1]):
                lines.append(line)
        while lines and not lines[-1]:
            lines.pop()
        return title or None, "\n".join(lines)

    @staticmethod
    def html_to_pdf(html: str, title: Optional[str] = None) -> bytes:
        """
        Render the text content of an HTML document onto A4 pages.

        The document's <title> is used when no title is given.

        Raises:
            PdfServiceError: If the HTML has no visible text
        """
        html_title, text = PdfService.html_to_text(html or "")
        if not text:
            raise PdfServiceError("HTML has no text content")
        return PdfService.text_to_pdf(text, title=title or html_title)

    @staticmethod
    def docx_to_pdf(data: bytes, title: Optional[str] = None) -> bytes:
        """
        Convert a Word (.docx) document to PDF via mammoth's HTML output.

        Raises:
            PdfServiceError: If the file is not a readable .docx document
        """
        try:
            result = mammoth.convert_to_html(io.BytesIO(data))
        except (zipfile.BadZipFile, KeyError, ValueError, OSError) as e:
            raise PdfServiceError("Not a valid Word document (.docx)") from e
        for message in result.messages:
            logger.warning(f"mammoth: {message.message}")
        return PdfService.html_to_pdf(result.value, title=title)
