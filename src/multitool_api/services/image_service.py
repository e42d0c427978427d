"""Image compression service backed by Pillow."""
import io
import logging
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# Output format -> (Pillow format name, media type)
OUTPUT_FORMATS = {
    "jpeg": ("JPEG", "image/jpeg"),
    "png": ("PNG", "image/png"),
    "webp": ("WEBP", "image/webp"),
}

# Modes each encoder writes as-is; anything else is converted first
ENCODABLE_MODES = {
    "JPEG": {"RGB", "L"},
    "PNG": {"1", "L", "LA", "P", "RGB", "RGBA"},
    "WEBP": {"RGB", "RGBA"},
}


class ImageServiceError(RuntimeError):
    """Raised when an image cannot be decoded or re-encoded."""


@dataclass
class CompressedImage:
    data: bytes
    original_size: int
    compressed_size: int
    width: int
    height: int
    fmt: str

    @property
    def media_type(self) -> str:
        return OUTPUT_FORMATS[self.fmt][1]

    @property
    def savings_percent(self) -> float:
        if not self.original_size:
            return 0.0
        return round((1 - self.compressed_size / self.original_size) * 100, 2)


def format_bytes(num_bytes: int) -> str:
    """Human readable size, e.g. '1.5 MB'."""
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    value = float(num_bytes)
    idx = 0
    while value >= 1024 and idx < len(units) - 1:
        value /= 1024
        idx += 1
    return f"{round(value, 2):g} {units[idx]}"


class ImageService:
    """Service for compressing and resizing uploaded images."""

    @staticmethod
    def load(data: bytes) -> Image.Image:
        try:
            img = Image.open(io.BytesIO(data))
            img.load()
        except Image.DecompressionBombError as e:
            raise ImageServiceError("Image is too large to process") from e
        except (UnidentifiedImageError, OSError) as e:
            raise ImageServiceError(f"Could not read image: {e}") from e
        return img

    @staticmethod
    def encodable(img: Image.Image, pil_format: str) -> Image.Image:
        """Convert ``img`` to a mode the target encoder accepts."""
        if img.mode in ENCODABLE_MODES[pil_format]:
            return img
        has_alpha = "A" in img.getbands() or "transparency" in img.info
        if has_alpha and pil_format != "JPEG":
            return img.convert("RGBA")
        return img.convert("RGB")

    @staticmethod
    def fit_within(img: Image.Image, max_width: int, max_height: int) -> Image.Image:
        """Downscale to fit the box, keeping aspect ratio. Never upscales."""
        if img.width <= max_width and img.height <= max_height:
            return img
        ratio = min(max_width / img.width, max_height / img.height)
        new_size = (max(1, int(img.width * ratio)), max(1, int(img.height * ratio)))
        return img.resize(new_size, Image.Resampling.LANCZOS)

    @staticmethod
    def compress(
        data: bytes,
        quality: float = 0.8,
        max_width: int = 1920,
        max_height: int = 1920,
        fmt: str = "jpeg",
    ) -> CompressedImage:
        """
        Compress an image.

        Args:
            data: Raw uploaded image bytes
            quality: Encoder quality in (0, 1]; ignored for PNG
            max_width: Maximum output width in pixels
            max_height: Maximum output height in pixels
            fmt: Output format (jpeg, png, webp)

        Returns:
            CompressedImage with the encoded bytes and size stats

        Raises:
            ImageServiceError: If the input is not an image or arguments are invalid
        """
        fmt = fmt.lower()
        if fmt == "jpg":
            fmt = "jpeg"
        if fmt not in OUTPUT_FORMATS:
            raise ImageServiceError(f"Unsupported output format: {fmt}")
        if not 0 < quality <= 1:
            raise ImageServiceError("Quality must be between 0 and 1")
        if max_width <= 0 or max_height <= 0:
            raise ImageServiceError("Maximum dimensions must be positive")

        img = ImageService.load(data)
        img = ImageService.fit_within(img, max_width, max_height)

        pil_format = OUTPUT_FORMATS[fmt][0]
        img = ImageService.encodable(img, pil_format)
        buf = io.BytesIO()
        try:
            if pil_format == "JPEG":
                img.save(buf, pil_format, quality=int(round(quality * 100)), optimize=True)
            elif pil_format == "WEBP":
                img.save(buf, pil_format, quality=int(round(quality * 100)))
            else:
                img.save(buf, pil_format, optimize=True)
        except (OSError, ValueError) as e:
            raise ImageServiceError(f"Could not encode image as {fmt}: {e}") from e

        out = buf.getvalue()
        logger.info(
            f"Compressed image {format_bytes(len(data))} -> {format_bytes(len(out))} "
            f"({img.width}x{img.height} {fmt})"
        )
        return CompressedImage(
            data=out,
            original_size=len(data),
            compressed_size=len(out),
            width=img.width,
            height=img.height,
            fmt=fmt,
        )
