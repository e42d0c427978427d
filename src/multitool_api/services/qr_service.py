"""QR code generation service."""
import io

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image, ImageColor

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


class QrServiceError(RuntimeError):
    """Raised when a QR code cannot be generated."""


class QrService:
    """Service for rendering QR codes as PNG images."""

    @staticmethod
    def generate_png(
        text: str,
        size: int = 256,
        fg_color: str = "#000000",
        bg_color: str = "#FFFFFF",
        level: str = "M",
    ) -> bytes:
        """
        Render ``text`` as a square PNG QR code of ``size`` pixels.

        Raises:
            QrServiceError: For empty text, unknown level, bad colour or
                data too long for a QR code
        """
        if not text:
            raise QrServiceError("Text is required")
        if level not in ERROR_CORRECTION_LEVELS:
            raise QrServiceError(f"Unknown error correction level: {level}")
        try:
            fill = ImageColor.getrgb(fg_color)
            back = ImageColor.getrgb(bg_color)
        except ValueError as e:
            raise QrServiceError(f"Invalid colour: {e}") from e

        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECTION_LEVELS[level],
            box_size=10,
            border=2,
        )
        qr.add_data(text)
        try:
            qr.make(fit=True)
        except (DataOverflowError, ValueError) as e:
            # qrcode 8 reports overflow as an invalid version past 40
            raise QrServiceError("Text is too long for a QR code") from e

        img = qr.make_image(fill_color=fill, back_color=back).get_image().convert("RGB")
        img = img.resize((size, size), Image.Resampling.NEAREST)

        buf = io.BytesIO()
        img.save(buf, "PNG")
        return buf.getvalue()
