"""API routes for the image, PDF and QR tools."""
import logging
import os
from typing import List

from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response

from multitool_api.config import settings
from multitool_api.models import HtmlToPdfRequest, QrRequest, TextToPdfRequest
from multitool_api.services.adapters import safe_filename
from multitool_api.services.image_service import ImageService, ImageServiceError
from multitool_api.services.pdf_service import PdfService, PdfServiceError
from multitool_api.services.qr_service import QrService, QrServiceError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tools", tags=["tools"])


async def _read_upload(file: UploadFile) -> bytes:
    data = await file.read()
    if not data:
        raise HTTPException(status_code=400, detail=f"Empty file: {file.filename}")
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail=f"File too large: {file.filename}")
    return data


@router.post("/compress-image")
async def compress_image(
    file: UploadFile = File(...),
    quality: float = Form(0.8),
    max_width: int = Form(1920),
    max_height: int = Form(1920),
    format: str = Form("jpeg"),
):
    """Compress and downscale an uploaded image."""
    data = await _read_upload(file)
    try:
        result = ImageService.compress(
            data, quality=quality, max_width=max_width, max_height=max_height, fmt=format
        )
    except ImageServiceError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return Response(
        content=result.data,
        media_type=result.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="compressed.{result.fmt}"',
            "X-Original-Size": str(result.original_size),
            "X-Compressed-Size": str(result.compressed_size),
            "X-Image-Dimensions": f"{result.width}x{result.height}",
            "X-Savings-Percent": str(result.savings_percent),
        },
    )


@router.post("/images-to-pdf")
async def images_to_pdf(files: List[UploadFile] = File(...)):
    """Combine uploaded images into a PDF, one image per page."""
    images = [await _read_upload(f) for f in files]
    try:
        pdf = PdfService.images_to_pdf(images)
    except PdfServiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="images.pdf"'},
    )


@router.post("/text-to-pdf")
def text_to_pdf(body: TextToPdfRequest):
    """Render plain text as a PDF document."""
    try:
        pdf = PdfService.text_to_pdf(body.text, title=body.title)
    except PdfServiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="document.pdf"'},
    )


@router.post("/html-to-pdf")
def html_to_pdf(body: HtmlToPdfRequest):
    """Render the text of an HTML document as a PDF."""
    try:
        pdf = PdfService.html_to_pdf(body.html, title=body.title)
    except PdfServiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": 'attachment; filename="converted_html.pdf"'},
    )


@router.post("/docx-to-pdf")
async def docx_to_pdf(file: UploadFile = File(...)):
    """Convert an uploaded Word (.docx) document to PDF."""
    data = await _read_upload(file)
    stem = safe_filename(os.path.splitext(file.filename or "")[0], fallback="document")
    try:
        pdf = PdfService.docx_to_pdf(data)
    except PdfServiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="converted_{stem}.pdf"'},
    )


@router.post("/qr")
def generate_qr(body: QrRequest):
    """Render a QR code as PNG."""
    try:
        png = QrService.generate_png(
            body.text,
            size=body.size,
            fg_color=body.fg_color,
            bg_color=body.bg_color,
            level=body.level,
        )
    except QrServiceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": 'attachment; filename="qrcode.png"'},
    )
