"""
PDF tools API: compression, OCR, merge, unlock.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from docverse.api.responses import file_response
from docverse.api.uploads import read_upload, read_uploads
from docverse.config import Settings, get_settings
from docverse.models.conversion import (
    Capability,
    CompressionQuality,
    ConversionParams,
    ConversionRequest,
)
from docverse.models.schemas import EncryptionStatusResponse
from docverse.services.converter import run_conversion
from docverse.services.formats import IMAGE_EXTENSIONS, MAX_DPI, MIN_DPI
from docverse.services.pdf_service import pdf_service

router = APIRouter()

PDF_ONLY = {"pdf"}


@router.post("/compress-pdf", summary="Reduce PDF file size")
async def compress_pdf(
    file: UploadFile = File(...),
    quality: CompressionQuality = Form(default=CompressionQuality.MEDIUM),
    dpi: Optional[int] = Form(default=None, ge=MIN_DPI, le=MAX_DPI),
    settings: Settings = Depends(get_settings),
):
    """
    Compress one PDF.

    The response is never larger than the upload: when compression does not
    shrink the file, the original bytes come back unchanged.
    """
    upload = await read_upload(file, settings, PDF_ONLY)
    request = ConversionRequest(
        capability=Capability.COMPRESS,
        files=[upload],
        params=ConversionParams(quality=quality, dpi=dpi),
    )
    return file_response(await run_conversion(request, settings))


@router.post("/ocr-searchable-pdf", summary="Make scanned PDFs and images searchable")
async def ocr_searchable_pdf(
    files: list[UploadFile] = File(...),
    language: str = Form(default="en"),
    settings: Settings = Depends(get_settings),
):
    inputs = await read_uploads(files, settings, PDF_ONLY | IMAGE_EXTENSIONS)
    request = ConversionRequest(
        capability=Capability.OCR,
        files=inputs,
        params=ConversionParams(language=language),
    )
    return file_response(await run_conversion(request, settings))


@router.post("/merge-pdf", summary="Merge PDFs in upload order")
async def merge_pdf(
    files: list[UploadFile] = File(...),
    settings: Settings = Depends(get_settings),
):
    inputs = await read_uploads(files, settings, PDF_ONLY, min_files=2)
    request = ConversionRequest(capability=Capability.MERGE, files=inputs)
    return file_response(await run_conversion(request, settings))


@router.post("/unlock-pdf", summary="Remove password protection")
async def unlock_pdf(
    file: UploadFile = File(...),
    password: str = Form(...),
    settings: Settings = Depends(get_settings),
):
    upload = await read_upload(file, settings, PDF_ONLY)
    request = ConversionRequest(
        capability=Capability.UNLOCK,
        files=[upload],
        params=ConversionParams(password=password),
    )
    return file_response(await run_conversion(request, settings))


@router.post("/pdf-encryption-status", response_model=EncryptionStatusResponse)
async def pdf_encryption_status(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    upload = await read_upload(file, settings, PDF_ONLY)
    encrypted = await asyncio.to_thread(pdf_service.is_encrypted, upload.data)
    return EncryptionStatusResponse(encrypted=encrypted)
