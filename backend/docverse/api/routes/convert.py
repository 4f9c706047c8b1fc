"""
Format conversion API: Office -> PDF and PDF -> Office.

One file returns the converted document; several files return a ZIP with
one converted document per upload, in upload order.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from docverse.api.responses import file_response
from docverse.api.uploads import read_uploads
from docverse.config import Settings, get_settings
from docverse.models.conversion import (
    Capability,
    ConversionParams,
    ConversionRequest,
    OfficeFormat,
)
from docverse.services.converter import run_conversion
from docverse.services.formats import DEFAULT_OFFICE_FILENAME, OFFICE_INPUT_EXTENSIONS
from docverse.services.office_service import ensure_pdf_to_office_supported

router = APIRouter()


@router.post("/convert/{source}-to-pdf", summary="Convert Office documents to PDF")
async def office_to_pdf(
    source: OfficeFormat,
    files: list[UploadFile] = File(...),
    settings: Settings = Depends(get_settings),
):
    inputs = await read_uploads(
        files,
        settings,
        OFFICE_INPUT_EXTENSIONS[source],
        default_name=DEFAULT_OFFICE_FILENAME[source],
    )
    request = ConversionRequest(
        capability=Capability.OFFICE_TO_PDF,
        files=inputs,
        params=ConversionParams(office_format=source),
    )
    return file_response(await run_conversion(request, settings))


@router.post("/convert/pdf-to-{target}", summary="Convert PDFs to Office documents")
async def pdf_to_office(
    target: OfficeFormat,
    files: list[UploadFile] = File(...),
    settings: Settings = Depends(get_settings),
):
    ensure_pdf_to_office_supported(target, settings)
    inputs = await read_uploads(files, settings, {"pdf"})
    request = ConversionRequest(
        capability=Capability.PDF_TO_OFFICE,
        files=inputs,
        params=ConversionParams(office_format=target),
    )
    return file_response(await run_conversion(request, settings))
