"""
Office Service - Office <-> PDF conversion engines.

Each direction has a cloud candidate (createpdf / exportpdf jobs) and a
local candidate (headless LibreOffice). The engine selection policy picks
between them.
"""

from docverse.config import Settings
from docverse.models.conversion import ConversionRequest, OfficeFormat
from docverse.services.cloud import CloudJobKind, run_cloud_job
from docverse.services.exceptions import InvalidInputError, LocalToolError
from docverse.services.formats import (
    DEFAULT_OFFICE_FILENAME,
    OFFICE_EXTENSION,
    OFFICE_MIME,
    PDF_MIME,
    cloud_upload_mime,
)
from docverse.services.local_tools import run_local_tool
from docverse.services.workspace import safe_filename

# PDF import filters so LibreOffice opens PDFs in the matching application.
# Spreadsheets have none: a PDF opens in Draw, which cannot export xlsx.
PDF_IMPORT_FILTERS = {
    OfficeFormat.WORD: "writer_pdf_import",
    OfficeFormat.POWERPOINT: "impress_pdf_import",
}


def _soffice_args(target: str, infilter: str | None = None) -> list[str]:
    # One profile per call; soffice instances cannot share a profile
    args = ["-env:UserInstallation={profile_uri}", "--headless"]
    if infilter:
        args.append(f"--infilter={infilter}")
    return args + ["--convert-to", target, "--outdir", "{outdir}", "{input}"]


def _office_input_name(request: ConversionRequest) -> str:
    file = request.primary
    default = DEFAULT_OFFICE_FILENAME[request.params.office_format]
    return safe_filename(file.filename or default, default)


def _pdf_input_name(request: ConversionRequest) -> str:
    return safe_filename(request.primary.filename or "document.pdf", "document.pdf")


def _stem(name: str) -> str:
    return name.rsplit(".", 1)[0] if "." in name else name


# Office -> PDF


def describe_office_to_pdf(request: ConversionRequest) -> tuple[str, str]:
    return f"{_stem(_office_input_name(request))}.pdf", PDF_MIME


async def office_to_pdf_cloud(request: ConversionRequest, settings: Settings) -> bytes:
    file = request.primary
    input_name = _office_input_name(request)
    return await run_cloud_job(
        CloudJobKind.CREATE_PDF,
        file.data,
        None,
        settings,
        media_type=cloud_upload_mime(file.extension),
        filename=input_name,
    )


async def office_to_pdf_local(request: ConversionRequest, settings: Settings) -> bytes:
    input_name = _office_input_name(request)
    return await run_local_tool(
        settings.soffice_path,
        _soffice_args("pdf"),
        request.primary.data,
        input_name=input_name,
        output_name=f"{_stem(input_name)}.pdf",
        settings=settings,
    )


# PDF -> Office


def ensure_pdf_to_office_supported(office_format: OfficeFormat, settings: Settings) -> None:
    """Reject targets that no available engine can produce."""
    if office_format not in PDF_IMPORT_FILTERS and not settings.cloud_engine_enabled:
        raise InvalidInputError(
            f"PDF to {office_format.value} conversion requires the cloud engine"
        )


def describe_pdf_to_office(request: ConversionRequest) -> tuple[str, str]:
    office_format: OfficeFormat = request.params.office_format
    extension = OFFICE_EXTENSION[office_format]
    return f"{_stem(_pdf_input_name(request))}.{extension}", OFFICE_MIME[office_format]


async def pdf_to_office_cloud(request: ConversionRequest, settings: Settings) -> bytes:
    extension = OFFICE_EXTENSION[request.params.office_format]
    return await run_cloud_job(
        CloudJobKind.EXPORT_PDF,
        request.primary.data,
        {"targetFormat": extension},
        settings,
        media_type=PDF_MIME,
        filename=_pdf_input_name(request),
    )


async def pdf_to_office_local(request: ConversionRequest, settings: Settings) -> bytes:
    if request.params.office_format not in PDF_IMPORT_FILTERS:
        raise LocalToolError(
            f"No local converter for PDF to {request.params.office_format.value}"
        )
    extension = OFFICE_EXTENSION[request.params.office_format]
    input_name = _pdf_input_name(request)
    return await run_local_tool(
        settings.soffice_path,
        _soffice_args(extension, PDF_IMPORT_FILTERS[request.params.office_format]),
        request.primary.data,
        input_name=input_name,
        output_name=f"{_stem(input_name)}.{extension}",
        settings=settings,
    )
