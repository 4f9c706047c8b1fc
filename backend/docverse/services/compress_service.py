"""
Compression Service - PDF size reduction.

Cloud candidate: compresspdf job. Local candidate: Ghostscript pdfwrite.
Whichever engine runs, the caller never gets a file larger than the one
it uploaded.
"""

from docverse.config import Settings
from docverse.models.conversion import ConversionParams, ConversionRequest
from docverse.services.cloud import CloudJobKind, run_cloud_job
from docverse.services.formats import (
    COMPRESSION_PROFILES,
    MAX_DPI,
    MIN_DPI,
    PDF_MIME,
    CompressionProfile,
)
from docverse.services.local_tools import run_local_tool


def pick_smaller(original_bytes: bytes, processed_bytes: bytes) -> bytes:
    """Keep the processed output only if it is strictly smaller."""
    if len(processed_bytes) < len(original_bytes):
        return processed_bytes
    return original_bytes


def keep_smaller(request: ConversionRequest, output: bytes) -> bytes:
    return pick_smaller(request.primary.data, output)


def resolve_profile(params: ConversionParams) -> tuple[CompressionProfile, int]:
    """Quality tier preset plus the effective image DPI."""
    profile = COMPRESSION_PROFILES[params.quality]
    dpi = params.dpi if params.dpi is not None else profile.dpi
    return profile, max(MIN_DPI, min(MAX_DPI, dpi))


def ghostscript_args(pdf_settings: str, dpi: int) -> list[str]:
    return [
        "-sDEVICE=pdfwrite",
        "-dCompatibilityLevel=1.4",
        f"-dPDFSETTINGS={pdf_settings}",
        "-dDownsampleColorImages=true",
        "-dColorImageDownsampleType=/Bicubic",
        f"-dColorImageResolution={dpi}",
        "-dDownsampleGrayImages=true",
        "-dGrayImageDownsampleType=/Bicubic",
        f"-dGrayImageResolution={dpi}",
        "-dDownsampleMonoImages=true",
        "-dMonoImageDownsampleType=/Subsample",
        f"-dMonoImageResolution={dpi}",
        "-dNOPAUSE",
        "-dQUIET",
        "-dBATCH",
        "-sOutputFile={output}",
        "{input}",
    ]


def describe_compress(request: ConversionRequest) -> tuple[str, str]:
    return f"{request.primary.stem}-compressed.pdf", PDF_MIME


async def compress_cloud(request: ConversionRequest, settings: Settings) -> bytes:
    profile, _ = resolve_profile(request.params)
    return await run_cloud_job(
        CloudJobKind.COMPRESS_PDF,
        request.primary.data,
        {"compressionLevel": profile.cloud_level},
        settings,
        media_type=PDF_MIME,
        filename="input.pdf",
    )


async def compress_local(request: ConversionRequest, settings: Settings) -> bytes:
    profile, dpi = resolve_profile(request.params)
    return await run_local_tool(
        settings.ghostscript_path,
        ghostscript_args(profile.pdf_settings, dpi),
        request.primary.data,
        input_name="input.pdf",
        output_name="output.pdf",
        settings=settings,
    )
