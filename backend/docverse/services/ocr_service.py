"""
OCR Service - Searchable PDF generation.

Local pipeline: pdftoppm rasterizes every PDF page, Tesseract turns each
page image into a one-page PDF with a text layer, PyMuPDF joins the pages.
Images skip rasterization. Pages may be recognized concurrently but the
output always follows input order.

Cloud candidate: one OCR job per PDF, results joined in input order.
"""

import asyncio
import logging
import re
from pathlib import Path

from docverse.config import Settings
from docverse.models.conversion import ConversionRequest, InputFile
from docverse.services.cloud import CloudJobKind, run_cloud_job
from docverse.services.exceptions import CloudEngineError, LocalToolError
from docverse.services.formats import (
    IMAGE_EXTENSIONS,
    PDF_MIME,
    cloud_ocr_locale,
    tesseract_language,
)
from docverse.services.local_tools import run_tool
from docverse.services.pdf_service import pdf_service
from docverse.services.pool import map_ordered
from docverse.services.workspace import ScopedWorkspace, scoped_workspace

logger = logging.getLogger(__name__)

CLOUD_OCR_TYPE = "searchable_image"

# pdftoppm names pages <root>-<n>.jpg, zero-padding n to the page count width
PAGE_IMAGE_PATTERN = re.compile(r"^page-(\d+)\.jpg$")


def describe_ocr(request: ConversionRequest) -> tuple[str, str]:
    return f"{request.primary.stem}-searchable.pdf", PDF_MIME


async def _rasterize(
    file: InputFile,
    index: int,
    ws: ScopedWorkspace,
    settings: Settings,
) -> list[Path]:
    """Render every page of a PDF to JPEG, returned in page order."""
    target = ws.subdir(f"file-{index}")
    pdf_path = target / "input.pdf"
    pdf_path.write_bytes(file.data)

    await run_tool(
        settings.pdftoppm_path,
        ["-jpeg", "-r", str(settings.ocr_render_dpi), str(pdf_path), str(target / "page")],
        cwd=target,
    )

    pages = []
    for candidate in target.iterdir():
        match = PAGE_IMAGE_PATTERN.match(candidate.name)
        if match:
            pages.append((int(match.group(1)), candidate))

    if not pages:
        raise LocalToolError(f"pdftoppm produced no pages for {file.filename}")

    return [path for _, path in sorted(pages)]


def _stage_image(file: InputFile, index: int, ws: ScopedWorkspace) -> Path:
    extension = file.extension if file.extension in IMAGE_EXTENSIONS else "png"
    target = ws.subdir(f"file-{index}")
    image_path = target / f"input.{extension}"
    image_path.write_bytes(file.data)
    return image_path


async def _recognize(image_path: Path, language: str, settings: Settings) -> bytes:
    """OCR one page image into a one-page searchable PDF."""
    output_base = image_path.with_name(f"{image_path.stem}-ocr")
    await run_tool(
        settings.tesseract_path,
        [str(image_path), str(output_base), "-l", language, "pdf"],
        cwd=image_path.parent,
    )

    output_path = output_base.with_name(f"{output_base.name}.pdf")
    if not output_path.is_file() or output_path.stat().st_size == 0:
        raise LocalToolError(f"tesseract produced no output for {image_path.name}")
    return output_path.read_bytes()


async def ocr_local(request: ConversionRequest, settings: Settings) -> bytes:
    language = tesseract_language(request.params.language)

    async with scoped_workspace(prefix="docverse-ocr-", root=settings.temp_dir) as ws:
        page_images: list[Path] = []
        for index, file in enumerate(request.files, start=1):
            if file.is_pdf:
                page_images.extend(await _rasterize(file, index, ws, settings))
            else:
                page_images.append(_stage_image(file, index, ws))

        logger.info(
            "OCR of %d page(s) with language %s, %d worker(s)",
            len(page_images),
            language,
            settings.ocr_max_workers,
        )

        page_pdfs = await map_ordered(
            lambda image: _recognize(image, language, settings),
            page_images,
            settings.ocr_max_workers,
        )

        return await asyncio.to_thread(pdf_service.concatenate, page_pdfs)


async def ocr_cloud(request: ConversionRequest, settings: Settings) -> bytes:
    unsupported = [file.filename for file in request.files if not file.is_pdf]
    if unsupported:
        raise CloudEngineError(
            f"Cloud OCR accepts PDF input only: {', '.join(unsupported)}"
        )

    job_params = {
        "ocrLang": cloud_ocr_locale(request.params.language),
        "ocrType": CLOUD_OCR_TYPE,
    }

    outputs = await map_ordered(
        lambda file: run_cloud_job(
            CloudJobKind.OCR,
            file.data,
            job_params,
            settings,
            media_type=PDF_MIME,
            filename="input.pdf",
        ),
        request.files,
        settings.conversion_max_workers,
    )

    if len(outputs) == 1:
        return outputs[0]
    return await asyncio.to_thread(pdf_service.concatenate, outputs)
