"""
Conversion orchestration.

Entry point for the HTTP layer: routes a ConversionRequest to the engine
selection policy (office, compression, OCR) or to the in-process PDF
service (merge, unlock).
"""

import asyncio
import io
import logging
import os
import zipfile

from docverse.config import Settings
from docverse.models.conversion import (
    Capability,
    ConversionRequest,
    ConversionResult,
    EngineChoice,
)
from docverse.services.exceptions import ConversionFailedError, InvalidInputError
from docverse.services.formats import PDF_MIME, ZIP_MIME
from docverse.services.pdf_service import pdf_service
from docverse.services.policy import select_and_run
from docverse.services.pool import map_ordered

logger = logging.getLogger(__name__)

BUNDLE_FILENAME = "docverse-converted.zip"
MERGED_FILENAME = "merged.pdf"

# Capabilities where several uploads mean several independent outputs
PER_FILE_CAPABILITIES = {Capability.OFFICE_TO_PDF, Capability.PDF_TO_OFFICE}


def _unique_name(name: str, taken: set[str]) -> str:
    if name not in taken:
        return name
    stem, ext = os.path.splitext(name)
    counter = 2
    while f"{stem} ({counter}){ext}" in taken:
        counter += 1
    return f"{stem} ({counter}){ext}"


def bundle_results(results: list[ConversionResult]) -> ConversionResult:
    """Pack several results into one ZIP, preserving their order."""
    buffer = io.BytesIO()
    taken: set[str] = set()

    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for result in results:
            name = _unique_name(result.filename, taken)
            taken.add(name)
            archive.writestr(name, result.data)

    all_cloud = all(result.engine == EngineChoice.CLOUD for result in results)
    return ConversionResult(
        data=buffer.getvalue(),
        filename=BUNDLE_FILENAME,
        content_type=ZIP_MIME,
        engine=EngineChoice.CLOUD if all_cloud else EngineChoice.LOCAL,
    )


async def convert_each(request: ConversionRequest, settings: Settings) -> ConversionResult:
    """Run the policy once per file; bundle when there is more than one."""
    if len(request.files) == 1:
        return await select_and_run(request.capability, request, settings)

    results = await map_ordered(
        lambda file: select_and_run(request.capability, request.single(file), settings),
        request.files,
        settings.conversion_max_workers,
    )
    return bundle_results(results)


async def merge(request: ConversionRequest, settings: Settings) -> ConversionResult:
    """Merge has one in-process implementation and no fallback."""
    try:
        data = await asyncio.to_thread(
            pdf_service.merge, [file.data for file in request.files]
        )
    except InvalidInputError:
        raise
    except Exception as e:
        logger.error("Merge failed: %s", e)
        raise ConversionFailedError() from e

    return ConversionResult(
        data=data,
        filename=MERGED_FILENAME,
        content_type=PDF_MIME,
        engine=EngineChoice.LOCAL,
    )


async def unlock(request: ConversionRequest, settings: Settings) -> ConversionResult:
    password = request.params.password
    if not password:
        raise InvalidInputError("A password is required to unlock the PDF")

    try:
        data = await asyncio.to_thread(pdf_service.unlock, request.primary.data, password)
    except InvalidInputError:
        raise
    except Exception as e:
        logger.error("Unlock failed: %s", e)
        raise ConversionFailedError() from e

    return ConversionResult(
        data=data,
        filename=f"{request.primary.stem}-unlocked.pdf",
        content_type=PDF_MIME,
        engine=EngineChoice.LOCAL,
    )


async def run_conversion(request: ConversionRequest, settings: Settings) -> ConversionResult:
    """Dispatch a request to the implementation for its capability."""
    if not request.files:
        raise InvalidInputError("No files uploaded")

    capability = request.capability
    if capability in PER_FILE_CAPABILITIES:
        result = await convert_each(request, settings)
    elif capability == Capability.MERGE:
        result = await merge(request, settings)
    elif capability == Capability.UNLOCK:
        result = await unlock(request, settings)
    else:
        result = await select_and_run(capability, request, settings)

    logger.info(
        "%s finished: %s (%d bytes, engine=%s)",
        capability.value,
        result.filename,
        result.size,
        result.engine.value,
    )
    return result
