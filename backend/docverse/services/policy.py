"""
Engine selection policy.

Decides which engine runs a capability and whether to fall back:

- cloud first only when ``prefer_cloud_engine`` is set and credentials exist;
- any cloud failure falls back to the local engine, exactly once,
  except a configuration error, which is fatal;
- a local failure is final.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from docverse.config import Settings
from docverse.models.conversion import (
    Capability,
    ConversionRequest,
    ConversionResult,
    EngineChoice,
)
from docverse.services import compress_service, ocr_service, office_service
from docverse.services.exceptions import (
    ConfigurationError,
    ConversionFailedError,
    InvalidInputError,
)

logger = logging.getLogger(__name__)

EngineFn = Callable[[ConversionRequest, Settings], Awaitable[bytes]]
DescribeFn = Callable[[ConversionRequest], tuple[str, str]]
FinalizeFn = Callable[[ConversionRequest, bytes], bytes]


@dataclass(frozen=True)
class EnginePair:
    """Cloud and local candidates for one capability."""

    cloud: EngineFn
    local: EngineFn
    describe: DescribeFn
    finalize: Optional[FinalizeFn] = None


def _build_result(
    engines: EnginePair,
    request: ConversionRequest,
    output: bytes,
    engine: EngineChoice,
) -> ConversionResult:
    if engines.finalize:
        output = engines.finalize(request, output)
    filename, content_type = engines.describe(request)
    return ConversionResult(
        data=output, filename=filename, content_type=content_type, engine=engine
    )


async def _run_local(
    capability: Capability,
    engines: EnginePair,
    request: ConversionRequest,
    settings: Settings,
) -> ConversionResult:
    try:
        output = await engines.local(request, settings)
    except InvalidInputError:
        raise
    except Exception as e:
        logger.error("Local engine failed for %s: %s", capability.value, e)
        raise ConversionFailedError() from e

    return _build_result(engines, request, output, EngineChoice.LOCAL)


async def select_and_run(
    capability: Capability,
    request: ConversionRequest,
    settings: Settings,
    registry: Optional[dict[Capability, EnginePair]] = None,
) -> ConversionResult:
    """
    Run a capability on the preferred engine, falling back once if needed.

    Args:
        capability: Abstract operation to perform
        request: Input files and parameters
        settings: Application settings
        registry: Capability -> engines table (defaults to ENGINES)

    Returns:
        ConversionResult tagged with the engine that produced it

    Raises:
        ConfigurationError: The cloud engine is not configured
        InvalidInputError: The local engine rejected the input
        ConversionFailedError: The final engine attempt failed
    """
    engines = (ENGINES if registry is None else registry).get(capability)
    if engines is None:
        raise InvalidInputError(f"Unsupported operation: {capability.value}")

    if not settings.cloud_engine_enabled:
        logger.info("Running %s on local engine", capability.value)
        return await _run_local(capability, engines, request, settings)

    logger.info("Running %s on cloud engine", capability.value)
    try:
        output = await engines.cloud(request, settings)
    except ConfigurationError:
        raise
    except Exception:
        logger.warning(
            "Cloud engine failed for %s, falling back to local engine",
            capability.value,
            exc_info=True,
        )
        return await _run_local(capability, engines, request, settings)

    return _build_result(engines, request, output, EngineChoice.CLOUD)


ENGINES: dict[Capability, EnginePair] = {
    Capability.OFFICE_TO_PDF: EnginePair(
        cloud=office_service.office_to_pdf_cloud,
        local=office_service.office_to_pdf_local,
        describe=office_service.describe_office_to_pdf,
    ),
    Capability.PDF_TO_OFFICE: EnginePair(
        cloud=office_service.pdf_to_office_cloud,
        local=office_service.pdf_to_office_local,
        describe=office_service.describe_pdf_to_office,
    ),
    Capability.COMPRESS: EnginePair(
        cloud=compress_service.compress_cloud,
        local=compress_service.compress_local,
        describe=compress_service.describe_compress,
        finalize=compress_service.keep_smaller,
    ),
    Capability.OCR: EnginePair(
        cloud=ocr_service.ocr_cloud,
        local=ocr_service.ocr_local,
        describe=ocr_service.describe_ocr,
    ),
}
