"""
Data models for the DocVerse backend.
"""

from docverse.models.conversion import (
    Capability,
    CompressionQuality,
    ConversionParams,
    ConversionRequest,
    ConversionResult,
    EngineChoice,
    InputFile,
    OfficeFormat,
)
from docverse.models.schemas import (
    EncryptionStatusResponse,
    ErrorResponse,
    HealthResponse,
    ServiceStatus,
)

__all__ = [
    "Capability",
    "CompressionQuality",
    "ConversionParams",
    "ConversionRequest",
    "ConversionResult",
    "EngineChoice",
    "InputFile",
    "OfficeFormat",
    "EncryptionStatusResponse",
    "ErrorResponse",
    "HealthResponse",
    "ServiceStatus",
]
