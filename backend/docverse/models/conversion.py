"""
Request-scoped conversion entities.

None of these outlive the request that created them.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Capability(str, Enum):
    """Abstract conversion operation requested by the caller."""

    OFFICE_TO_PDF = "office-to-pdf"
    PDF_TO_OFFICE = "pdf-to-office"
    COMPRESS = "compress"
    OCR = "ocr"
    MERGE = "merge"
    UNLOCK = "unlock"


class EngineChoice(str, Enum):
    """Which external capability produced the result."""

    CLOUD = "cloud"
    LOCAL = "local"


class OfficeFormat(str, Enum):
    """Office document families."""

    WORD = "word"
    EXCEL = "excel"
    POWERPOINT = "powerpoint"


class CompressionQuality(str, Enum):
    """Compression quality tier; lower quality means smaller output."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class InputFile:
    """One uploaded file."""

    filename: str
    content_type: str
    data: bytes

    @property
    def stem(self) -> str:
        base = os.path.splitext(os.path.basename(self.filename))[0]
        return base or "document"

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot ('' if none)."""
        return os.path.splitext(self.filename)[1].lower().lstrip(".")

    @property
    def is_pdf(self) -> bool:
        """Decided by the magic bytes, never by the client-declared type."""
        return self.data.startswith(b"%PDF")

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class ConversionParams:
    """Operation-specific parameters from the form fields."""

    office_format: OfficeFormat = OfficeFormat.WORD
    language: str = "en"
    quality: CompressionQuality = CompressionQuality.MEDIUM
    dpi: Optional[int] = None
    password: Optional[str] = None


@dataclass
class ConversionRequest:
    """Input files plus the requested capability and its parameters."""

    capability: Capability
    files: list[InputFile]
    params: ConversionParams = field(default_factory=ConversionParams)

    @property
    def primary(self) -> InputFile:
        """The first (or only) input file."""
        return self.files[0]

    def single(self, file: InputFile) -> "ConversionRequest":
        """Narrow this request to one of its files."""
        return ConversionRequest(
            capability=self.capability, files=[file], params=self.params
        )


@dataclass
class ConversionResult:
    """Output bytes plus the metadata needed to build the response."""

    data: bytes
    filename: str
    content_type: str
    engine: EngineChoice

    @property
    def size(self) -> int:
        return len(self.data)
