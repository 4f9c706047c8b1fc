"""
Upload intake: turns multipart files into validated InputFile objects
before any engine is invoked.
"""

from typing import Iterable, Optional

from fastapi import UploadFile

from docverse.config import Settings
from docverse.models.conversion import InputFile
from docverse.services.exceptions import FileTooLargeError, InvalidInputError

PDF_MAGIC = b"%PDF"


async def read_upload(
    upload: UploadFile,
    settings: Settings,
    allowed_extensions: Iterable[str],
    default_name: str = "document.pdf",
) -> InputFile:
    """Read one upload and check size, extension and PDF magic bytes."""
    filename = upload.filename or default_name
    content = await upload.read()

    file = InputFile(
        filename=filename,
        content_type=upload.content_type or "application/octet-stream",
        data=content,
    )

    allowed = set(allowed_extensions)
    if file.extension not in allowed:
        raise InvalidInputError(
            f"Unsupported file type for {filename}. Allowed: {', '.join(sorted(allowed))}"
        )

    if not content:
        raise InvalidInputError(f"{filename} is empty")

    if len(content) > settings.max_file_size_bytes:
        raise FileTooLargeError(
            f"{filename} is too large. Max: {settings.max_file_size_mb}MB"
        )

    if file.extension == "pdf" and not content.startswith(PDF_MAGIC):
        raise InvalidInputError(f"{filename} is not a valid PDF file")

    return file


async def read_uploads(
    uploads: Optional[list[UploadFile]],
    settings: Settings,
    allowed_extensions: Iterable[str],
    min_files: int = 1,
    default_name: str = "document.pdf",
) -> list[InputFile]:
    """Read and validate an ordered list of uploads."""
    uploads = uploads or []

    if len(uploads) < min_files:
        if min_files == 1:
            raise InvalidInputError("No files uploaded")
        raise InvalidInputError(f"At least {min_files} files are required")

    if len(uploads) > settings.max_files_per_request:
        raise InvalidInputError(
            f"Maximum {settings.max_files_per_request} files per request"
        )

    allowed = set(allowed_extensions)
    return [
        await read_upload(upload, settings, allowed, default_name) for upload in uploads
    ]
