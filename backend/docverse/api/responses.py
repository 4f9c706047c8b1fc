"""
Response assembly: maps a ConversionResult onto an HTTP download.
"""

import unicodedata
from urllib.parse import quote

from fastapi import Response

from docverse.models.conversion import ConversionResult

ENGINE_HEADER = "X-Conversion-Engine"

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def content_disposition(filename: str) -> str:
    """Attachment header with an ASCII fallback and an RFC 5987 UTF-8 name."""
    ascii_name = (
        unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    )
    ascii_name = ascii_name.replace('"', "").replace("\\", "").strip() or "download"
    return f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"


def file_response(result: ConversionResult) -> Response:
    return Response(
        content=result.data,
        media_type=result.content_type,
        headers={
            "Content-Disposition": content_disposition(result.filename),
            ENGINE_HEADER: result.engine.value,
            **NO_CACHE_HEADERS,
        },
    )
