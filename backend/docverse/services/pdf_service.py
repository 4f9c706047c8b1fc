"""
PDF Service - In-process PDF manipulation.

This service is responsible for:
- Merging several PDFs into one, page by page, in input order
- Concatenating per-page OCR outputs
- Detecting password protection and removing it with the right password
"""

import logging
from typing import Sequence

import fitz  # PyMuPDF

from docverse.services.exceptions import InvalidInputError

logger = logging.getLogger(__name__)


class PDFService:
    """
    Service for PDF operations that do not need an external engine.

    Uses PyMuPDF (fitz) which is fast and handles a wide range of
    PDF features.
    """

    # Minimum number of documents for a merge
    MIN_MERGE_INPUTS = 2

    def open_document(self, data: bytes, label: str = "document") -> fitz.Document:
        """
        Open PDF bytes.

        Raises:
            InvalidInputError: If the bytes are not a readable PDF
        """
        if not data:
            raise InvalidInputError(f"{label} is empty")
        doc = None
        try:
            doc = fitz.open(stream=data, filetype="pdf")
            # Page count of a locked document is unknown until authentication
            if not doc.needs_pass and doc.page_count == 0:
                raise ValueError("no pages")
        except Exception as e:
            if doc is not None:
                doc.close()
            logger.info("Could not open %s as PDF: %s", label, e)
            raise InvalidInputError(f"{label} is not a valid PDF") from e
        return doc

    def merge(self, inputs: Sequence[bytes]) -> bytes:
        """
        Merge PDFs in list order, keeping each document's page order.

        Args:
            inputs: PDF byte buffers, at least two

        Returns:
            The merged PDF

        Raises:
            InvalidInputError: Fewer than two inputs, or any input unreadable
        """
        if len(inputs) < self.MIN_MERGE_INPUTS:
            raise InvalidInputError(
                f"At least {self.MIN_MERGE_INPUTS} PDF files are required to merge"
            )

        merged = fitz.open()
        try:
            for index, data in enumerate(inputs, start=1):
                source = self.open_document(data, label=f"File {index}")
                try:
                    if source.needs_pass:
                        raise InvalidInputError(f"File {index} is password protected")
                    merged.insert_pdf(source)
                finally:
                    source.close()

            logger.info("Merged %d documents into %d pages", len(inputs), len(merged))
            return merged.tobytes(garbage=3, deflate=True)
        finally:
            merged.close()

    def concatenate(self, parts: Sequence[bytes]) -> bytes:
        """
        Join engine-produced PDFs in order.

        Unlike merge, a single part is fine and a bad part is an engine
        failure rather than a client error.
        """
        if not parts:
            raise ValueError("Nothing to concatenate")

        output = fitz.open()
        try:
            for data in parts:
                source = fitz.open(stream=data, filetype="pdf")
                try:
                    output.insert_pdf(source)
                finally:
                    source.close()
            return output.tobytes(garbage=3, deflate=True)
        finally:
            output.close()

    def is_encrypted(self, data: bytes) -> bool:
        """Whether the PDF requires a password to open."""
        doc = self.open_document(data)
        try:
            return bool(doc.needs_pass)
        finally:
            doc.close()

    def unlock(self, data: bytes, password: str) -> bytes:
        """
        Remove password protection.

        Raises:
            InvalidInputError: Not protected, or wrong password
        """
        doc = self.open_document(data)
        try:
            if not doc.needs_pass:
                raise InvalidInputError(
                    "This PDF is not password-protected and does not need unlocking"
                )
            if not doc.authenticate(password):
                raise InvalidInputError("Incorrect password")

            return doc.tobytes(encryption=fitz.PDF_ENCRYPT_NONE, garbage=3, deflate=True)
        finally:
            doc.close()


# Global instance
pdf_service = PDFService()
