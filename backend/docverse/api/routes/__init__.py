"""
API Routes for the DocVerse backend.

This package contains all API endpoint definitions:
- convert: Office <-> PDF conversion endpoints
- tools: compression, OCR, merge and unlock endpoints
- health: Health check endpoints
"""

from docverse.api.routes import convert, health, tools

__all__ = ["convert", "tools", "health"]
