"""DocVerse document conversion backend."""

__version__ = "1.0.0"
