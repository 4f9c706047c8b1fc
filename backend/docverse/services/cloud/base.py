"""
Cloud PDF client interface.

The rest of the code only talks to this fixed contract; SDK or REST
details live in the concrete adapter.
"""

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path


class CloudJobKind(str, Enum):
    """Operations supported by the cloud PDF API."""

    CREATE_PDF = "createpdf"
    EXPORT_PDF = "exportpdf"
    COMPRESS_PDF = "compresspdf"
    OCR = "ocr"


class BaseCloudClient(ABC):
    """Abstract base class for cloud PDF backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def authenticate(self) -> None:
        """Open a fresh authenticated session."""
        pass

    @abstractmethod
    async def upload_asset(self, path: Path, media_type: str) -> str:
        """Upload a file and return its opaque asset handle."""
        pass

    @abstractmethod
    async def submit_job(self, job_kind: CloudJobKind, job: dict) -> str:
        """Submit a job descriptor and return the polling handle."""
        pass

    @abstractmethod
    async def wait_for_result(self, polling_handle: str) -> str:
        """Poll until the job finishes and return the output asset handle."""
        pass

    @abstractmethod
    async def download_asset(self, asset_handle: str) -> bytes:
        """Download an output asset into memory."""
        pass

    @abstractmethod
    async def close(self) -> None:
        pass
