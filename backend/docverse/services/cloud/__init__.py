"""
Cloud PDF engine.

Usage:
    from docverse.services.cloud import CloudJobKind, run_cloud_job

    pdf_bytes = await run_cloud_job(CloudJobKind.CREATE_PDF, data, None, settings,
                                    media_type=mime, filename="report.docx")
"""

from docverse.services.cloud.base import BaseCloudClient, CloudJobKind
from docverse.services.cloud.factory import get_cloud_client
from docverse.services.cloud.jobs import run_cloud_job

__all__ = ["BaseCloudClient", "CloudJobKind", "get_cloud_client", "run_cloud_job"]
