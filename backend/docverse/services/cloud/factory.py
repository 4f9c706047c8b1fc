"""Cloud client factory."""

from docverse.config import Settings
from docverse.services.cloud.adobe import AdobePDFServicesClient
from docverse.services.cloud.base import BaseCloudClient
from docverse.services.exceptions import ConfigurationError


def get_cloud_client(settings: Settings) -> BaseCloudClient:
    """Build a fresh cloud client from settings."""
    if not settings.cloud_credentials_present:
        raise ConfigurationError(
            "Set ADOBE_CLIENT_ID and ADOBE_CLIENT_SECRET to use the cloud engine"
        )

    return AdobePDFServicesClient(
        client_id=settings.adobe_client_id,
        client_secret=settings.adobe_client_secret,
        base_url=settings.adobe_api_base_url,
        timeout=settings.adobe_request_timeout_seconds,
        poll_interval=settings.adobe_poll_interval_seconds,
        poll_max_attempts=settings.adobe_poll_max_attempts,
    )
