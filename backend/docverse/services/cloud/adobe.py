"""
Adobe PDF Services REST adapter.

Implements the cloud client contract over plain HTTP:
token -> asset upload -> job submit -> poll -> download.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import httpx

from docverse.services.cloud.base import BaseCloudClient, CloudJobKind
from docverse.services.exceptions import CloudEngineError

logger = logging.getLogger(__name__)

STATUS_DONE = "done"
STATUS_FAILED = "failed"


class AdobePDFServicesClient(BaseCloudClient):
    """One authenticated session per instance; nothing is shared across calls."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = "https://pdf-services.adobe.io",
        timeout: float = 120.0,
        poll_interval: float = 2.0,
        poll_max_attempts: int = 150,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.poll_max_attempts = poll_max_attempts
        self._transport = transport
        self.client: Optional[httpx.AsyncClient] = None

    @property
    def name(self) -> str:
        return "Adobe PDF Services"

    def _require_client(self) -> httpx.AsyncClient:
        if self.client is None:
            raise CloudEngineError("Session is not authenticated")
        return self.client

    async def authenticate(self) -> None:
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )
        response = await self.client.post(
            "/token",
            data={"client_id": self.client_id, "client_secret": self.client_secret},
        )
        response.raise_for_status()

        token = response.json().get("access_token")
        if not token:
            raise CloudEngineError("Token response has no access_token")

        self.client.headers.update(
            {"Authorization": f"Bearer {token}", "X-API-Key": self.client_id}
        )

    async def upload_asset(self, path: Path, media_type: str) -> str:
        client = self._require_client()

        response = await client.post("/assets", json={"mediaType": media_type})
        response.raise_for_status()
        body = response.json()
        upload_uri = body.get("uploadUri")
        asset_id = body.get("assetID")
        if not upload_uri or not asset_id:
            raise CloudEngineError("Asset response is missing uploadUri or assetID")

        # Pre-signed URL: sent as-is, without the API auth headers
        upload = httpx.Request(
            "PUT",
            upload_uri,
            content=path.read_bytes(),
            headers={"Content-Type": media_type},
        )
        response = await client.send(upload)
        response.raise_for_status()

        return asset_id

    async def submit_job(self, job_kind: CloudJobKind, job: dict) -> str:
        client = self._require_client()

        response = await client.post(f"/operation/{job_kind.value}", json=job)
        response.raise_for_status()

        location = response.headers.get("location")
        if not location:
            raise CloudEngineError("Job submission returned no location header")
        return location

    async def wait_for_result(self, polling_handle: str) -> str:
        client = self._require_client()

        for attempt in range(1, self.poll_max_attempts + 1):
            response = await client.get(polling_handle)
            response.raise_for_status()
            body = response.json()
            status = body.get("status")

            if status == STATUS_DONE:
                download_uri = (body.get("asset") or {}).get("downloadUri")
                if not download_uri:
                    raise CloudEngineError("Finished job has no downloadUri")
                return download_uri

            if status == STATUS_FAILED:
                error = body.get("error") or {}
                raise CloudEngineError(
                    f"Job failed: {error.get('code', 'unknown')} {error.get('message', '')}".strip()
                )

            logger.debug("Job %s: %s (poll %d)", polling_handle, status, attempt)
            await asyncio.sleep(self.poll_interval)

        raise CloudEngineError(
            f"Job did not finish after {self.poll_max_attempts} polls"
        )

    async def download_asset(self, asset_handle: str) -> bytes:
        client = self._require_client()

        response = await client.send(httpx.Request("GET", asset_handle))
        response.raise_for_status()
        return response.content

    async def close(self) -> None:
        if self.client:
            await self.client.aclose()
            self.client = None
