"""
Cloud engine invoker.

Runs one cloud job end to end. Every step can fail on its own; whichever
step fails, the caller sees one CloudEngineError and the step name only
reaches the logs.
"""

import logging
from typing import Optional

from docverse.config import Settings
from docverse.services.cloud.base import BaseCloudClient, CloudJobKind
from docverse.services.cloud.factory import get_cloud_client
from docverse.services.exceptions import CloudEngineError
from docverse.services.formats import PDF_MIME
from docverse.services.workspace import safe_filename, scoped_workspace

logger = logging.getLogger(__name__)


async def run_cloud_job(
    job_kind: CloudJobKind,
    input_bytes: bytes,
    job_params: Optional[dict],
    settings: Settings,
    *,
    media_type: str = PDF_MIME,
    filename: str = "input.pdf",
    client: Optional[BaseCloudClient] = None,
) -> bytes:
    """
    Run a cloud job and return the output asset's bytes.

    Args:
        job_kind: Cloud operation to run
        input_bytes: Input document
        job_params: Extra fields for the job descriptor
        settings: Application settings (credentials, endpoints)
        media_type: MIME type declared for the upload
        filename: Name used for the persisted input file
        client: Pre-built client; a fresh one is created when omitted

    Raises:
        ConfigurationError: Credentials are missing
        CloudEngineError: Any step of the job failed
    """
    # ConfigurationError surfaces as-is, before any step runs
    client = client or get_cloud_client(settings)
    step = "persist"

    try:
        async with scoped_workspace(prefix="docverse-cloud-", root=settings.temp_dir) as ws:
            input_path = ws.write(safe_filename(filename, "input"), input_bytes)

            step = "authenticate"
            await client.authenticate()

            step = "upload"
            asset_id = await client.upload_asset(input_path, media_type)

            step = "submit"
            job = {"assetID": asset_id, **(job_params or {})}
            polling_handle = await client.submit_job(job_kind, job)

            step = "poll"
            result_handle = await client.wait_for_result(polling_handle)

            step = "download"
            output = await client.download_asset(result_handle)
            if not output:
                raise CloudEngineError("Downloaded asset is empty")

            logger.info(
                "%s job %s finished (%d -> %d bytes)",
                client.name,
                job_kind.value,
                len(input_bytes),
                len(output),
            )
            return output

    except Exception as e:
        logger.error(
            "%s job %s failed at step '%s': %s", client.name, job_kind.value, step, e
        )
        raise CloudEngineError(f"Cloud job {job_kind.value} failed", step=step) from e

    finally:
        try:
            await client.close()
        except Exception as e:
            logger.warning("Failed to close cloud session: %s", e)
