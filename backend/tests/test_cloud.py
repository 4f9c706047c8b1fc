"""Cloud engine invoker against a mocked PDF Services API."""

import json

import httpx
import pytest

from docverse.services.cloud import CloudJobKind, get_cloud_client, run_cloud_job
from docverse.services.cloud.adobe import AdobePDFServicesClient
from docverse.services.exceptions import CloudEngineError, ConfigurationError

BASE_URL = "https://pdf-services.test"
UPLOAD_URL = "https://storage.test/upload/asset-1"
STATUS_URL = f"{BASE_URL}/operation/compresspdf/job-1/status"
DOWNLOAD_URL = "https://storage.test/download/result-1"


class FakePDFServices:
    """Minimal in-memory stand-in for the REST API."""

    def __init__(self, statuses=("done",), fail_on=None, output=b"%PDF-cloud"):
        self.statuses = list(statuses)
        self.fail_on = fail_on
        self.output = output
        self.requests: list[httpx.Request] = []
        self.uploaded = b""
        self.job: dict = {}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path == "/token":
            if self.fail_on == "token":
                return httpx.Response(401, json={"error": "invalid_client"})
            return httpx.Response(200, json={"access_token": "token-123"})

        if request.method == "POST" and path == "/assets":
            return httpx.Response(
                200, json={"uploadUri": UPLOAD_URL, "assetID": "asset-1"}
            )

        if request.method == "PUT" and str(request.url) == UPLOAD_URL:
            self.uploaded = request.content
            return httpx.Response(200)

        if request.method == "POST" and path.startswith("/operation/"):
            self.job = json.loads(request.content)
            if self.fail_on == "location":
                return httpx.Response(201)
            return httpx.Response(201, headers={"location": STATUS_URL})

        if request.method == "GET" and str(request.url) == STATUS_URL:
            status = self.statuses.pop(0) if len(self.statuses) > 1 else self.statuses[0]
            if status == "done":
                return httpx.Response(
                    200, json={"status": "done", "asset": {"downloadUri": DOWNLOAD_URL}}
                )
            if status == "failed":
                return httpx.Response(
                    200,
                    json={"status": "failed", "error": {"code": "BAD_PDF", "message": "corrupt"}},
                )
            return httpx.Response(200, json={"status": status})

        if request.method == "GET" and str(request.url) == DOWNLOAD_URL:
            return httpx.Response(200, content=self.output)

        return httpx.Response(404)


def make_client(service: FakePDFServices, poll_max_attempts: int = 3) -> AdobePDFServicesClient:
    return AdobePDFServicesClient(
        client_id="client-id",
        client_secret="client-secret",
        base_url=BASE_URL,
        poll_interval=0,
        poll_max_attempts=poll_max_attempts,
        transport=httpx.MockTransport(service),
    )


@pytest.mark.asyncio
async def test_full_job_round_trip(cloud_settings, workspace_root):
    service = FakePDFServices(statuses=("in progress", "in progress", "done"))
    client = make_client(service)

    output = await run_cloud_job(
        CloudJobKind.COMPRESS_PDF,
        b"%PDF-input",
        {"compressionLevel": "MEDIUM"},
        cloud_settings,
        client=client,
    )

    assert output == b"%PDF-cloud"
    assert service.uploaded == b"%PDF-input"
    assert service.job == {"assetID": "asset-1", "compressionLevel": "MEDIUM"}
    assert client.client is None
    assert list(workspace_root.iterdir()) == []


@pytest.mark.asyncio
async def test_api_calls_are_authenticated_but_upload_is_not(cloud_settings):
    service = FakePDFServices()

    await run_cloud_job(
        CloudJobKind.COMPRESS_PDF, b"%PDF-input", None, cloud_settings, client=make_client(service)
    )

    by_url = {(r.method, str(r.url)): r for r in service.requests}
    submit = by_url[("POST", f"{BASE_URL}/operation/compresspdf")]
    assert submit.headers["Authorization"] == "Bearer token-123"
    assert submit.headers["X-API-Key"] == "client-id"

    upload = by_url[("PUT", UPLOAD_URL)]
    assert "Authorization" not in upload.headers
    assert upload.headers["Content-Type"] == "application/pdf"


@pytest.mark.asyncio
async def test_declared_media_type_is_sent(cloud_settings):
    service = FakePDFServices()
    media_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

    await run_cloud_job(
        CloudJobKind.CREATE_PDF,
        b"PK\x03\x04",
        None,
        cloud_settings,
        media_type=media_type,
        filename="report.docx",
        client=make_client(service),
    )

    asset_request = next(r for r in service.requests if r.url.path == "/assets")
    assert json.loads(asset_request.content) == {"mediaType": media_type}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "service, step",
    [
        (FakePDFServices(fail_on="token"), "authenticate"),
        (FakePDFServices(fail_on="location"), "submit"),
        (FakePDFServices(statuses=("failed",)), "poll"),
        (FakePDFServices(statuses=("in progress",)), "poll"),
        (FakePDFServices(output=b""), "download"),
    ],
    ids=["token-rejected", "no-location", "job-failed", "poll-exhausted", "empty-result"],
)
async def test_any_failed_step_raises_cloud_engine_error(
    cloud_settings, workspace_root, service, step
):
    client = make_client(service)

    with pytest.raises(CloudEngineError) as exc_info:
        await run_cloud_job(
            CloudJobKind.COMPRESS_PDF, b"%PDF-input", None, cloud_settings, client=client
        )

    assert exc_info.value.step == step
    assert exc_info.value.public_message == "Processing failed"
    assert client.client is None
    assert list(workspace_root.iterdir()) == []


@pytest.mark.asyncio
async def test_poll_gives_up_after_max_attempts(cloud_settings):
    service = FakePDFServices(statuses=("in progress",))

    with pytest.raises(CloudEngineError):
        await run_cloud_job(
            CloudJobKind.OCR,
            b"%PDF-input",
            None,
            cloud_settings,
            client=make_client(service, poll_max_attempts=4),
        )

    polls = [r for r in service.requests if str(r.url) == STATUS_URL]
    assert len(polls) == 4


def test_factory_requires_credentials(settings):
    with pytest.raises(ConfigurationError):
        get_cloud_client(settings)


def test_factory_builds_client_from_settings(cloud_settings):
    client = get_cloud_client(cloud_settings)

    assert isinstance(client, AdobePDFServicesClient)
    assert client.base_url == BASE_URL
    assert client.poll_max_attempts == cloud_settings.adobe_poll_max_attempts


@pytest.mark.asyncio
async def test_missing_credentials_surface_before_any_step(settings, workspace_root):
    with pytest.raises(ConfigurationError):
        await run_cloud_job(CloudJobKind.OCR, b"%PDF-input", None, settings)

    assert list(workspace_root.iterdir()) == []
