"""Shared test fixtures for the DocVerse backend."""

import os
import stat
import sys
import textwrap
from pathlib import Path

import fitz
import pytest
from fastapi.testclient import TestClient

from docverse.config import Settings, get_settings
from docverse.models.conversion import (
    Capability,
    ConversionParams,
    ConversionRequest,
    InputFile,
)
from docverse.services.cloud import BaseCloudClient, CloudJobKind

posix_only = pytest.mark.skipif(os.name == "nt", reason="stand-in tools are POSIX scripts")


def make_pdf(*page_texts: str, user_pw: str | None = None) -> bytes:
    """Build a PDF with one page per text."""
    doc = fitz.open()
    for text in page_texts:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    try:
        if user_pw:
            return doc.tobytes(
                encryption=fitz.PDF_ENCRYPT_AES_256,
                user_pw=user_pw,
                owner_pw=f"{user_pw}-owner",
            )
        return doc.tobytes()
    finally:
        doc.close()


def page_texts(pdf_bytes: bytes) -> list[str]:
    doc = fitz.open(stream=pdf_bytes, filetype="pdf")
    try:
        return [page.get_text("text").strip() for page in doc]
    finally:
        doc.close()


def write_script(directory: Path, name: str, body: str) -> str:
    """Write an executable Python stand-in for an external tool."""
    path = directory / name
    path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(path)


def pdf_file(name: str = "doc.pdf", *texts: str) -> InputFile:
    return InputFile(filename=name, content_type="application/pdf", data=make_pdf(*(texts or ("page",))))


def request_for(capability: Capability, *files: InputFile, **params) -> ConversionRequest:
    return ConversionRequest(
        capability=capability, files=list(files), params=ConversionParams(**params)
    )


class EmptyResultCloudClient(BaseCloudClient):
    """Completes every step but hands back a zero-byte result."""

    def __init__(self):
        self.closed = False

    @property
    def name(self) -> str:
        return "empty"

    async def authenticate(self) -> None:
        pass

    async def upload_asset(self, path: Path, media_type: str) -> str:
        return "asset-1"

    async def submit_job(self, job_kind: CloudJobKind, job: dict) -> str:
        return "job-1"

    async def wait_for_result(self, polling_handle: str) -> str:
        return "result-1"

    async def download_asset(self, asset_handle: str) -> bytes:
        return b""

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def workspace_root(tmp_path) -> Path:
    root = tmp_path / "workspaces"
    root.mkdir()
    return root


@pytest.fixture
def settings(workspace_root) -> Settings:
    """Local-only settings with an isolated temp root."""
    return Settings(
        _env_file=None,
        prefer_cloud_engine=False,
        adobe_client_id="",
        adobe_client_secret="",
        temp_dir=str(workspace_root),
        adobe_poll_interval_seconds=0,
        adobe_poll_max_attempts=3,
        max_file_size_mb=1,
    )


@pytest.fixture
def cloud_settings(settings) -> Settings:
    return settings.model_copy(
        update={
            "prefer_cloud_engine": True,
            "adobe_client_id": "client-id",
            "adobe_client_secret": "client-secret",
            "adobe_api_base_url": "https://pdf-services.test",
        }
    )


@pytest.fixture
def tools_dir(tmp_path) -> Path:
    directory = tmp_path / "bin"
    directory.mkdir()
    return directory


@pytest.fixture
def client(settings):
    """FastAPI test client bound to the test settings."""
    from docverse.main import app

    app.dependency_overrides[get_settings] = lambda: settings
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
