from __future__ import annotations

import os
import tempfile

from fastapi import APIRouter, Depends

from docverse.config import Settings, get_settings
from docverse.models.schemas import HealthResponse, ServiceStatus
from docverse.services.local_tools import tool_available

router = APIRouter()


@router.get("/health/live")
async def liveness_probe():
    """
    MUST be lightweight and ALWAYS return 200 if the process is running.

    Do not perform external checks here (tools, cloud API), because they can
    cause deploy healthchecks to fail even when the app is fine.
    """
    return {"status": "alive"}


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)):
    """
    Detailed health endpoint.
    Reports which local engines are installed and whether the cloud engine
    is configured. Never calls the cloud API.
    """
    details = _check_local_tools(settings)
    services = {s.name: s.healthy for s in details}

    overall = "healthy" if all(s.healthy for s in details) else "degraded"

    return HealthResponse(
        status=overall,
        version=settings.app_version,
        environment=settings.app_env,
        cloud_engine=_cloud_engine_state(settings),
        services=services,
        details=details,
    )


@router.get("/health/ready")
async def readiness_probe(settings: Settings = Depends(get_settings)):
    """
    Readiness probe.
    Ready when the temp root is writable; every request needs a workspace.
    """
    workspace = _check_temp_dir(settings)

    if workspace.healthy:
        return {"status": "ready"}

    return {"status": "not_ready", "details": {"workspace": workspace.model_dump()}}


def _check_local_tools(settings: Settings) -> list[ServiceStatus]:
    tools = {
        "soffice": settings.soffice_path,
        "ghostscript": settings.ghostscript_path,
        "pdftoppm": settings.pdftoppm_path,
        "tesseract": settings.tesseract_path,
    }
    statuses = []
    for name, executable in tools.items():
        if tool_available(executable):
            statuses.append(ServiceStatus(name=name, healthy=True))
        else:
            statuses.append(
                ServiceStatus(
                    name=name, healthy=False, error=f"{executable} not found on PATH"
                )
            )
    return statuses


def _cloud_engine_state(settings: Settings) -> str:
    if settings.cloud_engine_enabled:
        return "enabled"
    if settings.cloud_credentials_present:
        return "configured"
    return "disabled"


def _check_temp_dir(settings: Settings) -> ServiceStatus:
    try:
        root = settings.temp_dir or tempfile.gettempdir()
        os.makedirs(root, exist_ok=True)
        with tempfile.NamedTemporaryFile(dir=root, prefix=".health_check") as f:
            f.write(b"ok")
        return ServiceStatus(name="workspace", healthy=True)
    except OSError as e:
        return ServiceStatus(name="workspace", healthy=False, error=str(e))
