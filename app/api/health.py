from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from app.clients.k8s import KubernetesClient
from app.core.dependencies import get_k8s_client

router = APIRouter()


@router.get("/ping")
def ping() -> dict[str, str]:
    return {"message": "pong"}


@router.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
def readyz(
    k8s_client: KubernetesClient = Depends(get_k8s_client),  # noqa: B008
) -> JSONResponse:
    """Ready once a Kubernetes API client could be configured."""
    if not k8s_client.is_configured:
        return JSONResponse(
            status_code=503,
            content={"status": "unavailable", "message": "kubernetes client is not configured"},
        )
    return JSONResponse(content={"status": "ok"})
