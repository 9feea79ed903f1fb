from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from app.clients.k8s import ClusterFetchError
from app.core.config import Settings
from app.core.dependencies import get_pod_service, get_settings
from app.schemas.pods import ClusterSummary, ProjectedPod
from app.services.pods import EmptySearchQueryError, PodService

router = APIRouter()


@router.get("/clusters", response_model=list[ClusterSummary])
def list_clusters(
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> list[ClusterSummary]:
    return [ClusterSummary(name=settings.cluster_name)]


@router.get("/namespaces", response_model=list[str])
def list_namespaces(
    service: PodService = Depends(get_pod_service),  # noqa: B008
) -> list[str]:
    return _fetch_namespaces(service)


@router.get("/clusters/{cluster}/namespaces", response_model=list[str])
def list_cluster_namespaces(
    cluster: str,
    settings: Settings = Depends(get_settings),  # noqa: B008
    service: PodService = Depends(get_pod_service),  # noqa: B008
) -> list[str]:
    _require_cluster(cluster, settings)
    return _fetch_namespaces(service)


@router.get(
    "/clusters/{cluster}/namespaces/{namespace}/pods",
    response_model=list[ProjectedPod],
    response_model_exclude_none=True,
)
def list_namespace_pods(
    cluster: str,
    namespace: str,
    settings: Settings = Depends(get_settings),  # noqa: B008
    service: PodService = Depends(get_pod_service),  # noqa: B008
) -> list[ProjectedPod]:
    """List pods of one namespace with per-container state details."""
    _require_cluster(cluster, settings)
    try:
        return service.list_namespace_pods(namespace)
    except ClusterFetchError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@router.get(
    "/clusters/{cluster}/search",
    response_model=list[ProjectedPod],
    response_model_exclude_none=True,
)
def search_pods(
    cluster: str,
    query: str | None = None,
    settings: Settings = Depends(get_settings),  # noqa: B008
    service: PodService = Depends(get_pod_service),  # noqa: B008
) -> list[ProjectedPod]:
    """Search pods in every namespace by name or namespace substring."""
    _require_cluster(cluster, settings)
    try:
        return service.search_pods(query)
    except EmptySearchQueryError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ClusterFetchError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def _require_cluster(cluster: str, settings: Settings) -> None:
    if cluster != settings.cluster_name:
        raise HTTPException(status_code=404, detail=f"Cluster {cluster} not found")


def _fetch_namespaces(service: PodService) -> list[str]:
    try:
        return service.list_namespaces()
    except ClusterFetchError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
