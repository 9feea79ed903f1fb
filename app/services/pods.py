from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime, timezone

from app.clients.k8s import KubernetesClient
from app.models.k8s import DataShapeError, PodStatus, RawPod
from app.schemas.pods import ContainerStateSummary, ProjectedPod
from app.services.pod_status import (
    DEFAULT_CONTAINER_TOTAL,
    UNKNOWN_AGE,
    aggregate_readiness,
    aggregate_restarts,
    classify,
    describe_container_state,
    format_age,
    format_ready,
)

logger = logging.getLogger(__name__)


class EmptySearchQueryError(ValueError):
    """Search was requested without a query."""


def project_namespace(raw_pods: Iterable[RawPod], now: datetime) -> list[ProjectedPod]:
    return [
        _project_safely(pod, now, include_namespace=False, include_containers=True)
        for pod in raw_pods
    ]


def search_across_cluster(
    raw_pods: Iterable[RawPod], query: str, now: datetime
) -> list[ProjectedPod]:
    """Project the pods whose name or namespace contains ``query``.

    Matching is a case-sensitive literal substring test and keeps input order.
    An empty or whitespace-only query raises ``EmptySearchQueryError``.
    """
    validate_search_query(query)
    return [
        _project_safely(pod, now, include_namespace=True, include_containers=False)
        for pod in raw_pods
        if _matches(pod, query)
    ]


def validate_search_query(query: str | None) -> str:
    if query is None or not query.strip():
        raise EmptySearchQueryError("Query parameter is required")
    return query


def _matches(pod: RawPod, query: str) -> bool:
    name = pod.name if isinstance(pod.name, str) else ""
    namespace = pod.namespace if isinstance(pod.namespace, str) else ""
    return query in name or query in namespace


def _project_safely(
    pod: RawPod,
    now: datetime,
    *,
    include_namespace: bool,
    include_containers: bool,
) -> ProjectedPod:
    try:
        return _project(
            pod,
            now,
            include_namespace=include_namespace,
            include_containers=include_containers,
        )
    except (DataShapeError, AttributeError, TypeError, ValueError) as exc:
        logger.warning(
            "Failed to project pod %s/%s, reporting it as Unknown: %s",
            getattr(pod, "namespace", None),
            getattr(pod, "name", None),
            exc,
        )
        return _degraded(
            pod,
            include_namespace=include_namespace,
            include_containers=include_containers,
        )


def _project(
    pod: RawPod,
    now: datetime,
    *,
    include_namespace: bool,
    include_containers: bool,
) -> ProjectedPod:
    if not pod.name:
        raise DataShapeError("pod name is missing")

    statuses = pod.container_statuses
    ready_count, total_count = aggregate_readiness(statuses)
    container_states = None
    if include_containers:
        container_states = [
            ContainerStateSummary(
                container_name=status.name,
                state=describe_container_state(status),
            )
            for status in statuses or ()
        ]

    return ProjectedPod(
        name=pod.name,
        namespace=pod.namespace if include_namespace else None,
        status=classify(pod.phase, statuses),
        ready=format_ready(ready_count, total_count),
        restart_count=str(aggregate_restarts(statuses)),
        age=format_age(pod.creation_timestamp, now),
        container_statuses=container_states,
    )


def _degraded(
    pod: RawPod,
    *,
    include_namespace: bool,
    include_containers: bool,
) -> ProjectedPod:
    namespace = getattr(pod, "namespace", None)
    return ProjectedPod(
        name=str(getattr(pod, "name", None) or ""),
        namespace=str(namespace or "") if include_namespace else None,
        status=PodStatus.UNKNOWN,
        ready=format_ready(0, DEFAULT_CONTAINER_TOTAL),
        restart_count="0",
        age=UNKNOWN_AGE,
        container_statuses=[] if include_containers else None,
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class PodService:
    def __init__(
        self,
        k8s_client: KubernetesClient,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._k8s_client = k8s_client
        self._clock = clock

    def list_namespaces(self) -> list[str]:
        return self._k8s_client.list_namespaces()

    def list_namespace_pods(self, namespace: str) -> list[ProjectedPod]:
        raw_pods = self._k8s_client.list_namespaced_pods(namespace)
        return project_namespace(raw_pods, self._clock())

    def search_pods(self, query: str | None) -> list[ProjectedPod]:
        query = validate_search_query(query)
        self._logger.info("Search query: %s", query)
        raw_pods: Sequence[RawPod] = self._k8s_client.list_all_pods()
        results = search_across_cluster(raw_pods, query, self._clock())
        self._logger.info("Search for %r matched %d of %d pods", query, len(results), len(raw_pods))
        return results
