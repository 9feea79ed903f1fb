from __future__ import annotations

import logging

from kubernetes import client, config
from kubernetes.client.exceptions import ApiException
from kubernetes.config.config_exception import ConfigException

from app.core.config import Settings
from app.models.k8s import RawContainerState, RawContainerStatus, RawPod


class ClusterFetchError(RuntimeError):
    """Raw cluster state could not be fetched from the Kubernetes API."""


class KubernetesClient:
    def __init__(self, settings: Settings) -> None:
        self._logger = logging.getLogger(__name__)
        self._settings = settings
        self._timeout_seconds = settings.k8s_api_timeout_seconds
        self._core_api = self._build_client()

    @property
    def is_configured(self) -> bool:
        return self._core_api is not None

    def list_namespaces(self) -> list[str]:
        core_api = self._require_core_api()
        try:
            response = core_api.list_namespace(_request_timeout=self._timeout_seconds)
        except Exception as exc:  # noqa: BLE001 - Kubernetes client raises many exception types.
            self._logger.warning("Failed to list namespaces: %s", exc)
            raise ClusterFetchError(f"failed to list namespaces: {_describe(exc)}") from exc
        return [item.metadata.name for item in response.items if item.metadata]

    def list_namespaced_pods(self, namespace: str) -> list[RawPod]:
        core_api = self._require_core_api()
        try:
            response = core_api.list_namespaced_pod(
                namespace=namespace,
                _request_timeout=self._timeout_seconds,
            )
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("Failed to list pods in %s: %s", namespace, exc)
            raise ClusterFetchError(
                f"failed to list pods in namespace {namespace}: {_describe(exc)}"
            ) from exc
        return [self._to_raw_pod(item) for item in response.items]

    def list_all_pods(self) -> list[RawPod]:
        core_api = self._require_core_api()
        try:
            response = core_api.list_pod_for_all_namespaces(
                _request_timeout=self._timeout_seconds,
            )
        except Exception as exc:  # noqa: BLE001
            self._logger.warning("Failed to list pods for all namespaces: %s", exc)
            raise ClusterFetchError(f"failed to list pods: {_describe(exc)}") from exc
        return [self._to_raw_pod(item) for item in response.items]

    def _require_core_api(self) -> client.CoreV1Api:
        if self._core_api is None:
            raise ClusterFetchError("kubernetes client is not configured")
        return self._core_api

    def _build_client(self) -> client.CoreV1Api | None:
        settings = self._settings
        if settings.k8s_api_server and settings.k8s_token:
            configuration = client.Configuration()
            configuration.host = settings.k8s_api_server
            configuration.api_key = {"authorization": f"Bearer {settings.k8s_token}"}
            if settings.k8s_ca_cert_path:
                configuration.ssl_ca_cert = settings.k8s_ca_cert_path
            self._logger.info("Using Kubernetes API server %s", settings.k8s_api_server)
            return client.CoreV1Api(client.ApiClient(configuration))

        try:
            config.load_incluster_config()
            self._logger.info("Loaded in-cluster Kubernetes config")
        except ConfigException:
            try:
                config.load_kube_config()
                self._logger.info("Loaded kubeconfig for local development")
            except ConfigException as exc:
                self._logger.warning("Failed to configure Kubernetes client: %s", exc)
                return None
        return client.CoreV1Api()

    def _to_raw_pod(self, pod: client.V1Pod) -> RawPod:
        metadata = pod.metadata
        status = pod.status
        container_statuses = None
        if status is not None and status.container_statuses is not None:
            container_statuses = tuple(
                self._to_raw_container_status(item) for item in status.container_statuses
            )
        return RawPod(
            name=metadata.name if metadata else "",
            namespace=metadata.namespace if metadata else "",
            phase=status.phase if status else None,
            creation_timestamp=metadata.creation_timestamp if metadata else None,
            container_statuses=container_statuses,
        )

    def _to_raw_container_status(
        self, container_status: client.V1ContainerStatus
    ) -> RawContainerStatus:
        return RawContainerStatus(
            name=container_status.name or "",
            ready=bool(container_status.ready),
            restart_count=container_status.restart_count or 0,
            state=self._extract_container_state(container_status.state),
        )

    @staticmethod
    def _extract_container_state(state: client.V1ContainerState | None) -> RawContainerState:
        if state is None:
            return RawContainerState.unknown()
        if state.waiting:
            return RawContainerState.waiting(state.waiting.reason)
        if state.terminated:
            return RawContainerState.terminated(
                state.terminated.reason, state.terminated.exit_code
            )
        if state.running:
            return RawContainerState.running()
        return RawContainerState.unknown()


def _describe(exc: Exception) -> str:
    if isinstance(exc, ApiException):
        return f"{exc.status} {exc.reason}"
    return str(exc)
