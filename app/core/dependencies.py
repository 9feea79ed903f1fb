from __future__ import annotations

from functools import lru_cache

from app.clients.k8s import KubernetesClient
from app.core.config import Settings, load_settings
from app.services.pods import PodService


@lru_cache
def get_settings() -> Settings:
    return load_settings()


@lru_cache
def get_k8s_client() -> KubernetesClient:
    return KubernetesClient(get_settings())


@lru_cache
def get_pod_service() -> PodService:
    return PodService(get_k8s_client())
