from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_CLUSTER_NAME = "K8S-Cluster"


def _get_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    port: int
    log_level: str
    cluster_name: str
    k8s_api_server: str
    k8s_token: str
    k8s_ca_cert_path: str
    k8s_api_timeout_seconds: int


def load_settings() -> Settings:
    return Settings(
        port=_get_int_env("PORT", 3000),
        log_level=os.getenv("LOG_LEVEL", "info"),
        cluster_name=os.getenv("CLUSTER_NAME", DEFAULT_CLUSTER_NAME),
        k8s_api_server=os.getenv("K8S_API_SERVER", ""),
        k8s_token=os.getenv("K8S_TOKEN", ""),
        k8s_ca_cert_path=os.getenv("K8S_CA_CERT_PATH", ""),
        k8s_api_timeout_seconds=_get_int_env("K8S_API_TIMEOUT_SECONDS", 5),
    )
