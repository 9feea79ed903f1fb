from __future__ import annotations

import logging
from collections.abc import Iterable

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
HEALTH_CHECK_PATHS = frozenset({"/healthz", "/readyz", "/ping"})


class _HealthCheckFilter(logging.Filter):
    """Drop uvicorn access-log lines for liveness probes."""

    def __init__(self, paths: Iterable[str]) -> None:
        super().__init__()
        self._paths = {path.rstrip("/") or "/" for path in paths}

    def filter(self, record: logging.LogRecord) -> bool:
        return _request_path(record) not in self._paths


def _request_path(record: logging.LogRecord) -> str | None:
    # uvicorn.access passes (client_addr, method, path, http_version, status_code)
    args = record.args
    if not isinstance(args, tuple) or len(args) < 3:
        return None
    path = str(args[2]).split("?", 1)[0]
    return path.rstrip("/") or "/"


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    logging.getLogger("uvicorn.access").addFilter(_HealthCheckFilter(HEALTH_CHECK_PATHS))
