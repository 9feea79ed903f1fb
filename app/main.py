from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from app.api import clusters, health
from app.core.dependencies import get_settings
from app.core.logging import configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Starting kube-pod-dashboard for cluster %s on port %s", settings.cluster_name, settings.port
    )
    yield


app = FastAPI(title="kube-pod-dashboard", version="1.0.0", lifespan=lifespan)
app.include_router(health.router)
app.include_router(clusters.router)


def run() -> None:
    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
