from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from app.models.k8s import PodStatus


class ContainerStateSummary(BaseModel):
    container_name: str = Field(alias="containerName")
    state: str

    model_config = ConfigDict(populate_by_name=True)


class ProjectedPod(BaseModel):
    """Pod summary rendered by the dashboard.

    ``namespace`` is only set on search results and ``container_statuses`` only
    on namespace listings; routes drop unset fields from the JSON body.
    """

    name: str
    namespace: str | None = None
    status: PodStatus
    ready: str
    restart_count: str = Field(alias="restartCount")
    age: str
    container_statuses: list[ContainerStateSummary] | None = Field(
        default=None, alias="containerStatuses"
    )

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)


class ClusterSummary(BaseModel):
    name: str
