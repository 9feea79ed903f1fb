from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class DataShapeError(ValueError):
    """A raw record misses an expected field or carries an unknown enum value."""


class PodPhase(str, Enum):
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"

    @classmethod
    def parse(cls, value: str | None) -> PodPhase:
        if not value:
            raise DataShapeError("pod phase is missing")
        try:
            return cls(value)
        except ValueError as exc:
            raise DataShapeError(f"unrecognized pod phase: {value}") from exc


class PodStatus(str, Enum):
    RUNNING = "Running"
    CRASH_LOOP_BACK_OFF = "CrashLoopBackOff"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    UNKNOWN = "Unknown"


class ContainerStateKind(str, Enum):
    WAITING = "waiting"
    TERMINATED = "terminated"
    RUNNING = "running"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RawContainerState:
    kind: ContainerStateKind
    reason: str | None = None
    exit_code: int | None = None

    @classmethod
    def waiting(cls, reason: str | None) -> RawContainerState:
        return cls(kind=ContainerStateKind.WAITING, reason=reason)

    @classmethod
    def terminated(cls, reason: str | None, exit_code: int | None) -> RawContainerState:
        return cls(kind=ContainerStateKind.TERMINATED, reason=reason, exit_code=exit_code)

    @classmethod
    def running(cls) -> RawContainerState:
        return cls(kind=ContainerStateKind.RUNNING)

    @classmethod
    def unknown(cls) -> RawContainerState:
        return cls(kind=ContainerStateKind.UNKNOWN)


@dataclass(frozen=True)
class RawContainerStatus:
    name: str
    ready: bool
    restart_count: int
    state: RawContainerState


@dataclass(frozen=True)
class RawPod:
    name: str
    namespace: str
    phase: str | None
    creation_timestamp: datetime | None
    container_statuses: tuple[RawContainerStatus, ...] | None = None
