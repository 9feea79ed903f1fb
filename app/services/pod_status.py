"""Reduce raw container state records to a single pod-level summary."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from app.models.k8s import (
    ContainerStateKind,
    DataShapeError,
    PodPhase,
    PodStatus,
    RawContainerStatus,
)

CRASH_LOOP_BACK_OFF_REASON = "CrashLoopBackOff"
# Shown as the total when a pod reports no container statuses yet.
DEFAULT_CONTAINER_TOTAL = 1
UNKNOWN_AGE = "unknown"

logger = logging.getLogger(__name__)

ContainerStatuses = Sequence[RawContainerStatus] | None


@dataclass(frozen=True)
class StatusRule:
    name: str
    matches: Callable[[PodPhase, Sequence[RawContainerStatus]], bool]
    status: PodStatus


def _is_crash_looping(status: RawContainerStatus) -> bool:
    return (
        status.state.kind == ContainerStateKind.WAITING
        and status.state.reason == CRASH_LOOP_BACK_OFF_REASON
    )


# Evaluated top to bottom, first match wins.
STATUS_RULES: tuple[StatusRule, ...] = (
    StatusRule(
        name="running-crash-loop",
        matches=lambda phase, statuses: (
            phase == PodPhase.RUNNING and any(_is_crash_looping(item) for item in statuses)
        ),
        status=PodStatus.CRASH_LOOP_BACK_OFF,
    ),
    StatusRule(
        name="running",
        matches=lambda phase, statuses: phase == PodPhase.RUNNING,
        status=PodStatus.RUNNING,
    ),
    StatusRule(
        name="succeeded",
        matches=lambda phase, statuses: phase == PodPhase.SUCCEEDED,
        status=PodStatus.SUCCEEDED,
    ),
    StatusRule(
        name="failed",
        matches=lambda phase, statuses: phase == PodPhase.FAILED,
        status=PodStatus.FAILED,
    ),
)


def classify(phase: str | None, container_statuses: ContainerStatuses) -> PodStatus:
    try:
        parsed_phase = PodPhase.parse(phase)
    except DataShapeError as exc:
        logger.debug("Classifying pod as Unknown: %s", exc)
        return PodStatus.UNKNOWN

    statuses = container_statuses or ()
    for rule in STATUS_RULES:
        if rule.matches(parsed_phase, statuses):
            return rule.status
    return PodStatus.UNKNOWN


def aggregate_readiness(container_statuses: ContainerStatuses) -> tuple[int, int]:
    if not container_statuses:
        return 0, DEFAULT_CONTAINER_TOTAL
    ready_count = sum(1 for status in container_statuses if status.ready)
    return ready_count, len(container_statuses)


def aggregate_restarts(container_statuses: ContainerStatuses) -> int:
    total = 0
    for status in container_statuses or ():
        if status.restart_count < 0:
            logger.warning(
                "Ignoring negative restart count %s for container %s",
                status.restart_count,
                status.name,
            )
            continue
        total += status.restart_count
    return total


def describe_container_state(status: RawContainerStatus) -> str:
    state = status.state
    if state.kind == ContainerStateKind.WAITING:
        return f"Waiting: {state.reason}"
    if state.kind == ContainerStateKind.TERMINATED:
        return f"Terminated: {state.reason}, Exit Code: {state.exit_code}"
    if state.kind == ContainerStateKind.RUNNING:
        return "Running"
    return "Unknown"


def format_ready(ready_count: int, total_count: int) -> str:
    return f"{ready_count}/{total_count}"


def format_age(creation_timestamp: datetime | None, now: datetime) -> str:
    """Render the time elapsed since ``creation_timestamp`` as e.g. "3 hours ago".

    Naive datetimes are read as UTC. Timestamps later than ``now`` (clock
    skew between the API server and this process) read as "a few seconds ago".
    """
    if creation_timestamp is None:
        return UNKNOWN_AGE

    elapsed = (_as_utc(now) - _as_utc(creation_timestamp)).total_seconds()
    seconds = round(max(elapsed, 0.0))
    minutes = round(seconds / 60)
    hours = round(seconds / 3600)
    days = round(seconds / 86400)

    if seconds < 45:
        return "a few seconds ago"
    if seconds < 90:
        return "a minute ago"
    if minutes < 45:
        return f"{minutes} minutes ago"
    if minutes < 90:
        return "an hour ago"
    if hours < 22:
        return f"{hours} hours ago"
    if hours < 36:
        return "a day ago"
    if days < 26:
        return f"{days} days ago"
    months = round(days / 30.4)
    if days < 45 or months < 2:
        return "a month ago"
    if days < 320:
        return f"{months} months ago"
    if days < 548:
        return "a year ago"
    return f"{round(days / 365)} years ago"


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
