from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from app.models.k8s import PodStatus, RawContainerState, RawContainerStatus
from app.services.pod_status import (
    aggregate_readiness,
    aggregate_restarts,
    classify,
    describe_container_state,
    format_age,
    format_ready,
)

NOW = datetime(2026, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _container(
    name: str = "app",
    *,
    ready: bool = True,
    restart_count: int = 0,
    state: RawContainerState | None = None,
) -> RawContainerStatus:
    return RawContainerStatus(
        name=name,
        ready=ready,
        restart_count=restart_count,
        state=state or RawContainerState.running(),
    )


def _crash_looping(name: str = "app") -> RawContainerStatus:
    return _container(
        name,
        ready=False,
        restart_count=4,
        state=RawContainerState.waiting("CrashLoopBackOff"),
    )


def test_classify_running_without_crash_loop() -> None:
    statuses = [
        _container("app"),
        _container("sidecar", ready=False, state=RawContainerState.waiting("ContainerCreating")),
    ]

    assert classify("Running", statuses) == PodStatus.RUNNING


def test_classify_crash_loop_takes_precedence_over_running() -> None:
    statuses = [_container("app"), _crash_looping("worker")]

    assert classify("Running", statuses) == PodStatus.CRASH_LOOP_BACK_OFF


def test_classify_running_with_no_container_statuses() -> None:
    assert classify("Running", None) == PodStatus.RUNNING
    assert classify("Running", []) == PodStatus.RUNNING


@pytest.mark.parametrize("phase", ["Succeeded", "Failed"])
def test_classify_terminal_phase_is_returned_verbatim(phase: str) -> None:
    assert classify(phase, [_crash_looping()]) == PodStatus(phase)
    assert classify(phase, None) == PodStatus(phase)


@pytest.mark.parametrize("phase", ["Pending", "Unknown", None, "", "Evicted", "running"])
def test_classify_other_phases_are_unknown(phase: str | None) -> None:
    assert classify(phase, [_crash_looping()]) == PodStatus.UNKNOWN


def test_classify_ignores_crash_loop_reason_in_terminated_state() -> None:
    statuses = [
        _container(state=RawContainerState.terminated("CrashLoopBackOff", 1)),
    ]

    assert classify("Running", statuses) == PodStatus.RUNNING


def test_aggregate_readiness() -> None:
    assert aggregate_readiness([]) == (0, 1)
    assert aggregate_readiness(None) == (0, 1)
    assert aggregate_readiness([_container(ready=True), _container(ready=False)]) == (1, 2)


def test_aggregate_restarts() -> None:
    statuses = [_container(restart_count=2), _container(restart_count=3)]

    assert aggregate_restarts(statuses) == 5
    assert aggregate_restarts([]) == 0
    assert aggregate_restarts(None) == 0


def test_aggregate_restarts_ignores_negative_counts(caplog: pytest.LogCaptureFixture) -> None:
    statuses = [_container("good", restart_count=2), _container("bad", restart_count=-3)]

    with caplog.at_level("WARNING"):
        total = aggregate_restarts(statuses)

    assert total == 2
    assert "negative restart count" in caplog.text


def test_describe_container_state() -> None:
    assert describe_container_state(
        _container(state=RawContainerState.waiting("ImagePullBackOff"))
    ) == "Waiting: ImagePullBackOff"
    assert describe_container_state(
        _container(state=RawContainerState.terminated("OOMKilled", 137))
    ) == "Terminated: OOMKilled, Exit Code: 137"
    assert describe_container_state(_container()) == "Running"
    assert describe_container_state(_container(state=RawContainerState.unknown())) == "Unknown"


def test_format_ready() -> None:
    assert format_ready(1, 2) == "1/2"


@pytest.mark.parametrize(
    ("elapsed", "expected"),
    [
        (timedelta(seconds=10), "a few seconds ago"),
        (timedelta(seconds=60), "a minute ago"),
        (timedelta(minutes=10), "10 minutes ago"),
        (timedelta(minutes=60), "an hour ago"),
        (timedelta(hours=3), "3 hours ago"),
        (timedelta(hours=24), "a day ago"),
        (timedelta(days=2), "2 days ago"),
        (timedelta(days=30), "a month ago"),
        (timedelta(days=92), "3 months ago"),
        (timedelta(days=400), "a year ago"),
        (timedelta(days=365 * 3), "3 years ago"),
    ],
)
def test_format_age(elapsed: timedelta, expected: str) -> None:
    assert format_age(NOW - elapsed, NOW) == expected


def test_format_age_edge_cases() -> None:
    naive_created = datetime(2026, 3, 1, 9, 0, 0)

    assert format_age(naive_created, NOW) == "3 hours ago"
    assert format_age(NOW + timedelta(minutes=5), NOW) == "a few seconds ago"
    assert format_age(None, NOW) == "unknown"
