"""
Render surface contract and an in-memory globe.

A real front-end (globe.gl, Cesium, ...) owns the pixels; the backend only
needs something that accepts camera poses and markers. HeadlessGlobe keeps the
latest state so it can be served over HTTP and inspected in tests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from domain.models import CameraPose, Marker
from services.scheduling import Scheduler

INITIAL_POSE = CameraPose(lat=0.0, lng=0.0, altitude=2.5)


class RenderSurface(Protocol):
    def get_pose(self) -> CameraPose: ...

    def set_pose(self, pose: CameraPose, transition_ms: float = 0) -> None: ...

    def set_auto_rotate(self, enabled: bool) -> None: ...

    def set_markers(self, markers: List[Marker]) -> None: ...


@dataclass(frozen=True)
class PoseWrite:
    time_ms: float
    pose: CameraPose
    transition_ms: float


@dataclass(frozen=True)
class AutoRotateChange:
    time_ms: float
    enabled: bool


class HeadlessGlobe:
    """Records every pose write and auto-rotate toggle."""

    def __init__(
        self,
        scheduler: Optional[Scheduler] = None,
        initial_pose: CameraPose = INITIAL_POSE,
        auto_rotate: bool = True,
    ):
        self._scheduler = scheduler
        self._pose = initial_pose
        self.auto_rotate = auto_rotate
        self.markers: List[Marker] = []
        self.pose_writes: List[PoseWrite] = []
        self.auto_rotate_changes: List[AutoRotateChange] = []

    def _now(self) -> float:
        return self._scheduler.now_ms() if self._scheduler is not None else 0.0

    def get_pose(self) -> CameraPose:
        return self._pose

    def set_pose(self, pose: CameraPose, transition_ms: float = 0) -> None:
        self._pose = pose
        self.pose_writes.append(PoseWrite(self._now(), pose, transition_ms))

    def set_auto_rotate(self, enabled: bool) -> None:
        self.auto_rotate = enabled
        self.auto_rotate_changes.append(AutoRotateChange(self._now(), enabled))

    def set_markers(self, markers: List[Marker]) -> None:
        self.markers = list(markers)
