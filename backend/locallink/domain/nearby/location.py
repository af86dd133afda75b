"""Device location access: readiness checks, one-shot fixes and fix streams."""

from __future__ import annotations

import asyncio
import enum
import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol

from locallink.domain.nearby.errors import LocationPermissionError, ServiceDisabledError
from locallink.domain.nearby.models import Position
from locallink.settings import settings

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000


class PermissionStatus(str, enum.Enum):
    GRANTED = "granted"
    DENIED = "denied"
    DENIED_FOREVER = "denied_forever"


@dataclass(frozen=True, slots=True)
class LocationSettings:
    accuracy: str
    interval_ms: int
    distance_filter_m: float

    @classmethod
    def from_settings(cls) -> "LocationSettings":
        return cls(
            accuracy=settings.location_accuracy,
            interval_ms=int(settings.location_interval_ms),
            distance_filter_m=float(settings.location_distance_filter_m),
        )


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance between two points in meters."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


class PositionSubscription:
    """Async iterator over fixes that can be paused without losing its place.

    Fixes pushed while paused are buffered and delivered in order on resume. The
    buffer holds at most ``max_buffered`` fixes; when full the oldest is dropped.
    """

    MAX_BUFFERED = 32

    def __init__(
        self,
        on_cancel: Optional[Callable[["PositionSubscription"], None]] = None,
        *,
        max_buffered: int = MAX_BUFFERED,
    ) -> None:
        self._queue: asyncio.Queue[Optional[Position]] = asyncio.Queue(maxsize=max(1, max_buffered))
        self._resumed = asyncio.Event()
        self._resumed.set()
        self._cancelled = False
        self._on_cancel = on_cancel

    @property
    def paused(self) -> bool:
        return not self._resumed.is_set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def _put(self, item: Optional[Position]) -> None:
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(item)

    def push(self, position: Position) -> None:
        if not self._cancelled:
            self._put(position)

    def pause(self) -> None:
        if not self._cancelled:
            self._resumed.clear()

    def resume(self) -> None:
        self._resumed.set()

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._put(None)
        self._resumed.set()
        if self._on_cancel is not None:
            self._on_cancel(self)

    def __aiter__(self) -> "PositionSubscription":
        return self

    async def __anext__(self) -> Position:
        if self._cancelled:
            raise StopAsyncIteration
        item = await self._queue.get()
        if item is None:
            raise StopAsyncIteration
        await self._resumed.wait()
        if self._cancelled:
            raise StopAsyncIteration
        return item


class LocationService(Protocol):
    async def is_service_enabled(self) -> bool:
        ...

    async def request_service_enable(self) -> bool:
        ...

    async def get_permission_status(self) -> PermissionStatus:
        ...

    async def request_permission(self) -> PermissionStatus:
        ...

    async def change_settings(self, config: LocationSettings) -> None:
        ...

    async def get_current_position(self) -> Position:
        ...

    def subscribe(self) -> PositionSubscription:
        ...


async def ensure_location_ready(service: LocationService) -> None:
    """Check service and permission, prompting once for each."""
    if not await service.is_service_enabled():
        if not await service.request_service_enable():
            raise ServiceDisabledError("location service not enabled after request")

    status = await service.get_permission_status()
    if status is PermissionStatus.DENIED:
        status = await service.request_permission()
    if status is not PermissionStatus.GRANTED:
        raise LocationPermissionError(f"location permission {status.value}")


async def acquire_position(service: LocationService) -> Position:
    await ensure_location_ready(service)
    return await service.get_current_position()


class ReportedLocationService:
    """Location service driven by what the mobile client reports.

    Prompts are published as ``pending_prompt`` and resolved by the client's next
    status report; an unanswered prompt times out and counts as declined. Fixes
    closer than the configured distance filter to the last delivered one are
    dropped, the way the device itself would suppress them.
    """

    def __init__(
        self,
        *,
        service_enabled: bool = True,
        permission: PermissionStatus = PermissionStatus.DENIED,
        prompt_timeout: Optional[float] = None,
    ) -> None:
        self._service_enabled = service_enabled
        self._permission = permission
        self._prompt_timeout = (
            settings.location_prompt_timeout_seconds if prompt_timeout is None else prompt_timeout
        )
        self._pending_prompt: Optional[str] = None
        self._answered = asyncio.Event()
        self._fix_arrived = asyncio.Event()
        self._latest: Optional[Position] = None
        self._last_delivered: Optional[Position] = None
        self._subscriptions: List[PositionSubscription] = []
        self.config: Optional[LocationSettings] = None

    @property
    def pending_prompt(self) -> Optional[str]:
        return self._pending_prompt

    @property
    def latest(self) -> Optional[Position]:
        return self._latest

    def report_status(
        self,
        *,
        service_enabled: Optional[bool] = None,
        permission: Optional[PermissionStatus] = None,
    ) -> None:
        if service_enabled is not None:
            self._service_enabled = service_enabled
        if permission is not None:
            self._permission = permission
        # A report only answers the prompt when it carries the field that prompt asks about
        if (self._pending_prompt == "service" and service_enabled is not None) or (
            self._pending_prompt == "permission" and permission is not None
        ):
            self._answered.set()

    def report_fix(self, position: Position) -> bool:
        """Record a fix from the device. Returns False when it was filtered out."""
        previous = self._last_delivered
        if previous is not None and self.config is not None and self.config.distance_filter_m > 0:
            moved = haversine(previous.latitude, previous.longitude, position.latitude, position.longitude)
            if moved < self.config.distance_filter_m:
                return False
        self._latest = position
        self._last_delivered = position
        self._fix_arrived.set()
        for subscription in list(self._subscriptions):
            subscription.push(position)
        return True

    async def _prompt(self, kind: str) -> None:
        self._pending_prompt = kind
        self._answered.clear()
        try:
            await asyncio.wait_for(self._answered.wait(), timeout=self._prompt_timeout)
        except asyncio.TimeoutError:
            logger.info("location prompt unanswered kind=%s", kind)
        finally:
            self._pending_prompt = None

    async def is_service_enabled(self) -> bool:
        return self._service_enabled

    async def request_service_enable(self) -> bool:
        if not self._service_enabled:
            await self._prompt("service")
        return self._service_enabled

    async def get_permission_status(self) -> PermissionStatus:
        return self._permission

    async def request_permission(self) -> PermissionStatus:
        if self._permission is PermissionStatus.DENIED:
            await self._prompt("permission")
        return self._permission

    async def change_settings(self, config: LocationSettings) -> None:
        self.config = config

    async def get_current_position(self) -> Position:
        if self._latest is None:
            await self._fix_arrived.wait()
        assert self._latest is not None
        return self._latest

    def subscribe(self) -> PositionSubscription:
        subscription = PositionSubscription(on_cancel=self._subscriptions.remove)
        self._subscriptions.append(subscription)
        return subscription
