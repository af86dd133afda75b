"""Home screen session: location tracking, roster loading and filtering.

A session is the server-side owner of one home screen instance. All mutations run
on the event loop and replace ``state`` with a new snapshot.
"""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import suppress
from typing import Coroutine, Mapping, Optional, Set

from locallink.domain.nearby import state as transitions
from locallink.domain.nearby.errors import FetchError, LocationUnavailable
from locallink.domain.nearby.location import (
	LocationService,
	LocationSettings,
	PositionSubscription,
	ensure_location_ready,
)
from locallink.domain.nearby.map_view import MapDisplay, MapViewState
from locallink.domain.nearby.models import Position
from locallink.domain.nearby.roster import RosterSource, fetch_roster
from locallink.domain.nearby.state import HomeState
from locallink.obs import metrics as obs_metrics
from locallink.settings import settings

logger = logging.getLogger(__name__)


class HomeSession:
	def __init__(
		self,
		session_id: str,
		device_id: str,
		*,
		location: LocationService,
		roster_source: RosterSource,
		map_display: Optional[MapDisplay] = None,
		zoom: Optional[float] = None,
	) -> None:
		self.id = session_id
		self.device_id = device_id
		self.location = location
		self.roster_source = roster_source
		self.map = map_display if map_display is not None else MapViewState()
		self.zoom = settings.map_zoom if zoom is None else zoom
		self.state = HomeState()
		self._subscription: Optional[PositionSubscription] = None
		self._acquire_task: Optional[asyncio.Task] = None
		self._fetch_task: Optional[asyncio.Task] = None
		self._tasks: Set[asyncio.Task] = set()
		self._closed = False
		self.last_seen = time.monotonic()

	def touch(self) -> None:
		self.last_seen = time.monotonic()

	@property
	def closed(self) -> bool:
		return self._closed

	@property
	def subscription(self) -> Optional[PositionSubscription]:
		return self._subscription

	def _set_state(self, new_state: HomeState) -> None:
		if not self._closed:
			self.state = new_state

	def _spawn(self, coro: Coroutine, name: str) -> asyncio.Task:
		task = asyncio.create_task(coro, name=f"{name}:{self.id}")
		self._tasks.add(task)
		task.add_done_callback(self._tasks.discard)
		return task

	# Location ------------------------------------------------------------------

	def start(self) -> asyncio.Task:
		"""Begin acquisition; the roster is fetched once location is ready."""
		self._set_state(transitions.location_requested(self.state))
		self._acquire_task = self._spawn(self._acquire(fetch_after=True), "home-acquire")
		return self._acquire_task

	async def _acquire(self, *, fetch_after: bool) -> None:
		try:
			await ensure_location_ready(self.location)
			await self.location.change_settings(LocationSettings.from_settings())
		except LocationUnavailable as exc:
			obs_metrics.inc_location_unavailable(exc.reason)
			logger.info("location unavailable session=%s reason=%s", self.id, exc.reason)
			self._set_state(transitions.location_failed(self.state, exc.reason))
			return
		if self._closed:
			return

		self._set_state(transitions.location_ready(self.state))
		self._spawn(self._initial_fix(), "home-initial-fix")
		subscription = self.location.subscribe()
		if not self.state.sharing:
			subscription.pause()
		self._subscription = subscription
		self._spawn(self._pump(subscription), "home-fix-stream")
		if fetch_after and self.state.sharing:
			self.request_roster()

	async def _initial_fix(self) -> None:
		position = await self.location.get_current_position()
		if self.state.sharing:
			self.handle_fix(position)

	async def _pump(self, subscription: PositionSubscription) -> None:
		async for position in subscription:
			self.handle_fix(position)

	def handle_fix(self, position: Position) -> None:
		if self._closed:
			return
		new_state = transitions.apply_fix(self.state, position)
		self._set_state(new_state)
		self.map.set_markers(new_state.markers)
		self.map.recenter(position, self.zoom)
		obs_metrics.inc_location_fix()

	# Roster --------------------------------------------------------------------

	def request_roster(self) -> asyncio.Task:
		"""Replace the roster from the source, superseding any fetch in flight."""
		if self._fetch_task is not None and not self._fetch_task.done():
			self._fetch_task.cancel()
		self._set_state(transitions.roster_requested(self.state))
		self._fetch_task = self._spawn(self._fetch(), "home-roster")
		return self._fetch_task

	async def _fetch(self) -> None:
		try:
			users = await fetch_roster(self.roster_source)
		except FetchError as exc:
			logger.info("roster unavailable session=%s reason=%s", self.id, exc.reason)
			self._set_state(transitions.roster_failed(self.state, exc.reason))
			return
		self._set_state(transitions.roster_loaded(self.state, users))

	# Filters -------------------------------------------------------------------

	def select_interests(self, updates: Mapping[str, bool]) -> HomeState:
		self._set_state(transitions.select_interests(self.state, updates))
		obs_metrics.inc_filter_update(len([tag for tag, on in self.state.selection.items() if on]))
		return self.state

	# Sharing toggle ------------------------------------------------------------

	def disable(self) -> HomeState:
		if not self.state.sharing:
			return self.state
		if self._subscription is not None:
			self._subscription.pause()
		if self._fetch_task is not None and not self._fetch_task.done():
			self._fetch_task.cancel()
		self._set_state(transitions.disable_sharing(self.state))
		obs_metrics.inc_sharing_toggle("off")
		logger.info("location sharing disabled session=%s", self.id)
		return self.state

	def enable(self) -> HomeState:
		if self.state.sharing:
			return self.state
		self._set_state(transitions.enable_sharing(self.state))
		if self._subscription is not None:
			self._subscription.resume()
		elif self._acquire_task is None or self._acquire_task.done():
			self._set_state(transitions.location_requested(self.state))
			self._acquire_task = self._spawn(self._acquire(fetch_after=False), "home-acquire")
		self.request_roster()
		obs_metrics.inc_sharing_toggle("on")
		logger.info("location sharing enabled session=%s", self.id)
		return self.state

	def set_sharing(self, enabled: bool) -> HomeState:
		return self.enable() if enabled else self.disable()

	# Teardown ------------------------------------------------------------------

	async def close(self) -> None:
		if self._closed:
			return
		self._closed = True
		if self._subscription is not None:
			self._subscription.cancel()
		tasks = list(self._tasks)
		for task in tasks:
			task.cancel()
		for task in tasks:
			with suppress(asyncio.CancelledError):
				await task
		dispose = getattr(self.map, "dispose", None)
		if callable(dispose):
			dispose()
