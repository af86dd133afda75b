"""First-launch gate deciding whether onboarding or the home screen opens."""

from __future__ import annotations

import logging
from typing import Literal

from locallink.infra.flag_store import FlagStore, FlagStoreUnavailable
from locallink.obs import metrics as obs_metrics
from locallink.settings import settings

logger = logging.getLogger(__name__)

Screen = Literal["onboarding", "home"]


class LaunchGate:
	def __init__(self, store: FlagStore, *, key: str | None = None) -> None:
		self._store = store
		self._key = key or settings.first_launch_key

	async def is_first_launch(self) -> bool:
		return await self._store.get_bool(self._key, default=True)

	async def initial_screen(self) -> Screen:
		return "onboarding" if await self.is_first_launch() else "home"

	async def mark_launch_complete(self) -> bool:
		"""Persist that onboarding finished. Returns False when the write was lost."""
		if not await self.is_first_launch():
			return True
		try:
			await self._store.set_bool(self._key, False)
		except FlagStoreUnavailable:
			return False
		obs_metrics.inc_launch_completed()
		logger.info("launch gate closed", extra={"flag": self._key})
		return True
