"""Sources for the nearby roster.

Only a simulated source exists today; a real backend plugs in by implementing
``RosterSource``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional, Protocol, Sequence, Tuple

from locallink.domain.nearby.errors import FetchError
from locallink.domain.nearby.models import NearbyUser
from locallink.obs import metrics as obs_metrics
from locallink.settings import settings

logger = logging.getLogger(__name__)


DEMO_ROSTER: Tuple[NearbyUser, ...] = (
	NearbyUser(id="1", name="Alex", interests=("Coffee", "AI")),
	NearbyUser(id="2", name="Maria", interests=("Music", "Basketball")),
	NearbyUser(id="3", name="Sam", interests=("AI", "Music")),
	NearbyUser(id="4", name="Chloe", interests=("Coffee", "Reading")),
	NearbyUser(id="5", name="David", interests=("Basketball", "Hiking")),
	NearbyUser(id="6", name="Emma", interests=("Gaming", "Cooking")),
	NearbyUser(id="7", name="James", interests=("Travel", "Hiking")),
)


class RosterSource(Protocol):
	async def fetch_roster(self) -> Sequence[NearbyUser]:
		...


class SimulatedRosterSource:
	"""Returns a constant roster after a fixed delay."""

	def __init__(self, users: Sequence[NearbyUser] = DEMO_ROSTER, *, latency: Optional[float] = None) -> None:
		self._users = tuple(users)
		self._latency = settings.roster_latency_seconds if latency is None else latency

	async def fetch_roster(self) -> Sequence[NearbyUser]:
		if self._latency > 0:
			await asyncio.sleep(self._latency)
		return self._users


async def fetch_roster(source: RosterSource) -> Tuple[NearbyUser, ...]:
	"""Fetch a full roster, normalising source failures into ``FetchError``."""
	try:
		users = tuple(await source.fetch_roster())
	except asyncio.CancelledError:
		raise
	except FetchError:
		obs_metrics.inc_roster_fetch("error")
		raise
	except Exception as exc:
		obs_metrics.inc_roster_fetch("error")
		logger.warning("roster fetch failed", exc_info=True)
		raise FetchError(str(exc)) from exc
	obs_metrics.inc_roster_fetch("ok")
	return users
