"""Persisted boolean flags keyed per device.

The mobile client used to keep these in on-device preferences; here they live in
Redis under ``device:{device_id}:{key}`` so every install keeps its own flags.
"""

from __future__ import annotations

import logging
from typing import Dict, Protocol

from redis.exceptions import RedisError

from locallink.infra.redis import redis_client

logger = logging.getLogger(__name__)

_TRUE = "1"
_FALSE = "0"


class FlagStoreUnavailable(RuntimeError):
	"""Raised when a flag could not be written."""


class FlagStore(Protocol):
	async def get_bool(self, key: str, *, default: bool) -> bool:
		...

	async def set_bool(self, key: str, value: bool) -> None:
		...


class RedisFlagStore:
	"""Flag store backed by the shared Redis client.

	Reads never raise: an unreachable store yields ``default``. Writes raise
	``FlagStoreUnavailable`` so callers can report that nothing was persisted.
	"""

	def __init__(self, device_id: str) -> None:
		self.device_id = device_id

	def _key(self, key: str) -> str:
		return f"device:{self.device_id}:{key}"

	async def get_bool(self, key: str, *, default: bool) -> bool:
		try:
			raw = await redis_client.get(self._key(key))
		except (RedisError, OSError):
			logger.warning("flag read failed device=%s key=%s", self.device_id, key, exc_info=True)
			return default
		if raw is None:
			return default
		return str(raw) == _TRUE

	async def set_bool(self, key: str, value: bool) -> None:
		try:
			await redis_client.set(self._key(key), _TRUE if value else _FALSE)
		except (RedisError, OSError) as exc:
			logger.warning("flag write failed device=%s key=%s", self.device_id, key, exc_info=True)
			raise FlagStoreUnavailable(key) from exc


class MemoryFlagStore:
	"""In-process flag store, for tools and tests that run without Redis."""

	def __init__(self) -> None:
		self._values: Dict[str, bool] = {}

	async def get_bool(self, key: str, *, default: bool) -> bool:
		return self._values.get(key, default)

	async def set_bool(self, key: str, value: bool) -> None:
		self._values[key] = bool(value)
