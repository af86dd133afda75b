"""Fixed-window rate limiting backed by Redis counters."""

from __future__ import annotations

import math
import time
from typing import Optional

from locallink.infra.redis import redis_client


class RateLimitExceeded(Exception):
	"""Raised when a bucket has no budget left for the current window."""

	def __init__(self, kind: str):
		super().__init__(kind)
		self.kind = kind


async def allow(
	kind: str,
	actor_id: str,
	*,
	limit: int,
	window_seconds: int = 60,
	now: Optional[float] = None,
) -> bool:
	"""Return True when the operation is still within the allowed budget."""

	if limit <= 0:
		return False
	now = now or time.time()
	window = max(1, int(window_seconds))
	slot = int(math.floor(now / window))
	key = f"rl:{kind}:{actor_id}:{slot}:{window}"
	async with redis_client.pipeline(transaction=True) as pipe:
		pipe.incr(key)
		pipe.expire(key, window)
		count, _ = await pipe.execute()
	return int(count) <= limit


async def enforce(kind: str, actor_id: str, *, limit: int, window_seconds: int = 60) -> None:
	if not await allow(kind, actor_id, limit=limit, window_seconds=window_seconds):
		raise RateLimitExceeded(kind)
