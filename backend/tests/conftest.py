import asyncio
import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from fakeredis.aioredis import FakeRedis

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

from locallink.domain.nearby import registry
from locallink.main import app
from locallink.settings import settings


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	from locallink.infra.redis import redis_client, set_redis_client
	original = redis_client._client
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		await registry.shutdown()
		set_redis_client(original)
		await client.flushall()


@pytest.fixture(autouse=True)
def force_test_settings():
	"""Keep the simulated roster fast and prompts short for every test."""
	original = (
		settings.roster_latency_seconds,
		settings.location_prompt_timeout_seconds,
		settings.fix_rate_limit_per_minute,
	)
	settings.roster_latency_seconds = 0.05
	settings.location_prompt_timeout_seconds = 0.2
	settings.fix_rate_limit_per_minute = 1000
	try:
		yield
	finally:
		(
			settings.roster_latency_seconds,
			settings.location_prompt_timeout_seconds,
			settings.fix_rate_limit_per_minute,
		) = original


@pytest.fixture
def eventually():
	"""Poll an (optionally async) predicate until it holds or the timeout expires."""

	async def _wait(predicate, timeout: float = 2.0, interval: float = 0.01):
		loop = asyncio.get_running_loop()
		deadline = loop.time() + timeout
		while True:
			result = predicate()
			if asyncio.iscoroutine(result):
				result = await result
			if result:
				return result
			if loop.time() >= deadline:
				raise AssertionError("condition not met before timeout")
			await asyncio.sleep(interval)

	return _wait


@pytest_asyncio.fixture
async def api_client():
	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
