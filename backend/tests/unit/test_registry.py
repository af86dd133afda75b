import pytest

from locallink.domain.nearby import registry
from locallink.domain.nearby.location import PermissionStatus
from locallink.domain.nearby.roster import SimulatedRosterSource


async def _open(device_id="device-1"):
	return await registry.open_session(
		device_id,
		service_enabled=True,
		permission=PermissionStatus.GRANTED,
		roster_source=SimulatedRosterSource(latency=0.01),
	)


@pytest.mark.asyncio
async def test_reopening_replaces_the_previous_session_for_a_device():
	sessions = [await _open() for _ in range(20)]
	other = await _open("device-2")

	assert registry.open_count("device-1") == 1
	assert all(session.closed for session in sessions[:-1])
	assert not sessions[-1].closed
	with pytest.raises(registry.SessionNotFound):
		await registry.get_session(sessions[0].id, "device-1")
	assert await registry.get_session(other.id, "device-2") is other


@pytest.mark.asyncio
async def test_replaced_session_releases_its_subscription(eventually):
	first = await _open()
	await eventually(lambda: first.subscription is not None)
	await _open()
	assert first.subscription.cancelled
	assert all(task.done() for task in first._tasks)


@pytest.mark.asyncio
async def test_sweep_closes_only_idle_sessions(monkeypatch):
	monkeypatch.setattr(registry.settings, "home_session_idle_seconds", 60.0)
	idle = await _open("device-idle")
	busy = await _open("device-busy")
	idle.last_seen -= 120
	busy.last_seen -= 120
	await registry.get_session(busy.id, "device-busy")

	assert await registry.sweep_idle() == 1
	assert idle.closed
	assert not busy.closed
	with pytest.raises(registry.SessionNotFound):
		await registry.get_session(idle.id, "device-idle")


@pytest.mark.asyncio
async def test_sweep_disabled_with_zero_timeout(monkeypatch):
	monkeypatch.setattr(registry.settings, "home_session_idle_seconds", 0)
	session = await _open()
	session.last_seen -= 10_000
	assert await registry.sweep_idle() == 0
	assert not session.closed


@pytest.mark.asyncio
async def test_background_sweeper_expires_abandoned_session(monkeypatch, eventually):
	monkeypatch.setattr(registry.settings, "home_session_idle_seconds", 0.1)
	session = await _open()
	await eventually(lambda: session.closed)
	assert registry.open_count() == 0
