import asyncio

import pytest

from locallink.domain.nearby.errors import FetchError
from locallink.domain.nearby.location import PermissionStatus, ReportedLocationService
from locallink.domain.nearby.map_view import MapViewState
from locallink.domain.nearby.models import CURRENT_USER_MARKER_ID, NearbyUser, Position
from locallink.domain.nearby.roster import DEMO_ROSTER, SimulatedRosterSource
from locallink.domain.nearby.session import HomeSession
from locallink.domain.nearby.state import ENABLE_LOCATION_MESSAGE


class CountingSource:
	"""Roster source returning a different roster on every call."""

	def __init__(self, latency: float = 0.02):
		self.calls = 0
		self.latency = latency

	async def fetch_roster(self):
		self.calls += 1
		await asyncio.sleep(self.latency)
		return [NearbyUser(id=str(self.calls), name=f"Fetch {self.calls}", interests=("AI",))]


class BrokenSource:
	async def fetch_roster(self):
		raise ConnectionError("backend unreachable")


def _session(permission=PermissionStatus.GRANTED, *, source=None, service_enabled=True):
	location = ReportedLocationService(service_enabled=service_enabled, permission=permission, prompt_timeout=0.05)
	return HomeSession(
		"s1",
		"device-1",
		location=location,
		roster_source=source or SimulatedRosterSource(latency=0.02),
		map_display=MapViewState(),
	)


@pytest.mark.asyncio
async def test_start_loads_roster_and_tracks_fixes(eventually):
	session = _session()
	await session.start()
	assert session.state.loading is False
	assert session.location.config is not None
	assert session.location.config.interval_ms == 1000

	await eventually(lambda: session.state.roster == DEMO_ROSTER)
	assert session.state.filtered == DEMO_ROSTER

	session.location.report_fix(Position(45.5, -73.57))
	await eventually(lambda: session.state.position == Position(45.5, -73.57))
	assert [m.id for m in session.state.markers] == [CURRENT_USER_MARKER_ID]
	assert session.map.markers == session.state.markers
	assert session.map.camera.target == Position(45.5, -73.57)
	assert session.map.camera.zoom == 15.5

	session.location.report_fix(Position(45.6, -73.57))
	await eventually(lambda: session.state.position == Position(45.6, -73.57))
	assert len(session.state.markers) == 1
	await session.close()


@pytest.mark.asyncio
async def test_permission_denied_degrades_without_fetch():
	source = CountingSource()
	session = _session(PermissionStatus.DENIED_FOREVER, source=source)
	await session.start()
	assert session.state.location_error == "permission_denied"
	assert session.state.map_message == ENABLE_LOCATION_MESSAGE
	assert session.subscription is None
	await asyncio.sleep(0.05)
	assert source.calls == 0
	await session.close()


@pytest.mark.asyncio
async def test_service_disabled_reports_reason():
	session = _session(service_enabled=False)
	await session.start()
	assert session.state.location_error == "service_disabled"
	await session.close()


@pytest.mark.asyncio
async def test_filter_applies_to_loaded_roster(eventually):
	session = _session()
	await session.start()
	await eventually(lambda: session.state.roster)
	session.select_interests({"AI": True})
	assert [user.name for user in session.state.filtered] == ["Alex", "Sam"]
	await session.close()


@pytest.mark.asyncio
async def test_disable_then_enable_refetches_from_source(eventually):
	source = CountingSource()
	session = _session(source=source)
	await session.start()
	await eventually(lambda: session.state.roster)
	assert session.state.roster[0].name == "Fetch 1"

	session.disable()
	assert session.state.sharing is False
	assert session.state.roster == ()
	assert session.state.filtered == ()
	assert session.subscription.paused

	session.enable()
	assert session.state.sharing is True
	assert not session.subscription.paused
	await eventually(lambda: session.state.roster)
	assert source.calls == 2
	assert session.state.roster[0].name == "Fetch 2"
	await session.close()


@pytest.mark.asyncio
async def test_fixes_while_disabled_are_applied_after_enable(eventually):
	session = _session()
	await session.start()
	session.disable()
	session.location.report_fix(Position(1.0, 1.0))
	await asyncio.sleep(0.05)
	assert session.state.position is None

	session.enable()
	await eventually(lambda: session.state.position == Position(1.0, 1.0))
	await session.close()


@pytest.mark.asyncio
async def test_fetch_in_flight_is_dropped_when_disabled():
	source = CountingSource(latency=0.1)
	session = _session(source=source)
	await session.start()
	session.disable()
	await asyncio.sleep(0.2)
	assert session.state.roster == ()
	assert session.state.fetching is False
	await session.close()


@pytest.mark.asyncio
async def test_enable_after_failed_acquisition_retries(eventually):
	session = _session(PermissionStatus.DENIED_FOREVER, source=CountingSource())
	await session.start()
	assert session.state.location_error == "permission_denied"

	session.disable()
	session.location.report_status(permission=PermissionStatus.GRANTED)
	session.enable()
	await eventually(lambda: session.subscription is not None)
	assert session.state.location_error is None
	await eventually(lambda: session.state.roster)
	await session.close()


@pytest.mark.asyncio
async def test_fetch_failure_is_reported_not_raised():
	session = _session(source=BrokenSource())
	await session.start()
	await asyncio.sleep(0.05)
	assert session.state.roster_error == FetchError.reason
	assert session.state.fetching is False
	await session.close()


@pytest.mark.asyncio
async def test_close_releases_subscription_and_ignores_late_fixes():
	session = _session()
	await session.start()
	subscription = session.subscription
	await session.close()
	assert subscription.cancelled
	assert session.map.disposed
	session.location.report_fix(Position(5.0, 5.0))
	await asyncio.sleep(0.02)
	assert session.state.position is None
