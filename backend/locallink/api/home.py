"""REST API surface for the home screen: location, roster and filters."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response, status

from locallink.api.deps import get_device_id
from locallink.domain.nearby import registry
from locallink.domain.nearby.location import ReportedLocationService
from locallink.domain.nearby.models import INTERESTS
from locallink.domain.nearby.schemas import (
	DeviceStatusPayload,
	FixPayload,
	FixResponse,
	HomeSnapshot,
	InterestSelectionPatch,
	OpenSessionPayload,
	SharingPayload,
)
from locallink.domain.nearby.session import HomeSession
from locallink.domain.nearby.state import UnknownInterest
from locallink.infra.rate_limit import RateLimitExceeded, enforce
from locallink.obs import metrics as obs_metrics
from locallink.settings import settings

router = APIRouter(tags=["home"])


async def _session(session_id: str, device_id: str) -> HomeSession:
	try:
		return await registry.get_session(session_id, device_id)
	except registry.SessionNotFound:
		raise HTTPException(status.HTTP_404_NOT_FOUND, detail="session_not_found") from None


def _reported_location(session: HomeSession) -> ReportedLocationService:
	location = session.location
	if not isinstance(location, ReportedLocationService):
		raise HTTPException(status.HTTP_409_CONFLICT, detail="location_not_client_reported")
	return location


@router.get("/interests", response_model=List[str])
async def list_interests() -> List[str]:
	return list(INTERESTS)


@router.post("/home/sessions", response_model=HomeSnapshot, status_code=status.HTTP_201_CREATED)
async def open_home_session(
	payload: OpenSessionPayload,
	device_id: str = Depends(get_device_id),
) -> HomeSnapshot:
	session = await registry.open_session(
		device_id,
		service_enabled=payload.service_enabled,
		permission=payload.permission,
	)
	return HomeSnapshot.from_session(session)


@router.get("/home/sessions/{session_id}", response_model=HomeSnapshot)
async def get_home_session(session_id: str, device_id: str = Depends(get_device_id)) -> HomeSnapshot:
	return HomeSnapshot.from_session(await _session(session_id, device_id))


@router.post("/home/sessions/{session_id}/device", response_model=HomeSnapshot)
async def report_device_status(
	session_id: str,
	payload: DeviceStatusPayload,
	device_id: str = Depends(get_device_id),
) -> HomeSnapshot:
	session = await _session(session_id, device_id)
	_reported_location(session).report_status(
		service_enabled=payload.service_enabled,
		permission=payload.permission,
	)
	return HomeSnapshot.from_session(session)


@router.post("/home/sessions/{session_id}/fixes", response_model=FixResponse)
async def report_fix(
	session_id: str,
	payload: FixPayload,
	device_id: str = Depends(get_device_id),
) -> FixResponse:
	session = await _session(session_id, device_id)
	try:
		await enforce("fix", device_id, limit=settings.fix_rate_limit_per_minute)
	except RateLimitExceeded:
		obs_metrics.inc_location_fix_reject("rate_limit")
		raise HTTPException(status.HTTP_429_TOO_MANY_REQUESTS, detail="rate_limit") from None
	accepted = _reported_location(session).report_fix(payload.to_position())
	if not accepted:
		obs_metrics.inc_location_fix_reject("distance_filter")
	return FixResponse(accepted=accepted)


@router.put("/home/sessions/{session_id}/interests", response_model=HomeSnapshot)
async def update_interests(
	session_id: str,
	payload: InterestSelectionPatch,
	device_id: str = Depends(get_device_id),
) -> HomeSnapshot:
	session = await _session(session_id, device_id)
	try:
		session.select_interests(payload.selection)
	except UnknownInterest as exc:
		raise HTTPException(
			status.HTTP_400_BAD_REQUEST,
			detail={"code": "unknown_interest", "tags": list(exc.tags)},
		) from None
	return HomeSnapshot.from_session(session)


@router.post("/home/sessions/{session_id}/sharing", response_model=HomeSnapshot)
async def set_sharing(
	session_id: str,
	payload: SharingPayload,
	device_id: str = Depends(get_device_id),
) -> HomeSnapshot:
	session = await _session(session_id, device_id)
	session.set_sharing(payload.enabled)
	return HomeSnapshot.from_session(session)


@router.delete("/home/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def close_home_session(session_id: str, device_id: str = Depends(get_device_id)) -> Response:
	try:
		await registry.close_session(session_id, device_id)
	except registry.SessionNotFound:
		raise HTTPException(status.HTTP_404_NOT_FOUND, detail="session_not_found") from None
	return Response(status_code=status.HTTP_204_NO_CONTENT)
