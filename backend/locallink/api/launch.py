"""REST surface for the launch gate and onboarding carousel."""

from __future__ import annotations

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from locallink.api.deps import get_device_id
from locallink.domain.launch import onboarding
from locallink.domain.launch.gate import LaunchGate
from locallink.infra.flag_store import RedisFlagStore

router = APIRouter(tags=["launch"])


class LaunchResponse(BaseModel):
	first_launch: bool
	initial_screen: Literal["onboarding", "home"]


class OnboardingPageOut(BaseModel):
	title: str
	description: str
	icon: str
	image: Optional[str] = None


class AdvancePayload(BaseModel):
	current_page: int = Field(..., ge=0)


class AdvanceResponse(BaseModel):
	page: int
	is_last: bool
	complete: bool
	next_screen: Optional[Literal["home"]] = None
	persisted: Optional[bool] = None


class CompleteResponse(BaseModel):
	next_screen: Literal["home"] = "home"
	persisted: bool


def _gate(device_id: str) -> LaunchGate:
	return LaunchGate(RedisFlagStore(device_id))


@router.get("/launch", response_model=LaunchResponse)
async def launch(device_id: str = Depends(get_device_id)) -> LaunchResponse:
	screen = await _gate(device_id).initial_screen()
	return LaunchResponse(first_launch=screen == "onboarding", initial_screen=screen)


@router.get("/onboarding/pages", response_model=List[OnboardingPageOut])
async def onboarding_pages() -> List[OnboardingPageOut]:
	return [
		OnboardingPageOut(title=page.title, description=page.description, icon=page.icon, image=page.image)
		for page in onboarding.PAGES
	]


@router.post("/onboarding/next", response_model=AdvanceResponse)
async def onboarding_next(payload: AdvancePayload, device_id: str = Depends(get_device_id)) -> AdvanceResponse:
	try:
		step = onboarding.advance(payload.current_page)
	except IndexError:
		raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="unknown_page") from None
	if step.complete:
		persisted = await _gate(device_id).mark_launch_complete()
		return AdvanceResponse(page=step.page, is_last=True, complete=True, next_screen="home", persisted=persisted)
	return AdvanceResponse(page=step.page, is_last=step.is_last, complete=False)


@router.post("/onboarding/complete", response_model=CompleteResponse)
async def onboarding_complete(device_id: str = Depends(get_device_id)) -> CompleteResponse:
	"""Finish or skip onboarding."""
	persisted = await _gate(device_id).mark_launch_complete()
	return CompleteResponse(persisted=persisted)
