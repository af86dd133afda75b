"""Onboarding carousel content and page progression."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True, slots=True)
class OnboardingPage:
	title: str
	description: str
	icon: str
	image: Optional[str] = None


PAGES: Tuple[OnboardingPage, ...] = (
	OnboardingPage(
		title="Find People Nearby",
		description="Discover people around you who share your interests and passions",
		icon="people_alt_rounded",
		image="assets/undraw_connected_0xor.png",
	),
	OnboardingPage(
		title="Connect Through Interests",
		description="Filter and match with others based on shared activities and hobbies",
		icon="favorite_rounded",
		image="assets/undraw_connection_ts3f.png",
	),
	OnboardingPage(
		title="Real-time Location",
		description="See where others are and easily meet up at convenient places",
		icon="location_on_rounded",
		image="assets/undraw_founding-team_8uhm.png",
	),
	OnboardingPage(
		title="Start Your Journey",
		description="Create your profile and begin connecting with your community",
		icon="rocket_launch_rounded",
		image="assets/undraw_location-tracking_q3yd.png",
	),
)


@dataclass(frozen=True, slots=True)
class Step:
	page: int
	is_last: bool
	complete: bool


def advance(current_page: int, pages: Tuple[OnboardingPage, ...] = PAGES) -> Step:
	"""Move past ``current_page``; leaving the last page completes onboarding."""
	if current_page < 0 or current_page >= len(pages):
		raise IndexError(current_page)
	last = len(pages) - 1
	if current_page < last:
		nxt = current_page + 1
		return Step(page=nxt, is_last=nxt == last, complete=False)
	return Step(page=last, is_last=True, complete=True)
