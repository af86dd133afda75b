"""Immutable home screen state and the pure transitions applied to it.

Every event (fix, fetch completion, filter change, sharing toggle) produces a new
``HomeState``; nothing mutates a snapshot in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from locallink.domain.nearby.filtering import apply_filter, default_selection
from locallink.domain.nearby.models import (
	CURRENT_USER_MARKER_ID,
	Marker,
	NearbyUser,
	Position,
	current_user_marker,
)

ENABLE_LOCATION_MESSAGE = "Enable location to find matches!"
NO_MATCHES_MESSAGE = "No one nearby matches your filters..."


class UnknownInterest(ValueError):
	def __init__(self, tags: Iterable[str]):
		self.tags = tuple(tags)
		super().__init__(", ".join(self.tags))


def _freeze(selection: Mapping[str, bool]) -> Mapping[str, bool]:
	return MappingProxyType(dict(selection))


@dataclass(frozen=True, slots=True)
class HomeState:
	position: Optional[Position] = None
	markers: Tuple[Marker, ...] = ()
	roster: Tuple[NearbyUser, ...] = ()
	selection: Mapping[str, bool] = field(default_factory=lambda: _freeze(default_selection()))
	sharing: bool = True
	loading: bool = True
	fetching: bool = False
	location_error: Optional[str] = None
	roster_error: Optional[str] = None

	@property
	def filtered(self) -> Tuple[NearbyUser, ...]:
		return apply_filter(self.roster, self.selection)

	@property
	def map_message(self) -> Optional[str]:
		if not self.loading and self.position is None:
			return ENABLE_LOCATION_MESSAGE
		return None

	@property
	def list_message(self) -> Optional[str]:
		if not self.loading and not self.filtered:
			return NO_MATCHES_MESSAGE
		return None


def apply_fix(state: HomeState, position: Position) -> HomeState:
	markers = tuple(m for m in state.markers if m.id != CURRENT_USER_MARKER_ID)
	return replace(state, position=position, markers=markers + (current_user_marker(position),))


def location_requested(state: HomeState) -> HomeState:
	return replace(state, loading=True, location_error=None)


def location_ready(state: HomeState) -> HomeState:
	return replace(state, loading=False, location_error=None)


def location_failed(state: HomeState, reason: str) -> HomeState:
	return replace(state, loading=False, location_error=reason)


def roster_requested(state: HomeState) -> HomeState:
	return replace(state, fetching=True, roster_error=None)


def roster_loaded(state: HomeState, users: Iterable[NearbyUser]) -> HomeState:
	if not state.sharing:
		# Sharing was switched off while the fetch was in flight
		return state
	return replace(state, roster=tuple(users), fetching=False, roster_error=None)


def roster_failed(state: HomeState, reason: str) -> HomeState:
	return replace(state, fetching=False, roster_error=reason)


def select_interests(state: HomeState, updates: Mapping[str, bool]) -> HomeState:
	unknown = [tag for tag in updates if tag not in state.selection]
	if unknown:
		raise UnknownInterest(unknown)
	merged = dict(state.selection)
	merged.update({tag: bool(value) for tag, value in updates.items()})
	return replace(state, selection=_freeze(merged))


def disable_sharing(state: HomeState) -> HomeState:
	if not state.sharing:
		return state
	return replace(state, sharing=False, roster=(), fetching=False, roster_error=None)


def enable_sharing(state: HomeState) -> HomeState:
	if state.sharing:
		return state
	return replace(state, sharing=True)
