"""Interest filtering over the nearby roster."""

from __future__ import annotations

from typing import Dict, Iterable, Mapping, Sequence, Tuple

from locallink.domain.nearby.models import INTERESTS, NearbyUser


def default_selection(interests: Iterable[str] = INTERESTS) -> Dict[str, bool]:
	return {interest: False for interest in interests}


def active_tags(selection: Mapping[str, bool]) -> frozenset[str]:
	return frozenset(tag for tag, selected in selection.items() if selected)


def apply_filter(roster: Sequence[NearbyUser], selection: Mapping[str, bool]) -> Tuple[NearbyUser, ...]:
	"""Return the users sharing at least one selected interest, in roster order.

	With nothing selected the roster comes back unchanged.
	"""
	active = active_tags(selection)
	if not active:
		return tuple(roster)
	return tuple(user for user in roster if not active.isdisjoint(user.interests))
