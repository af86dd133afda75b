"""Domain models used by the home screen session."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Tuple

# Fixed set of tags the home screen can filter on
INTERESTS: Tuple[str, ...] = (
	"Coffee",
	"AI",
	"Music",
	"Basketball",
	"Reading",
	"Hiking",
	"Gaming",
	"Cooking",
	"Travel",
)

CURRENT_USER_MARKER_ID = "currentUser"
CURRENT_USER_MARKER_LABEL = "Your Location"


@dataclass(frozen=True, slots=True)
class Position:
	"""A single device fix."""

	latitude: float
	longitude: float

	def __post_init__(self) -> None:
		if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
			raise ValueError("coordinates must be finite")
		if not -90.0 <= self.latitude <= 90.0:
			raise ValueError("latitude out of range")
		if not -180.0 <= self.longitude <= 180.0:
			raise ValueError("longitude out of range")


@dataclass(frozen=True, slots=True)
class NearbyUser:
	id: str
	name: str
	interests: Tuple[str, ...] = ()

	def __post_init__(self) -> None:
		if not self.name:
			raise ValueError("name must not be empty")


@dataclass(frozen=True, slots=True)
class Marker:
	id: str
	position: Position
	label: str


@dataclass(frozen=True, slots=True)
class CameraPosition:
	target: Position
	zoom: float


def current_user_marker(position: Position) -> Marker:
	return Marker(id=CURRENT_USER_MARKER_ID, position=position, label=CURRENT_USER_MARKER_LABEL)
