"""Pydantic schemas for home session endpoints."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from locallink.domain.nearby.location import LocationSettings, PermissionStatus
from locallink.domain.nearby.models import CameraPosition, Marker, NearbyUser, Position
from locallink.domain.nearby.session import HomeSession


class DeviceStatusPayload(BaseModel):
	"""Device capabilities reported by the client, also used to answer prompts."""

	service_enabled: Optional[bool] = None
	permission: Optional[PermissionStatus] = None


class OpenSessionPayload(BaseModel):
	service_enabled: bool = True
	permission: PermissionStatus = PermissionStatus.DENIED


class FixPayload(BaseModel):
	"""A single location fix reported by the device."""

	lat: float = Field(..., ge=-90.0, le=90.0)
	lon: float = Field(..., ge=-180.0, le=180.0)

	def to_position(self) -> Position:
		return Position(latitude=self.lat, longitude=self.lon)


class FixResponse(BaseModel):
	accepted: bool


class InterestSelectionPatch(BaseModel):
	selection: Dict[str, bool]


class SharingPayload(BaseModel):
	enabled: bool


class CoordinateOut(BaseModel):
	lat: float
	lon: float

	@classmethod
	def from_position(cls, position: Position) -> "CoordinateOut":
		return cls(lat=position.latitude, lon=position.longitude)


class MarkerOut(BaseModel):
	id: str
	position: CoordinateOut
	label: str

	@classmethod
	def from_marker(cls, marker: Marker) -> "MarkerOut":
		return cls(id=marker.id, position=CoordinateOut.from_position(marker.position), label=marker.label)


class CameraOut(BaseModel):
	target: CoordinateOut
	zoom: float

	@classmethod
	def from_camera(cls, camera: CameraPosition) -> "CameraOut":
		return cls(target=CoordinateOut.from_position(camera.target), zoom=camera.zoom)


class NearbyUserOut(BaseModel):
	id: str
	name: str
	interests: List[str] = Field(default_factory=list)

	@classmethod
	def from_user(cls, user: NearbyUser) -> "NearbyUserOut":
		return cls(id=user.id, name=user.name, interests=list(user.interests))


class TrackingSettingsOut(BaseModel):
	accuracy: str
	interval_ms: int
	distance_filter_m: float

	@classmethod
	def from_config(cls, config: LocationSettings) -> "TrackingSettingsOut":
		return cls(accuracy=config.accuracy, interval_ms=config.interval_ms, distance_filter_m=config.distance_filter_m)


class HomeSnapshot(BaseModel):
	session_id: str
	sharing: bool
	loading: bool
	fetching: bool
	position: Optional[CoordinateOut] = None
	markers: List[MarkerOut] = Field(default_factory=list)
	camera: Optional[CameraOut] = None
	roster: List[NearbyUserOut] = Field(default_factory=list)
	filtered: List[NearbyUserOut] = Field(default_factory=list)
	selection: Dict[str, bool] = Field(default_factory=dict)
	location_error: Optional[str] = None
	roster_error: Optional[str] = None
	map_message: Optional[str] = None
	list_message: Optional[str] = None
	pending_prompt: Optional[str] = None
	tracking: Optional[TrackingSettingsOut] = None

	@classmethod
	def from_session(cls, session: HomeSession) -> "HomeSnapshot":
		state = session.state
		camera = getattr(session.map, "camera", None)
		config = getattr(session.location, "config", None)
		return cls(
			session_id=session.id,
			sharing=state.sharing,
			loading=state.loading,
			fetching=state.fetching,
			position=CoordinateOut.from_position(state.position) if state.position else None,
			markers=[MarkerOut.from_marker(marker) for marker in state.markers],
			camera=CameraOut.from_camera(camera) if camera is not None else None,
			roster=[NearbyUserOut.from_user(user) for user in state.roster],
			filtered=[NearbyUserOut.from_user(user) for user in state.filtered],
			selection=dict(state.selection),
			location_error=state.location_error,
			roster_error=state.roster_error,
			map_message=state.map_message,
			list_message=state.list_message,
			pending_prompt=getattr(session.location, "pending_prompt", None),
			tracking=TrackingSettingsOut.from_config(config) if config is not None else None,
		)
