"""Map display handle owned by a home session."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol, Tuple

from locallink.domain.nearby.models import CameraPosition, Marker, Position


class MapDisplay(Protocol):
	def set_markers(self, markers: Iterable[Marker]) -> None:
		...

	def recenter(self, target: Position, zoom: float) -> None:
		...


class MapViewState:
	"""Keeps what the client map should show; the client renders it from snapshots."""

	def __init__(self) -> None:
		self.markers: Tuple[Marker, ...] = ()
		self.camera: Optional[CameraPosition] = None
		self.disposed = False

	def set_markers(self, markers: Iterable[Marker]) -> None:
		if not self.disposed:
			self.markers = tuple(markers)

	def recenter(self, target: Position, zoom: float) -> None:
		if not self.disposed:
			self.camera = CameraPosition(target=target, zoom=zoom)

	def dispose(self) -> None:
		self.disposed = True
