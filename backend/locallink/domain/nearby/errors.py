"""Failures reported by the home screen collaborators.

None of these are fatal: the session records the ``reason`` and the client shows
an informational state until the user acts again.
"""

from __future__ import annotations


class NearbyError(Exception):
	reason = "nearby_error"

	def __init__(self, message: str | None = None):
		super().__init__(message or self.reason)


class LocationUnavailable(NearbyError):
	"""Raised when no position can be acquired."""

	reason = "location_unavailable"


class ServiceDisabledError(LocationUnavailable):
	"""Device-level location service is off and stayed off after the prompt."""

	reason = "service_disabled"


class LocationPermissionError(LocationUnavailable):
	"""The user declined location access, possibly permanently."""

	reason = "permission_denied"


class FetchError(NearbyError):
	"""The roster source could not be reached."""

	reason = "fetch_failed"
