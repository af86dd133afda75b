"""Shared request dependencies."""

from __future__ import annotations

from typing import Optional

from fastapi import Header, HTTPException, status

DEVICE_ID_MAX_LEN = 128


async def get_device_id(x_device_id: Optional[str] = Header(default=None, alias="X-Device-Id")) -> str:
	"""Resolve the calling install; every endpoint with device state requires it."""
	device_id = (x_device_id or "").strip()
	if not device_id or len(device_id) > DEVICE_ID_MAX_LEN:
		raise HTTPException(status.HTTP_400_BAD_REQUEST, detail="device_id_required")
	return device_id
